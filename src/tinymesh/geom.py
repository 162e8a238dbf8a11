## foundational vector operations for tinymesh
## Copyright (c) 2020 Richard DeVaul

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""vector operations for **tinymesh**

====================
OVERVIEW
====================

Vectors are lists of four numbers, ``[x, y, z, w]``.  The ``w``
coordinate follows the generalized homogeneous convention: positions
(mesh vertices, primitive centers) lie in the ``w=1`` hyperplane,
while directions (normals, axes, displacements) carry ``w=0``, so
that a translation never moves a normal.

Operations that combine two positions (``add``, ``sub``, ``scale3``,
``mul``, ``cross``) ignore the incoming ``w`` and return a ``w=1``
result; operations that produce a direction (``normalize``, ``neg``,
``orthonormal``) return ``w=0``.  Scalar-valued operations (``dot``,
``mag``, ``dist``) ignore ``w`` entirely.

constants
=========

``epsilon`` and ``pi2`` (2*pi).  Redefine these at your peril.

"""

from math import *

## constants
epsilon=0.000005
pi2 = 2.0*pi

## operations on scalars
## -----------------------

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon

def clamp(x,lo=0.0,hi=1.0):
    """ clamp scalar ``x`` to the interval ``[lo, hi]``"""
    return max(lo,min(hi,x))


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

def _issequence(x):
    return (not isinstance(x,(str,bytes))) and hasattr(x,'__len__') and hasattr(x,'__getitem__')

def point(x=False,y=False,z=False):
    """Point creation from an existing point, an XYZ sequence (list,
    tuple, numpy row), or scalars"""
    if _issequence(x):
        if len(x) < 3:
            raise ValueError('bad sequence passed to point(): {}'.format(x))
        return [float(x[0]),float(x[1]),float(x[2]),1.0]
    if not (x is False or isgoodnum(x)):
        raise ValueError('bad thing passed to point(): {}'.format(x))
    r = vect(x,y,z)
    r[3] = 1.0
    return r

def direction(x=False,y=False,z=False):
    """Direction (``w=0``) creation from a sequence or scalars"""
    r = point(x,y,z)
    r[3] = 0.0
    return r

def vclose(a,b):
    """ are two vectors the same within epsilon"""
    return close(mag(sub(a,b)),0)

def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def mul(a,b):
    """ component-wise 3 vector multiplication"""
    return [a[0]*b[0],a[1]*b[1],a[2]*b[2],1.0]

def cross(a,b):
    """Compute the cross product of a x b, ignoring w"""
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

def neg(a):
    """ direction pointing the other way, `-a`"""
    return [-a[0],-a[1],-a[2],0.0]

## R^3 -> R functions -- ignore w component
## ----------------------------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

## directions and frames
## ---------------------

def normalize(a):
    """Return the unit direction (``w=0``) of ``a``.

    A vector shorter than ``epsilon`` has no direction; asking for one
    raises ``ValueError``.
    """
    m = mag(a)
    if m < epsilon:
        raise ValueError('cannot normalize degenerate vector: {}'.format(a))
    return [a[0]/m,a[1]/m,a[2]/m,0.0]

def orthonormal(z):
    """Given a direction ``z``, return unit directions ``x, y`` such
    that ``(x, y, z)`` is a right-handed orthonormal frame, i.e.
    ``cross(x, y)`` is ``z``.
    """
    n = normalize(z)
    ref = [0.0,0.0,1.0,0.0]
    if abs(dot(ref,n)) > 0.9:
        ref = [1.0,0.0,0.0,0.0]
    x = normalize(cross(ref,n))
    y = normalize(cross(n,x))
    return x,y

