## 3x3 matrix operations for transforming tinymesh geometry

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

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

from math import cos, sin, radians
import tinymesh.geom as geom

## a Matrix3 holds nine numbers in row-major order, so that m[0..2]
## is the first row.  Vectors are treated as columns: Mx applies the
## matrix to x.  Only the x, y, z components of a vector are
## transformed; w passes through, so points stay points and normals
## stay normals.

## Matrices are values: every operation returns a new Matrix3 and
## never modifies its operands.


class Matrix3:
    """3x3 matrix class for transforming tinymesh vertices and normals"""

    def __init__(self,a=False):
        self.m = [1.0,0.0,0.0,
                  0.0,1.0,0.0,
                  0.0,0.0,1.0]

        if isinstance(a,Matrix3):
            self.m = list(a.m)

        elif isinstance(a,(tuple,list)):
            if len(a) == 3:
                if not all(isinstance(r,(tuple,list)) and len(r) == 3 for r in a):
                    raise ValueError('bad row in matrix initialization: {}'.format(a))
                flat = [x for r in a for x in r]
            elif len(a) == 9:
                flat = list(a)
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
            for x in flat:
                if not geom.isgoodnum(x):
                    raise ValueError('bad element in matrix initialization: {}'.format(x))
            self.m = [float(x) for x in flat]

        elif a is not False:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix3({},{},{})".format(self.m[0:3],self.m[3:6],self.m[6:9])

    def __getitem__(self,i):
        return self.m[i]

    def __eq__(self,other):
        if not isinstance(other,Matrix3):
            return NotImplemented
        return self.m == other.m

    __hash__ = None

    def isclose(self,other):
        """are all nine entries within epsilon of ``other``"""
        return all(geom.close(a,b) for a,b in zip(self.m,other.m))

    #return value indexed by i,j
    def get(self,i,j):
        if i < 0 or i > 2 or j < 0 or j > 2:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        return self.m[i*3+j]

    def getrow(self,i):
        if i < 0 or i > 2:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return self.m[i*3:i*3+3]

    def getcol(self,j):
        if j < 0 or j > 2:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[j],self.m[3+j],self.m[6+j]]

    def isdiagonal(self):
        """true if all six off-diagonal entries are exactly zero"""
        return all(self.m[i] == 0.0 for i in (1,2,3,5,6,7))

    def add(self,x):
        return Matrix3([a+b for a,b in zip(self.m,x.m)])

    def sub(self,x):
        return Matrix3([a-b for a,b in zip(self.m,x.m)])

    # matrix multiply.  If x is a matrix, compute MX.  If x is a
    # vector, compute Mx (w unchanged). If x is a scalar, compute xM.
    def mul(self,x):
        if isinstance(x,Matrix3):
            result = []
            for i in range(3):
                row = self.getrow(i)
                for j in range(3):
                    result.append(geom.dot(row,x.getcol(j)))
            return Matrix3(result)
        elif isinstance(x,(list,tuple)) and len(x) >= 3:
            w = x[3] if len(x) > 3 else 1.0
            return [geom.dot(self.getrow(0),x),
                    geom.dot(self.getrow(1),x),
                    geom.dot(self.getrow(2),x),
                    w]
        elif geom.isgoodnum(x):
            return Matrix3([a*x for a in self.m])

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def transpose(self):
        m = self.m
        return Matrix3([m[0],m[3],m[6],
                        m[1],m[4],m[7],
                        m[2],m[5],m[8]])

    def inverse(self):
        """Inverse of a diagonal matrix.

        Only pure scaling matrices are invertible here; any non-zero
        off-diagonal entry raises ``ValueError``.
        """
        if not self.isdiagonal():
            raise ValueError('inverse() requires a diagonal matrix: {}'.format(self))
        m = self.m
        if m[0] == 0.0 or m[4] == 0.0 or m[8] == 0.0:
            raise ValueError('singular matrix passed to inverse(): {}'.format(self))
        return Matrix3([1.0/m[0],0.0,0.0,
                        0.0,1.0/m[4],0.0,
                        0.0,0.0,1.0/m[8]])

    def __add__(self,x):
        if not isinstance(x,Matrix3):
            return NotImplemented
        return self.add(x)

    def __sub__(self,x):
        if not isinstance(x,Matrix3):
            return NotImplemented
        return self.sub(x)

    def __mul__(self,x):
        return self.mul(x)

    def __rmul__(self,x):
        if geom.isgoodnum(x):
            return self.mul(x)
        return NotImplemented


def Identity():
    """return a new 3x3 identity matrix"""
    return Matrix3()

# rotation matrices take angles in degrees
def RotationX(theta):
    rad = radians(theta)
    c = cos(rad)
    s = sin(rad)
    return Matrix3([[1,0,0],
                    [0,c,-s],
                    [0,s,c]])

def RotationY(theta):
    rad = radians(theta)
    c = cos(rad)
    s = sin(rad)
    return Matrix3([[c,0,s],
                    [0,1,0],
                    [-s,0,c]])

def RotationZ(theta):
    rad = radians(theta)
    c = cos(rad)
    s = sin(rad)
    return Matrix3([[c,-s,0],
                    [s,c,0],
                    [0,0,1]])

def Rotation(angles):
    """Composite rotation ``Rx * Ry * Rz`` for the per-axis angles (in
    degrees) held in ``angles``.  Applied to a vector, the z rotation
    acts first and the x rotation last.
    """
    return RotationX(angles[0]).mul(RotationY(angles[1])).mul(RotationZ(angles[2]))

def Scaling(x,y=False,z=False):
    """diagonal scaling matrix from a vector of factors, three scalars,
    or one uniform scalar"""
    if geom.isgoodnum(x):
        sx = x
        if geom.isgoodnum(y) and geom.isgoodnum(z):
            sy = y
            sz = z
        elif y is False and z is False:
            sy = sz = x
        else:
            raise ValueError('bad scaling values passed to Scaling: {},{},{}'.format(x,y,z))
    elif isinstance(x,(tuple,list)) and len(x) >= 3:
        sx = x[0]
        sy = x[1]
        sz = x[2]
    else:
        raise ValueError('bad scaling values passed to Scaling')

    return Matrix3([[sx,0,0],
                    [0,sy,0],
                    [0,0,sz]])
