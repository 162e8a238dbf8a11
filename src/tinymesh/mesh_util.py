## mesh_util, procedural primitives for tinymesh

from math import cos, sin, pi

from tinymesh.geom import (add, direction, neg, normalize, orthonormal,
                           pi2, point, scale3, sub)
from tinymesh.mesh import Face, Mesh
from tinymesh.primitives import Box, Cylinder, Disc, Sphere, Torus

"""
==================================================
Procedural tessellation of analytic primitives
==================================================

Each generator takes a primitive descriptor and a resolution and
returns a freshly built ``Mesh``.  Generators share no state, so
independent meshes may be built concurrently.

Flat faces (disc, cylinder caps, box) give every corner of a face the
same normal index.  Smooth surfaces (sphere, torus) use the vertex
index as the normal index.

"""


def _check_resolution(n, least=3, what='resolution'):
    if isinstance(n, bool) or not isinstance(n, int) or n < least:
        raise ValueError('bad {}: {}, need an integer >= {}'.format(what, n, least))


def _ring(center, x, y, r, n):
    """``n`` points at equal angular steps on the circle of radius
    ``r`` about ``center`` in the plane spanned by ``x`` and ``y``"""
    dphi = pi2 / n
    points = []
    for i in range(n):
        phi = i * dphi
        v = add(scale3(x, cos(phi)), scale3(y, sin(phi)))
        points.append(add(center, scale3(v, r)))
    return points


def box_mesh(box):
    """Flat-shaded box mesh, see ``Mesh.from_box``."""
    return Mesh.from_box(box)


def sphere_mesh(sphere, n=16):
    """
    Latitude/longitude sphere with ``n`` stacks and ``2n`` sectors.

    Vertices form an ``(n+1) x (2n+1)`` grid, rows running from the
    north pole (stack angle pi/2) to the south pole (-pi/2) and
    columns from sector angle 0 to 2pi; the last column repeats the
    first so that the seam has its own vertices.  Each normal is the
    unit direction from the center to its vertex.

    Each band between rows ``i`` and ``i+1`` holds two triangles per
    sector, except that the triangle touching the pole is left out on
    the first and last bands.
    """
    _check_resolution(n, 2, 'sphere stack count')
    c = point(sphere.center)
    r = sphere.radius
    stacks = n
    sectors = 2 * n

    sector_step = pi2 / sectors
    stack_step = pi / stacks

    mesh = Mesh()
    for i in range(stacks + 1):
        stack = pi / 2 - i * stack_step
        for j in range(sectors + 1):
            sector = j * sector_step
            offset = point(r * cos(stack) * cos(sector),
                           r * cos(stack) * sin(sector),
                           r * sin(stack))
            mesh.vertices.append(add(c, offset))
            mesh.normals.append(normalize(offset))

    for i in range(stacks):
        k1 = i * (sectors + 1)
        k2 = k1 + sectors + 1
        for j in range(sectors):
            if i != 0:
                mesh.add_face(Face.smooth(k1, k2, k1 + 1))
            if i != stacks - 1:
                mesh.add_face(Face.smooth(k1 + 1, k2, k2 + 1))
            k1 += 1
            k2 += 1
    return mesh


def disc_mesh(disc, n=32):
    """
    Flat disc as a triangle fan: ``n`` rim vertices, then the center
    at index ``n``, and one normal shared by every triangle.
    """
    _check_resolution(n)
    c = point(disc.center)
    z = normalize(disc.normal)
    x, y = orthonormal(z)

    mesh = Mesh()
    mesh.vertices = _ring(c, x, y, disc.radius, n)
    mesh.vertices.append(c)
    mesh.normals.append(z)

    for i in range(n):
        mesh.add_triangle(n, i, (i + 1) % n, 0)
    return mesh


def cylinder_mesh(cylinder, n=16):
    """
    Capped cylinder from ``cylinder.a`` to ``cylinder.b``.

    Each cap is a triangle fan with its own center vertex and a single
    flat normal: ``-axis`` at ``a`` (normal 0), ``+axis`` at ``b``
    (normal 1).  The side adds one normal per column, the direction
    from ``a`` to that column's vertex on the first ring, shared by
    both triangles of the column.
    """
    _check_resolution(n)
    a = point(cylinder.a)
    b = point(cylinder.b)
    r = cylinder.radius
    z = normalize(sub(b, a))
    x, y = orthonormal(z)

    mesh = Mesh()

    # first cap
    mesh.vertices.extend(_ring(a, x, y, r, n))
    mesh.vertices.append(a)
    mesh.normals.append(neg(z))
    for i in range(n):
        mesh.add_triangle(n, i, (i + 1) % n, 0)

    # second cap
    offset = len(mesh.vertices)
    mesh.vertices.extend(_ring(b, x, y, r, n))
    mesh.vertices.append(b)
    mesh.normals.append(z)
    for i in range(n):
        mesh.add_triangle(offset + n, offset + i, offset + (i + 1) % n, 1)

    # side
    for i in range(n):
        mesh.normals.append(normalize(sub(mesh.vertices[i], a)))
        nn = len(mesh.normals) - 1
        mesh.add_triangle(i, offset + i, (i + 1) % n, nn)
        mesh.add_triangle((i + 1) % n, offset + i, offset + (i + 1) % n, nn)
    return mesh


def torus_mesh(torus, n=16, slices=16):
    """
    Closed torus with ``slices`` steps around the major circle and
    ``n`` steps around the tube.

    Vertex ``i*n + j`` sits at ``center + R*u + r*v`` where ``u`` is the
    major direction of slice ``i`` and ``v = cos(phi)*u + sin(phi)*z``
    the tube direction of step ``j``; ``v`` is also its exact normal.
    Both angles wrap, so every quad connects to its neighbors.
    """
    _check_resolution(n, 3, 'torus tube resolution')
    _check_resolution(slices, 3, 'torus slice count')
    c = point(torus.center)
    R = torus.radius
    r = torus.minor_radius
    z = normalize(torus.normal)
    x, y = orthonormal(z)

    dtheta = pi2 / slices
    dphi = pi2 / n

    mesh = Mesh()
    for i in range(slices):
        theta = i * dtheta
        u = add(scale3(x, cos(theta)), scale3(y, sin(theta)))
        for j in range(n):
            phi = j * dphi
            v = add(scale3(u, cos(phi)), scale3(z, sin(phi)))
            mesh.vertices.append(add(c, add(scale3(u, R), scale3(v, r))))
            mesh.normals.append(direction(v))

    for i in range(slices):
        nxt = (i + 1) % slices
        for j in range(n):
            jn = (j + 1) % n
            a = i * n + j
            b = nxt * n + j
            cc = nxt * n + jn
            d = i * n + jn
            mesh.add_quad(a, b, cc, d)
    return mesh


def tessellate(obj, n=16, slices=None):
    """
    Dispatch ``obj`` to the matching generator.  ``slices`` only
    applies to tori and defaults to ``n``.
    """
    if isinstance(obj, Box):
        return box_mesh(obj)
    elif isinstance(obj, Sphere):
        return sphere_mesh(obj, n)
    elif isinstance(obj, Torus):
        return torus_mesh(obj, n, n if slices is None else slices)
    elif isinstance(obj, Disc):
        return disc_mesh(obj, n)
    elif isinstance(obj, Cylinder):
        return cylinder_mesh(obj, n)
    raise ValueError('bad thing passed to tessellate(): {}'.format(obj))
