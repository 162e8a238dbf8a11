"""Indexed triangle meshes with independent vertex and normal streams.

A ``Mesh`` stores positions and normals in two separate arrays and
names them per triangle corner through two parallel index arrays,
``vertex_index`` and ``normal_index``.  Because the two indices are
independent, one position may carry different normals in different
faces: a box keeps hard edges by giving each face its own normal,
while a sphere shares one normal per vertex.

Triangles are only ever added as whole ``Face`` values (three vertex
indices and three normal indices), so both index arrays always have
the same length, a multiple of three.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Iterator, NamedTuple, Optional, Sequence, Tuple

from tinymesh.geom import (add, clamp, direction, dist, isgoodnum, mag, neg,
                           point, scale3)
from tinymesh.geometry_utils import Triangle, area_normal
from tinymesh.primitives import Box, to_vec3
from tinymesh.xform import Matrix3

logger = logging.getLogger(__name__)


def _unit(n):
    # zero normals (unreferenced vertices) stay zero
    m = mag(n)
    if m > 0.0:
        return [n[0]/m, n[1]/m, n[2]/m, 0.0]
    return [0.0, 0.0, 0.0, 0.0]


def _flat_index(index):
    # accepts a flat index sequence or one (a, b, c) row per triangle
    flat = []
    for i in ([] if index is None else index):
        if hasattr(i, '__len__'):
            flat.extend(int(k) for k in i)
        else:
            flat.append(int(i))
    return flat


class Face(NamedTuple):
    """One triangle: the vertex index and normal index of each corner."""

    vertices: Tuple[int, int, int]
    normals: Tuple[int, int, int]

    @classmethod
    def flat(cls, a: int, b: int, c: int, n: int) -> "Face":
        return cls((a, b, c), (n, n, n))

    @classmethod
    def smooth(cls, a: int, b: int, c: int) -> "Face":
        return cls((a, b, c), (a, b, c))


class Mesh:
    """Indexed triangle mesh.

    ``Mesh()`` is empty.  ``Mesh(vertices, normals, vertex_index,
    normal_index)`` adopts caller-supplied arrays; when ``normals`` and
    ``normal_index`` are both omitted every vertex gets a ``+Z`` normal
    and ``normal_index`` mirrors ``vertex_index``.  Inconsistent arrays
    raise ``ValueError``.  Index arrays may be flat or hold one row per
    triangle, so the output of ``interop.mesh_arrays`` can be passed
    straight back in.
    """

    def __init__(self, vertices=None, normals=None, vertex_index=None, normal_index=None):
        self.vertices = [point(v) for v in ([] if vertices is None else vertices)]
        self._vindex = _flat_index(vertex_index)

        if normals is None and normal_index is None:
            self.normals = [direction(0, 0, 1) for _ in self.vertices]
            self._nindex = list(self._vindex)
        else:
            self.normals = [direction(n) for n in ([] if normals is None else normals)]
            self._nindex = _flat_index(normal_index)

        self.validate()

    @classmethod
    def from_box(cls, box: Box) -> "Mesh":
        """Flat-shaded box: 8 vertices, 6 face normals, 12 triangles."""

        mesh = cls()
        mesh.vertices = [box.vertex(i) for i in range(8)]
        mesh.normals = [direction(-1, 0, 0), direction(1, 0, 0),
                        direction(0, -1, 0), direction(0, 1, 0),
                        direction(0, 0, -1), direction(0, 0, 1)]

        mesh.add_triangle(0, 2, 1, 4)
        mesh.add_triangle(1, 2, 3, 4)

        mesh.add_triangle(4, 5, 6, 5)
        mesh.add_triangle(5, 7, 6, 5)

        mesh.add_triangle(0, 4, 2, 0)
        mesh.add_triangle(4, 6, 2, 0)

        mesh.add_triangle(1, 3, 5, 1)
        mesh.add_triangle(3, 7, 5, 1)

        mesh.add_triangle(0, 1, 5, 2)
        mesh.add_triangle(0, 5, 4, 2)

        mesh.add_triangle(3, 2, 7, 3)
        mesh.add_triangle(6, 7, 2, 3)
        return mesh

    def __repr__(self):
        return "Mesh(vertices={}, normals={}, triangles={})".format(
            self.vertex_count, self.normal_count, self.triangle_count)

    ## read access
    ## -----------

    @property
    def vertex_index(self) -> Tuple[int, ...]:
        return tuple(self._vindex)

    @property
    def normal_index(self) -> Tuple[int, ...]:
        return tuple(self._nindex)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def normal_count(self) -> int:
        return len(self.normals)

    @property
    def triangle_count(self) -> int:
        return len(self._vindex) // 3

    def vertex(self, i: int) -> list:
        return self.vertices[i]

    def normal(self, i: int) -> list:
        return self.normals[i]

    def faces(self) -> Iterator[Face]:
        vi = self._vindex
        ni = self._nindex
        for i in range(0, len(vi), 3):
            yield Face((vi[i], vi[i + 1], vi[i + 2]), (ni[i], ni[i + 1], ni[i + 2]))

    def triangles(self) -> Iterator[Triangle]:
        """Yield the geometry of every face as a ``Triangle``."""
        verts = self.vertices
        for face in self.faces():
            a, b, c = face.vertices
            yield Triangle(to_vec3(verts[a]), to_vec3(verts[b]), to_vec3(verts[c]))

    def validate(self) -> None:
        """Raise ``ValueError`` unless the index arrays are consistent."""

        if len(self._vindex) != len(self._nindex):
            raise ValueError('vertex/normal index length mismatch: {} != {}'.format(
                len(self._vindex), len(self._nindex)))
        if len(self._vindex) % 3 != 0:
            raise ValueError('index arrays must hold whole triangles, got {} entries'.format(
                len(self._vindex)))
        nv = len(self.vertices)
        nn = len(self.normals)
        for i in self._vindex:
            if i < 0 or i >= nv:
                raise ValueError('vertex index out of range: {}'.format(i))
        for i in self._nindex:
            if i < 0 or i >= nn:
                raise ValueError('normal index out of range: {}'.format(i))

    def copy(self) -> "Mesh":
        return deepcopy(self)

    ## construction
    ## ------------

    def clear(self) -> None:
        self.vertices = []
        self.normals = []
        self._vindex = []
        self._nindex = []

    def add_face(self, face: Face) -> None:
        if len(face.vertices) != 3 or len(face.normals) != 3:
            raise ValueError('bad face, need three corners: {}'.format(face))
        self._vindex.extend(face.vertices)
        self._nindex.extend(face.normals)

    def add_triangle(self, a: int, b: int, c: int, n: int) -> None:
        """Add triangle ``abc`` with normal ``n`` on all three corners."""
        self.add_face(Face.flat(a, b, c, n))

    def add_smooth_triangle(self, a: int, na: int, b: int, nb: int, c: int, nc: int) -> None:
        self.add_face(Face((a, b, c), (na, nb, nc)))

    def add_smooth_quad(self, a, na, b, nb, c, nc, d, nd) -> None:
        """Add quad ``abcd`` as the two triangles ``abc`` and ``acd``."""
        self.add_smooth_triangle(a, na, b, nb, c, nc)
        self.add_smooth_triangle(a, na, c, nc, d, nd)

    def add_quad(self, a: int, b: int, c: int, d: int) -> None:
        self.add_smooth_quad(a, a, b, b, c, c, d, d)

    ## queries
    ## -------

    def bbox(self) -> Box:
        if not self.vertices:
            return Box.null()
        return Box.from_points(self.vertices)

    ## in-place transformations
    ## ------------------------

    def smooth_normals(self) -> None:
        """Replace the normals with area-weighted per-vertex normals.

        Afterwards ``normal_index`` equals ``vertex_index``.  Vertices
        that no triangle references keep a zero normal.
        """

        normals = [[0.0, 0.0, 0.0, 0.0] for _ in self.vertices]
        self._nindex = list(self._vindex)

        verts = self.vertices
        for face in self.faces():
            a, b, c = face.vertices
            tn = area_normal(verts[a], verts[b], verts[c])
            for k in face.normals:
                acc = normals[k]
                acc[0] += tn[0]
                acc[1] += tn[1]
                acc[2] += tn[2]

        self.normals = [_unit(n) for n in normals]

    def scale(self, s) -> None:
        """Scale by a number or by a diagonal ``Matrix3``.

        A negative number mirrors the mesh, so every normal is flipped.
        A matrix is applied to the vertices; normals go through the
        inverse transpose and are renormalized.
        """

        if isgoodnum(s):
            self.vertices = [scale3(v, s) for v in self.vertices]
            if s < 0.0:
                self.normals = [neg(n) for n in self.normals]
        elif isinstance(s, Matrix3):
            nm = s.transpose().inverse()
            self.vertices = [s.mul(v) for v in self.vertices]
            self.normals = [_unit(nm.mul(n)) for n in self.normals]
        else:
            raise ValueError('bad thing passed to scale(): {}'.format(s))

    def rotate(self, m: Matrix3) -> None:
        if not isinstance(m, Matrix3):
            raise ValueError('bad thing passed to rotate(): {}'.format(m))
        self.vertices = [m.mul(v) for v in self.vertices]
        self.normals = [m.mul(n) for n in self.normals]

    def translate(self, delta: Sequence[float]) -> None:
        d = direction(delta)
        self.vertices = [add(v, d) for v in self.vertices]

    def sphere_warp(self, center: Sequence[float], radius: float, displacement: Sequence[float]) -> None:
        """Displace vertices by ``displacement`` with a radial falloff.

        A vertex at distance ``t*radius`` from ``center`` moves by
        ``clamp(t, 0, 1) * displacement``; the normals are then
        recomputed with ``smooth_normals()``.
        """

        if not isgoodnum(radius) or radius <= 0.0:
            raise ValueError('bad warp radius: {}'.format(radius))
        c = point(center)
        d = direction(displacement)
        warped = []
        for v in self.vertices:
            t = clamp(dist(v, c) / radius)
            warped.append(add(v, scale3(d, t)))
        self.vertices = warped

        self.smooth_normals()

    ## file boundary
    ## -------------

    def load(self, path) -> bool:
        """Replace the contents with an OBJ file.

        Returns ``False`` (and leaves the mesh empty) if the file
        cannot be read.
        """

        from tinymesh.io import MeshIOError
        from tinymesh.io.obj import read_obj

        self.clear()
        try:
            other = read_obj(path)
        except MeshIOError as exc:
            logger.warning("could not load mesh from %s: %s", path, exc)
            return False

        self.vertices = other.vertices
        self.normals = other.normals
        self._vindex = other._vindex
        self._nindex = other._nindex
        return True

    def save_obj(self, path, name: Optional[str] = None) -> bool:
        """Write the mesh as OBJ; returns ``False`` if the write failed."""

        from tinymesh.io import MeshIOError
        from tinymesh.io.obj import write_obj

        try:
            write_obj(self, path, name="tinymesh" if name is None else name)
        except MeshIOError as exc:
            logger.warning("could not save mesh to %s: %s", path, exc)
            return False
        return True


__all__ = ["Face", "Mesh"]
