"""Wavefront OBJ import and export for tinymesh meshes.

Only the subset the mesh kernel needs is understood: ``v`` (position),
``vn`` (normal) and triangular ``f`` lines whose corners name both a
vertex and a normal (``a/t/n`` or ``a//n``, 1-based).  Everything else
is skipped.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from tinymesh.io import MeshIOError
from tinymesh.mesh import Mesh

logger = logging.getLogger(__name__)


def _parse_xyz(fields: List[str]) -> Optional[Tuple[float, float, float]]:
    if len(fields) < 3:
        return None
    try:
        return float(fields[0]), float(fields[1]), float(fields[2])
    except ValueError:
        return None


def _parse_corner(token: str) -> Optional[Tuple[int, int]]:
    parts = token.split('/')
    if len(parts) != 3 or not parts[0] or not parts[2]:
        return None
    try:
        vi = int(parts[0])
        ni = int(parts[2])
    except ValueError:
        return None
    if vi < 1 or ni < 1:
        return None
    return vi - 1, ni - 1


def _parse_face(fields: List[str]) -> Optional[List[Tuple[int, int]]]:
    if len(fields) != 3:
        return None
    corners = [_parse_corner(tok) for tok in fields]
    if any(c is None for c in corners):
        return None
    return corners


def parse_obj(lines) -> Mesh:
    """Build a ``Mesh`` from an iterable of OBJ text lines."""

    vertices = []
    normals = []
    vindex = []
    nindex = []
    skipped = 0

    for line in lines:
        fields = line.split()
        if not fields or fields[0].startswith('#'):
            continue
        key = fields[0]
        if key == 'v':
            xyz = _parse_xyz(fields[1:])
            if xyz is None:
                skipped += 1
                continue
            vertices.append(xyz)
        elif key == 'vn':
            xyz = _parse_xyz(fields[1:])
            if xyz is None:
                skipped += 1
                continue
            normals.append(xyz)
        elif key == 'f':
            corners = _parse_face(fields[1:])
            if corners is None:
                skipped += 1
                continue
            for vi, ni in corners:
                vindex.append(vi)
                nindex.append(ni)
        elif key not in ('g', 'o', 's', 'vt', 'usemtl', 'mtllib'):
            skipped += 1

    if skipped:
        logger.debug("skipped %d unrecognized OBJ lines", skipped)

    try:
        return Mesh(vertices, normals, vindex, nindex)
    except ValueError as exc:
        raise MeshIOError("inconsistent OBJ data: {}".format(exc)) from exc


def read_obj(path_or_file) -> Mesh:
    """Read an OBJ file and return a ``Mesh``.

    ``path_or_file`` can be a filesystem path or an open text stream.
    Raises ``MeshIOError`` if the file cannot be read or its faces
    reference missing vertices or normals.
    """

    if hasattr(path_or_file, 'read'):
        try:
            data = path_or_file.read()
        except OSError as exc:
            raise MeshIOError("cannot read {}: {}".format(path_or_file, exc)) from exc
        if isinstance(data, bytes):
            data = data.decode('utf-8', errors='replace')
        return parse_obj(data.splitlines())

    try:
        with open(path_or_file, 'r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise MeshIOError("cannot read {}: {}".format(path_or_file, exc)) from exc

    mesh = parse_obj(text.splitlines())
    logger.debug("read %s: %d vertices, %d normals, %d triangles",
                 path_or_file, mesh.vertex_count, mesh.normal_count, mesh.triangle_count)
    return mesh


def _write(mesh: Mesh, stream, name: str) -> None:
    print(f"g {name}", file=stream)
    for v in mesh.vertices:
        print(f"v {v[0]} {v[1]} {v[2]}", file=stream)
    for n in mesh.normals:
        print(f"vn {n[0]} {n[1]} {n[2]}", file=stream)
    for face in mesh.faces():
        (a, b, c), (na, nb, nc) = face
        print(f"f {a + 1}//{na + 1} {b + 1}//{nb + 1} {c + 1}//{nc + 1}", file=stream)


def write_obj(mesh: Mesh, path_or_file, *, name: str = 'tinymesh') -> None:
    """Write ``mesh`` as OBJ, preceded by a ``g name`` group line.

    ``path_or_file`` can be a filesystem path or an open text stream.
    Raises ``MeshIOError`` if the file cannot be written.
    """

    try:
        if hasattr(path_or_file, 'write'):
            _write(mesh, path_or_file, name)
        else:
            with open(path_or_file, 'w', encoding='utf-8') as stream:
                _write(mesh, stream, name)
    except OSError as exc:
        raise MeshIOError("cannot write {}: {}".format(path_or_file, exc)) from exc


__all__ = ['parse_obj', 'read_obj', 'write_obj']
