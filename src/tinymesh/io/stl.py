"""STL import and export utilities for tinymesh meshes."""

from __future__ import annotations

import logging
import re
import struct
from typing import List, Tuple

from tinymesh.geometry_utils import Triangle
from tinymesh.io import MeshIOError
from tinymesh.mesh import Mesh

logger = logging.getLogger(__name__)

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')
_VERTEX_TOL = 1e-9  # Tolerance for vertex deduplication

Facet = Tuple[Tuple[float, float, float], Triangle]


def _facets(mesh: Mesh) -> List[Facet]:
    """Pair each non-degenerate triangle with its geometric unit normal."""

    facets = []
    for tri in mesh.triangles():
        normal = tri.normal()
        if normal is None:
            continue
        facets.append((normal, tri))
    return facets


def write_stl(mesh: Mesh, path_or_file, *, binary: bool = True, name: str = 'tinymesh') -> None:
    """Write ``mesh`` to STL, one facet per non-degenerate triangle.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    Raises ``MeshIOError`` if a path cannot be written.
    """

    facets = _facets(mesh)
    skipped = mesh.triangle_count - len(facets)
    if skipped:
        logger.debug("skipped %d degenerate triangles", skipped)

    try:
        if binary:
            _write_binary(facets, path_or_file, name)
        else:
            _write_ascii(facets, path_or_file, name)
    except OSError as exc:
        raise MeshIOError("cannot write {}: {}".format(path_or_file, exc)) from exc


def _write_binary(facets: List[Facet], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'wb')
        close_when_done = True

    try:
        header = (name[:_HEADER_SIZE]).encode('ascii', errors='replace')
        header = header.ljust(_HEADER_SIZE, b' ')
        stream.write(header)
        stream.write(struct.pack('<I', len(facets)))

        for normal, tri in facets:
            data = _STRUCT_TRIANGLE.pack(
                *normal,
                *tri.v0,
                *tri.v1,
                *tri.v2,
                0,
            )
            stream.write(data)
    finally:
        if close_when_done:
            stream.close()


def _write_ascii(facets: List[Facet], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='ascii')
        close_when_done = True

    try:
        print(f"solid {name}", file=stream)
        for normal, tri in facets:
            print(f"  facet normal {normal[0]:.6e} {normal[1]:.6e} {normal[2]:.6e}", file=stream)
            print("    outer loop", file=stream)
            for v in (tri.v0, tri.v1, tri.v2):
                print(f"      vertex {v[0]:.6e} {v[1]:.6e} {v[2]:.6e}", file=stream)
            print("    endloop", file=stream)
            print("  endfacet", file=stream)
        print(f"endsolid {name}", file=stream)
    finally:
        if close_when_done:
            stream.close()


# ---------------------------------------------------------------------------
# STL Import
# ---------------------------------------------------------------------------


def _is_binary_stl(data: bytes) -> bool:
    """Determine if STL data is binary format.

    Binary STL has 80-byte header + 4-byte count, then 50 bytes per triangle.
    ASCII STL starts with 'solid' keyword.
    """
    if len(data) < 84:
        return False

    try:
        header = data[:80].decode('ascii', errors='ignore').strip().lower()
        if header.startswith('solid'):
            # 'solid' may also open a binary header; the size decides
            tri_count = struct.unpack('<I', data[80:84])[0]
            expected_size = 84 + (tri_count * 50)
            if len(data) == expected_size:
                rest = data[84:min(200, len(data))]
                if b'facet' in rest or b'vertex' in rest:
                    return False
                return True
            return False
        return True
    except (UnicodeDecodeError, struct.error):
        return True


def _parse_binary_stl(data: bytes) -> List[Facet]:
    """Parse binary STL data into facets."""
    if len(data) < 84:
        raise MeshIOError("invalid binary STL: file too small")

    tri_count = struct.unpack('<I', data[80:84])[0]
    facets = []
    offset = 84

    for _ in range(tri_count):
        if offset + 50 > len(data):
            break
        values = _STRUCT_TRIANGLE.unpack(data[offset:offset + 50])
        normal = (values[0], values[1], values[2])
        tri = Triangle(values[3:6], values[6:9], values[9:12])
        facets.append((normal, tri))
        offset += 50

    return facets


_FLOAT = r'([eE\d.+-]+)'
_FACET_PATTERN = re.compile(
    r'facet\s+normal\s+' + r'\s+'.join([_FLOAT] * 3) + r'\s+'
    r'outer\s+loop\s+'
    r'vertex\s+' + r'\s+'.join([_FLOAT] * 3) + r'\s+'
    r'vertex\s+' + r'\s+'.join([_FLOAT] * 3) + r'\s+'
    r'vertex\s+' + r'\s+'.join([_FLOAT] * 3) + r'\s+'
    r'endloop\s+endfacet',
    re.IGNORECASE
)


def _parse_ascii_stl(text: str) -> List[Facet]:
    """Parse ASCII STL text into facets."""
    facets = []
    for match in _FACET_PATTERN.finditer(text):
        try:
            values = [float(g) for g in match.groups()]
        except ValueError:
            continue
        normal = (values[0], values[1], values[2])
        tri = Triangle(tuple(values[3:6]), tuple(values[6:9]), tuple(values[9:12]))
        facets.append((normal, tri))
    return facets


def _vertex_key(v: Tuple[float, float, float], tol: float = _VERTEX_TOL) -> Tuple[int, int, int]:
    """Create a hashable key for vertex deduplication."""
    scale = 1.0 / tol
    return (int(round(v[0] * scale)), int(round(v[1] * scale)), int(round(v[2] * scale)))


def _facets_to_mesh(facets: List[Facet], deduplicate: bool = True) -> Mesh:
    """Build a flat-shaded mesh: one normal per facet, shared by its corners."""

    mesh = Mesh()
    vertex_map = {}

    for normal, tri in facets:
        corners = []
        for v in (tri.v0, tri.v1, tri.v2):
            if deduplicate:
                key = _vertex_key(v)
                idx = vertex_map.get(key)
                if idx is None:
                    idx = len(mesh.vertices)
                    vertex_map[key] = idx
                    mesh.vertices.append([v[0], v[1], v[2], 1.0])
            else:
                idx = len(mesh.vertices)
                mesh.vertices.append([v[0], v[1], v[2], 1.0])
            corners.append(idx)
        mesh.normals.append([normal[0], normal[1], normal[2], 0.0])
        mesh.add_triangle(corners[0], corners[1], corners[2], len(mesh.normals) - 1)

    return mesh


def read_stl(path_or_file, *, deduplicate: bool = True) -> Mesh:
    """Read an STL file and return a flat-shaded ``Mesh``.

    Parameters
    ----------
    path_or_file : str or path-like or file-like
        Path to STL file, or an open binary file object.
    deduplicate : bool, optional
        If True (default), merge coincident vertices to create a proper
        indexed mesh. If False, each triangle gets its own vertices.

    Examples
    --------
    >>> from tinymesh.io.stl import read_stl, write_stl
    >>> mesh = read_stl('model.stl')
    >>> write_stl(mesh, 'copy.stl')
    """

    try:
        if hasattr(path_or_file, 'read'):
            data = path_or_file.read()
        else:
            with open(path_or_file, 'rb') as f:
                data = f.read()
    except OSError as exc:
        raise MeshIOError("cannot read {}: {}".format(path_or_file, exc)) from exc
    if isinstance(data, str):
        data = data.encode('utf-8')

    if _is_binary_stl(data):
        facets = _parse_binary_stl(data)
    else:
        text = data.decode('utf-8', errors='replace')
        facets = _parse_ascii_stl(text)

    return _facets_to_mesh(facets, deduplicate=deduplicate)


__all__ = ['write_stl', 'read_stl']
