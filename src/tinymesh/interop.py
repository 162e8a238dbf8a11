"""Array views of tinymesh meshes for renderers and other mesh libraries.

``mesh_arrays`` hands the three parallel streams of a ``Mesh`` to numpy
so that a viewer can build vertex buffers and draw calls without
touching the kernel.  ``to_trimesh``/``from_trimesh`` convert to and
from ``trimesh.Trimesh``; they need the optional ``trimesh`` package.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

try:
    import trimesh
except ImportError:  # pragma: no cover - optional dependency
    trimesh = None  # type: ignore[assignment]

from tinymesh.mesh import Mesh


def trimesh_available() -> bool:
    return trimesh is not None


def mesh_arrays(mesh: Mesh) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(vertices, normals, vertex_index, normal_index)`` arrays.

    Positions and normals are ``(N, 3)`` / ``(M, 3)`` float arrays; the
    index arrays are reshaped to one ``(a, b, c)`` row per triangle.
    """

    verts = np.asarray([v[:3] for v in mesh.vertices], dtype=float).reshape(-1, 3)
    norms = np.asarray([n[:3] for n in mesh.normals], dtype=float).reshape(-1, 3)
    vindex = np.asarray(mesh.vertex_index, dtype=np.int64).reshape(-1, 3)
    nindex = np.asarray(mesh.normal_index, dtype=np.int64).reshape(-1, 3)
    return verts, norms, vindex, nindex


def to_trimesh(mesh: Mesh) -> "trimesh.Trimesh":
    """Convert to a ``trimesh.Trimesh`` sharing vertex order and faces.

    Trimesh keeps one normal per vertex, so per-corner normals are not
    carried over; trimesh recomputes its own from the faces.
    """

    if trimesh is None:  # pragma: no cover - optional dependency
        raise RuntimeError("trimesh is not installed")

    verts, _, faces, _ = mesh_arrays(mesh)
    return trimesh.Trimesh(vertices=verts, faces=faces, process=False)


def from_trimesh(tm: "trimesh.Trimesh") -> Mesh:
    """Convert a ``trimesh.Trimesh`` into a smooth-shaded ``Mesh``."""

    if trimesh is None:  # pragma: no cover - optional dependency
        raise RuntimeError("trimesh is not installed")

    verts = np.asarray(tm.vertices, dtype=float)
    faces = np.asarray(tm.faces, dtype=np.int64).reshape(-1)
    normals = np.asarray(tm.vertex_normals, dtype=float)
    return Mesh(verts.tolist(), normals.tolist(), faces.tolist(), faces.tolist())


__all__ = ["mesh_arrays", "to_trimesh", "from_trimesh", "trimesh_available"]
