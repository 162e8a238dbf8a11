"""I/O utilities for tinymesh."""


class MeshIOError(Exception):
    """A mesh file could not be opened, read or written."""


from .obj import read_obj, write_obj  # noqa: E402
from .stl import read_stl, write_stl  # noqa: E402

__all__ = ['MeshIOError', 'read_obj', 'write_obj', 'read_stl', 'write_stl']
