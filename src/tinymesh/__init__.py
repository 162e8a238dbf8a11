# -*- coding: utf-8 -*-
"""indexed triangle meshes and procedural primitives for **tinymesh**"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tinymesh")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"
