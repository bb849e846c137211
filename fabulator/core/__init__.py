"""Fabulator core module.

Components:
- reader: Input readers choosing a parser by file type
- context: Holder of the loaded fabric geometry and design
"""

from fabulator.core.context import FabricContext, SearchMatch, TileInstance, find_geometry_file
from fabulator.core.reader import FasmReader, GeometryReader, Reader, create_reader

__all__ = [
    "FabricContext",
    "FasmReader",
    "GeometryReader",
    "Reader",
    "SearchMatch",
    "TileInstance",
    "create_reader",
    "find_geometry_file",
]
