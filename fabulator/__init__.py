"""Fabulator - fabric geometry and design models for FABulous FPGA fabrics.

This package reads the files describing a FABulous fabric and a design mapped onto
it, and turns them into typed models for a fabric viewer.

Processing Pipeline
-------------------
1. **Parsers**: Geometry CSV, switch matrix CSV and FASM files → model objects
2. **Geometry**: Low level-of-detail wire rectangles per tile
3. **Core/Context**: Hold the loaded fabric and design, answer viewer queries
4. **Serialize**: Plain documents for a rendering layer

Quick Start
-----------
::

    from fabulator import FabricContext

    context = FabricContext()
    context.load_fabric(Path("eFPGA_geometry.csv"))
    context.load_design(Path("user_design/sequential_16bit_en.fasm"))
    print(context.statistics)
"""

# Core
from fabulator.core import FabricContext, FasmReader, GeometryReader, Reader, create_reader

# Geometry processing
from fabulator.geometry import rasterize

# Data model
from fabulator.model import (
    BitstreamConfiguration,
    FabricGeometry,
    FasmStatistics,
    Location,
    TileGeometry,
    to_json,
    to_plain,
)

# Parsers
from fabulator.parsers import (
    FasmParser,
    GeometryParser,
    get_statistics,
    parse_fasm,
    parse_geometry,
    parse_switch_matrix_csv,
    validate_fasm_file,
)

__all__ = [
    # Core
    "FabricContext",
    "Reader",
    "GeometryReader",
    "FasmReader",
    "create_reader",
    # Data model
    "BitstreamConfiguration",
    "FabricGeometry",
    "FasmStatistics",
    "Location",
    "TileGeometry",
    "to_json",
    "to_plain",
    # Parsers
    "FasmParser",
    "GeometryParser",
    "get_statistics",
    "parse_fasm",
    "parse_geometry",
    "parse_switch_matrix_csv",
    "validate_fasm_file",
    # Geometry
    "rasterize",
]
