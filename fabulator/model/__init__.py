"""Fabulator data model module.

This module contains the data structures produced by the parsers.

The model includes:
- geometry: Fabric, tile, switch matrix, BEL, port and wire geometry
- design: Nets and connections of a routed design read from FASM
- serialize: Conversion into plain documents for a rendering layer
"""

from fabulator.model.design import (
    BitstreamConfiguration,
    BitstreamConfigurationBuilder,
    ConnectedPorts,
    DiscreteLocation,
    FasmStatistics,
    Net,
    NetEntry,
)
from fabulator.model.geometry import (
    IO,
    BelGeometry,
    FabricGeometry,
    Location,
    LowLodWiresGeometry,
    PortGeometry,
    Side,
    SwitchMatrixConfiguration,
    SwitchMatrixConnection,
    SwitchMatrixGeometry,
    SwitchMatrixWireGeometry,
    TileGeometry,
    WireGeometry,
    parse_location,
)
from fabulator.model.serialize import to_json, to_plain

__all__ = [
    "IO",
    "BelGeometry",
    "BitstreamConfiguration",
    "BitstreamConfigurationBuilder",
    "ConnectedPorts",
    "DiscreteLocation",
    "FabricGeometry",
    "FasmStatistics",
    "Location",
    "LowLodWiresGeometry",
    "Net",
    "NetEntry",
    "PortGeometry",
    "Side",
    "SwitchMatrixConfiguration",
    "SwitchMatrixConnection",
    "SwitchMatrixGeometry",
    "SwitchMatrixWireGeometry",
    "TileGeometry",
    "WireGeometry",
    "parse_location",
    "to_json",
    "to_plain",
]
