"""Geometric representation of a FABulous fabric.

The records in this module mirror the sections of a FABulous geometry file. A
:class:`FabricGeometry` owns the tile grid and a registry of :class:`TileGeometry`
templates keyed by tile type name; every tile type owns its switch matrix, BELs and
wires.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Location:
    """A point in fabric or tile coordinates.

    Attributes
    ----------
    x : float
        X coordinate
    y : float
        Y coordinate
    """

    x: float = 0.0
    y: float = 0.0

    def __repr__(self) -> str:
        return f"{self.x}/{self.y}"

    def __add__(self, other: "Location") -> "Location":
        return Location(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Location") -> "Location":
        return Location(self.x - other.x, self.y - other.y)

    def scale_inverse(self, value: float) -> "Location":
        """Return the location with both components divided by `value`."""
        return Location(self.x / value, self.y / value)

    @property
    def is_valid(self) -> bool:
        """Whether neither component is NaN."""
        return not (math.isnan(self.x) or math.isnan(self.y))

    @staticmethod
    def average_of(*locations: "Location") -> "Location":
        """Return the centroid of `locations`.

        Raises
        ------
        ValueError
            If no location is given.
        """
        if not locations:
            raise ValueError("Cannot average an empty set of locations")
        total = Location()
        for location in locations:
            total = total + location
        return total.scale_inverse(len(locations))


class Side(Enum):
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @classmethod
    def from_identifier(cls, identifier: str) -> "Side | None":
        """Decode a side identifier, returning None for anything unrecognised."""
        try:
            return cls(identifier.strip().upper())
        except ValueError:
            return None


class IO(Enum):
    INPUT = "I"
    OUTPUT = "O"

    @classmethod
    def from_identifier(cls, identifier: str) -> "IO | None":
        """Decode an IO identifier, returning None for anything unrecognised."""
        try:
            return cls(identifier.strip().upper())
        except ValueError:
            return None


@dataclass
class PortGeometry:
    """Position of a port on a BEL or switch matrix.

    Attributes
    ----------
    name : str
        Port name.
    sourceName : str | None
        Name of the wire or port driving this port.
    destName : str | None
        Name of the wire or port driven by this port.
    io : IO | None
        Port direction.
    side : Side | None
        Side of the switch matrix the port sits on. Only switch matrix ports carry it.
    relX : float
        X position relative to the owning element.
    relY : float
        Y position relative to the owning element.
    """

    name: str
    sourceName: str | None = None
    destName: str | None = None
    io: IO | None = None
    side: Side | None = None
    relX: float = 0.0
    relY: float = 0.0

    @property
    def location(self) -> Location:
        return Location(self.relX, self.relY)


@dataclass
class WireGeometry:
    """A tile wire as a path of axis-aligned segments."""

    name: str
    path: list[Location] = field(default_factory=list)


@dataclass
class SwitchMatrixConnection:
    """A programmable connection between two switch matrix ports, by name."""

    sourcePort: str
    destPort: str
    customPath: list[Location] | None = None


@dataclass
class SwitchMatrixWireGeometry:
    """Rendering ready counterpart of a :class:`SwitchMatrixConnection`."""

    name: str
    sourcePort: str
    destPort: str
    path: list[Location] = field(default_factory=list)


@dataclass
class SwitchMatrixConfiguration:
    """Normalised content of a switch matrix CSV file."""

    connections: list[SwitchMatrixConnection] = field(default_factory=list)
    wireGeometries: list[SwitchMatrixWireGeometry] = field(default_factory=list)


@dataclass
class SwitchMatrixGeometry:
    """Geometry of a tile's switch matrix.

    Attributes
    ----------
    name : str
        Switch matrix name.
    relX, relY : float
        Position relative to the tile.
    width, height : float
        Size of the switch matrix.
    src : str | None
        HDL source of the switch matrix.
    csv : str | None
        Switch matrix CSV reference as written in the geometry file.
    portGeometryList : list[PortGeometry]
        Ordinary switch matrix ports.
    jumpPortGeometryList : list[PortGeometry]
        Jump ports.
    wireConnections : list[SwitchMatrixConnection] | None
        Connections read from `csv`, None when no CSV was loaded.
    switchMatrixWires : list[SwitchMatrixWireGeometry] | None
        Wire geometries read from `csv`, None when no CSV was loaded.
    """

    name: str
    relX: float = 0.0
    relY: float = 0.0
    width: float = 0.0
    height: float = 0.0
    src: str | None = None
    csv: str | None = None
    portGeometryList: list[PortGeometry] = field(default_factory=list)
    jumpPortGeometryList: list[PortGeometry] = field(default_factory=list)
    wireConnections: list[SwitchMatrixConnection] | None = None
    switchMatrixWires: list[SwitchMatrixWireGeometry] | None = None


@dataclass
class BelGeometry:
    """Geometry of a Basic Element of Logic inside a tile."""

    name: str
    relX: float = 0.0
    relY: float = 0.0
    width: float = 0.0
    height: float = 0.0
    src: str | None = None
    portGeometryList: list[PortGeometry] = field(default_factory=list)


@dataclass
class LowLodWiresGeometry:
    """Axis-aligned rectangle approximating wire density inside a tile."""

    relX: float
    relY: float
    width: float
    height: float


@dataclass
class TileGeometry:
    """Geometry template of a tile type."""

    name: str
    width: float = 0.0
    height: float = 0.0
    smGeometry: SwitchMatrixGeometry | None = None
    belGeometryList: list[BelGeometry] = field(default_factory=list)
    wireGeometryList: list[WireGeometry] = field(default_factory=list)
    lowLodWiresGeoms: list[LowLodWiresGeometry] = field(default_factory=list)
    lowLodOverlays: list[LowLodWiresGeometry] = field(default_factory=list)


@dataclass
class FabricGeometry:
    """Geometry of a complete fabric.

    Attributes
    ----------
    name : str
        Fabric name.
    numberOfRows, numberOfColumns : int
        Declared size of the tile grid.
    width, height : int
        Declared physical size of the fabric.
    numberOfLines : int
        Number of lines in the geometry file as declared by the generator.
    tileNames : list[list[str]]
        Tile type name per grid cell, row-major, as written in the file. Empty
        cells hold the literal "Null".
    tileLocations : list[list[Location | None]]
        Physical position per grid cell, row-major, None for empty cells.
    tileGeomMap : dict[str, TileGeometry]
        Tile type registry.
    generatorVersion : str | None
        Version of the generator that wrote the file.
    """

    name: str = ""
    numberOfRows: int = 0
    numberOfColumns: int = 0
    width: int = 0
    height: int = 0
    numberOfLines: int = 0
    tileNames: list[list[str]] = field(default_factory=list)
    tileLocations: list[list[Location | None]] = field(default_factory=list)
    tileGeomMap: dict[str, TileGeometry] = field(default_factory=dict)
    generatorVersion: str | None = None


_NUMBER = r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_NUMBER_PREFIX = re.compile(_NUMBER)
_PAREN_LOCATION = re.compile(r"\(([^,]+),([^)]+)\)")


def parse_float(token: str) -> float | None:
    """Parse the leading decimal number of `token`, None if there is none."""
    match = _NUMBER_PREFIX.match(token)
    if match is None:
        return None
    return float(match.group())


def parse_location(token: str) -> Location:
    """Decode a location token.

    The forms ``x/y``, ``(x,y)`` and ``x,y`` are tried in that order. A token
    matching none of them decodes to the origin.

    Parameters
    ----------
    token : str
        The location text.

    Returns
    -------
    Location
        The decoded location.
    """
    parts = token.split("/")
    if len(parts) == 2:
        x, y = parse_float(parts[0]), parse_float(parts[1])
        if x is not None and y is not None:
            return Location(x, y)

    match = _PAREN_LOCATION.search(token)
    if match:
        x, y = parse_float(match.group(1)), parse_float(match.group(2))
        if x is not None and y is not None:
            return Location(x, y)

    parts = token.split(",")
    if len(parts) >= 2:
        x, y = parse_float(parts[0]), parse_float(parts[1])
        if x is not None and y is not None:
            return Location(x, y)

    return Location(0, 0)
