"""FABulous geometry file parser.

A geometry file is a flat list of comma separated rows. Rows whose first token is a
section keyword (``PARAMS``, ``FABRIC_DEF``, ``FABRIC_LOCS``, ``TILE``,
``SWITCH_MATRIX``, ``BEL``, ``PORT``, ``JUMP_PORT``, ``BEL_PORT``, ``WIRE``) switch
the parsing mode, every other row is an attribute of the element most recently
opened in the current mode::

    PARAMS
    Name,eFPGA
    Rows,2
    ...
    TILE
    Name,LUT4AB
    Width,300
    SWITCH_MATRIX
    Name,LUT4AB_switch_matrix
    Csv,Tile/LUT4AB/LUT4AB_switch_matrix.csv
    PORT
    Name,N1BEG0
    IO,O
    ...

Unknown rows and rows with an unexpected number of tokens are ignored so that
partial files still produce a model.
"""

import re
from enum import Enum, auto
from pathlib import Path

from loguru import logger

from fabulator.geometry.low_lod import rasterize
from fabulator.model.geometry import (
    IO,
    BelGeometry,
    FabricGeometry,
    Location,
    PortGeometry,
    Side,
    SwitchMatrixGeometry,
    TileGeometry,
    WireGeometry,
    parse_float,
    parse_location,
)
from fabulator.parsers.switchmatrix_parser import parse_switch_matrix_csv, resolve_wire_coordinates
from fabulator.utils.exceptions import ParseError

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


class ParsingMode(Enum):
    NONE = auto()
    PARAMS = auto()
    FABRIC_DEF = auto()
    FABRIC_LOCS = auto()
    TILE = auto()
    SWITCH_MATRIX = auto()
    BEL = auto()
    SM_PORT = auto()
    JUMP_PORT = auto()
    BEL_PORT = auto()
    WIRE = auto()


MODE_KEYWORDS = {
    "PARAMS": ParsingMode.PARAMS,
    "FABRIC_DEF": ParsingMode.FABRIC_DEF,
    "FABRIC_LOCS": ParsingMode.FABRIC_LOCS,
    "TILE": ParsingMode.TILE,
    "SWITCH_MATRIX": ParsingMode.SWITCH_MATRIX,
    "BEL": ParsingMode.BEL,
    "PORT": ParsingMode.SM_PORT,
    "JUMP_PORT": ParsingMode.JUMP_PORT,
    "BEL_PORT": ParsingMode.BEL_PORT,
    "WIRE": ParsingMode.WIRE,
}

NULL_TOKEN = "Null"

_PARAM_FIELDS = {
    "Rows": "numberOfRows",
    "Columns": "numberOfColumns",
    "Width": "width",
    "Height": "height",
    "Lines": "numberOfLines",
}
_SIZE_FIELDS = {"RelX": "relX", "RelY": "relY", "Width": "width", "Height": "height"}


def parse_int(token: str) -> int:
    """Parse the leading integer of `token`, 0 if there is none."""
    match = _INT_PREFIX.match(token)
    return int(match.group()) if match else 0


def _number(token: str) -> float:
    value = parse_float(token)
    return 0.0 if value is None else value


class GeometryParser:
    """Parser of a FABulous geometry file.

    A parser instance holds the state of a single parse, use one instance per file.

    Parameters
    ----------
    filePath : str | Path
        Path to the geometry file. Switch matrix CSV references are resolved
        relative to its directory.
    encoding : str, optional
        Encoding of the geometry file and the switch matrix CSV files, by default
        "utf-8".
    """

    def __init__(self, filePath: str | Path, encoding: str = "utf-8") -> None:
        self.filePath = Path(filePath)
        self.encoding = encoding
        self.geometry: FabricGeometry | None = None
        self._reset()

        self._handlers = {
            ParsingMode.PARAMS: self._parse_params,
            ParsingMode.TILE: self._parse_tile,
            ParsingMode.SWITCH_MATRIX: self._parse_switch_matrix,
            ParsingMode.BEL: self._parse_bel,
            ParsingMode.SM_PORT: self._parse_sm_port,
            ParsingMode.JUMP_PORT: self._parse_jump_port,
            ParsingMode.BEL_PORT: self._parse_bel_port,
            ParsingMode.WIRE: self._parse_wire,
        }

    def _reset(self) -> None:
        self._fabric = FabricGeometry()
        self._mode = ParsingMode.NONE
        self._tile: TileGeometry | None = None
        self._sm: SwitchMatrixGeometry | None = None
        self._bel: BelGeometry | None = None
        self._smPort: PortGeometry | None = None
        self._jumpPort: PortGeometry | None = None
        self._belPort: PortGeometry | None = None
        self._wire: WireGeometry | None = None
        self._pendingPoint = False

    def parse(self) -> FabricGeometry:
        """Parse the geometry file.

        Every call reads the file again and returns a new model, models returned by
        earlier calls are left untouched.

        Returns
        -------
        FabricGeometry
            The fabric geometry, with switch matrix CSVs loaded and low detail
            wire rectangles computed for every tile type.

        Raises
        ------
        ParseError
            If the file cannot be read.
        """
        try:
            content = self.filePath.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to parse geometry file {self.filePath}: {e}") from e

        self._reset()
        lines = content.splitlines()
        for line in lines:
            self._process_line(line.strip())

        for tile in self._fabric.tileGeomMap.values():
            if tile.smGeometry is not None and tile.smGeometry.switchMatrixWires is not None:
                self._resolve_switch_matrix_wires(tile.smGeometry)
            tile.lowLodWiresGeoms, tile.lowLodOverlays = rasterize(tile)

        logger.debug(
            f"Parsed geometry file {self.filePath}: {len(lines)} lines, "
            f"{len(self._fabric.tileGeomMap)} tile types"
        )
        self.geometry = self._fabric
        return self.geometry

    def _process_line(self, line: str) -> None:
        if not line:
            return
        tokens = line.split(",")
        if tokens[0] in MODE_KEYWORDS:
            self._mode = MODE_KEYWORDS[tokens[0]]
            return

        if self._mode == ParsingMode.FABRIC_DEF:
            self._fabric.tileNames.append(list(tokens))
        elif self._mode == ParsingMode.FABRIC_LOCS:
            self._fabric.tileLocations.append(
                [None if i == NULL_TOKEN else parse_location(i) for i in tokens]
            )
        elif self._mode != ParsingMode.NONE and len(tokens) == 2:
            self._handlers[self._mode](tokens[0], tokens[1])

    def _parse_params(self, attribute: str, value: str) -> None:
        if attribute == "GeneratorVersion":
            self._fabric.generatorVersion = value
        elif attribute == "Name":
            self._fabric.name = value
        elif attribute in _PARAM_FIELDS:
            setattr(self._fabric, _PARAM_FIELDS[attribute], parse_int(value))

    def _parse_tile(self, attribute: str, value: str) -> None:
        if attribute == "Name":
            self._tile = TileGeometry(value)
            self._fabric.tileGeomMap[value] = self._tile
            self._sm = self._bel = self._wire = None
            self._smPort = self._jumpPort = self._belPort = None
            self._pendingPoint = False
        elif self._tile is not None and attribute in ("Width", "Height"):
            setattr(self._tile, _SIZE_FIELDS[attribute], _number(value))

    def _parse_switch_matrix(self, attribute: str, value: str) -> None:
        if attribute == "Name":
            self._sm = SwitchMatrixGeometry(value)
            if self._tile is not None:
                self._tile.smGeometry = self._sm
        elif self._sm is None:
            return
        elif attribute in _SIZE_FIELDS:
            setattr(self._sm, _SIZE_FIELDS[attribute], _number(value))
        elif attribute == "Src":
            self._sm.src = value
        elif attribute == "Csv":
            self._sm.csv = value
            self._load_switch_matrix_csv(self._sm)

    def _parse_bel(self, attribute: str, value: str) -> None:
        if attribute == "Name":
            self._bel = BelGeometry(value)
            if self._tile is not None:
                self._tile.belGeometryList.append(self._bel)
        elif self._bel is None:
            return
        elif attribute in _SIZE_FIELDS:
            setattr(self._bel, _SIZE_FIELDS[attribute], _number(value))
        elif attribute == "Src":
            self._bel.src = value

    def _parse_port_attribute(self, port: PortGeometry | None, attribute: str, value: str) -> None:
        if port is None:
            return
        if attribute == "Source":
            port.sourceName = value
        elif attribute == "Dest":
            port.destName = value
        elif attribute == "IO":
            port.io = IO.from_identifier(value)
        elif attribute == "RelX":
            port.relX = _number(value)
        elif attribute == "RelY":
            port.relY = _number(value)

    def _parse_sm_port(self, attribute: str, value: str) -> None:
        if attribute == "Name":
            self._smPort = PortGeometry(value)
            if self._sm is not None:
                self._sm.portGeometryList.append(self._smPort)
        elif attribute == "Side":
            if self._smPort is not None:
                self._smPort.side = Side.from_identifier(value)
        else:
            self._parse_port_attribute(self._smPort, attribute, value)

    def _parse_jump_port(self, attribute: str, value: str) -> None:
        if attribute == "Name":
            self._jumpPort = PortGeometry(value)
            if self._sm is not None:
                self._sm.jumpPortGeometryList.append(self._jumpPort)
        else:
            self._parse_port_attribute(self._jumpPort, attribute, value)

    def _parse_bel_port(self, attribute: str, value: str) -> None:
        if attribute == "Name":
            self._belPort = PortGeometry(value)
            if self._bel is not None:
                self._bel.portGeometryList.append(self._belPort)
        else:
            self._parse_port_attribute(self._belPort, attribute, value)

    def _parse_wire(self, attribute: str, value: str) -> None:
        if attribute == "Name":
            self._wire = WireGeometry(value)
            self._pendingPoint = False
            if self._tile is not None:
                self._tile.wireGeometryList.append(self._wire)
        elif self._wire is None:
            return
        elif attribute == "RelX":
            # The point is added before its y coordinate is known, RelY completes it.
            self._wire.path.append(Location(_number(value), 0))
            self._pendingPoint = True
        elif attribute == "RelY" and self._pendingPoint:
            self._wire.path[-1] = Location(self._wire.path[-1].x, _number(value))
            self._pendingPoint = False

    def _load_switch_matrix_csv(self, sm: SwitchMatrixGeometry) -> None:
        csvPath = Path(sm.csv)
        if not csvPath.is_absolute():
            csvPath = self.filePath.parent / csvPath
        logger.debug(f"Parsing switch matrix CSV: {csvPath} for {sm.name}")

        config = parse_switch_matrix_csv(csvPath, self.encoding)
        if config is None:
            logger.warning(f"Failed to parse switch matrix CSV for {sm.name}, using fallback generation")
            return
        sm.wireConnections = config.connections
        sm.switchMatrixWires = config.wireGeometries

    def _resolve_switch_matrix_wires(self, sm: SwitchMatrixGeometry) -> None:
        # Ports are listed after the Csv row, so placeholders are resolved once the
        # whole file has been read.
        portLocations: dict[str, Location] = {}
        for port in sm.portGeometryList + sm.jumpPortGeometryList:
            portLocations[port.name] = port.location
        resolve_wire_coordinates(sm.switchMatrixWires, portLocations)

    def get_geometry(self) -> FabricGeometry | None:
        return self.geometry


def parse_geometry(filePath: str | Path, encoding: str = "utf-8") -> FabricGeometry:
    """Parse a FABulous geometry file. See :class:`GeometryParser`."""
    return GeometryParser(filePath, encoding).parse()


__all__ = ["GeometryParser", "parse_geometry"]
