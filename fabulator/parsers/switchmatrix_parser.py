"""Switch matrix CSV parser.

A switch matrix CSV describes the programmable connections of one switch matrix.
Three shapes are recognised, tried in this order:

1. A dense adjacency matrix as written by FABulous: a header row of destination
   ports and one row per source port with ``1`` where a connection exists.
2. A sectioned file in which a ``Connections``/``Routing`` marker line introduces
   ``source,dest[,x,y...]`` rows and a ``Wires``/``Geometry`` marker line introduces
   ``name,source,dest,x1,y1,x2,y2[,...]`` rows.
3. The same two row kinds without any marker, classified row by row.

Each shape is handled by an independent strategy returning ``None`` when the content
is not of its shape.
"""

import csv
import math
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from fabulator.model.geometry import (
    Location,
    SwitchMatrixConfiguration,
    SwitchMatrixConnection,
    SwitchMatrixWireGeometry,
)

MATRIX_MIN_HEADER_TOKENS = 5
MATRIX_MIN_NAME_TOKENS = 3
MATRIX_MIN_NAME_RATIO = 0.3

_TRUE_VALUES = {"1", "true", "TRUE"}
_BINARY_VALUES = _TRUE_VALUES | {"0", "false", "FALSE", ""}
_CONNECTION_MARKERS = ("connection", "routing")
_WIRE_MARKERS = ("wire", "geometry")


def tokenize_line(line: str) -> list[str]:
    """Split a CSV line on commas outside double quotes.

    Tokens are stripped and empty trailing tokens are dropped.
    """
    tokens = [i.strip() for i in next(csv.reader([line], skipinitialspace=True), [])]
    while tokens and not tokens[-1]:
        tokens.pop()
    return tokens


def is_numeric(token: str) -> bool:
    try:
        return math.isfinite(float(token))
    except ValueError:
        return False


def _is_name(token: str) -> bool:
    return bool(token) and not is_numeric(token)


def _content_lines(content: str) -> list[str]:
    return [line.strip() for line in content.splitlines() if line.strip() and not line.strip().startswith("#")]


def _parse_path(tokens: list[str]) -> list[Location]:
    path = []
    for i in range(0, len(tokens) - 1, 2):
        if is_numeric(tokens[i]) and is_numeric(tokens[i + 1]):
            path.append(Location(float(tokens[i]), float(tokens[i + 1])))
    return path


def parse_connection_row(tokens: list[str]) -> SwitchMatrixConnection | None:
    """Build a connection from ``source,dest[,x,y...]``.

    Trailing tokens form a custom path only when they are an even number of numbers.
    """
    if len(tokens) < 2:
        return None
    sourcePort, destPort = tokens[0], tokens[1]
    if not sourcePort or not destPort:
        return None

    customPath = None
    rest = tokens[2:]
    if rest and len(rest) % 2 == 0 and all(is_numeric(i) for i in rest):
        customPath = _parse_path(rest)
    return SwitchMatrixConnection(sourcePort, destPort, customPath)


def parse_wire_row(tokens: list[str]) -> SwitchMatrixWireGeometry | None:
    """Build a wire geometry from ``name,source,dest,x1,y1,x2,y2[,...]``."""
    if len(tokens) < 6:
        return None
    name, sourcePort, destPort = tokens[0], tokens[1], tokens[2]
    path = _parse_path(tokens[3:])
    if len(path) < 2 or not name or not sourcePort or not destPort:
        return None
    return SwitchMatrixWireGeometry(name, sourcePort, destPort, path)


def looks_like_connection(tokens: list[str]) -> bool:
    return len(tokens) >= 2 and _is_name(tokens[0]) and _is_name(tokens[1])


def looks_like_wire_geometry(tokens: list[str]) -> bool:
    # The destination must be a name so that a connection with a custom path is
    # not mistaken for a wire.
    return (
        len(tokens) >= 6
        and all(_is_name(i) for i in tokens[:3])
        and all(is_numeric(i) for i in tokens[3:7])
    )


def _classify_row(tokens: list[str], config: SwitchMatrixConfiguration) -> None:
    if looks_like_wire_geometry(tokens):
        if wire := parse_wire_row(tokens):
            config.wireGeometries.append(wire)
    elif looks_like_connection(tokens):
        if connection := parse_connection_row(tokens):
            config.connections.append(connection)


def _section_marker(tokens: list[str]) -> str | None:
    if len(tokens) != 1:
        return None
    text = tokens[0].lower()
    if any(i in text for i in _CONNECTION_MARKERS):
        return "connections"
    if any(i in text for i in _WIRE_MARKERS):
        return "wires"
    return None


def _row_cells(row: list[str]) -> list[str]:
    cells = row[1:]
    if "#" in cells:
        cells = cells[: cells.index("#")]
    return cells


def _looks_like_matrix_header(header: list[str]) -> bool:
    if len(header) < MATRIX_MIN_HEADER_TOKENS:
        return False
    names = [i for i in header if _is_name(i) and i != "#"]
    return len(names) >= max(MATRIX_MIN_NAME_TOKENS, MATRIX_MIN_NAME_RATIO * len(header))


def _has_binary_body(header: list[str], rows: list[list[str]]) -> bool:
    # Small matrices fail the header test, their 0/1 body identifies them instead.
    if len(header) < 2 or not all(_is_name(i) for i in header) or not rows:
        return False
    return all(
        _is_name(row[0]) and all(i in _BINARY_VALUES for i in _row_cells(row)) for row in rows if row
    )


def try_parse_matrix(lines: list[str]) -> SwitchMatrixConfiguration | None:
    """Parse a dense adjacency matrix.

    The first line is accepted as a header when it has at least
    ``MATRIX_MIN_HEADER_TOKENS`` tokens of which enough are port names, or when every
    following row is a port name followed by 0/1 cells only. A ``#`` cell ends a
    data row.
    """
    if not lines:
        return None
    header = tokenize_line(lines[0])
    rows = [tokenize_line(line) for line in lines[1:]]
    if not _looks_like_matrix_header(header) and not _has_binary_body(header, rows):
        return None

    destPorts = [i for i in header[1:] if i and i != "#"]
    config = SwitchMatrixConfiguration()
    for row in rows:
        if not row or not _is_name(row[0]):
            continue
        for column, value in enumerate(_row_cells(row), start=1):
            if value in _TRUE_VALUES and column - 1 < len(destPorts):
                config.connections.append(SwitchMatrixConnection(row[0], destPorts[column - 1]))

    if not config.connections:
        return None
    return config


def try_parse_sectioned(lines: list[str]) -> SwitchMatrixConfiguration | None:
    """Parse a file split into connection and wire sections by marker lines.

    Rows before the first marker are classified individually.
    """
    rows = [tokenize_line(line) for line in lines]
    if not any(_section_marker(tokens) for tokens in rows):
        return None

    config = SwitchMatrixConfiguration()
    mode = None
    for tokens in rows:
        if marker := _section_marker(tokens):
            mode = marker
            continue
        if len(tokens) < 2:
            continue
        if mode == "connections":
            if connection := parse_connection_row(tokens):
                config.connections.append(connection)
        elif mode == "wires":
            if wire := parse_wire_row(tokens):
                config.wireGeometries.append(wire)
        else:
            _classify_row(tokens, config)
    return config


def try_parse_heuristic(lines: list[str]) -> SwitchMatrixConfiguration | None:
    """Classify every row as a connection or a wire geometry, dropping the rest."""
    config = SwitchMatrixConfiguration()
    for line in lines:
        _classify_row(tokenize_line(line), config)
    if not config.connections and not config.wireGeometries:
        return None
    return config


STRATEGIES: list[Callable[[list[str]], SwitchMatrixConfiguration | None]] = [
    try_parse_matrix,
    try_parse_sectioned,
    try_parse_heuristic,
]


def wire_from_connection(connection: SwitchMatrixConnection) -> SwitchMatrixWireGeometry:
    """Create the wire geometry of a connection.

    Without a custom path the wire gets a ``(0,0)-(0,0)`` placeholder path which is
    resolved against the port positions once they are known.
    """
    if connection.customPath and len(connection.customPath) >= 2:
        path = list(connection.customPath)
    else:
        path = [Location(0, 0), Location(0, 0)]
    return SwitchMatrixWireGeometry(
        name=f"{connection.sourcePort}_to_{connection.destPort}",
        sourcePort=connection.sourcePort,
        destPort=connection.destPort,
        path=path,
    )


def parse_switch_matrix_content(content: str) -> SwitchMatrixConfiguration | None:
    """Parse switch matrix CSV content.

    Parameters
    ----------
    content : str
        The CSV text.

    Returns
    -------
    SwitchMatrixConfiguration | None
        The normalised configuration, or None if the content has no recognised shape.
    """
    lines = _content_lines(content)
    config = None
    for strategy in STRATEGIES:
        config = strategy(lines)
        if config is not None:
            break
    if config is None:
        return None

    if not config.wireGeometries and config.connections:
        logger.info(f"Generating wire geometries from {len(config.connections)} connections")
        config.wireGeometries = [wire_from_connection(i) for i in config.connections]
    return config


def parse_switch_matrix_csv(csvPath: Path, encoding: str = "utf-8") -> SwitchMatrixConfiguration | None:
    """Parse a switch matrix CSV file.

    Parameters
    ----------
    csvPath : Path
        Path to the CSV file.
    encoding : str, optional
        File encoding, by default "utf-8".

    Returns
    -------
    SwitchMatrixConfiguration | None
        The normalised configuration, or None if the file is missing, unreadable or
        of no recognised shape.
    """
    csvPath = Path(csvPath)
    if not csvPath.is_file():
        logger.warning(f"Switch matrix CSV file not found: {csvPath}")
        return None
    try:
        content = csvPath.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot read switch matrix CSV file {csvPath}: {e}")
        return None

    config = parse_switch_matrix_content(content)
    if config is None:
        logger.warning(f"Switch matrix CSV file {csvPath} has no recognised format")
        return None

    logger.info(
        f"Parsed switch matrix CSV {csvPath.name}: {len(config.connections)} connections, "
        f"{len(config.wireGeometries)} wire geometries"
    )
    return config


def resolve_wire_coordinates(
    wires: list[SwitchMatrixWireGeometry], portLocations: dict[str, Location]
) -> list[SwitchMatrixWireGeometry]:
    """Replace placeholder paths by the positions of the connected ports.

    Only wires whose path is exactly ``(0,0)-(0,0)`` are touched, and only when both
    port names are found in `portLocations`.
    """
    placeholder = [Location(0, 0), Location(0, 0)]
    for wire in wires:
        if wire.path != placeholder:
            continue
        source = portLocations.get(wire.sourcePort)
        dest = portLocations.get(wire.destPort)
        if source is not None and dest is not None:
            wire.path = [source, dest]
    return wires


__all__ = [
    "parse_switch_matrix_content",
    "parse_switch_matrix_csv",
    "resolve_wire_coordinates",
    "tokenize_line",
]
