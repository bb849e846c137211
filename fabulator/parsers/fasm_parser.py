"""FASM (FABulous Assembly) parser.

A FASM file lists the configured routing of a design, grouped by net::

    # routing for net 'net_name'
    X0Y1.port_a.port_b
    X2Y3.port_c.port_d

Lines with more or fewer than three dot separated parts, and ``INIT`` configuration
bits, do not describe routing and are skipped.
"""

import re
from pathlib import Path

from loguru import logger

from fabulator.model.design import (
    BitstreamConfiguration,
    BitstreamConfigurationBuilder,
    DiscreteLocation,
    FasmStatistics,
)
from fabulator.utils.exceptions import InvalidLocationError, MissingNetError, ParseError

_NET_NAME = re.compile(r"net\s+'([^']+)'")
_ROUTING_ENTRY = re.compile(r"^X\d+Y\d+\.[^.]+\.[^.]+$")
NET_COMMENT = "# routing for net"


class FasmParser:
    """Parser of a FASM file.

    A parser instance holds the state of a single parse, use one instance per file.

    Parameters
    ----------
    filePath : str | Path
        Path to the FASM file.
    encoding : str, optional
        File encoding, by default "utf-8".
    """

    def __init__(self, filePath: str | Path, encoding: str = "utf-8") -> None:
        self.filePath = Path(filePath)
        self.encoding = encoding
        self._reset()

    def _reset(self) -> None:
        self._currentNetName = ""
        self._builder = BitstreamConfigurationBuilder()

    def parse(self) -> BitstreamConfiguration:
        """Parse the FASM file.

        Every call reads the file again and returns a new configuration.

        Returns
        -------
        BitstreamConfiguration
            Routing of the design indexed by net and by tile.

        Raises
        ------
        ParseError
            If the file cannot be read.
        InvalidLocationError
            If a routing entry has a malformed tile location.
        MissingNetError
            If a routing entry appears before the first net declaration.
        """
        try:
            content = self.filePath.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to parse FASM file '{self.filePath}': {e}") from e

        self._reset()
        for lineNumber, line in enumerate(content.splitlines(), start=1):
            line = line.strip()
            if line:
                self._process_line(line, lineNumber)

        config = self._builder.build()
        logger.debug(
            f"Parsed FASM file {self.filePath}: {len(config.netMap)} nets, "
            f"{len(config.connectivityMap)} used tiles"
        )
        return config

    def _process_line(self, line: str, lineNumber: int) -> None:
        if line.startswith("#"):
            self._process_comment(line)
            return
        if "." not in line:
            return

        parts = line.split(".")
        if len(parts) != 3:
            return
        locationStr, portA, portB = parts
        if portB.startswith("INIT"):
            return

        try:
            location = DiscreteLocation.from_string(locationStr)
        except InvalidLocationError as e:
            raise InvalidLocationError(
                f"Error processing line {lineNumber} of '{self.filePath}': {line}. {e}"
            ) from e

        if not self._currentNetName:
            raise MissingNetError(
                f"Error processing line {lineNumber} of '{self.filePath}': "
                f"routing entry found without a net name: {line}"
            )
        self._builder.add_entry(self._currentNetName, location, portA, portB)

    def _process_comment(self, line: str) -> None:
        if "net" not in line:
            return
        match = _NET_NAME.search(line)
        if match:
            self._currentNetName = match.group(1)
            self._builder.add_net(self._currentNetName)

    def get_statistics(self, config: BitstreamConfiguration) -> FasmStatistics:
        """Summarise `config`. See :func:`get_statistics`."""
        return get_statistics(config)


def parse_fasm(filePath: str | Path, encoding: str = "utf-8") -> BitstreamConfiguration:
    """Parse a FASM file. See :class:`FasmParser`."""
    return FasmParser(filePath, encoding).parse()


def validate_fasm_file(filePath: str | Path, encoding: str = "utf-8") -> bool:
    """Check whether a file plausibly is a FASM file.

    The file qualifies if it contains a net comment or a ``X<x>Y<y>.<a>.<b>`` routing
    line. This does not guarantee that :func:`parse_fasm` succeeds.

    Parameters
    ----------
    filePath : str | Path
        File to check.
    encoding : str, optional
        File encoding, by default "utf-8".

    Returns
    -------
    bool
        True if the file looks like FASM, False otherwise or if it cannot be read.
    """
    try:
        content = Path(filePath).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError):
        return False

    for line in content.splitlines():
        line = line.strip()
        if NET_COMMENT in line or _ROUTING_ENTRY.match(line):
            return True
    return False


def get_statistics(config: BitstreamConfiguration) -> FasmStatistics:
    """Summarise a parsed design.

    Parameters
    ----------
    config : BitstreamConfiguration
        The parsed design.

    Returns
    -------
    FasmStatistics
        Net, connection and tile counts of the design.
    """
    nets = config.nets
    nonEmptyNets = [net for net in nets if not net.is_empty]
    totalConnections = sum(len(net.entries) for net in nets)

    longestNet = ""
    maxLength = 0
    for net in nets:
        if len(net.entries) > maxLength:
            maxLength = len(net.entries)
            longestNet = net.name

    return FasmStatistics(
        totalNets=len(nets),
        nonEmptyNets=len(nonEmptyNets),
        totalConnections=totalConnections,
        usedTiles=sum(1 for connections in config.connectivityMap.values() if connections),
        longestNet=longestNet,
        averageNetLength=totalConnections / len(nonEmptyNets) if nonEmptyNets else 0,
    )


__all__ = ["FasmParser", "get_statistics", "parse_fasm", "validate_fasm_file"]
