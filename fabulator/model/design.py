"""Data structures of a routed design read from a FASM file."""

import re
from dataclasses import dataclass, field

from fabulator.utils.exceptions import InvalidLocationError

_DISCRETE_LOCATION = re.compile(r"X(\d+)Y(\d+)")


@dataclass(frozen=True)
class DiscreteLocation:
    """Integer tile grid coordinate, written as ``X<x>Y<y>``."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"X{self.x}Y{self.y}"

    @classmethod
    def from_string(cls, text: str) -> "DiscreteLocation":
        """Decode a ``X<x>Y<y>`` location.

        Raises
        ------
        InvalidLocationError
            If `text` is not of the form ``X<int>Y<int>``.
        """
        match = _DISCRETE_LOCATION.fullmatch(text.strip())
        if match is None:
            raise InvalidLocationError(f"Invalid location format: {text}")
        return cls(int(match.group(1)), int(match.group(2)))


@dataclass(frozen=True)
class ConnectedPorts:
    """Two port or wire names connected at one tile."""

    portA: str
    portB: str


@dataclass(frozen=True)
class NetEntry:
    location: DiscreteLocation
    ports: ConnectedPorts


@dataclass
class Net:
    """A named net and its routing entries in file order."""

    name: str
    entries: list[NetEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass
class BitstreamConfiguration:
    """Routing of a design, indexed both by net and by tile location.

    Attributes
    ----------
    connectivityMap : dict[str, list[ConnectedPorts]]
        Connections per ``X<x>Y<y>`` tile key.
    netMap : dict[str, Net]
        Nets by name, in declaration order.
    """

    connectivityMap: dict[str, list[ConnectedPorts]] = field(default_factory=dict)
    netMap: dict[str, Net] = field(default_factory=dict)

    @property
    def nets(self) -> list[Net]:
        return list(self.netMap.values())

    def used_tile_locations(self) -> list[DiscreteLocation]:
        """Return the locations of all tiles carrying at least one connection."""
        return [DiscreteLocation.from_string(key) for key in self.connectivityMap]

    def connections_at(self, location: DiscreteLocation | str) -> list[ConnectedPorts]:
        """Return the connections configured at `location`, empty if there are none."""
        return list(self.connectivityMap.get(str(location), []))


class BitstreamConfigurationBuilder:
    """Accumulates nets and routing entries into a :class:`BitstreamConfiguration`."""

    def __init__(self) -> None:
        self._connectivityMap: dict[str, list[ConnectedPorts]] = {}
        self._netMap: dict[str, Net] = {}

    def has_net(self, netName: str) -> bool:
        return netName in self._netMap

    def add_net(self, netName: str) -> None:
        """Declare `netName`. Declaring a known net again is a no-op."""
        if netName not in self._netMap:
            self._netMap[netName] = Net(netName)

    def add_entry(self, netName: str, location: DiscreteLocation, portA: str, portB: str) -> None:
        """Record a connection of `netName` at `location`.

        Raises
        ------
        KeyError
            If `netName` has not been declared.
        """
        net = self._netMap[netName]
        ports = ConnectedPorts(portA, portB)
        self._connectivityMap.setdefault(str(location), []).append(ports)
        net.entries.append(NetEntry(location, ports))

    def build(self) -> BitstreamConfiguration:
        """Return a configuration that later additions to the builder do not change."""
        return BitstreamConfiguration(
            connectivityMap={key: list(ports) for key, ports in self._connectivityMap.items()},
            netMap={name: Net(name, list(net.entries)) for name, net in self._netMap.items()},
        )


@dataclass(frozen=True)
class FasmStatistics:
    """Summary of a parsed design.

    Attributes
    ----------
    totalNets : int
        Number of declared nets.
    nonEmptyNets : int
        Number of nets with at least one entry.
    totalConnections : int
        Number of entries over all nets.
    usedTiles : int
        Number of distinct tile locations with at least one entry.
    longestNet : str
        Name of the net with the most entries, first declared wins ties. Empty if
        no net has entries.
    averageNetLength : float
        Mean number of entries per non-empty net, 0 if there are none.
    """

    totalNets: int
    nonEmptyNets: int
    totalConnections: int
    usedTiles: int
    longestNet: str
    averageNetLength: float
