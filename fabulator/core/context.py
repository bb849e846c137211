"""Fabric context - holds the loaded fabric geometry and design.

This is the object a viewer works with: it loads the geometry of a FABulous
project and a routed design, and answers the queries a fabric explorer needs.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from fabulator.core.reader import FasmReader, GeometryReader, create_reader
from fabulator.model.design import BitstreamConfiguration, FasmStatistics
from fabulator.model.geometry import FabricGeometry, Location, TileGeometry
from fabulator.model.serialize import to_plain
from fabulator.parsers.fasm_parser import get_statistics
from fabulator.parsers.geometry_parser import NULL_TOKEN
from fabulator.utils.settings import FabulatorSettings, get_context, is_context_initialized


@dataclass(frozen=True)
class TileInstance:
    """A tile placed in the fabric grid.

    Attributes
    ----------
    x, y : int
        Grid position.
    name : str
        Tile type name.
    location : Location | None
        Physical position, None when the location grid has no entry.
    geometry : TileGeometry | None
        Tile type geometry, None when the type is not defined in the file.
    """

    x: int
    y: int
    name: str
    location: Location | None
    geometry: TileGeometry | None


@dataclass(frozen=True)
class SearchMatch:
    """A named element found by :meth:`FabricContext.search`.

    `kind` is one of ``tile``, ``bel``, ``wire``, ``port``, ``jump_port`` or ``net``.
    `tile` names the owning tile type, None for nets.
    """

    kind: str
    name: str
    tile: str | None = None


def find_geometry_file(projectDir: Path, names: list[str], searchDirs: list[str]) -> Path | None:
    """Return the first existing geometry file of a FABulous project.

    Every directory in `searchDirs` is tried in order, and in each of them every
    file name in `names`.
    """
    for directory in searchDirs:
        for name in names:
            candidate = projectDir / directory / name
            if candidate.is_file():
                return candidate
    return None


class FabricContext:
    """Fabric context - holds the loaded fabric geometry and design.

    Parameters
    ----------
    settings : FabulatorSettings | None, optional
        Settings used to locate and decode files. When omitted, the settings of
        :func:`~fabulator.utils.settings.init_context` are used if it has been
        called, and a default instance otherwise.

    Attributes
    ----------
    geometry : FabricGeometry | None
        Loaded fabric geometry
    design : BitstreamConfiguration | None
        Loaded design
    statistics : FasmStatistics | None
        Statistics of the loaded design
    """

    def __init__(self, settings: FabulatorSettings | None = None) -> None:
        if settings is None:
            settings = get_context() if is_context_initialized() else FabulatorSettings()
        self.settings = settings
        self.geometry: FabricGeometry | None = None
        self.geometryFile: Path | None = None
        self.design: BitstreamConfiguration | None = None
        self.designFile: Path | None = None
        self.statistics: FasmStatistics | None = None

    def load_fabric(self, path: Path | None = None) -> FabricGeometry:
        """Load a fabric geometry file.

        Parameters
        ----------
        path : Path | None, optional
            Geometry file. When omitted it is searched in the project directory.

        Returns
        -------
        FabricGeometry
            The loaded geometry.

        Raises
        ------
        FileNotFoundError
            If no path is given and no geometry file is found in the project.
        """
        if path is None:
            path = find_geometry_file(
                self.settings.proj_dir,
                self.settings.geometry_file_names,
                self.settings.geometry_search_dirs,
            )
            if path is None:
                raise FileNotFoundError(f"No geometry file found in {self.settings.proj_dir}")
            logger.info(f"Found geometry file {path}")

        return self._set_geometry(GeometryReader(self.settings.encoding).read(Path(path)), Path(path))

    def load_design(self, path: Path) -> BitstreamConfiguration:
        """Load a FASM design file and compute its statistics."""
        return self._set_design(FasmReader(self.settings.encoding).read(Path(path)), Path(path))

    def load(self, path: Path) -> FabricGeometry | BitstreamConfiguration:
        """Load a geometry or design file, chosen by its extension."""
        model = create_reader(Path(path), self.settings.encoding).read(Path(path))
        if isinstance(model, BitstreamConfiguration):
            return self._set_design(model, Path(path))
        return self._set_geometry(model, Path(path))

    def _set_geometry(self, geometry: FabricGeometry, path: Path) -> FabricGeometry:
        self.geometry = geometry
        self.geometryFile = path
        return geometry

    def _set_design(self, design: BitstreamConfiguration, path: Path) -> BitstreamConfiguration:
        self.design = design
        self.designFile = path
        self.statistics = get_statistics(design)
        logger.info(
            f"Loaded design {path.name}: {self.statistics.totalNets} nets, "
            f"{self.statistics.totalConnections} connections"
        )
        return design

    @property
    def tiles(self) -> dict[str, TileGeometry]:
        """Get all tile types of the fabric.

        Returns
        -------
        dict[str, TileGeometry]
            Dictionary of tile type name to TileGeometry
        """
        return self.geometry.tileGeomMap if self.geometry else {}

    def get_tile(self, name: str, *, required: bool = False) -> TileGeometry | None:
        """Get tile type by name with optional validation.

        Parameters
        ----------
        name : str
            Name of the tile type to retrieve
        required : bool, optional
            If True, raises KeyError when the tile type is not found. Default False.

        Returns
        -------
        TileGeometry | None
            The tile type geometry, or None if not found and not required

        Raises
        ------
        KeyError
            If required=True and the tile type is not found
        """
        tile = self.tiles.get(name)
        if tile is None and required:
            raise KeyError(f"Tile '{name}' not found in fabric")
        return tile

    def tile_instances(self) -> Iterator[TileInstance]:
        """Iterate over the occupied cells of the fabric grid, row by row."""
        if self.geometry is None:
            return
        locations = self.geometry.tileLocations
        for y, row in enumerate(self.geometry.tileNames):
            for x, name in enumerate(row):
                if not name or name == NULL_TOKEN:
                    continue
                location = None
                if y < len(locations) and x < len(locations[y]):
                    location = locations[y][x]
                yield TileInstance(x, y, name, location, self.tiles.get(name))

    def missing_tile_types(self) -> list[str]:
        """Return tile type names used in the grid but not defined, in grid order."""
        missing: dict[str, None] = {}
        for instance in self.tile_instances():
            if instance.geometry is None:
                missing[instance.name] = None
        return list(missing)

    def search(self, term: str) -> list[SearchMatch]:
        """Find tile types, BELs, wires, ports and nets whose name contains `term`.

        Matching is case-insensitive. An empty term matches nothing.
        """
        term = term.strip().lower()
        if not term:
            return []

        matches = []
        for tileName, tile in self.tiles.items():
            if term in tileName.lower():
                matches.append(SearchMatch("tile", tileName, tileName))
            for bel in tile.belGeometryList:
                if term in bel.name.lower():
                    matches.append(SearchMatch("bel", bel.name, tileName))
            for wire in tile.wireGeometryList:
                if term in wire.name.lower():
                    matches.append(SearchMatch("wire", wire.name, tileName))
            if tile.smGeometry is not None:
                for port in tile.smGeometry.portGeometryList:
                    if term in port.name.lower():
                        matches.append(SearchMatch("port", port.name, tileName))
                for port in tile.smGeometry.jumpPortGeometryList:
                    if term in port.name.lower():
                        matches.append(SearchMatch("jump_port", port.name, tileName))

        if self.design is not None:
            for netName in self.design.netMap:
                if term in netName.lower():
                    matches.append(SearchMatch("net", netName))
        return matches

    def to_dict(self) -> dict[str, Any]:
        """Plain document of the loaded geometry, design and statistics."""
        return {
            "geometry": to_plain(self.geometry) if self.geometry else None,
            "design": to_plain(self.design) if self.design else None,
            "statistics": to_plain(self.statistics) if self.statistics else None,
        }
