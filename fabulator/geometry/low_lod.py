"""Low level-of-detail wire rectangles.

At low zoom a tile's wires are drawn as a few rectangles instead of individual
paths. The wires are rasterised onto a unit grid counting how many wire segments
touch every cell, and the grid is then covered greedily with maximal rectangles:
once for every cell touched by a wire, and once more for the cells touched at
least twice, which are drawn as congestion overlays.
"""

import math

from fabulator.model.geometry import LowLodWiresGeometry, TileGeometry, WireGeometry

BASE_THRESHOLD = 1
OVERLAY_THRESHOLD = 2

DensityGrid = list[list[int]]


def _grid_size(extent: float) -> int:
    if math.isnan(extent) or extent < 0:
        return 0
    return math.floor(extent) + 1


def build_density_grid(width: float, height: float, wires: list[WireGeometry]) -> DensityGrid:
    """Count the wire segments passing through every unit cell.

    The grid is indexed ``grid[x][y]``. Segments are walked from the end of each
    path to its start. Diagonal segments are not rasterised and points outside the
    grid are ignored.
    """
    columns, rows = _grid_size(width), _grid_size(height)
    grid = [[0] * rows for _ in range(columns)]

    def bump(x: float, y: float) -> None:
        ix, iy = math.floor(x), math.floor(y)
        if 0 <= ix < columns and 0 <= iy < rows:
            grid[ix][iy] += 1

    for wire in wires:
        path = wire.path
        for i in range(len(path) - 1, 0, -1):
            start, end = path[i], path[i - 1]
            if not all(math.isfinite(v) for v in (start.x, start.y, end.x, end.y)):
                continue
            lowX, lowY = min(start.x, end.x), min(start.y, end.y)
            highX, highY = max(start.x, end.x), max(start.y, end.y)

            if start.x == end.x:
                y = lowY
                while math.floor(y) <= highY:
                    bump(lowX, y)
                    y += 1
            elif start.y == end.y:
                x = lowX
                while math.floor(x) <= highX:
                    bump(x, lowY)
                    x += 1
    return grid


def _grow_rect(
    grid: DensityGrid, covered: list[list[bool]], left: int, top: int, threshold: int
) -> tuple[int, int]:
    def qualifies(x: int, y: int) -> bool:
        return grid[x][y] >= threshold and not covered[x][y]

    bottom = top
    while bottom + 1 < len(grid[left]) and qualifies(left, bottom + 1):
        bottom += 1

    right = left
    while right + 1 < len(grid) and all(qualifies(right + 1, y) for y in range(top, bottom + 1)):
        right += 1

    for x in range(left, right + 1):
        for y in range(top, bottom + 1):
            covered[x][y] = True
    return right - left + 1, bottom - top + 1


def extract_rects(grid: DensityGrid, threshold: int) -> list[LowLodWiresGeometry]:
    """Cover every cell meeting `threshold` with disjoint maximal rectangles.

    Cells are scanned column by column. From each uncovered qualifying cell a
    rectangle grows downwards as far as the column qualifies, then rightwards while
    the whole next column span qualifies. Above the base threshold, rectangles of a
    single cell are dropped.

    Parameters
    ----------
    grid : DensityGrid
        Segment counts indexed ``grid[x][y]``.
    threshold : int
        Minimum count of a covered cell.

    Returns
    -------
    list[LowLodWiresGeometry]
        Rectangles in cell units, `width` and `height` counting covered cells.
    """
    covered = [[False] * len(column) for column in grid]
    rects = []
    for x, column in enumerate(grid):
        for y, count in enumerate(column):
            if count < threshold or covered[x][y]:
                continue
            width, height = _grow_rect(grid, covered, x, y, threshold)
            if threshold <= BASE_THRESHOLD or width > 1 or height > 1:
                rects.append(LowLodWiresGeometry(relX=x, relY=y, width=width, height=height))
    return rects


def rasterize(tile: TileGeometry) -> tuple[list[LowLodWiresGeometry], list[LowLodWiresGeometry]]:
    """Compute the low detail wire rectangles of a tile.

    Parameters
    ----------
    tile : TileGeometry
        The tile, only its size and wires are read.

    Returns
    -------
    tuple[list[LowLodWiresGeometry], list[LowLodWiresGeometry]]
        The base rectangles covering all wire cells and the overlay rectangles
        covering the cells crossed by at least two segments.
    """
    grid = build_density_grid(tile.width, tile.height, tile.wireGeometryList)
    return extract_rects(grid, BASE_THRESHOLD), extract_rects(grid, OVERLAY_THRESHOLD)
