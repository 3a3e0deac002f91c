"""Cell geometry for lazily loaded, cell-backed plane caches."""

from dataclasses import dataclass
from typing import Iterator
from loguru import logger
from planeio import config
from planeio.planes import Region


@dataclass(frozen=True)
class TileGeometry:
    """Width and height of one cache cell in pixels."""

    width: int
    height: int


def _clamp(proposed, limit):
    # type: (int, int) -> int
    # Non-positive or oversized proposals collapse to the plane dimension.
    if proposed <= 0 or proposed > limit:
        return limit
    return proposed


def _grow(step, limit, unit_bytes, budget):
    # type: (int, int, int, int) -> int
    # Largest multiple of step within budget, or limit itself if that fits;
    # never below the first step.
    if limit * unit_bytes <= budget:
        return limit
    return max(step, min(budget // unit_bytes // step * step, limit))


def optimal_tile(plane_width, plane_height, bytes_per_pixel, tile_width, tile_height, max_bytes=None):
    # type: (int, int, int, int, int, int | None) -> TileGeometry
    """Grow a proposed tile into a cache cell that fits the byte budget.

    The tile first widens in steps of ``tile_width`` towards the full plane
    width. Only once a cell spans the whole width does it grow downwards in
    steps of ``tile_height``. Growth stops at the plane edge or before
    ``width * height * bytes_per_pixel`` would exceed ``max_bytes``.

    Args:
        plane_width: Plane width in pixels
        plane_height: Plane height in pixels
        bytes_per_pixel: Bytes per sample; channel count is not included
        tile_width: Proposed width, usually the format's native tile width
        tile_height: Proposed height
        max_bytes: Byte ceiling per cell (defaults to twice the soft cap)

    Returns:
        TileGeometry never larger than the plane
    """
    budget = config.settings.max_cell_bytes if max_bytes is None else max_bytes
    plane_width = max(int(plane_width), 1)
    plane_height = max(int(plane_height), 1)
    bpp = max(int(bytes_per_pixel), 1)

    step_w = _clamp(int(tile_width), plane_width)
    step_h = _clamp(int(tile_height), plane_height)
    height = step_h
    width = _grow(step_w, plane_width, height * bpp, budget)
    if width == plane_width:
        height = _grow(step_h, plane_height, width * bpp, budget)

    logger.debug(
        f"Cell for {plane_width}x{plane_height} plane from tile {tile_width}x{tile_height}: "
        f"{width}x{height}"
    )
    return TileGeometry(width, height)


def default_tile_height(plane_width, plane_height, bytes_per_pixel, channel_count=1, soft_cap=None):
    # type: (int, int, int, int, int | None) -> int
    """Rows of a full-width strip that fit in the soft byte cap, at least one."""
    cap = config.settings.tile_soft_cap_bytes if soft_cap is None else soft_cap
    row_bytes = max(plane_width * channel_count * bytes_per_pixel, 1)
    return max(1, min(cap // row_bytes, plane_height))


def iter_cells(plane_width, plane_height, cell):
    # type: (int, int, TileGeometry) -> Iterator[Region]
    """Yield cell regions covering the plane row by row.

    Cells in the last column and row are cut to the plane edge.
    """
    for y in range(0, plane_height, cell.height):
        h = min(cell.height, plane_height - y)
        for x in range(0, plane_width, cell.width):
            yield Region(x, y, min(cell.width, plane_width - x), h)


def cell_grid_shape(plane_width, plane_height, cell):
    # type: (int, int, TileGeometry) -> tuple[int, int]
    """Number of cell columns and rows needed to cover the plane."""
    return -(-plane_width // cell.width), -(-plane_height // cell.height)
