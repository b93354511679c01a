from __future__ import annotations

import logging
import math
from typing import List, Tuple

from ..core.geometry import Point
from ..core.grid import Grid
from ..dungeon.cells import Cell

logger = logging.getLogger(__name__)

UNSEEN = 0
VISIBLE = 1

# unit direction per integer degree, computed once
_RAYS: List[Tuple[float, float]] = [
    (math.cos(math.radians(angle)), math.sin(math.radians(angle))) for angle in range(360)
]


def cast_ray(grid: Grid, visibility: Grid, observer: Point, dx: float, dy: float) -> int:
    """March one ray from the observer cell in unit steps, marking cells visible.

    The cell under the ray is the truncation of its floating position. The ray
    stops after marking a wall cell, or when it leaves the grid. Returns the
    number of cells marked (repeats included).
    """
    x = float(observer.x)
    y = float(observer.y)
    marked = 0
    while 0 <= x < grid.cols and 0 <= y < grid.rows:
        row, col = int(y), int(x)
        visibility.set(row, col, VISIBLE)
        marked += 1
        if grid.get(row, col) == Cell.WALL:
            break
        x += dx
        y += dy
    return marked


def compute_visibility(grid: Grid, observer: Point) -> Grid:
    """
    Cast 360 rays, one per integer degree, from ``observer`` over ``grid``.

    Returns a new Grid of the same shape holding VISIBLE (1) for every cell a
    ray passed through and UNSEEN (0) elsewhere. Walls are revealed at the
    point of occlusion. The observer's own cell is always visible; an observer
    off the grid raises IndexError like any other out-of-range cell access.
    Single-cell gaps between rays at long range are part of the algorithm.
    """
    if not grid.in_bounds(observer.y, observer.x):
        raise IndexError(f"Observer {observer} out of bounds for {grid!r}")

    visibility = Grid(grid.rows, grid.cols, UNSEEN)
    for dx, dy in _RAYS:
        cast_ray(grid, visibility, observer, dx, dy)

    logger.debug("FOV from %s -> %d visible cells", observer, visibility.count(VISIBLE))
    return visibility
