from __future__ import annotations

import logging
from typing import Optional

from ...core.grid import Grid
from ...core.random import RandomSource, default_source
from ...exceptions import EmptyGridError
from ..cells import Cell
from .base import MapGenerator

logger = logging.getLogger(__name__)

WALL = int(Cell.WALL)
FLOOR = int(Cell.FLOOR)


class CellularGenerator(MapGenerator):
    """Cellular automata caverns generator.

    Algorithm:
    - Fill every cell independently: floor if a draw from [1, 100] exceeds
      ``floor_threshold`` (48 by default, i.e. ~52% floor), wall otherwise.
    - Apply ``passes`` smoothing steps over the 3x3 neighbourhood (the cell
      itself included). Cells outside the interior count as walls whatever
      they hold. More than ``wall_limit`` wall-like cells => wall, else floor.
    - Each pass reads a snapshot of the previous pass and writes a fresh grid.

    No connectivity pass is run; disconnected floor pockets are expected.
    """

    def __init__(
        self,
        passes: int = 10,
        floor_threshold: int = 48,
        wall_limit: int = 4,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        if passes < 0:
            raise ValueError("passes must be >= 0")
        if not 0 <= floor_threshold <= 100:
            raise ValueError("floor_threshold must be between 0 and 100")
        self.passes = int(passes)
        self.floor_threshold = int(floor_threshold)
        self.wall_limit = int(wall_limit)
        self.random_source = random_source

    @property
    def rng(self) -> RandomSource:
        return self.random_source or default_source()

    def generate(self, width: int, height: int) -> Grid:
        grid = self.random_fill(width, height)
        grid = self.smooth(grid, self.passes)
        logger.info(
            "CellularGenerator: %dx%d map after %d passes, %d floor cells",
            width,
            height,
            self.passes,
            grid.count(FLOOR),
        )
        return grid

    def random_fill(self, width: int, height: int) -> Grid:
        if width < 0 or height < 0:
            raise ValueError(f"Map dimensions must be non-negative, got {width}x{height}")
        if width == 0 or height == 0:
            raise EmptyGridError(f"Cannot generate a {width}x{height} map")

        rng = self.rng
        grid = Grid(height, width, WALL)
        for r in range(height):
            for c in range(width):
                if rng.randint(1, 100) > self.floor_threshold:
                    grid.set(r, c, FLOOR)
        return grid

    def smooth(self, grid: Grid, passes: int) -> Grid:
        current = grid
        for p in range(passes):
            nxt = Grid(current.rows, current.cols, WALL)
            for r in range(current.rows):
                for c in range(current.cols):
                    if neighbor_wall_count(current, r, c) > self.wall_limit:
                        nxt.set(r, c, WALL)
                    else:
                        nxt.set(r, c, FLOOR)
            current = nxt
            logger.debug("Smoothing pass %d/%d: %d floor cells", p + 1, passes, current.count(FLOOR))
        return current


def neighbor_wall_count(grid: Grid, row: int, col: int) -> int:
    """Count wall-like cells in the 3x3 block centred on (row, col), itself included.

    Anything outside the interior [1, rows-2] x [1, cols-2] counts as a wall.
    """
    count = 0
    for r in range(row - 1, row + 2):
        for c in range(col - 1, col + 2):
            if 1 <= r < grid.rows - 1 and 1 <= c < grid.cols - 1:
                if grid.get(r, c) == WALL:
                    count += 1
            else:
                count += 1
    return count
