from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..core.geometry import Point, Size
from ..core.grid import Grid
from ..core.random import RandomSource
from .cells import Cell
from .generator import CellularGenerator, MapGenerator, random_point_excluding
from .pathfinding import AStar, floor_passable

logger = logging.getLogger(__name__)


@dataclass
class MapInfo:
    """A generated level: its cell grid plus the visibility layer for the current observer.

    Coordinates are Points with x = column and y = row; every accessor here
    translates to the Grid's (row, col) order so callers never index cells
    directly.
    """

    name: str
    width: int
    height: int
    cells: Grid
    visibility: Optional[Grid] = None

    def __post_init__(self) -> None:
        if self.cells.rows != self.height or self.cells.cols != self.width:
            raise ValueError(
                f"cells grid is {self.cells.rows}x{self.cells.cols}, expected {self.height}x{self.width}"
            )
        if self.visibility is None:
            self.visibility = Grid(self.height, self.width, 0)
        elif (self.visibility.rows, self.visibility.cols) != (self.height, self.width):
            raise ValueError("visibility grid must match the cells grid")

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def in_bounds(self, point: Point) -> bool:
        return self.cells.in_bounds(point.y, point.x)

    def cell_at(self, point: Point) -> int:
        return self.cells.get(point.y, point.x)

    def is_point_blocked(self, x: int, y: int) -> bool:
        """True when (x, y) holds a wall. Out-of-map points are blocked."""
        if not self.cells.in_bounds(y, x):
            return True
        return self.cells.get(y, x) == Cell.WALL

    def is_visible(self, point: Point) -> bool:
        return self.visibility.get(point.y, point.x) != 0

    def random_point(self, excluded: Iterable[int] = (Cell.WALL,), random_source: Optional[RandomSource] = None) -> Point:
        return random_point_excluding(self.cells, excluded, random_source)

    def find_path(self, start: Point, goal: Point) -> List[Point]:
        """A* across floor cells of this map."""
        return AStar(floor_passable).find_path(self.cells, start, goal)


def generate_map(name: str, width: int, height: int, generator: Optional[MapGenerator] = None) -> MapInfo:
    gen = generator or CellularGenerator()
    cells = gen.generate(width, height)
    info = MapInfo(name=name, width=width, height=height, cells=cells)
    logger.info("Generated map '%s' (%dx%d)", name, width, height)
    return info


class MapCatalog:
    """Lookup-by-name table of levels with exactly one current map at a time."""

    def __init__(self) -> None:
        self._maps: Dict[str, MapInfo] = {}
        self._current: Optional[MapInfo] = None

    @property
    def current(self) -> Optional[MapInfo]:
        return self._current

    def add(self, info: MapInfo, make_current: bool = True) -> MapInfo:
        if info.name in self._maps:
            logger.info("Replacing map '%s'", info.name)
        self._maps[info.name] = info
        if make_current:
            self._current = info
        return info

    def get(self, name: str) -> Optional[MapInfo]:
        return self._maps.get(name)

    def switch(self, name: str) -> bool:
        """Make ``name`` current. Returns False and keeps the current map if unknown."""
        info = self._maps.get(name)
        if info is None:
            logger.warning("Cannot switch to unknown map '%s'", name)
            return False
        self._current = info
        return True

    def remove(self, name: str) -> Optional[MapInfo]:
        info = self._maps.pop(name, None)
        if info is not None and info is self._current:
            self._current = None
        return info

    def names(self) -> List[str]:
        return list(self._maps)

    def __contains__(self, name: object) -> bool:
        return name in self._maps

    def __len__(self) -> int:
        return len(self._maps)
