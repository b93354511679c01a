from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


@dataclass(frozen=True)
class Point:
    """Integer map coordinate. x is the column, y is the row."""

    x: int
    y: int

    def as_cell(self) -> Tuple[int, int]:
        """Return the (row, col) pair used to index a Grid."""
        return (self.y, self.x)

    def offset(self, dx: int, dy: int) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Size:
    width: int
    height: int


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]

    def step(self, x: int, y: int) -> Point:
        dx, dy = self.delta
        return Point(x + dx, y + dy)


_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Viewport:
    """The on-screen rectangle of the map plus the point the FOV radiates from."""

    origin: Point
    size: Size
    focus: Point

    @property
    def right(self) -> int:
        return self.origin.x + self.size.width

    @property
    def bottom(self) -> int:
        return self.origin.y + self.size.height

    def contains(self, x: int, y: int) -> bool:
        return self.origin.x <= x < self.right and self.origin.y <= y < self.bottom

    @classmethod
    def centered_on(cls, focus: Point, view: Size, map_size: Size) -> "Viewport":
        """Centre a view of size ``view`` on ``focus`` and clamp it into the map.

        When the map is smaller than the view on an axis, the origin on that
        axis is pinned to 0.
        """
        x = _clamp(focus.x - view.width // 2, 0, map_size.width - view.width)
        y = _clamp(focus.y - view.height // 2, 0, map_size.height - view.height)
        return cls(origin=Point(x, y), size=view, focus=focus)


def _clamp(value: int, lo: int, hi: int) -> int:
    if hi < lo:
        return lo
    return max(lo, min(hi, value))
