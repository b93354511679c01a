from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple

from ..core.geometry import Point
from ..core.grid import Grid
from .cells import Cell

logger = logging.getLogger(__name__)

Passable = Callable[[int], bool]
RowCol = Tuple[int, int]

# up, down, left, right as (drow, dcol)
_STEPS: Tuple[RowCol, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def open_passable(value: int) -> bool:
    """Default traversability: a cell holding 0 is open.

    This is the path-cost convention, the inverse of the generator's
    0 = wall / 1 = floor. Use ``floor_passable`` on generated maps.
    """
    return value == 0


def floor_passable(value: int) -> bool:
    return value == Cell.FLOOR


def manhattan(a: Point, b: Point) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


class AStar:
    """A* search over a 4-connected, unit-cost Grid.

    The open set is a binary heap keyed by ``g + manhattan``; entries carry an
    insertion counter so ties pop in FIFO order. A neighbour is relaxed only
    when its cost strictly improves; stale heap entries are skipped on pop
    instead of decreasing keys in place.
    """

    def __init__(self, passable: Optional[Passable] = None) -> None:
        self.passable: Passable = passable or open_passable

    def find_path(self, grid: Grid, start: Point, goal: Point) -> List[Point]:
        """Return the start..goal path (both inclusive), or [] when there is none."""
        srow, scol = start.as_cell()
        grow, gcol = goal.as_cell()
        if not grid.in_bounds(srow, scol) or not grid.in_bounds(grow, gcol):
            logger.debug("A*: start %s or goal %s outside %r", start, goal, grid)
            return []
        if not self.passable(grid.get(srow, scol)):
            return []

        counter = itertools.count()
        # transient bookkeeping, same shape as the searched grid
        cost = Grid(grid.rows, grid.cols, _INF)
        parent = Grid(grid.rows, grid.cols, None)
        cost.set(srow, scol, 0)
        open_list: List[Tuple[int, int, int, RowCol]] = [(0, next(counter), 0, (srow, scol))]
        expanded = 0

        while open_list:
            _, _, g, node = heapq.heappop(open_list)
            r, c = node
            if g > cost.get(r, c):
                continue
            expanded += 1

            if node == (grow, gcol):
                path = [node]
                while node != (srow, scol):
                    node = parent.get(*node)
                    path.append(node)
                path.reverse()
                logger.debug("A*: %s -> %s in %d steps, %d nodes expanded", start, goal, len(path) - 1, expanded)
                return [Point(x=pc, y=pr) for pr, pc in path]

            for dr, dc in _STEPS:
                nr, nc = r + dr, c + dc
                if not grid.in_bounds(nr, nc) or not self.passable(grid.get(nr, nc)):
                    continue
                new_cost = g + 1
                if new_cost < cost.get(nr, nc):
                    cost.set(nr, nc, new_cost)
                    parent.set(nr, nc, node)
                    priority = new_cost + abs(nr - grow) + abs(nc - gcol)
                    heapq.heappush(open_list, (priority, next(counter), new_cost, (nr, nc)))

        logger.debug("A*: no path %s -> %s after %d nodes", start, goal, expanded)
        return []


_INF = float("inf")


def find_path(grid: Grid, start: Point, goal: Point, passable: Optional[Passable] = None) -> List[Point]:
    return AStar(passable).find_path(grid, start, goal)


__all__ = ["AStar", "find_path", "floor_passable", "manhattan", "open_passable"]
