from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ...core.geometry import Point
from ...core.grid import Grid
from ...core.random import RandomSource, default_source
from ...exceptions import NoPointFoundError

logger = logging.getLogger(__name__)


class MapGenerator(ABC):
    """Abstract base for map generators."""

    @abstractmethod
    def generate(self, width: int, height: int) -> Grid:
        """Generate a rows=height x cols=width grid of cell values."""
        raise NotImplementedError


def random_point_excluding(
    grid: Grid,
    excluded: Iterable[int] = (),
    random_source: Optional[RandomSource] = None,
) -> Point:
    """Return a uniformly drawn point whose cell value is not in ``excluded``.

    Makes at most rows*cols draws. Raises NoPointFoundError when the grid has
    zero area or every draw hit an excluded value.
    """
    rng = random_source or default_source()
    if grid.rows <= 0 or grid.cols <= 0:
        raise NoPointFoundError("Empty map")

    off_limits = set(excluded)
    if not off_limits:
        return Point(x=rng.randint(0, grid.cols - 1), y=rng.randint(0, grid.rows - 1))

    max_attempts = grid.rows * grid.cols
    for _ in range(max_attempts):
        row = rng.randint(0, grid.rows - 1)
        col = rng.randint(0, grid.cols - 1)
        if grid.get(row, col) not in off_limits:
            return Point(x=col, y=row)

    logger.warning("No random point found after %d attempts (excluded=%s)", max_attempts, sorted(off_limits))
    raise NoPointFoundError("Unable to find a random point in map")
