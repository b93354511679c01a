from __future__ import annotations

from enum import IntEnum


class Cell(IntEnum):
    """Map cell values. Grids store the plain ints; these are names for them."""

    WALL = 0
    FLOOR = 1
    VOID = 9  # unseen / outside the carved map
