from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from ..core.geometry import Point
from ..core.grid import Grid
from ..dungeon.maps import MapInfo
from .fov import VISIBLE, compute_visibility

logger = logging.getLogger(__name__)


class VisibilityState(str, Enum):
    UNSEEN = "unseen"         # never seen
    EXPLORED = "explored"     # seen before but not currently visible
    VISIBLE = "visible"       # currently visible


class VisibilityTracker:
    """
    Keeps a MapInfo's visibility layer in step with the observer.

    Responsibilities:
    - Recomputes the 360-ray FOV only when the observer actually moves.
    - Writes the result into ``map_info.visibility``.
    - Remembers every cell that has been visible at least once (auto-map).
    """

    def __init__(self, map_info: MapInfo) -> None:
        self.map_info = map_info
        self._explored = Grid(map_info.height, map_info.width, False)
        self._observer: Optional[Point] = None
        self.recomputations = 0

    @property
    def observer(self) -> Optional[Point]:
        return self._observer

    def update(self, observer: Point, force: bool = False) -> bool:
        """Recompute visibility around ``observer``. Returns True if work was done."""
        if not force and observer == self._observer:
            return False

        visibility = compute_visibility(self.map_info.cells, observer)
        self.map_info.visibility = visibility
        self._observer = observer
        self.recomputations += 1

        for r, c, value in visibility.iter_cells():
            if value == VISIBLE:
                self._explored.set(r, c, True)

        logger.debug("Visibility updated for '%s' at %s", self.map_info.name, observer)
        return True

    def state(self, row: int, col: int) -> VisibilityState:
        if self.map_info.visibility.get(row, col) == VISIBLE:
            return VisibilityState.VISIBLE
        if self._explored.get(row, col):
            return VisibilityState.EXPLORED
        return VisibilityState.UNSEEN

    def explored_mask(self) -> List[List[bool]]:
        return self._explored.to_lists()

    def reset_memory(self) -> None:
        """Forget explored cells (current visibility is kept)."""
        self._explored.clear()
        logger.debug("Explored memory reset for '%s'", self.map_info.name)

    def on_map_changed(self, map_info: MapInfo) -> None:
        """Track a different level.

        Memory, the cached observer and the level's stale visibility layer are
        dropped; nothing is visible until the next ``update``.
        """
        self.map_info = map_info
        map_info.visibility.clear()
        self._explored = Grid(map_info.height, map_info.width, False)
        self._observer = None
        logger.debug("VisibilityTracker switched to '%s' (%dx%d)", map_info.name, map_info.width, map_info.height)
