from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import Settings
from ..core.geometry import Direction, Point, Size, Viewport
from ..core.random import RandomSource, default_source
from ..dungeon.generator import CellularGenerator
from ..dungeon.maps import MapCatalog, MapInfo, generate_map
from ..ecs.registry import EntityGroupName, EntityRegistry, ViewportEntry
from ..exceptions import NoPointFoundError
from ..fov.tracker import VisibilityTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdjacentPoint:
    x: int
    y: int
    blocked: bool


class GameContext:
    """
    Everything the rule layer works against for one game, passed explicitly.

    Holds the entity registry, the map catalog (with its current map), the
    visibility tracker for the current map and the last computed viewport.
    The player, mobs, items and other groups exist from the start.
    Nothing here is module-global; two contexts never share state except the
    random source when the process-wide default is used.
    """

    def __init__(self, settings: Optional[Settings] = None, random_source: Optional[RandomSource] = None) -> None:
        self.settings = settings or Settings()
        self.random_source = random_source or default_source()
        self.registry = EntityRegistry()
        for group in EntityGroupName:
            self.registry.create_group(group)
        self.maps = MapCatalog()
        self.tracker: Optional[VisibilityTracker] = None
        self.viewport: Optional[Viewport] = None

    @property
    def current_map(self) -> Optional[MapInfo]:
        return self.maps.current

    # ---- Maps -----------------------------------------------------------------
    def generate_map(self, name: Optional[str] = None, width: Optional[int] = None, height: Optional[int] = None) -> MapInfo:
        generator = CellularGenerator(
            passes=self.settings.smoothing_passes,
            floor_threshold=self.settings.floor_threshold,
            random_source=self.random_source,
        )
        info = generate_map(
            name or self.settings.map_name,
            self.settings.map_width if width is None else width,
            self.settings.map_height if height is None else height,
            generator,
        )
        return self.add_map(info)

    def add_map(self, info: MapInfo) -> MapInfo:
        """Register a prepared map and make it current."""
        self.maps.add(info)
        self._track(info)
        return info

    def set_map(self, name: str) -> bool:
        if not self.maps.switch(name):
            return False
        self._track(self.maps.current)
        logger.info("Current map is now '%s'", name)
        return True

    def _track(self, info: Optional[MapInfo]) -> None:
        self.viewport = None
        if info is None:
            self.tracker = None
        elif self.tracker is None:
            self.tracker = VisibilityTracker(info)
        else:
            self.tracker.on_map_changed(info)

    def _require_map(self) -> MapInfo:
        info = self.maps.current
        if info is None:
            raise RuntimeError("No current map; call generate_map() or set_map() first")
        return info

    def random_open_point(self, max_attempts: Optional[int] = None) -> Point:
        """A random non-wall point of the current map that no entity occupies."""
        info = self._require_map()
        attempts = max_attempts if max_attempts is not None else info.width * info.height
        for _ in range(attempts):
            point = info.random_point((), self.random_source)
            if not info.is_point_blocked(point.x, point.y) and self.registry.is_point_unique(point):
                return point
        raise NoPointFoundError(f"No unoccupied open point on '{info.name}' after {attempts} attempts")

    # ---- Viewport / visibility -----------------------------------------------
    def update_player_viewport(self, focus: Point, view: Optional[Size] = None) -> Viewport:
        """Re-centre the viewport on ``focus`` and refresh visibility from it."""
        info = self._require_map()
        viewport = Viewport.centered_on(focus, view or self.settings.view_port, info.size)
        assert self.tracker is not None
        # raises IndexError for an off-map focus before anything is replaced
        self.tracker.update(focus)
        self.viewport = viewport
        return viewport

    def is_within_viewport(self, x: int, y: int) -> bool:
        if self.viewport is None:
            return False
        return self.viewport.contains(x, y)

    def entities_in_viewport(self) -> Dict[str, ViewportEntry]:
        return self.registry.entities_in_viewport(self.is_within_viewport)

    def map_to_world(self, x: int, y: int, tile_width: int, tile_height: int, scale: int = 1) -> Point:
        """Pixel offset of map cell (x, y) relative to the viewport origin."""
        origin = self.viewport.origin if self.viewport is not None else Point(0, 0)
        return Point((x - origin.x) * tile_width * scale, (y - origin.y) * tile_height * scale)

    # ---- Movement helpers -------------------------------------------------------
    def adjacent_points(self, x: int, y: int) -> Dict[Direction, AdjacentPoint]:
        """The four neighbours of (x, y); a neighbour is blocked when it is a wall nobody stands on."""
        info = self._require_map()
        result: Dict[Direction, AdjacentPoint] = {}
        for direction in Direction:
            p = direction.step(x, y)
            blocked = self.registry.is_point_unique(p) and info.is_point_blocked(p.x, p.y)
            result[direction] = AdjacentPoint(p.x, p.y, blocked)
        return result

    def find_path(self, start: Point, goal: Point) -> List[Point]:
        return self._require_map().find_path(start, goal)
