from importlib.metadata import PackageNotFoundError, version

from .core import Direction, Grid, Point, RandomSource, Size, Viewport
from .dungeon import AStar, Cell, CellularGenerator, MapCatalog, MapInfo, find_path, generate_map
from .ecs import Entity, EntityGroupName, EntityRegistry, PropertyBag
from .exceptions import ConfigError, EmptyGridError, NoPointFoundError, RoguelyError
from .fov import VisibilityTracker, compute_visibility
from .world import GameContext

try:
    __version__ = version("roguely")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

__all__ = [
    "AStar",
    "Cell",
    "CellularGenerator",
    "ConfigError",
    "Direction",
    "EmptyGridError",
    "Entity",
    "EntityGroupName",
    "EntityRegistry",
    "GameContext",
    "Grid",
    "MapCatalog",
    "MapInfo",
    "NoPointFoundError",
    "Point",
    "PropertyBag",
    "RandomSource",
    "RoguelyError",
    "Size",
    "Viewport",
    "VisibilityTracker",
    "__version__",
    "compute_visibility",
    "find_path",
    "generate_map",
]
