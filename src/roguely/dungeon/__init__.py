from .cells import Cell
from .generator import CellularGenerator, MapGenerator, random_point_excluding
from .maps import MapCatalog, MapInfo, generate_map
from .pathfinding import AStar, find_path, floor_passable

__all__ = [
    "AStar",
    "Cell",
    "CellularGenerator",
    "MapCatalog",
    "MapGenerator",
    "MapInfo",
    "find_path",
    "floor_passable",
    "generate_map",
    "random_point_excluding",
]
