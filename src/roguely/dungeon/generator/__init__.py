from .base import MapGenerator, random_point_excluding
from .cellular import CellularGenerator, neighbor_wall_count

__all__ = ["MapGenerator", "CellularGenerator", "neighbor_wall_count", "random_point_excluding"]
