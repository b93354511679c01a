from .geometry import Direction, Point, Size, Viewport
from .grid import Grid
from .random import RandomSource, default_source, random_int, seed_default

__all__ = [
    "Direction",
    "Grid",
    "Point",
    "RandomSource",
    "Size",
    "Viewport",
    "default_source",
    "random_int",
    "seed_default",
]
