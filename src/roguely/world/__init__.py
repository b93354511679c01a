from .context import AdjacentPoint, GameContext

__all__ = ["AdjacentPoint", "GameContext"]
