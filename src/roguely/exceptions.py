class RoguelyError(Exception):
    """Base exception for the roguely simulation core."""


class EmptyGridError(RoguelyError):
    """Raised when generation is asked for a grid with no cells."""


class NoPointFoundError(RoguelyError):
    """Raised when a random point search is exhausted or the grid has zero area."""


class ConfigError(RoguelyError):
    """Raised when a settings file cannot be read or fails validation."""
