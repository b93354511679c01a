from .components import POSITION, Component, PropertyBag
from .entity import Entity
from .registry import BlockedPoint, EntityGroup, EntityGroupName, EntityRegistry, ViewportEntry

__all__ = [
    "POSITION",
    "BlockedPoint",
    "Component",
    "Entity",
    "EntityGroup",
    "EntityGroupName",
    "EntityRegistry",
    "PropertyBag",
    "ViewportEntry",
]
