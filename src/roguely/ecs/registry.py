from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..core.geometry import Direction, Point
from .components import PropertyBag
from .entity import Entity

logger = logging.getLogger(__name__)

EntityPredicate = Callable[[Entity], bool]
OverlapCallback = Callable[[str, str, PropertyBag], Any]


class EntityGroupName(str, Enum):
    """Conventional default groups; any string is a valid group name."""

    PLAYER = "player"
    MOBS = "mobs"
    ITEMS = "items"
    OTHER = "other"


GroupName = Union[str, EntityGroupName]


def _group_key(name: GroupName) -> str:
    return name.value if isinstance(name, EntityGroupName) else str(name)


@dataclass
class EntityGroup:
    name: str
    entities: List[Entity] = field(default_factory=list)


@dataclass(frozen=True)
class BlockedPoint:
    """The entity standing one step from a point in a given direction."""

    entity_name: str
    entity_full_name: str
    entity_position: Point
    direction: Direction
    entity: Entity = field(compare=False, repr=False)


@dataclass(frozen=True)
class ViewportEntry:
    group_name: str
    name: str
    full_name: str
    entity: Entity = field(compare=False, repr=False)


class EntityRegistry:
    """
    Owns every entity, organised into named, insertion-ordered groups.

    Lookups never raise for absence: a missing group or entity yields None or
    an empty list. Spatial queries read the ``position_component`` of each
    entity's property bag; entities without one are ignored by them.
    """

    def __init__(self) -> None:
        self._groups: List[EntityGroup] = []

    # ---- Groups -----------------------------------------------------------
    def create_group(self, name: GroupName) -> EntityGroup:
        """Append a new group. Duplicates are not rejected; lookups hit the first."""
        group = EntityGroup(_group_key(name))
        self._groups.append(group)
        logger.debug("Created entity group '%s'", group.name)
        return group

    def get_group(self, name: GroupName) -> Optional[EntityGroup]:
        key = _group_key(name)
        for group in self._groups:
            if group.name == key:
                return group
        return None

    def group_names(self) -> List[str]:
        return [g.name for g in self._groups]

    def get_entities_in_group(self, name: GroupName) -> List[Entity]:
        group = self.get_group(name)
        return list(group.entities) if group is not None else []

    # ---- Entities -----------------------------------------------------------
    def add_entity(self, group_name: GroupName, entity: Entity) -> Entity:
        group = self.get_group(group_name)
        if group is None:
            group = self.create_group(group_name)
        group.entities.append(entity)
        logger.debug("Added %s to group '%s'", entity.full_name, group.name)
        return entity

    def create_entity_in_group(
        self, group_name: GroupName, entity_name: str, properties: Optional[Mapping[str, Any]] = None
    ) -> Optional[Entity]:
        """Create an entity inside an existing group; None if the group does not exist."""
        group = self.get_group(group_name)
        if group is None:
            return None
        entity = Entity.with_properties(entity_name, properties or {})
        group.entities.append(entity)
        return entity

    def remove_entity(self, group_name: GroupName, entity_id: int) -> Optional[Entity]:
        group = self.get_group(group_name)
        if group is None:
            return None
        for i, e in enumerate(group.entities):
            if e.id == entity_id:
                del group.entities[i]
                logger.debug("Removed %s from group '%s'", e.full_name, group.name)
                return e
        return None

    def find_entity(self, group_name: GroupName, predicate: EntityPredicate) -> Optional[Entity]:
        group = self.get_group(group_name)
        if group is None:
            return None
        for e in group.entities:
            if predicate(e):
                return e
        return None

    def find_entities(self, group_name: GroupName, predicate: EntityPredicate) -> List[Entity]:
        group = self.get_group(group_name)
        if group is None:
            return []
        return [e for e in group.entities if predicate(e)]

    def get_entity_by_name(self, group_name: GroupName, entity_name: str) -> Optional[Entity]:
        return self.find_entity(group_name, lambda e: e.name == entity_name)

    def get_entity_by_id(self, group_name: GroupName, entity_id: int) -> Optional[Entity]:
        return self.find_entity(group_name, lambda e: e.id == entity_id)

    def get_entity_id_by_name(self, group_name: GroupName, entity_name: str) -> Optional[int]:
        entity = self.get_entity_by_name(group_name, entity_name)
        return entity.id if entity is not None else None

    def all_entities(self) -> List[Entity]:
        return [e for g in self._groups for e in g.entities]

    def for_each_entity(self, fn: Callable[[Entity], Any]) -> None:
        for e in self.all_entities():
            fn(e)

    # ---- Property bag values ----------------------------------------------
    def get_component_value(
        self, group_name: GroupName, entity_name: str, component: str, key: str, default: Any = None
    ) -> Any:
        """Read ``properties[component][key]`` of the named entity, or ``default``."""
        bag = self._bag_of(group_name, entity_name)
        if bag is None:
            return default
        section = bag.get(component)
        if not isinstance(section, Mapping):
            return default
        return section.get(key, default)

    def set_component_value(self, group_name: GroupName, entity_name: str, component: str, key: str, value: Any) -> bool:
        bag = self._bag_of(group_name, entity_name)
        if bag is None:
            return False
        section = bag.get(component)
        if not isinstance(section, dict):
            return False
        section[key] = value
        return True

    def remove_component(self, group_name: GroupName, entity_name: str, component: str) -> bool:
        """Drop a whole named section from the entity's property bag."""
        bag = self._bag_of(group_name, entity_name)
        if bag is None or component not in bag:
            return False
        del bag[component]
        logger.debug("Removed component '%s' from %s", component, entity_name)
        return True

    def _bag_of(self, group_name: GroupName, entity_name: str) -> Optional[PropertyBag]:
        entity = self.get_entity_by_name(group_name, entity_name)
        if entity is None:
            return None
        return entity.properties

    # ---- Spatial queries ----------------------------------------------------
    def is_point_unique(self, point: Point) -> bool:
        """True when no entity in any group stands on ``point``."""
        for group in self._groups:
            for e in group.entities:
                if e.position == point:
                    return False
        return True

    def entities_at(self, x: int, y: int) -> List[Entity]:
        target = Point(x, y)
        return [e for e in self.all_entities() if e.position == target]

    def for_each_overlapping_point(self, exclude_name: str, x: int, y: int, callback: OverlapCallback) -> int:
        """Call ``callback(full_name, name, properties)`` for each other entity on (x, y).

        Entities named ``exclude_name`` are skipped. A callback that raises is
        logged and the sweep carries on. Returns how many callbacks ran.
        """
        target = Point(x, y)
        calls = 0
        for group in self._groups:
            for e in list(group.entities):
                if e.name == exclude_name:
                    continue
                bag = e.properties
                if bag is None or e.position != target:
                    continue
                calls += 1
                try:
                    callback(e.full_name, e.name, bag)
                except Exception:
                    logger.exception("Overlap callback failed for %s at (%d,%d)", e.full_name, x, y)
        return calls

    def blocked_points(self, group_name: GroupName, x: int, y: int, direction: Union[str, Direction]) -> Optional[BlockedPoint]:
        """Return the first entity of the group exactly one step from (x, y) toward ``direction``."""
        step = Direction(direction)
        group = self.get_group(group_name)
        if group is None:
            return None
        target = step.step(x, y)
        for e in group.entities:
            if e.position == target:
                return BlockedPoint(
                    entity_name=e.name,
                    entity_full_name=e.full_name,
                    entity_position=target,
                    direction=step,
                    entity=e,
                )
        return None

    def entities_in_viewport(self, predicate: Callable[[int, int], bool]) -> Dict[str, ViewportEntry]:
        """Entities of every group whose position satisfies ``predicate(x, y)``, keyed by full name."""
        result: Dict[str, ViewportEntry] = {}
        for group in self._groups:
            for e in group.entities:
                pos = e.position
                if pos is not None and predicate(pos.x, pos.y):
                    result[e.full_name] = ViewportEntry(group.name, e.name, e.full_name, e)
        return result

    def __len__(self) -> int:
        return sum(len(g.entities) for g in self._groups)
