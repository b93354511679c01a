from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Type, TypeVar

from ..core.geometry import Point
from .components import Component, PropertyBag
from .ids import next_id

C = TypeVar("C", bound=Component)


class Entity:
    """A game object: unique id, non-unique name and an ordered list of components."""

    def __init__(self, name: str = "unnamed entity", components: Optional[Iterable[Component]] = None) -> None:
        self.id: int = next_id()
        self.name = name
        self._components: List[Component] = list(components or [])

    @classmethod
    def with_properties(cls, name: str, properties: Mapping[str, Any], bag_name: str = "properties") -> "Entity":
        """Shortcut for the common case: one entity carrying one PropertyBag."""
        return cls(name, [PropertyBag(bag_name, properties)])

    @property
    def full_name(self) -> str:
        return f"{self.name}-{self.id}"

    # ---- Component lookup -------------------------------------------------
    def find_first_component_by_type(self, kind: Type[C]) -> Optional[C]:
        for c in self._components:
            if isinstance(c, kind):
                return c
        return None

    def find_first_component_by_name(self, kind: Type[C], name: str) -> Optional[C]:
        for c in self._components:
            if isinstance(c, kind) and c.name == name:
                return c
        return None

    def find_components_by_type(self, kind: Type[C], predicate: Optional[Callable[[C], bool]] = None) -> List[C]:
        return [c for c in self._components if isinstance(c, kind) and (predicate is None or predicate(c))]

    def find_components_by_name(self, kind: Type[C], name: str) -> List[C]:
        return [c for c in self._components if isinstance(c, kind) and c.name == name]

    def has_component(self, kind: Type[Component]) -> bool:
        return self.find_first_component_by_type(kind) is not None

    # ---- Mutation -----------------------------------------------------------
    def add_component(self, component: Component) -> None:
        self._components.append(component)

    def add_components(self, components: Iterable[Component]) -> None:
        self._components.extend(components)

    def remove_component(self, component: Component) -> bool:
        for i, c in enumerate(self._components):
            if c is component:
                del self._components[i]
                return True
        return False

    def remove_components(self, components: Iterable[Component]) -> int:
        return sum(1 for c in list(components) if self.remove_component(c))

    def for_each_component(self, fn: Callable[[Component], None]) -> None:
        for c in list(self._components):
            fn(c)

    def clear_components(self) -> None:
        self._components.clear()

    @property
    def component_count(self) -> int:
        return len(self._components)

    @property
    def components(self) -> List[Component]:
        return list(self._components)

    # ---- Property bag helpers ----------------------------------------------
    @property
    def properties(self) -> Optional[PropertyBag]:
        """The first PropertyBag on this entity, where gameplay state lives."""
        return self.find_first_component_by_type(PropertyBag)

    @property
    def position(self) -> Optional[Point]:
        bag = self.properties
        if bag is None:
            return None
        pos = bag.position()
        if pos is None:
            return None
        return Point(*pos)

    def __repr__(self) -> str:
        return f"Entity({self.full_name}, components={len(self._components)})"
