from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from .ids import next_id

POSITION = "position_component"


class Component:
    """Base class for anything attached to an Entity.

    The registry never enumerates concrete kinds; callers ask an entity for
    "the first component of kind K" or "components of kind K named N".
    """

    def __init__(self, name: str, component_id: Optional[str] = None) -> None:
        self.name = name
        self.id = component_id if component_id is not None else str(next_id())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, id={self.id})"


class PropertyBag(Component):
    """
    A schemaless component carrying gameplay state as nested key/value pairs.

    Values are ints, floats, bools, strings or nested mappings. Nested
    mappings are deep-copied on construction so the caller's dict is never
    aliased, e.g.::

        PropertyBag("props", {"position_component": {"x": 3, "y": 4},
                              "health_component": {"health": 100}})

    Bags compare by identity like every other component.
    """

    def __init__(self, name: str, properties: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(name)
        self._props: Dict[str, Any] = copy.deepcopy(dict(properties or {}))

    def __getitem__(self, key: str) -> Any:
        return self._props[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._props[key] = value

    def __delitem__(self, key: str) -> None:
        del self._props[key]

    def __contains__(self, key: object) -> bool:
        return key in self._props

    def __iter__(self) -> Iterator[str]:
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def get(self, key: str, default: Any = None) -> Any:
        return self._props.get(key, default)

    def keys(self):
        return self._props.keys()

    def items(self):
        return self._props.items()

    def pop(self, key: str, default: Any = None) -> Any:
        return self._props.pop(key, default)

    def get_property(self, name: str) -> Any:
        """Return a property, raising KeyError with a readable message if absent."""
        if name not in self._props:
            raise KeyError(f"Property does not exist: {name}")
        return self._props[name]

    def set_property(self, name: str, value: Any) -> None:
        self._props[name] = value

    def set_properties(self, properties: Mapping[str, Any]) -> None:
        self._props = copy.deepcopy(dict(properties))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._props)

    def position(self) -> Optional[Tuple[int, int]]:
        """Return (x, y) from the position component, or None when there is none."""
        pos = self._props.get(POSITION)
        if not isinstance(pos, Mapping) or "x" not in pos or "y" not in pos:
            return None
        return int(pos["x"]), int(pos["y"])

    def __repr__(self) -> str:
        return f"PropertyBag(name={self.name!r}, keys={sorted(self._props)})"
