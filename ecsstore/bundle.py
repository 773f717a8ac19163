"""Collections of components and helpers for working with them."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable

from .typeinfo import TypeInfo


def bundle_type_info(components: Iterable[Any]) -> list[TypeInfo]:
    """Infos of the components' types, sorted by descending alignment then id."""
    return sorted(TypeInfo.of(type(component)) for component in components)


def bundle_type_ids(components: Iterable[Any]) -> list[Hashable]:
    """Type ids of the components, in the same order as ``bundle_type_info``."""
    return [info.type_id for info in bundle_type_info(components)]


def bundle_has(components: Iterable[Any], component_type: type) -> bool:
    """Whether the bundle holds a component of exactly ``component_type``."""
    return any(type(component) is component_type for component in components)


class MissingComponent(LookupError):
    """An entity did not have a required component."""

    def __init__(self, component_type: Any) -> None:
        if isinstance(component_type, type):
            name = component_type.__qualname__
        else:
            name = str(component_type)
        super().__init__(f"missing {name} component")
        self.component_type = component_type
        self.type_name = name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MissingComponent):
            return NotImplemented
        return self.type_name == other.type_name

    def __hash__(self) -> int:
        return hash(self.type_name)


@dataclass(frozen=True)
class DynamicClone:
    """Type-erased cloning for one component type."""

    component_type: type
    func: Callable[[Any], Any] = field(default=copy.deepcopy)

    @property
    def info(self) -> TypeInfo:
        """Info of the cloned component type."""
        return TypeInfo.of(self.component_type)

    def clone(self, value: Any) -> Any:
        """Return an independent copy of ``value``."""
        if type(value) is not self.component_type:
            raise TypeError(
                f"expected {self.component_type.__qualname__}, "
                f"got {type(value).__qualname__}"
            )
        return self.func(value)