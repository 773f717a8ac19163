"""Metadata describing a component type."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

FROM_PARTS_NAME = "<unknown> (TypeInfo constructed from parts)"


def _type_order_key(type_id: Hashable) -> tuple:
    module = getattr(type_id, "__module__", None) or ""
    name = getattr(type_id, "__qualname__", None) or repr(type_id)
    return (str(module), str(name), hash(type_id))


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class TypeInfo:
    """Identity, alignment and destructor of a component type.

    Infos compare equal when their type ids are equal and are ordered by
    alignment, descending, with ties broken by type id. A missing destructor
    means that dropping a value needs no extra work.
    """

    type_id: Hashable
    align: int = 1
    drop_shim: Optional[Callable[[Any], None]] = None
    name: str = FROM_PARTS_NAME

    def __post_init__(self) -> None:
        if self.align <= 0 or self.align & (self.align - 1):
            raise ValueError(f"alignment must be a power of two, got {self.align}")

    @classmethod
    def of(cls, component_type: type) -> "TypeInfo":
        """Build the info for a Python class."""
        if not isinstance(component_type, type):
            raise TypeError(f"expected a type, got {component_type!r}")
        return cls(component_type, 1, None, component_type.__qualname__)

    @classmethod
    def from_parts(
        cls, type_id: Hashable, align: int, drop: Optional[Callable[[Any], None]]
    ) -> "TypeInfo":
        """Build an info from an arbitrary id, alignment and destructor."""
        return cls(type_id, align, drop, FROM_PARTS_NAME)

    @property
    def sort_key(self) -> tuple:
        """Key that realises the ordering of infos."""
        return (-self.align, _type_order_key(self.type_id))

    def drop(self, value: Any) -> None:
        """Run the destructor, if any, on a value of this type."""
        if self.drop_shim is not None:
            self.drop_shim(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeInfo):
            return NotImplemented
        return self.type_id == other.type_id

    def __lt__(self, other: "TypeInfo") -> bool:
        if not isinstance(other, TypeInfo):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self) -> int:
        return hash(self.type_id)