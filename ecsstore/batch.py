"""Building many entities' worth of component data one column at a time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable

from .archetype import Archetype
from .typeinfo import TypeInfo

#: Entity id recorded for slots of a batch until they are spawned into a world.
PLACEHOLDER_ID = 0xFFFF_FFFF


class BatchIncomplete(ValueError):
    """A batch was built before every column was completely filled."""

    def __init__(self) -> None:
        super().__init__("batch incomplete")


class BatchFull(OverflowError):
    """A component was pushed into a column that has no space left."""

    def __init__(self, value: Any) -> None:
        super().__init__("batch column is full")
        self.value = value


class ColumnBatchType:
    """A collection of component types."""

    def __init__(self, types: Iterable[TypeInfo] = ()) -> None:
        self._types: list[TypeInfo] = list(types)

    def add(self, component_type: type) -> "ColumnBatchType":
        """Include ``component_type`` components."""
        self._types.append(TypeInfo.of(component_type))
        return self

    def add_dynamic(self, info: TypeInfo) -> "ColumnBatchType":
        """Include components described by ``info``."""
        if not isinstance(info, TypeInfo):
            raise TypeError(f"expected a TypeInfo, got {info!r}")
        self._types.append(info)
        return self

    @property
    def types(self) -> tuple[TypeInfo, ...]:
        """The included types, sorted and without duplicates."""
        result: list[TypeInfo] = []
        for info in sorted(self._types):
            if not result or result[-1] != info:
                result.append(info)
        return tuple(result)

    def copy(self) -> "ColumnBatchType":
        """An independent copy of this collection."""
        return ColumnBatchType(self._types)

    def into_batch(self, size: int) -> "ColumnBatchBuilder":
        """Start a batch for exactly ``size`` entities with these components."""
        return ColumnBatchBuilder(self, size)

    def __repr__(self) -> str:
        names = ", ".join(info.name for info in self.types)
        return f"ColumnBatchType([{names}])"


class BatchWriter:
    """Handle for appending components of one type to a batch."""

    def __init__(self, values: list[Any], target: int, type_id: Hashable) -> None:
        self._values = values
        self._target = target
        self._type_id = type_id

    def push(self, value: Any) -> None:
        """Append a component; raise :class:`BatchFull` if the column is full."""
        if isinstance(self._type_id, type) and type(value) is not self._type_id:
            raise TypeError(
                f"expected {self._type_id.__qualname__}, got {type(value).__qualname__}"
            )
        if len(self._values) >= self._target:
            raise BatchFull(value)
        self._values.append(value)

    @property
    def fill(self) -> int:
        """How many components have been added so far."""
        return len(self._values)


class ColumnBatchBuilder:
    """An incomplete collection of component data for entities with the same types."""

    def __init__(self, batch_type: ColumnBatchType, size: int) -> None:
        if size < 0:
            raise ValueError("batch size cannot be negative")
        types = batch_type.types
        self._archetype = Archetype(types)
        self._archetype.reserve(size)
        self._target = size
        self._fill: dict[Hashable, list[Any]] = {info.type_id: [] for info in types}
        self._built = False

    @property
    def size(self) -> int:
        """Number of entities the batch holds once complete."""
        return self._target

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("batch has already been built")

    def writer(self, component_type: Hashable) -> BatchWriter | None:
        """A writer for ``component_type`` if it is part of the batch, else None."""
        self._check_open()
        values = self._fill.get(component_type)
        if values is None:
            return None
        return BatchWriter(values, self._target, component_type)

    def build(self) -> "ColumnBatch":
        """Finish the batch; raise :class:`BatchIncomplete` if components are missing."""
        self._check_open()
        if any(len(values) != self._target for values in self._fill.values()):
            raise BatchIncomplete()
        self._built = True
        archetype = self._archetype
        for _ in range(self._target):
            archetype.allocate(PLACEHOLDER_ID)
        for type_id, values in self._fill.items():
            for index, value in enumerate(values):
                archetype.put_dynamic(value, type_id, index)
        self._fill = {}
        return ColumnBatch(archetype)


@dataclass(frozen=True)
class ColumnBatch:
    """A complete collection of component data for entities with the same types."""

    archetype: Archetype

    def __len__(self) -> int:
        return len(self.archetype)