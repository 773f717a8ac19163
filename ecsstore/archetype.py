"""Column storage for entities that share the same set of component types."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable, Hashable, Iterable, Iterator

from .borrow import AtomicBorrow, BorrowError
from .typeinfo import TypeInfo

#: Smallest number of slots added whenever storage grows.
MIN_GROWTH = 64


class DuplicateComponentError(ValueError):
    """A component type occurs more than once in an archetype."""


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<unset>"


_UNSET = _Unset()


def _check_type_info(types: Sequence[TypeInfo]) -> None:
    for first, second in zip(types, types[1:]):
        if first == second:
            raise DuplicateComponentError(
                f"attempted to allocate entity with duplicate {first.name} components; "
                "each type must occur at most once!"
            )
        if second < first:
            raise ValueError("type info is unsorted")


class Archetype:
    """A collection of entities having the same component types.

    ``types`` must be sorted (see :class:`TypeInfo` ordering) and free of
    duplicates.
    """

    def __init__(self, types: Iterable[TypeInfo]) -> None:
        infos = list(types)
        _check_type_info(infos)
        self._types: tuple[TypeInfo, ...] = tuple(infos)
        self._index: dict[Hashable, int] = {
            info.type_id: i for i, info in enumerate(infos)
        }
        self._entities: list[int] = []
        self._columns: list[list[Any]] = [[] for _ in infos]
        self._states: list[AtomicBorrow] = [AtomicBorrow() for _ in infos]
        self._capacity = 0

    @property
    def types(self) -> tuple[TypeInfo, ...]:
        """Infos of the stored component types, in storage order."""
        return self._types

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        names = ", ".join(info.name for info in self._types)
        return f"Archetype([{names}], len={len(self)})"

    def has(self, component_type: type) -> bool:
        """Whether this archetype contains ``component_type`` components."""
        return self.has_dynamic(component_type)

    def has_dynamic(self, type_id: Hashable) -> bool:
        """Whether this archetype contains components identified by ``type_id``."""
        return type_id in self._index

    def get(self, component_type: Hashable) -> "ArchetypeColumn | None":
        """Borrow the column of ``component_type`` for reading, if present."""
        state = self._index.get(component_type)
        if state is None:
            return None
        return ArchetypeColumn(self, state)

    def get_mut(self, component_type: Hashable) -> "ArchetypeColumnMut | None":
        """Borrow the column of ``component_type`` for writing, if present."""
        state = self._index.get(component_type)
        if state is None:
            return None
        return ArchetypeColumnMut(self, state)

    def component_types(self) -> Iterator[Hashable]:
        """Iterate over the type ids of the stored components."""
        return (info.type_id for info in self._types)

    def ids(self) -> list[int]:
        """Raw ids of the entities in this archetype, in storage order."""
        return list(self._entities)

    def is_empty(self) -> bool:
        """Whether this archetype contains no entities."""
        return not self._entities

    def capacity(self) -> int:
        """Number of entities that fit without growing."""
        return self._capacity

    def reserve(self, additional: int) -> None:
        """Make room for at least ``additional`` more entities."""
        if additional < 0:
            raise ValueError("cannot reserve a negative number of entities")
        free = self._capacity - len(self)
        if additional > free:
            self._grow(max(additional - free, MIN_GROWTH))

    def _grow(self, min_increment: int) -> None:
        # Double capacity or add min_increment, whichever is larger.
        self._capacity += max(self._capacity, min_increment)

    def allocate(self, entity_id: int) -> int:
        """Append a slot for ``entity_id`` and return its index.

        Every component of the new slot must be written with
        :meth:`put_dynamic` straight afterwards.
        """
        if len(self) == self._capacity:
            self._grow(MIN_GROWTH)
        self._entities.append(entity_id)
        for column in self._columns:
            column.append(_UNSET)
        return len(self._entities) - 1

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self):
            raise IndexError(f"index {index} out of range for {len(self)} entities")

    def entity_id(self, index: int) -> int:
        """Raw id of the entity stored at ``index``."""
        self._check_index(index)
        return self._entities[index]

    def set_entity_id(self, index: int, entity_id: int) -> None:
        """Change the raw id recorded at ``index``."""
        self._check_index(index)
        self._entities[index] = entity_id

    def get_dynamic(self, type_id: Hashable, index: int) -> Any:
        """Component of type ``type_id`` at ``index``, or None if the type is absent."""
        state = self._index.get(type_id)
        if state is None:
            return None
        self._check_index(index)
        value = self._columns[state][index]
        if value is _UNSET:
            raise LookupError(f"component at index {index} has not been written")
        return value

    def put_dynamic(self, component: Any, type_id: Hashable, index: int) -> None:
        """Store ``component`` as the ``type_id`` component at ``index``."""
        state = self._index.get(type_id)
        if state is None:
            raise KeyError(f"archetype has no component type {type_id!r}")
        self._check_index(index)
        self._columns[state][index] = component

    def _swap_out(self, index: int, visit: Callable[[Any, TypeInfo], None]) -> int | None:
        self._check_index(index)
        last = len(self) - 1
        for info, column in zip(self._types, self._columns):
            visit(column[index], info)
            if index != last:
                column[index] = column[last]
            column.pop()
        moved = self._entities.pop()
        if index != last:
            self._entities[index] = moved
            return moved
        return None

    def remove(self, index: int, drop: bool) -> int | None:
        """Remove the entity at ``index`` by swapping in the last one.

        Returns the id of the entity moved into ``index``, if any.
        """

        def visit(value: Any, info: TypeInfo) -> None:
            if drop and value is not _UNSET:
                info.drop(value)

        return self._swap_out(index, visit)

    def move_to(self, index: int, sink: Callable[[Any, Hashable], None]) -> int | None:
        """Hand each component at ``index`` to ``sink(value, type_id)`` and remove it.

        Returns the id of the entity moved into ``index``, if any.
        """
        return self._swap_out(index, lambda value, info: sink(value, info.type_id))

    def merge(self, other: "Archetype") -> None:
        """Take over all entities of ``other``, which must have identical types."""
        if list(self.component_types()) != list(other.component_types()):
            raise ValueError("cannot merge archetypes with different component types")
        self.reserve(len(other))
        self._entities.extend(other._entities)
        for mine, theirs in zip(self._columns, other._columns):
            mine.extend(theirs)
            theirs.clear()
        other._entities.clear()

    def clear(self) -> None:
        """Drop every component and forget all entities."""
        for info, column in zip(self._types, self._columns):
            for value in column:
                if value is not _UNSET:
                    info.drop(value)
            column.clear()
        self._entities.clear()

    def _borrow(self, state: int) -> None:
        if not self._states[state].borrow():
            raise BorrowError(f"{self._types[state].name} already borrowed uniquely")

    def _borrow_mut(self, state: int) -> None:
        if not self._states[state].borrow_mut():
            raise BorrowError(f"{self._types[state].name} already borrowed")

    def _release(self, state: int) -> None:
        self._states[state].release()

    def _release_mut(self, state: int) -> None:
        self._states[state].release_mut()


class ArchetypeColumn(Sequence):
    """Shared borrow of one column of component data."""

    def __init__(self, archetype: Archetype, state: int) -> None:
        archetype._borrow(state)
        self._archetype = archetype
        self._state = state
        self._released = False

    def _column(self) -> list[Any]:
        if self._released:
            raise BorrowError("column has been released")
        return self._archetype._columns[self._state]

    def __getitem__(self, index):
        return self._column()[index]

    def __len__(self) -> int:
        return len(self._column())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Sequence) and not isinstance(other, (str, bytes)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return repr(list(self._column()))

    def release(self) -> None:
        """End the borrow; later releases do nothing."""
        if not self._released:
            self._released = True
            self._archetype._release(self._state)

    def __enter__(self) -> "ArchetypeColumn":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class ArchetypeColumnMut(ArchetypeColumn):
    """Unique borrow of one column of component data."""

    def __init__(self, archetype: Archetype, state: int) -> None:
        archetype._borrow_mut(state)
        self._archetype = archetype
        self._state = state
        self._released = False

    def __setitem__(self, index: int, value: Any) -> None:
        column = self._column()
        if not -len(column) <= index < len(column):
            raise IndexError(f"index {index} out of range")
        column[index] = value

    def release(self) -> None:
        """End the borrow; later releases do nothing."""
        if not self._released:
            self._released = True
            self._archetype._release_mut(self._state)

    def __enter__(self) -> "ArchetypeColumnMut":
        return self