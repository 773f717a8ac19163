"""Recording world operations for later application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Protocol, Union

from .typeinfo import TypeInfo


class WorldLike(Protocol):
    """The operations a command buffer needs from a world."""

    def spawn(self, components: tuple) -> Any: ...

    def insert(self, entity: Any, components: tuple) -> Any: ...

    def remove(self, entity: Any, *component_types: Hashable) -> Any: ...

    def despawn(self, entity: Any) -> Any: ...


@dataclass(frozen=True)
class _SpawnOrInsert:
    entity: Any
    components: tuple


@dataclass(frozen=True)
class _Remove:
    entity: Any
    component_types: tuple


@dataclass(frozen=True)
class _Despawn:
    entity: Any


_Command = Union[_SpawnOrInsert, _Remove, _Despawn]


def _sorted_components(components: Iterable[Any]) -> tuple:
    return tuple(sorted(components, key=lambda value: TypeInfo.of(type(value)).sort_key))


class CommandBuffer:
    """Records operations for future application to a world.

    Failures caused by entities or components that no longer exist (any
    :class:`LookupError` raised by the world) are ignored when the
    commands are run.
    """

    def __init__(self) -> None:
        self._cmds: list[_Command] = []

    def __len__(self) -> int:
        return len(self._cmds)

    def insert(self, entity: Any, components: Iterable[Any]) -> None:
        """Add ``components`` to ``entity``, if it exists when run."""
        self._cmds.append(_SpawnOrInsert(entity, _sorted_components(components)))

    def insert_one(self, entity: Any, component: Any) -> None:
        """Add a single ``component`` to ``entity``, if it exists when run."""
        self.insert(entity, (component,))

    def remove(self, entity: Any, *args: Hashable) -> None:
        """Remove the components of the given types from ``entity``, if present."""
        self._cmds.append(_Remove(entity, tuple(args)))

    def remove_one(self, entity: Any, component_type: Hashable) -> None:
        """Remove the ``component_type`` component from ``entity``, if present."""
        self.remove(entity, component_type)

    def despawn(self, entity: Any) -> None:
        """Despawn ``entity``."""
        self._cmds.append(_Despawn(entity))

    def spawn(self, components: Iterable[Any]) -> None:
        """Spawn a new entity with ``components``."""
        self._cmds.append(_SpawnOrInsert(None, _sorted_components(components)))

    def run_on(self, world: WorldLike) -> None:
        """Apply the recorded commands to ``world`` in order and clear the buffer."""
        cmds, self._cmds = self._cmds, []
        for cmd in cmds:
            if isinstance(cmd, _SpawnOrInsert):
                if cmd.entity is None:
                    world.spawn(cmd.components)
                else:
                    try:
                        world.insert(cmd.entity, cmd.components)
                    except LookupError:
                        pass
            elif isinstance(cmd, _Remove):
                try:
                    world.remove(cmd.entity, *cmd.component_types)
                except LookupError:
                    pass
            else:
                try:
                    world.despawn(cmd.entity)
                except LookupError:
                    pass

    def clear(self) -> None:
        """Drop all recorded commands."""
        self._cmds.clear()