# ecsstore

Building blocks for an entity-component-system. The package provides archetype
tables that store components column by column, runtime borrow tracking for
those columns, column batches for building many entities at once, and a command
buffer that records world operations to apply later.

The tests use pytest. The `test` extra installs it.

## Modules

### `ecsstore.borrow`

`AtomicBorrow` is a thread-safe borrow state.

- `borrow()` takes a shared borrow. It returns `False` if a unique borrow is
  active.
- `borrow_mut()` takes a unique borrow. It returns `False` if any borrow is
  active.
- `release()` and `release_mut()` give a borrow back.

A counter overflow raises `BorrowError`. An unbalanced or mismatched release
also raises `BorrowError`. The properties `state`, `shared_count` and
`is_unique` expose the current state.

### `ecsstore.typeinfo`

`TypeInfo` describes a component type with a type id, an alignment, an
optional destructor and a name. There are two ways to build one:

- `TypeInfo.of(SomeClass)` takes a class and uses alignment 1.
- `TypeInfo.from_parts(type_id, align, drop)` takes any hashable id. The
  alignment must be a power of two.

Two infos are equal when their type ids are equal. Infos sort by alignment,
largest first, then by type id. `drop(value)` runs the destructor, if the info
has one.

### `ecsstore.bundle`

Helpers that work on an iterable of component values:

- `bundle_type_info(components)` returns the sorted `TypeInfo` list for the
  components.
- `bundle_type_ids(components)` returns the type ids in that same order.
- `bundle_has(components, component_type)` tells whether the bundle holds a
  component of exactly that type.

`MissingComponent` is a `LookupError` whose message reads
`missing <name> component`. `DynamicClone(component_type, func)` copies values
of one type. Its default `func` is `copy.deepcopy`. Passing a value of another
type to `clone` raises `TypeError`.

### `ecsstore.archetype`

`Archetype(types)` stores the entities that share one sorted set of
`TypeInfo`s. Creating an archetype that has the same type twice raises
`DuplicateComponentError`. Creating one from unsorted types raises
`ValueError`.

- `allocate(entity_id)` appends a slot and returns its index. Fill the slot
  with `put_dynamic(component, type_id, index)`. Read a value back with
  `get_dynamic(type_id, index)`.
- `remove(index, drop)` and `move_to(index, sink)` take an entity out by
  swapping the last entity into its place. Both return the id of the entity
  that moved, if any.
- `merge(other)` takes over every entity of an archetype that has the same
  types.
- `clear()` drops every component.
- `ids()`, `entity_id(index)`, `set_entity_id(index, entity_id)`, `has`,
  `has_dynamic`, `component_types()`, `is_empty()`, `capacity()`,
  `reserve(additional)` and `len()` inspect or adjust the table.
- `get(type)` borrows a column for reading and returns an `ArchetypeColumn`.
  `get_mut(type)` borrows it for writing and returns an `ArchetypeColumnMut`.
  Both return `None` if the type is absent. A column behaves as a sequence and
  is a context manager that calls `release()` on exit. A conflicting borrow
  raises `BorrowError`.

```python
from ecsstore.archetype import Archetype
from ecsstore.typeinfo import TypeInfo

table = Archetype(sorted([TypeInfo.of(int), TypeInfo.of(str)]))
index = table.allocate(7)
table.put_dynamic(42, int, index)
table.put_dynamic("abc", str, index)

with table.get_mut(int) as numbers:
    numbers[0] = 43
with table.get(int) as numbers:
    assert list(numbers) == [43]
```

### `ecsstore.batch`

`ColumnBatchType` collects component types through `add(type)` or
`add_dynamic(info)`. Duplicate types are merged. `into_batch(size)` returns a
`ColumnBatchBuilder` for exactly `size` entities. Its `writer(type)` method
returns a `BatchWriter`, or `None` if the type is not part of the batch.

- `BatchWriter.push` raises `BatchFull` when its column is full.
- `BatchWriter.push` raises `TypeError` when a value is not exactly of the
  column's class.
- `build()` returns a `ColumnBatch` that wraps a filled `Archetype`.
- `build()` raises `BatchIncomplete` if any column is short.

```python
from ecsstore.batch import ColumnBatchType

batch_type = ColumnBatchType()
batch_type.add(int).add(bool)
builder = batch_type.into_batch(2)

ints = builder.writer(int)
ints.push(42)
ints.push(43)

flags = builder.writer(bool)
flags.push(True)
flags.push(False)

batch = builder.build()
assert len(batch) == 2
```

A batch built for zero entities accepts no components. Every `push` on one of
its writers raises `BatchFull`.

### `ecsstore.command_buffer`

`CommandBuffer` records operations that change a world:

- `spawn(components)`
- `insert(entity, components)` and `insert_one(entity, component)`
- `remove(entity, *types)` and `remove_one(entity, type)`
- `despawn(entity)`

Components are kept in type order. `run_on(world)` applies the commands in the
order they were recorded and then empties the buffer. Any `LookupError` that
`insert`, `remove` or `despawn` raises is ignored. `clear()` drops the
commands without running them.

The world can be any object with `spawn(components)`,
`insert(entity, components)`, `remove(entity, *types)` and `despawn(entity)`
methods.

## What the package does not do

There is no world type in this package. It has no entity allocator, no
queries and no views. `CommandBuffer.run_on` needs a world object that you
supply. The archetypes and batches here are storage pieces that such a world
can build on.