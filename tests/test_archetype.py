import pytest

from ecsstore.archetype import (
    Archetype,
    ArchetypeColumnMut,
    DuplicateComponentError,
)
from ecsstore.borrow import BorrowError
from ecsstore.typeinfo import TypeInfo


def make(*types):
    return Archetype(sorted(TypeInfo.of(t) for t in types))


def spawn(arch, entity_id, *values):
    index = arch.allocate(entity_id)
    for value in values:
        arch.put_dynamic(value, type(value), index)
    return index


def test_columnar_access():
    arch = make(int, str)
    spawn(arch, 1, 123, "abc")
    spawn(arch, 2, 456, "def")
    assert arch.ids() == [1, 2]
    assert arch.get(int) == [123, 456]
    assert arch.get(str) == ["abc", "def"]
    assert arch.get(bool) is None


def test_has_and_component_types():
    arch = make(str, int)
    assert arch.has(int)
    assert arch.has_dynamic(str)
    assert not arch.has(bool)
    expected = [info.type_id for info in sorted([TypeInfo.of(int), TypeInfo.of(str)])]
    assert list(arch.component_types()) == expected


def test_duplicate_components_rejected():
    with pytest.raises(DuplicateComponentError) as err:
        Archetype([TypeInfo.of(int), TypeInfo.of(int)])
    assert str(err.value) == (
        "attempted to allocate entity with duplicate int components; "
        "each type must occur at most once!"
    )


def test_unsorted_types_rejected():
    infos = sorted([TypeInfo.of(int), TypeInfo.of(str)])
    with pytest.raises(ValueError, match="type info is unsorted"):
        Archetype(list(reversed(infos)))


def test_new_archetype_is_empty():
    arch = make(int)
    assert len(arch) == 0
    assert arch.is_empty()
    assert arch.capacity() == 0
    assert arch.ids() == []


def test_allocate_grows_capacity():
    arch = make(int)
    spawn(arch, 0, 0)
    assert arch.capacity() == 64
    for i in range(1, 65):
        spawn(arch, i, i)
    assert len(arch) == 65
    assert arch.capacity() > 64
    assert arch.capacity() >= len(arch)


def test_reserve():
    small = make(int)
    small.reserve(10)
    assert small.capacity() == 64
    large = make(int)
    large.reserve(100)
    assert large.capacity() == 100
    large.reserve(100)
    assert large.capacity() == 100
    with pytest.raises(ValueError):
        large.reserve(-1)


def test_remove_swaps_last_into_place_and_drops():
    dropped = []
    arch = Archetype([TypeInfo.from_parts(int, 1, dropped.append)])
    for entity_id, value in [(1, 10), (2, 20), (3, 30)]:
        spawn(arch, entity_id, value)
    assert arch.remove(0, True) == 3
    assert arch.ids() == [3, 2]
    assert arch.get(int) == [30, 20]
    assert dropped == [10]


def test_remove_last_returns_none_without_drop():
    dropped = []
    arch = Archetype([TypeInfo.from_parts(int, 1, dropped.append)])
    spawn(arch, 1, 10)
    spawn(arch, 2, 20)
    assert arch.remove(1, False) is None
    assert arch.ids() == [1]
    assert dropped == []
    with pytest.raises(IndexError):
        arch.remove(5, True)


def test_move_to_hands_out_components():
    arch = make(int, str)
    spawn(arch, 7, 1, "a")
    spawn(arch, 8, 2, "b")
    received = {}
    moved = arch.move_to(0, lambda value, type_id: received.__setitem__(type_id, value))
    assert moved == 8
    assert received == {int: 1, str: "a"}
    assert arch.ids() == [8]
    assert arch.get_dynamic(str, 0) == "b"


def test_merge():
    a = make(int, str)
    b = make(int, str)
    spawn(a, 1, 10, "x")
    spawn(b, 2, 20, "y")
    spawn(b, 3, 30, "z")
    a.merge(b)
    assert a.ids() == [1, 2, 3]
    assert a.get(int) == [10, 20, 30]
    assert b.is_empty()
    assert a.capacity() >= len(a)


def test_merge_mismatched_types():
    with pytest.raises(ValueError):
        make(int).merge(make(str))


def test_borrow_rules():
    arch = make(int)
    spawn(arch, 1, 5)
    first = arch.get(int)
    second = arch.get(int)
    with pytest.raises(BorrowError, match="already borrowed"):
        arch.get_mut(int)
    first.release()
    second.release()
    column = arch.get_mut(int)
    with pytest.raises(BorrowError, match="already borrowed uniquely"):
        arch.get(int)
    column.release()
    assert arch.get(int) == [5]


def test_get_mut_writes_through():
    arch = make(int)
    spawn(arch, 1, 5)
    with arch.get_mut(int) as column:
        assert isinstance(column, ArchetypeColumnMut)
        column[0] = 42
    with arch.get(int) as column:
        assert list(column) == [42]
    assert arch.get_dynamic(int, 0) == 42


def test_released_column_cannot_be_read():
    arch = make(int)
    spawn(arch, 1, 5)
    column = arch.get(int)
    column.release()
    column.release()
    with pytest.raises(BorrowError):
        len(column)
    # A second release must not unbalance the borrow state.
    with arch.get_mut(int) as unique:
        assert list(unique) == [5]


def test_clear_drops_everything():
    dropped = []
    arch = Archetype([TypeInfo.from_parts(int, 1, dropped.append)])
    spawn(arch, 1, 10)
    spawn(arch, 2, 20)
    capacity = arch.capacity()
    arch.clear()
    assert sorted(dropped) == [10, 20]
    assert len(arch) == 0
    assert arch.capacity() == capacity


def test_dynamic_access():
    arch = make(int)
    index = spawn(arch, 4, 99)
    assert arch.get_dynamic(int, index) == 99
    assert arch.get_dynamic(str, index) is None
    with pytest.raises(IndexError):
        arch.get_dynamic(int, 1)
    with pytest.raises(KeyError):
        arch.put_dynamic("x", str, index)


def test_unwritten_slot_raises():
    arch = make(int)
    index = arch.allocate(1)
    with pytest.raises(LookupError):
        arch.get_dynamic(int, index)


def test_entity_ids():
    arch = make(int)
    spawn(arch, 4, 1)
    assert arch.entity_id(0) == 4
    arch.set_entity_id(0, 9)
    assert arch.ids() == [9]
    with pytest.raises(IndexError):
        arch.entity_id(1)