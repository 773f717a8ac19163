import pytest

from ecsstore.archetype import DuplicateComponentError
from ecsstore.batch import (
    PLACEHOLDER_ID,
    BatchFull,
    BatchIncomplete,
    ColumnBatch,
    ColumnBatchBuilder,
    ColumnBatchType,
)
from ecsstore.typeinfo import TypeInfo


def test_empty_batch():
    types = ColumnBatchType()
    types.add(int)
    builder = types.into_batch(0)
    writer = builder.writer(int)
    with pytest.raises(BatchFull) as info:
        writer.push(42)
    assert info.value.value == 42


def test_build_complete_batch():
    batch_ty = ColumnBatchType()
    batch_ty.add(int).add(bool)
    builder = batch_ty.into_batch(2)
    bs = builder.writer(bool)
    bs.push(True)
    bs.push(False)
    ints = builder.writer(int)
    ints.push(42)
    ints.push(43)
    batch = builder.build()
    assert isinstance(batch, ColumnBatch)
    assert len(batch) == 2
    with batch.archetype.get(int) as column:
        assert column == [42, 43]
    with batch.archetype.get(bool) as column:
        assert column == [True, False]
    assert batch.archetype.ids() == [PLACEHOLDER_ID, PLACEHOLDER_ID]


def test_type_can_be_reused():
    batch_ty = ColumnBatchType().add(int)
    for base in (1, 10):
        builder = batch_ty.copy().into_batch(1)
        builder.writer(int).push(base)
        with builder.build().archetype.get(int) as column:
            assert column == [base]


def test_incomplete_batch():
    builder = ColumnBatchType().add(int).add(str).into_batch(2)
    builder.writer(int).push(1)
    builder.writer(int).push(2)
    builder.writer(str).push("a")
    with pytest.raises(BatchIncomplete, match="batch incomplete"):
        builder.build()


def test_writer_for_missing_type():
    builder = ColumnBatchType().add(int).into_batch(1)
    assert builder.writer(str) is None


def test_writers_share_fill():
    builder = ColumnBatchType().add(int).into_batch(2)
    first = builder.writer(int)
    first.push(1)
    second = builder.writer(int)
    assert second.fill == 1
    second.push(2)
    assert first.fill == 2
    with pytest.raises(BatchFull):
        first.push(3)


def test_push_wrong_type():
    builder = ColumnBatchType().add(int).into_batch(1)
    with pytest.raises(TypeError):
        builder.writer(int).push("text")


def test_duplicate_types_are_merged():
    batch_ty = ColumnBatchType().add(int).add(int).add(str)
    assert [info.type_id for info in batch_ty.types].count(int) == 1
    builder = batch_ty.into_batch(1)
    builder.writer(int).push(5)
    builder.writer(str).push("x")
    assert sorted(builder.build().archetype.component_types(), key=repr) == sorted(
        [int, str], key=repr
    )


def test_add_dynamic():
    info = TypeInfo.from_parts("custom", 8, lambda value: None)
    builder = ColumnBatchType().add_dynamic(info).into_batch(1)
    builder.writer("custom").push({"anything": 1})
    batch = builder.build()
    assert batch.archetype.get_dynamic("custom", 0) == {"anything": 1}


def test_add_dynamic_rejects_non_info():
    with pytest.raises(TypeError):
        ColumnBatchType().add_dynamic(int)


def test_build_twice():
    builder = ColumnBatchBuilder(ColumnBatchType().add(int), 0)
    assert len(builder.build()) == 0
    with pytest.raises(RuntimeError):
        builder.build()


def test_negative_size():
    with pytest.raises(ValueError):
        ColumnBatchType().add(int).into_batch(-1)


def test_capacity_reserved():
    builder = ColumnBatchType().add(int).into_batch(100)
    for value in range(100):
        builder.writer(int).push(value)
    batch = builder.build()
    assert batch.archetype.capacity() >= 100
    assert len(batch) == 100