import pytest

from creambus.lookup import (
    LookupTable,
    SubscriberLookupData,
    SubscriberOldLookupData,
)


def test_tables_start_empty_and_sized_by_rows():
    table = LookupTable(max_groups=32, max_subscribers=4)
    assert len(table.input) == 32 * 4
    assert len(table.output) == 32 * 4
    assert bytes(table.input) == bytes(32 * 4)
    assert bytes(table.output) == bytes(32 * 4)


def test_add_records_both_directions():
    table = LookupTable(max_groups=32, max_subscribers=4)
    table.add(2, [SubscriberLookupData(local_group_id=3, global_group_id=10)])
    row = 2 * table.max_groups
    assert table.input[row + 3] == 10
    assert table.output[row + 10] == 3
    assert table.input[row] == 1
    assert table.output[row] == 1


def test_add_leaves_other_rows_untouched():
    table = LookupTable(max_groups=16, max_subscribers=4)
    table.add(1, [SubscriberLookupData(local_group_id=2, global_group_id=5)])
    row = table.max_groups
    outside = bytes(table.input[:row]) + bytes(table.input[2 * row :])
    assert outside == bytes(16 * 3)
    assert table.input[row + 2] == 5


def test_add_with_empty_iterable_changes_nothing():
    table = LookupTable(max_groups=16, max_subscribers=4)
    table.add(1, [])
    assert bytes(table.input) == bytes(16 * 4)
    assert bytes(table.output) == bytes(16 * 4)


def test_remove_undoes_add():
    table = LookupTable(max_groups=32, max_subscribers=4)
    table.add(3, [SubscriberLookupData(local_group_id=1, global_group_id=7)])
    row = 3 * table.max_groups
    assert table.output[row + 7] == 1
    table.remove(3, [SubscriberOldLookupData(global_group_id=7)])
    assert bytes(table.input) == bytes(32 * 4)
    assert bytes(table.output) == bytes(32 * 4)


def test_tables_are_read_only_views():
    table = LookupTable(max_groups=8, max_subscribers=2)
    with pytest.raises(TypeError):
        table.input[0] = 1
    assert table.input[0] == 0


def test_subscriber_beyond_table_raises():
    table = LookupTable(max_groups=8, max_subscribers=2)
    with pytest.raises(IndexError):
        table.add(2, [SubscriberLookupData(local_group_id=1, global_group_id=1)])


@pytest.mark.parametrize("local, global_", [(256, 1), (1, 256), (-1, 1)])
def test_lookup_data_must_fit_a_byte(local, global_):
    with pytest.raises(ValueError):
        SubscriberLookupData(local_group_id=local, global_group_id=global_)


def test_old_lookup_data_must_fit_a_byte():
    with pytest.raises(ValueError):
        SubscriberOldLookupData(global_group_id=300)