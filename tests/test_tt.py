import pytest

from chesscore.tt import Bound, TTEntry, TranspositionTable, CLUSTER_SIZE


def cluster_key(table, cluster, low):
    shift = 64 - (table.cluster_count.bit_length() - 1)
    return (cluster << shift) | low


def test_miss_on_empty_table():
    table = TranspositionTable(1)
    found, entry = table.probe(12345)
    assert found is False
    assert entry.depth8 == 0


def test_save_and_probe_round_trip():
    table = TranspositionTable(1)
    key = 0xDEADBEEF12345678
    _, entry = table.probe(key)
    table.save(entry, key, 123, True, Bound.LOWER, 10, 777, -45)
    found, again = table.probe(key)
    assert found is True
    assert again is entry
    assert again.depth() == 10
    assert again.value == 123
    assert again.eval_value == -45
    assert again.move == 777
    assert again.is_pv() is True
    assert again.bound() is Bound.LOWER


def test_values_wrap_to_sixteen_bits():
    entry = TTEntry()
    entry.save(1, -300, False, Bound.EXACT, 4, 0, -32768, 0)
    assert entry.value == -300
    assert entry.eval_value == -32768


def test_move_kept_when_saving_without_move():
    entry = TTEntry()
    entry.save(9, 1, False, Bound.EXACT, 5, 42, 0, 0)
    entry.save(9, 2, False, Bound.EXACT, 6, 0, 0, 0)
    assert entry.move == 42
    assert entry.value == 2


def test_shallow_non_exact_does_not_overwrite():
    entry = TTEntry()
    entry.save(9, 10, False, Bound.LOWER, 10, 0, 0, 0)
    entry.save(9, 20, False, Bound.UPPER, 3, 0, 0, 0)
    assert entry.depth() == 10
    assert entry.value == 10
    assert entry.bound() is Bound.LOWER


def test_exact_always_overwrites():
    entry = TTEntry()
    entry.save(9, 10, False, Bound.LOWER, 10, 0, 0, 0)
    entry.save(9, 20, False, Bound.EXACT, 3, 0, 0, 0)
    assert entry.depth() == 3
    assert entry.bound() is Bound.EXACT


def test_depth_out_of_range_raises():
    entry = TTEntry()
    with pytest.raises(ValueError):
        entry.save(1, 0, False, Bound.EXACT, -7, 0, 0, 0)
    with pytest.raises(ValueError):
        entry.save(1, 0, False, Bound.EXACT, 249, 0, 0, 0)


def test_cluster_index_within_range():
    table = TranspositionTable(1)
    for key in (0, 1, 2**63, 2**64 - 1, 0x0123456789ABCDEF):
        assert 0 <= table.cluster_index(key) < table.cluster_count
    assert table.cluster_index(2**64 - 1) == table.cluster_count - 1
    assert table.cluster_index(cluster_key(table, 17, 5)) == 17


def test_resize_scales_and_clears():
    table = TranspositionTable(1)
    count = table.cluster_count
    _, entry = table.probe(5)
    table.save(entry, 5, 0, False, Bound.EXACT, 4, 0, 0)
    table.resize(2)
    assert table.cluster_count == 2 * count
    assert table.probe(5)[0] is False


def test_resize_rejects_zero():
    table = TranspositionTable(1)
    with pytest.raises(ValueError):
        table.resize(0)


def test_clear_forgets_entries():
    table = TranspositionTable(1)
    _, entry = table.probe(77)
    table.save(entry, 77, 0, False, Bound.EXACT, 4, 0, 0)
    table.clear()
    assert table.probe(77)[0] is False


def test_replaces_shallowest_entry():
    table = TranspositionTable(1)
    for low, depth in ((1, 5), (2, 2), (3, 8)):
        key = cluster_key(table, 0, low)
        found, entry = table.probe(key)
        assert found is False
        table.save(entry, key, 0, False, Bound.LOWER, depth, 0, 0)
    found, victim = table.probe(cluster_key(table, 0, 4))
    assert found is False
    assert victim.depth() == 2


def test_old_generation_entries_age_out():
    table = TranspositionTable(1)
    old_key = cluster_key(table, 3, 1)
    _, entry = table.probe(old_key)
    table.save(entry, old_key, 0, False, Bound.LOWER, 8, 0, 0)
    table.new_search()
    for low, depth in ((2, 2), (3, 3)):
        key = cluster_key(table, 3, low)
        _, fresh = table.probe(key)
        table.save(fresh, key, 0, False, Bound.LOWER, depth, 0, 0)
    found, victim = table.probe(cluster_key(table, 3, 4))
    assert found is False
    assert victim.depth() == 8


def test_hashfull_counts_current_generation():
    table = TranspositionTable(1)
    assert table.hashfull() == 0
    for cluster in range(1000):
        for low in range(1, CLUSTER_SIZE + 1):
            key = cluster_key(table, cluster, low)
            _, entry = table.probe(key)
            table.save(entry, key, 0, False, Bound.EXACT, 4, 0, 0)
    assert table.hashfull() == 1000
    table.new_search()
    assert table.hashfull() == 0


def test_new_search_advances_generation_and_probe_refreshes():
    table = TranspositionTable(1)
    _, entry = table.probe(99)
    table.save(entry, 99, 0, True, Bound.UPPER, 4, 0, 0)
    table.new_search()
    assert table.generation == 8
    found, again = table.probe(99)
    assert found is True
    assert again.gen_bound8 >> 3 == 1
    assert again.is_pv() is True
    assert again.bound() is Bound.UPPER