import threading

import pytest

from cloudpatterns.sharding import ShardedMap

BUCKETS = 17

TRUTH = {
    "alpha": 1,
    "beta": 2,
    "gamma": 3,
    "delta": 4,
    "epsilon": 5,
}


@pytest.fixture
def filled():
    smap = ShardedMap(BUCKETS)
    for key, value in TRUTH.items():
        smap.set(key, value)
    return smap


def test_shard_index_has_no_collisions_for_single_letters():
    smap = ShardedMap(BUCKETS)
    indices = [smap.shard_index(key) for key in ["A", "B", "C", "D", "E"]]
    assert len(set(indices)) == len(indices)


def test_shard_index_is_in_range_and_stable():
    smap = ShardedMap(BUCKETS)
    for n in range(200):
        key = f"key-{n}"
        index = smap.shard_index(key)
        assert 0 <= index < BUCKETS
        assert smap.shard_index(key) == index


def test_single_shard_always_index_zero():
    smap = ShardedMap(1)
    assert {smap.shard_index(k) for k in TRUTH} == {0}


def test_set_and_get(filled):
    for key, value in TRUTH.items():
        assert filled.get(key) == value


def test_get_missing_returns_default():
    smap = ShardedMap(BUCKETS)
    assert smap.get("missing") is None
    assert smap.get("missing", 0) == 0


def test_set_overwrites(filled):
    filled.set("alpha", 100)
    assert filled.get("alpha") == 100
    assert len(filled.keys()) == len(TRUTH)


def test_keys(filled):
    keys = filled.keys()
    assert len(keys) == len(TRUTH)
    assert sorted(keys) == sorted(TRUTH)


def test_delete(filled):
    for key in filled.keys():
        filled.delete(key)
    assert filled.keys() == []


def test_delete_missing_is_noop(filled):
    filled.delete("zeta")
    assert sorted(filled.keys()) == sorted(TRUTH)


def test_non_positive_shard_count_rejected():
    with pytest.raises(ValueError):
        ShardedMap(0)


def test_concurrent_sets():
    smap = ShardedMap(BUCKETS)

    def writer(base):
        for n in range(100):
            smap.set(f"{base}-{n}", n)

    threads = [threading.Thread(target=writer, args=(b,)) for b in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(smap.keys()) == 800
    assert smap.get("3-42") == 42