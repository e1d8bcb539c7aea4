import threading

import pytest

from cloudpatterns.store import KeyValueStore, NoSuchKeyError


@pytest.fixture
def store():
    return KeyValueStore()


def test_put(store):
    key, value = "create-key", "create-value"
    assert key not in store
    store.put(key, value)
    assert key in store
    assert store.get(key) == value


def test_get(store):
    key, value = "read-key", "read-value"
    with pytest.raises(NoSuchKeyError) as info:
        store.get(key)
    assert str(info.value) == "no such key"

    store.put(key, value)
    assert store.get(key) == value


def test_missing_key_is_a_lookup_error(store):
    with pytest.raises(LookupError):
        store.get("absent")


def test_delete(store):
    key, value = "delete-key", "delete-value"
    store.put(key, value)
    assert key in store
    store.delete(key)
    assert key not in store
    with pytest.raises(NoSuchKeyError):
        store.get(key)


def test_delete_missing_key(store):
    store.delete("never-there")
    assert "never-there" not in store


def test_put_overwrites(store):
    store.put("k", "one")
    store.put("k", "two")
    assert store.get("k") == "two"


def test_concurrent_puts(store):
    def writer(base):
        for n in range(200):
            store.put(f"{base}-{n}", str(n))

    threads = [threading.Thread(target=writer, args=(b,)) for b in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get("4-199") == "199"
    assert all(f"{b}-0" in store for b in range(5))