"""A dictionary split into independently locked shards."""

from __future__ import annotations

import threading
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def _fnv1a_32(data: bytes) -> int:
    digest = _FNV32_OFFSET
    for byte in data:
        digest ^= byte
        digest = (digest * _FNV32_PRIME) & 0xFFFFFFFF
    return digest


@dataclass
class _Shard:
    lock: threading.Lock = field(default_factory=threading.Lock)
    items: dict[Hashable, Any] = field(default_factory=dict)


class ShardedMap:
    """Thread-safe mapping whose keys are spread over ``nshards`` shards.

    Each shard has its own lock, so operations on keys in different shards
    do not contend with each other.
    """

    def __init__(self, nshards: int) -> None:
        if nshards <= 0:
            raise ValueError("nshards must be positive")
        self._shards = [_Shard() for _ in range(nshards)]

    def shard_index(self, key: Hashable) -> int:
        """Return the index, in ``0..nshards-1``, of the shard holding ``key``."""
        return _fnv1a_32(str(key).encode("utf-8")) % len(self._shards)

    def _shard(self, key: Hashable) -> _Shard:
        return self._shards[self.shard_index(key)]

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default`` if there is none."""
        shard = self._shard(key)
        with shard.lock:
            return shard.items.get(key, default)

    def set(self, key: Hashable, value: Any) -> None:
        """Store ``value`` under ``key``."""
        shard = self._shard(key)
        with shard.lock:
            shard.items[key] = value

    def delete(self, key: Hashable) -> None:
        """Remove ``key``; a missing key is ignored."""
        shard = self._shard(key)
        with shard.lock:
            shard.items.pop(key, None)

    def keys(self) -> list[Hashable]:
        """Return every key in the map."""
        collected: list[Hashable] = []
        for shard in self._shards:
            with shard.lock:
                collected.extend(shard.items)
        return collected