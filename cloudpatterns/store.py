"""A thread-safe in-memory key-value store."""

from __future__ import annotations

import threading


class NoSuchKeyError(LookupError):
    """Raised when a key is not in the store."""

    def __init__(self, message: str = "no such key") -> None:
        super().__init__(message)


class KeyValueStore:
    """String keys mapped to string values, guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[str, str] = {}

    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        with self._lock:
            self._items[key] = value

    def get(self, key: str) -> str:
        """Return the value under ``key``; raise :class:`NoSuchKeyError` if absent."""
        with self._lock:
            try:
                return self._items[key]
            except KeyError:
                raise NoSuchKeyError() from None

    def delete(self, key: str) -> None:
        """Remove ``key``; a missing key is not an error."""
        with self._lock:
            self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items