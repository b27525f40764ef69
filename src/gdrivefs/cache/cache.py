"""Thread-safe key/value cache with prefix invalidation."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Iterator


class _ReadWriteLock:
    """
    Readers-writer lock.

    Any number of readers may hold the lock together; a writer holds it alone.
    Waiting writers block new readers so that writers are not starved.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class Cache:
    """
    In-memory cache used to avoid repeated Drive lookups.

    There is no size limit and no expiry: entries only leave the cache through
    delete(), cleanup_by_prefix() or cleanup_everything().
    """

    def __init__(self) -> None:
        self._lock = _ReadWriteLock()
        self._items: dict[str, Any] = {}

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._items)

    def set(self, key: str, value: Any) -> None:
        with self._lock.write():
            self._items[key] = value

    def get(self, key: str) -> tuple[Any, bool]:
        """Return (value, found)."""
        with self._lock.read():
            if key in self._items:
                return self._items[key], True
        return None, False

    def get_value(self, key: str) -> Any:
        """Return the value, or None when the key is missing."""
        value, _ = self.get(key)
        return value

    def delete(self, key: str) -> None:
        with self._lock.write():
            self._items.pop(key, None)

    def cleanup_by_prefix(self, prefix: str) -> int:
        """Delete every entry whose key starts with prefix. Returns the count."""
        with self._lock.write():
            keys = [k for k in self._items if k.startswith(prefix)]
            for k in keys:
                del self._items[k]
        return len(keys)

    def cleanup_everything(self) -> None:
        with self._lock.write():
            self._items = {}
