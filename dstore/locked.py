"""A datastore wrapper that serialises every operation with one lock."""

from __future__ import annotations

import threading
from typing import Any

from dstore.query import Query, Results, results_with_entries


class BatchUnsupportedError(Exception):
    """Raised when the wrapped datastore cannot batch."""

    def __init__(self, message: str = "this datastore does not support batching"):
        super().__init__(message)


def _disk_usage(store: Any) -> int:
    usage = getattr(store, "disk_usage", None)
    return usage() if callable(usage) else 0


class MutexDatastore:
    """Wraps a datastore with a coarse lock held around every operation."""

    def __init__(self, child: Any):
        self._child = child
        self._lock = threading.Lock()

    def children(self) -> list:
        return [self._child]

    def put(self, key, value: bytes) -> None:
        with self._lock:
            self._child.put(key, value)

    def sync(self, prefix) -> None:
        with self._lock:
            self._child.sync(prefix)

    def get(self, key) -> bytes:
        with self._lock:
            return self._child.get(key)

    def has(self, key) -> bool:
        with self._lock:
            return self._child.has(key)

    def get_size(self, key) -> int:
        with self._lock:
            return self._child.get_size(key)

    def delete(self, key) -> None:
        with self._lock:
            self._child.delete(key)

    def query(self, query: Query) -> Results:
        """Run the whole query while locked and return its entries."""
        with self._lock:
            results = self._child.query(query)
            try:
                entries = results.rest()
            except BaseException:
                try:
                    results.close()
                except Exception:
                    pass
                raise
            results.close()
        return results_with_entries(query, entries)

    def batch(self) -> "SyncBatch":
        with self._lock:
            make_batch = getattr(self._child, "batch", None)
            if not callable(make_batch):
                raise BatchUnsupportedError()
            return SyncBatch(make_batch(), self._lock)

    def close(self) -> None:
        with self._lock:
            self._child.close()

    def disk_usage(self) -> int:
        """The child's disk usage, or 0 if it does not report one."""
        with self._lock:
            return _disk_usage(self._child)

    def _maintain(self, name: str) -> None:
        action = getattr(self._child, name, None)
        if callable(action):
            with self._lock:
                action()

    def check(self) -> None:
        self._maintain("check")

    def scrub(self) -> None:
        self._maintain("scrub")

    def collect_garbage(self) -> None:
        self._maintain("collect_garbage")


class SyncBatch:
    """A batch whose operations take the owning datastore's lock."""

    def __init__(self, batch: Any, lock: threading.Lock):
        self._batch = batch
        self._lock = lock

    def put(self, key, value: bytes) -> None:
        with self._lock:
            self._batch.put(key, value)

    def delete(self, key) -> None:
        with self._lock:
            self._batch.delete(key)

    def commit(self) -> None:
        with self._lock:
            self._batch.commit()


def mutex_wrap(child: Any) -> MutexDatastore:
    """Wrap ``child`` so that every operation is serialised."""
    return MutexDatastore(child)