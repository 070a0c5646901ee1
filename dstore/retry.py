"""A datastore wrapper that retries operations after temporary errors."""

from __future__ import annotations

import time
from typing import Any, Callable, TypeVar

from dstore.query import Query, Results

T = TypeVar("T")


class RetriesExhaustedError(Exception):
    """Raised when an operation still fails after every retry."""

    def __init__(self, error: BaseException):
        super().__init__(f"ran out of retries trying to get past temporary error: {error}")
        self.error = error


def _disk_usage(store: Any) -> int:
    usage = getattr(store, "disk_usage", None)
    return usage() if callable(usage) else 0


class RetryDatastore:
    """Retries reads and writes whose errors ``temp_err_func`` deems temporary.

    After a failure the n-th retry waits ``n * delay`` seconds. Delete,
    query, batch and close go to the child without retries.
    """

    def __init__(
        self,
        child: Any,
        temp_err_func: Callable[[BaseException], bool],
        retries: int = 0,
        delay: float = 0.0,
    ):
        self.child = child
        self.temp_err_func = temp_err_func
        self.retries = retries
        self.delay = delay

    def _run(self, op: Callable[[], T]) -> T:
        try:
            return op()
        except Exception as err:
            if not self.temp_err_func(err):
                raise
            last = err
        for attempt in range(1, self.retries + 1):
            time.sleep(attempt * self.delay)
            try:
                return op()
            except Exception as err:
                if not self.temp_err_func(err):
                    raise
                last = err
        raise RetriesExhaustedError(last) from last

    def disk_usage(self) -> int:
        return self._run(lambda: _disk_usage(self.child))

    def get(self, key) -> bytes:
        return self._run(lambda: self.child.get(key))

    def put(self, key, value: bytes) -> None:
        self._run(lambda: self.child.put(key, value))

    def sync(self, prefix) -> None:
        self._run(lambda: self.child.sync(prefix))

    def has(self, key) -> bool:
        return self._run(lambda: self.child.has(key))

    def get_size(self, key) -> int:
        return self._run(lambda: self.child.get_size(key))

    def delete(self, key) -> None:
        self.child.delete(key)

    def query(self, query: Query) -> Results:
        return self.child.query(query)

    def batch(self):
        return self.child.batch()

    def close(self) -> None:
        self.child.close()