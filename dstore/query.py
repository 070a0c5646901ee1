"""Query descriptions and lazily produced query results."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterator, Optional


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


@dataclass
class Entry:
    """A single key/value pair produced by a query."""

    key: str
    value: Optional[bytes] = None
    expiration: Optional[datetime] = None
    size: int = 0


@dataclass
class Result:
    """An entry, or an error met while producing entries."""

    entry: Entry = field(default_factory=lambda: Entry(""))
    error: Optional[BaseException] = None

    @property
    def key(self) -> str:
        return self.entry.key

    @property
    def value(self) -> Optional[bytes]:
        return self.entry.value


@dataclass
class Query:
    """A description of which entries to fetch and how to shape them.

    Operations apply in order: prefix, filters, orders, offset, limit.
    A limit or offset of zero means none.
    """

    prefix: str = ""
    filters: list = field(default_factory=list)
    orders: list = field(default_factory=list)
    limit: int = 0
    offset: int = 0
    keys_only: bool = False
    return_expirations: bool = False
    returns_sizes: bool = False

    def __str__(self) -> str:
        select = "SELECT keys"
        if not self.keys_only:
            select += ",vals"
        if self.return_expirations:
            select += ",exps"
        parts = [select]
        if self.prefix:
            parts.append(f"FROM {_quote(self.prefix)}")
        if self.filters:
            parts.append("FILTER [" + ", ".join(str(f) for f in self.filters) + "]")
        if self.orders:
            parts.append("ORDER [" + ", ".join(str(o) for o in self.orders) + "]")
        if self.offset > 0:
            parts.append(f"OFFSET {self.offset}")
        if self.limit > 0:
            parts.append(f"LIMIT {self.limit}")
        return " ".join(parts)


class QueryError(Exception):
    """Raised when a query produced an error result.

    ``error`` is the underlying error and ``entries`` holds the entries
    collected before it, if any.
    """

    def __init__(self, error: BaseException, entries: Optional[list] = None):
        super().__init__(str(error))
        self.error = error
        self.entries: list = list(entries or [])


NextFn = Callable[[], Optional[Result]]


class Results:
    """A lazily evaluated stream of query results.

    ``next_fn`` returns the next :class:`Result`, or ``None`` once the
    stream is exhausted. ``close`` is called at most once, either when the
    stream runs out or when the caller closes it early.
    """

    def __init__(self, query: Query, next_fn: NextFn, close: Optional[Callable[[], Any]] = None):
        self.query = query
        self._next = next_fn
        self._close = close
        self._closed = False

    def __iter__(self) -> Iterator[Entry]:
        return self

    def __next__(self) -> Entry:
        result = self.next_sync()
        if result is None:
            raise StopIteration
        if result.error is not None:
            raise QueryError(result.error) from result.error
        return result.entry

    def next_sync(self) -> Optional[Result]:
        """Return the next result, or None when there are no more."""
        if self._closed:
            return None
        result = self._next()
        if result is None:
            self.close()
        return result

    def rest(self) -> list:
        """Collect all remaining entries, raising QueryError on an error result."""
        entries: list = []
        while (result := self.next_sync()) is not None:
            if result.error is not None:
                raise QueryError(result.error, entries) from result.error
            entries.append(result.entry)
        return entries

    def close(self) -> None:
        """Release the underlying source; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        if self._close is not None:
            self._close()

    def __enter__(self) -> "Results":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def results_from_iterator(
    query: Query, next_fn: NextFn, close: Optional[Callable[[], Any]] = None
) -> Results:
    """Build results from a next function and an optional close function."""
    return Results(query, next_fn, close)


def results_with_entries(query: Query, entries) -> Results:
    """Build results that yield the given entries in order."""
    source = iter(list(entries or []))

    def next_fn() -> Optional[Result]:
        entry = next(source, None)
        return None if entry is None else Result(entry)

    return Results(query, next_fn)


def results_replace_query(results: Results, query: Query) -> Results:
    """Return results drawing from the same source but reporting another query."""
    if not isinstance(results, Results):
        raise TypeError(f"unknown results type: {type(results).__name__}")
    replaced = copy.copy(results)
    replaced.query = query
    return replaced