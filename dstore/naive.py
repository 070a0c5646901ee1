"""Query operations applied in memory over a stream of results."""

from __future__ import annotations

import posixpath
from typing import Iterator, Optional

from dstore.filter import FilterKeyPrefix
from dstore.order import sort_entries
from dstore.query import Entry, Query, Result, Results, results_from_iterator


def naive_filter(results: Results, flt) -> Results:
    """Keep only entries that pass ``flt``; error results always pass."""

    def next_fn() -> Optional[Result]:
        while (result := results.next_sync()) is not None:
            if result.error is not None or flt.filter(result.entry):
                return result
        return None

    return results_from_iterator(results.query, next_fn, results.close)


def naive_limit(results: Results, limit: int) -> Results:
    """Truncate the results to at most ``limit`` entries; zero means no limit."""
    if limit == 0:
        return results
    remaining = limit
    closed = False

    def next_fn() -> Optional[Result]:
        nonlocal remaining, closed
        if remaining == 0:
            if not closed:
                closed = True
                try:
                    results.close()
                except Exception as err:
                    return Result(error=err)
            return None
        remaining -= 1
        return results.next_sync()

    def close() -> None:
        nonlocal closed
        if closed:
            return
        closed = True
        results.close()

    return results_from_iterator(results.query, next_fn, close)


def naive_offset(results: Results, offset: int) -> Results:
    """Skip the first ``offset`` results."""
    to_skip = offset

    def next_fn() -> Optional[Result]:
        nonlocal to_skip
        while to_skip > 0:
            result = results.next_sync()
            if result is None or result.error is not None:
                return result
            to_skip -= 1
        return results.next_sync()

    return results_from_iterator(results.query, next_fn, results.close)


def naive_order(results: Results, *args) -> Results:
    """Reorder the results by the orders given in ``args``.

    Every entry is read before the first one is returned. Error results
    are passed on ahead of the sorted entries.
    """
    orders = args
    if not orders:
        return results

    def produce() -> Iterator[Result]:
        entries: list[Entry] = []
        while (result := results.next_sync()) is not None:
            if result.error is not None:
                yield result
                continue
            entries.append(result.entry)
        results.close()
        sort_entries(orders, entries)
        for entry in entries:
            yield Result(entry)

    stream = produce()
    return results_from_iterator(results.query, lambda: next(stream, None), results.close)


def _clean_prefix(prefix: str) -> str:
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    cleaned = posixpath.normpath(prefix)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def naive_query_apply(query: Query, results: Results) -> Results:
    """Apply prefix, filters, orders, offset and limit of ``query`` in memory."""
    if query.prefix:
        # A prefix of /bar must match /bar/baz but not /barbaz.
        prefix = _clean_prefix(query.prefix)
        if prefix != "/":
            results = naive_filter(results, FilterKeyPrefix(prefix + "/"))
    for flt in query.filters:
        results = naive_filter(results, flt)
    if query.orders:
        results = naive_order(results, *query.orders)
    if query.offset != 0:
        results = naive_offset(results, query.offset)
    if query.limit != 0:
        results = naive_limit(results, query.limit)
    return results


def result_entries_from(keys, values) -> list[Entry]:
    """Pair keys with values into entries carrying their sizes."""
    keys = list(keys)
    values = list(values)
    if len(values) < len(keys):
        raise ValueError("fewer values than keys")
    return [Entry(key, value=value, size=len(value)) for key, value in zip(keys, values)]