"""Orderings for query entries."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Callable, Sequence

from dstore.query import Entry


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


@dataclass(frozen=True)
class OrderByFunction:
    """Orders entries by a user supplied comparison function."""

    fn: Callable[[Entry, Entry], int]

    def compare(self, a: Entry, b: Entry) -> int:
        return self.fn(a, b)

    def __str__(self) -> str:
        return "FN"


@dataclass(frozen=True)
class OrderByValue:
    """Orders entries by value, ascending."""

    def compare(self, a: Entry, b: Entry) -> int:
        return _cmp(a.value or b"", b.value or b"")

    def __str__(self) -> str:
        return "VALUE"


@dataclass(frozen=True)
class OrderByValueDescending:
    """Orders entries by value, descending."""

    def compare(self, a: Entry, b: Entry) -> int:
        return -_cmp(a.value or b"", b.value or b"")

    def __str__(self) -> str:
        return "desc(VALUE)"


@dataclass(frozen=True)
class OrderByKey:
    """Orders entries by key, ascending."""

    def compare(self, a: Entry, b: Entry) -> int:
        return _cmp(a.key, b.key)

    def __str__(self) -> str:
        return "KEY"


@dataclass(frozen=True)
class OrderByKeyDescending:
    """Orders entries by key, descending."""

    def compare(self, a: Entry, b: Entry) -> int:
        return -_cmp(a.key, b.key)

    def __str__(self) -> str:
        return "desc(KEY)"


def less(orders: Sequence, a: Entry, b: Entry) -> bool:
    """Whether ``a`` comes before ``b`` under the orders, ties broken by key."""
    for order in orders:
        outcome = order.compare(a, b)
        if outcome == -1:
            return True
        if outcome == 1:
            return False
    return a.key < b.key


def sort_entries(orders: Sequence, entries: list) -> None:
    """Sort ``entries`` in place using the given orders."""

    def compare(a: Entry, b: Entry) -> int:
        if less(orders, a, b):
            return -1
        if less(orders, b, a):
            return 1
        return 0

    entries.sort(key=functools.cmp_to_key(compare))