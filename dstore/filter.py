"""Filters that decide whether a query entry is kept."""

from __future__ import annotations

import json
import operator
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from dstore.query import Entry


class Op(str, Enum):
    """A comparison operator."""

    EQUAL = "=="
    NOT_EQUAL = "!="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="

    def __str__(self) -> str:
        return self.value


_COMPARATORS: dict[Op, Callable] = {
    Op.EQUAL: operator.eq,
    Op.NOT_EQUAL: operator.ne,
    Op.GREATER_THAN: operator.gt,
    Op.GREATER_THAN_OR_EQUAL: operator.ge,
    Op.LESS_THAN: operator.lt,
    Op.LESS_THAN_OR_EQUAL: operator.le,
}


def _coerce_op(op) -> Op:
    try:
        return Op(op)
    except ValueError:
        raise ValueError(f"unknown operation: {op}") from None


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


@dataclass(frozen=True)
class FilterValueCompare:
    """Keeps entries whose value compares to ``value`` under ``op``."""

    op: Op
    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "op", _coerce_op(self.op))

    def filter(self, entry: Entry) -> bool:
        return _COMPARATORS[self.op](entry.value or b"", self.value or b"")

    def __str__(self) -> str:
        text = (self.value or b"").decode("utf-8", "replace")
        return f"VALUE {self.op} {_quote(text)}"


@dataclass(frozen=True)
class FilterKeyCompare:
    """Keeps entries whose key compares to ``key`` under ``op``."""

    op: Op
    key: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "op", _coerce_op(self.op))

    def filter(self, entry: Entry) -> bool:
        return _COMPARATORS[self.op](entry.key, self.key)

    def __str__(self) -> str:
        return f"KEY {self.op} {_quote(self.key)}"


@dataclass(frozen=True)
class FilterKeyPrefix:
    """Keeps entries whose key starts with ``prefix``."""

    prefix: str

    def filter(self, entry: Entry) -> bool:
        return entry.key.startswith(self.prefix)

    def __str__(self) -> str:
        return f"PREFIX({_quote(self.prefix)})"