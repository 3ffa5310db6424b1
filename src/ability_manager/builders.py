"""Operator builders — factory functions used as condition field values.

Each builder returns a :class:`TaggedOperator` that the condition parser
turns into a :class:`~ability_manager.conditions.nodes.FieldOperator`::

    from ability_manager.builders import gte, or_, past_days

    ability.allow("read", "Post", {
        "status": or_("published", "archived"),
        "views": gte(100),
        "updated_at": past_days(7),
    })

A builder with a missing or falsy operand never matches.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True, slots=True)
class TaggedOperator:
    """An operator kind plus the operands it was built with."""

    kind: str
    operands: tuple[Any, ...]


def _tagged(kind: str, *operands: Any) -> TaggedOperator:
    return TaggedOperator(kind=kind, operands=operands)


# ── logical ──────────────────────────────────────────────────
# Membership tests of the operands against the resolved value.


def or_(*values: Any) -> TaggedOperator:
    return _tagged("or", *values)


def and_(*values: Any) -> TaggedOperator:
    return _tagged("and", *values)


def not_(*values: Any) -> TaggedOperator:
    return _tagged("not", *values)


def nand(*values: Any) -> TaggedOperator:
    """True unless every value is present."""
    return _tagged("nand", *values)


def nor(*values: Any) -> TaggedOperator:
    """True only when none of the values is present."""
    return _tagged("nor", *values)


def xor(*values: Any) -> TaggedOperator:
    """True when exactly one value is present."""
    return _tagged("xor", *values)


def xnor(*values: Any) -> TaggedOperator:
    """True when none or all of the values are present."""
    return _tagged("xnor", *values)


# ── comparison ───────────────────────────────────────────────


def gt(bound: float) -> TaggedOperator:
    return _tagged("gt", bound)


def gte(bound: float) -> TaggedOperator:
    return _tagged("gte", bound)


def lt(bound: float) -> TaggedOperator:
    return _tagged("lt", bound)


def lte(bound: float) -> TaggedOperator:
    return _tagged("lte", bound)


def between(low: float, high: float) -> TaggedOperator:
    """Inclusive numeric range."""
    return _tagged("between", low, high)


# ── string ───────────────────────────────────────────────────


def contains(*needles: str) -> TaggedOperator:
    return _tagged("contains", *needles)


def starts_with(*prefixes: str) -> TaggedOperator:
    return _tagged("startsWith", *prefixes)


def ends_with(*suffixes: str) -> TaggedOperator:
    return _tagged("endsWith", *suffixes)


def matches(pattern: re.Pattern[str] | str) -> TaggedOperator:
    return _tagged("matches", pattern)


# ── array ────────────────────────────────────────────────────


def includes_all(values: list[Any] | tuple[Any, ...]) -> TaggedOperator:
    return _tagged("includesAll", values)


def includes_any(values: list[Any] | tuple[Any, ...]) -> TaggedOperator:
    return _tagged("includesAny", values)


# ── date ─────────────────────────────────────────────────────

DateLike = date | str


def before(moment: DateLike) -> TaggedOperator:
    return _tagged("before", moment)


def after(moment: DateLike) -> TaggedOperator:
    return _tagged("after", moment)


def within(start: DateLike, end: DateLike) -> TaggedOperator:
    """Inclusive date range."""
    return _tagged("within", (start, end))


def past_days(days: int) -> TaggedOperator:
    """The value lies within the last *days* days and not in the future."""
    return _tagged("pastDays", days)


def future_days(days: int) -> TaggedOperator:
    """The value is no later than *days* days from now."""
    return _tagged("futureDays", days)


__all__ = [
    "TaggedOperator",
    "after",
    "and_",
    "before",
    "between",
    "contains",
    "ends_with",
    "future_days",
    "gt",
    "gte",
    "includes_all",
    "includes_any",
    "lt",
    "lte",
    "matches",
    "nand",
    "nor",
    "not_",
    "or_",
    "past_days",
    "starts_with",
    "within",
    "xnor",
    "xor",
]
