"""Operator tables.

Two vocabularies evaluate a resolved field value against an operand:

* ``FIELD_OPERATORS``: the ``$``-keyed operators written inside operator
  mappings, e.g. ``{"views": {"$gte": 100}}``.
* ``TAGGED_OPERATORS``: the operators produced by
  :mod:`ability_manager.builders`, e.g. ``{"views": gte(100)}``.  Their
  operand is always the tuple of values passed to the builder.

Every operator is a plain function ``(value, operand, env) -> bool`` and
must not raise.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from ability_manager._internal.clock import Clock, SystemClock
from ability_manager.conditions.values import (
    contains_value,
    is_date,
    is_number,
    is_sequence,
    strict_equals,
    to_datetime,
)


@dataclass(frozen=True)
class OperatorEnv:
    """What an operator may reach besides its two arguments."""

    logger: Any
    clock: Clock = field(default_factory=SystemClock)


OperatorFn = Callable[[Any, Any, OperatorEnv], bool]


# ── $-keyed field operators ──────────────────────────────────


def _eq(value: Any, operand: Any, env: OperatorEnv) -> bool:
    return strict_equals(value, operand)


def _ne(value: Any, operand: Any, env: OperatorEnv) -> bool:
    return not strict_equals(value, operand)


def _membership(value: Any, operand: Any) -> bool:
    if is_sequence(value):
        return any(contains_value(operand, item) for item in value)
    return contains_value(operand, value)


def _in(value: Any, operand: Any, env: OperatorEnv) -> bool:
    if not is_sequence(operand):
        env.logger.warning("invalid_operand", operator="$in", expected="array")
        return False
    return _membership(value, operand)


def _nin(value: Any, operand: Any, env: OperatorEnv) -> bool:
    if not is_sequence(operand):
        env.logger.warning("invalid_operand", operator="$nin", expected="array")
        return False
    return not _membership(value, operand)


def _numeric(compare: Callable[[Any, Any], bool]) -> OperatorFn:
    def op(value: Any, operand: Any, env: OperatorEnv) -> bool:
        return is_number(value) and is_number(operand) and compare(value, operand)

    return op


def _between(value: Any, operand: Any, env: OperatorEnv) -> bool:
    if not is_sequence(operand) or len(operand) != 2:
        return False
    low, high = operand
    if is_number(value) and is_number(low) and is_number(high):
        return bool(low <= value <= high)
    if is_date(value) and is_date(low) and is_date(high):
        moment, start, end = to_datetime(value), to_datetime(low), to_datetime(high)
        return start <= moment <= end  # type: ignore[operator]
    return False


def _compile(pattern: Any, env: OperatorEnv) -> re.Pattern[str] | None:
    if isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str):
        try:
            return re.compile(pattern)
        except re.error as exc:
            env.logger.warning("invalid_pattern", pattern=pattern, error=str(exc))
    return None


def _regex(value: Any, operand: Any, env: OperatorEnv) -> bool:
    compiled = _compile(operand, env)
    return compiled is not None and isinstance(value, str) and compiled.search(value) is not None


def _string(test: Callable[[str, str], bool]) -> OperatorFn:
    def op(value: Any, operand: Any, env: OperatorEnv) -> bool:
        return isinstance(value, str) and isinstance(operand, str) and test(value, operand)

    return op


FIELD_OPERATORS: dict[str, OperatorFn] = {
    "$eq": _eq,
    "$ne": _ne,
    "$in": _in,
    "$nin": _nin,
    "$gt": _numeric(lambda v, o: v > o),
    "$gte": _numeric(lambda v, o: v >= o),
    "$lt": _numeric(lambda v, o: v < o),
    "$lte": _numeric(lambda v, o: v <= o),
    "$between": _between,
    "$regex": _regex,
    "$contains": _string(lambda v, o: o in v),
    "$startsWith": _string(lambda v, o: v.startswith(o)),
    "$endsWith": _string(lambda v, o: v.endswith(o)),
}


# ── tagged (builder) operators ───────────────────────────────
#
# ``operands`` is the tuple handed to the builder, e.g. ``or_("a", "b")``
# evaluates with ``operands == ("a", "b")``.


def _present(value: Any, operands: tuple[Any, ...]) -> int:
    """How many operands occur in the list *value*."""
    if not is_sequence(value):
        return 0
    return sum(1 for candidate in operands if contains_value(value, candidate))


def _tag_or(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    if is_sequence(value):
        return any(contains_value(value, candidate) for candidate in operands)
    return contains_value(operands, value)


def _tag_and(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    return is_sequence(value) and _present(value, operands) == len(operands)


def _tag_not(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    return not contains_value(operands, value)


def _tag_nand(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    return is_sequence(value) and _present(value, operands) != len(operands)


def _tag_nor(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    return is_sequence(value) and _present(value, operands) == 0


def _tag_xor(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    return is_sequence(value) and _present(value, operands) == 1


def _tag_xnor(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    count = _present(value, operands)
    return count == 0 or count == len(operands)


def _first(operands: tuple[Any, ...]) -> Any:
    return operands[0] if operands else None


def _tag_numeric(compare: Callable[[Any, Any], bool]) -> OperatorFn:
    def op(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
        bound = _first(operands)
        if not bound or not is_number(bound):
            return False
        return is_number(value) and compare(value, bound)

    return op


def _tag_between(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    if len(operands) < 2 or not operands[0] or not operands[1]:
        return False
    low, high = operands[0], operands[1]
    if not (is_number(low) and is_number(high) and is_number(value)):
        return False
    return bool(low <= value <= high)


def _tag_string(test: Callable[[str, str], bool]) -> OperatorFn:
    def op(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
        if not isinstance(value, str):
            return False
        return any(isinstance(o, str) and test(value, o) for o in operands)

    return op


def _tag_matches(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    pattern = _first(operands)
    if not pattern:
        return False
    return _regex(value, pattern, env)


def _tag_includes_all(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    wanted = _first(operands)
    if not wanted or not is_sequence(value):
        return False
    return all(contains_value(value, item) for item in wanted)


def _tag_includes_any(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    wanted = _first(operands)
    if not wanted or not is_sequence(value):
        return False
    return any(contains_value(value, item) for item in wanted)


def _tag_before(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    moment, bound = to_datetime(value), to_datetime(_first(operands))
    return moment is not None and bound is not None and moment < bound


def _tag_after(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    moment, bound = to_datetime(value), to_datetime(_first(operands))
    return moment is not None and bound is not None and moment > bound


def _tag_within(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    window = _first(operands)
    moment = to_datetime(value)
    if moment is None or not is_sequence(window) or len(window) != 2:
        return False
    start, end = to_datetime(window[0]), to_datetime(window[1])
    if start is None or end is None:
        return False
    return start <= moment <= end


def _days(operands: tuple[Any, ...]) -> int | float | None:
    days = _first(operands)
    if not days or not is_number(days):
        return None
    return days  # type: ignore[no-any-return]


def _tag_past_days(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    days, moment = _days(operands), to_datetime(value)
    if days is None or moment is None:
        return False
    now = env.clock.now().replace(microsecond=0)
    return now - timedelta(days=days) <= moment.replace(microsecond=0) and moment <= env.clock.now()


def _tag_future_days(value: Any, operands: tuple[Any, ...], env: OperatorEnv) -> bool:
    days, moment = _days(operands), to_datetime(value)
    if days is None or moment is None:
        return False
    return moment <= env.clock.now() + timedelta(days=days)


TAGGED_OPERATORS: dict[str, OperatorFn] = {
    "or": _tag_or,
    "and": _tag_and,
    "not": _tag_not,
    "nand": _tag_nand,
    "nor": _tag_nor,
    "xor": _tag_xor,
    "xnor": _tag_xnor,
    "gt": _tag_numeric(lambda v, o: v > o),
    "gte": _tag_numeric(lambda v, o: v >= o),
    "lt": _tag_numeric(lambda v, o: v < o),
    "lte": _tag_numeric(lambda v, o: v <= o),
    "between": _tag_between,
    "contains": _tag_string(lambda v, o: o in v),
    "startsWith": _tag_string(lambda v, o: v.startswith(o)),
    "endsWith": _tag_string(lambda v, o: v.endswith(o)),
    "matches": _tag_matches,
    "includesAll": _tag_includes_all,
    "includesAny": _tag_includes_any,
    "before": _tag_before,
    "after": _tag_after,
    "within": _tag_within,
    "pastDays": _tag_past_days,
    "futureDays": _tag_future_days,
}


def lookup(name: str) -> OperatorFn | None:
    """Find the implementation for *name* in the matching table."""
    table = FIELD_OPERATORS if name.startswith("$") else TAGGED_OPERATORS
    return table.get(name)
