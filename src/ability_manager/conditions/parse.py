"""Turn user-written conditions into condition trees.

Accepted input::

    {"published": True}                              # field equality
    {"author.id": 7}                                 # dot path
    {"tags": ["a", "b"]}                             # deep equality
    {"views": {"$gte": 10, "$lt": 100}}              # operator mapping
    {"views": gte(10)}                               # operator builder
    {"$or": [{"draft": False}, {"author.id": 7}]}    # logical keys

Logical keys may sit next to field keys; every part must hold.  Malformed
logical operands are logged and parsed into a condition that never matches.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from ability_manager.builders import TaggedOperator
from ability_manager.conditions.nodes import And, Condition, FieldEquality, FieldOperator, Not, Or

logger = structlog.get_logger(__name__)

NEVER = Or(())
ALWAYS = And(())


def _combine(parts: list[Condition]) -> Condition:
    if len(parts) == 1:
        return parts[0]
    return And(tuple(parts))


def _is_operator_mapping(value: Any) -> bool:
    return isinstance(value, Mapping) and any(
        isinstance(key, str) and key.startswith("$") for key in value
    )


def parse_field(path: str, expected: Any) -> Condition:
    """Parse the condition for one field entry."""
    if isinstance(expected, TaggedOperator):
        return FieldOperator(path, expected.kind, expected.operands)

    if not _is_operator_mapping(expected):
        return FieldEquality(path, expected)

    parts: list[Condition] = []
    for key, operand in expected.items():
        key = str(key)
        if key.startswith("$"):
            parts.append(FieldOperator(path, key, operand))
        else:
            # Plain key among operators: compare the nested field instead.
            parts.append(parse_field(f"{path}.{key}", operand))
    return _combine(parts)


def _parse_list(key: str, value: Any, log: Any) -> tuple[Condition, ...] | None:
    if not isinstance(value, list | tuple):
        log.warning("invalid_logical_operand", operator=key, expected="array")
        return None
    return tuple(parse_condition(sub, log=log) for sub in value)


def parse_condition(raw: Any, *, log: Any = None) -> Condition:
    """Parse *raw* into a :class:`Condition`.

    ``None`` and ``{}`` parse to a condition that always matches.
    """
    if log is None:
        log = logger

    if raw is None:
        return ALWAYS
    if isinstance(raw, Condition):
        return raw
    if not isinstance(raw, Mapping):
        log.warning("invalid_condition", received=type(raw).__name__)
        return NEVER

    parts: list[Condition] = []
    for key, value in raw.items():
        if key == "$and":
            subs = _parse_list(key, value, log)
            parts.append(NEVER if subs is None else And(subs))
        elif key == "$or":
            subs = _parse_list(key, value, log)
            parts.append(NEVER if subs is None else Or(subs))
        elif key == "$not":
            if isinstance(value, Mapping | Condition):
                parts.append(Not(parse_condition(value, log=log)))
            else:
                log.warning("invalid_logical_operand", operator=key, expected="condition")
                parts.append(NEVER)
        else:
            parts.append(parse_field(str(key), value))

    if not parts:
        return ALWAYS
    return _combine(parts)
