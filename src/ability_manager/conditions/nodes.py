"""Condition tree — the tagged union every condition is parsed into.

Variants:

* :class:`FieldEquality`: resolved field value equals a literal, or is
  structurally equal to a list / mapping.
* :class:`FieldOperator`: one operator applied to a resolved field value.
  ``$``-prefixed names come from operator mappings (``{"$gt": 5}``); bare
  names (``"gt"``, ``"pastDays"``) come from the operator builders.
* :class:`And`, :class:`Or`, :class:`Not`: logical combinators.

Nodes are immutable and carry no evaluation logic; see
:mod:`ability_manager.conditions.matcher`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from ability_manager.conditions.values import MISSING


class Condition:
    """Marker base for every condition node."""

    __slots__ = ()

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of this node."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class FieldEquality(Condition):
    path: str
    value: Any

    def export(self) -> dict[str, Any]:
        return {"field": self.path, "equals": export_value(self.value)}


@dataclass(frozen=True, slots=True)
class FieldOperator(Condition):
    path: str
    operator: str
    operand: Any

    @property
    def is_tagged(self) -> bool:
        return not self.operator.startswith("$")

    def export(self) -> dict[str, Any]:
        return {
            "field": self.path,
            "operator": self.operator,
            "operand": export_value(self.operand),
        }


@dataclass(frozen=True, slots=True)
class And(Condition):
    conditions: tuple[Condition, ...] = ()

    def export(self) -> dict[str, Any]:
        return {"$and": [c.export() for c in self.conditions]}


@dataclass(frozen=True, slots=True)
class Or(Condition):
    conditions: tuple[Condition, ...] = ()

    def export(self) -> dict[str, Any]:
        return {"$or": [c.export() for c in self.conditions]}


@dataclass(frozen=True, slots=True)
class Not(Condition):
    condition: Condition

    def export(self) -> dict[str, Any]:
        return {"$not": self.condition.export()}


def export_value(value: Any) -> Any:
    """Best-effort JSON rendering of an operand."""
    if value is MISSING:
        return None
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Condition):
        return value.export()
    if isinstance(value, Mapping):
        return {str(k): export_value(v) for k, v in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return [export_value(v) for v in value]
    return value
