"""Condition trees, their parser and the matcher that evaluates them."""

from ability_manager.conditions.matcher import ConditionMatcher, matches_condition
from ability_manager.conditions.nodes import And, Condition, FieldEquality, FieldOperator, Not, Or
from ability_manager.conditions.parse import parse_condition
from ability_manager.conditions.values import MISSING, get_deep_value

__all__ = [
    "MISSING",
    "And",
    "Condition",
    "ConditionMatcher",
    "FieldEquality",
    "FieldOperator",
    "Not",
    "Or",
    "get_deep_value",
    "matches_condition",
    "parse_condition",
]
