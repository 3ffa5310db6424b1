"""ability_manager — an in-process authorization predicate engine.

Rules are declared in order with ``allow`` / ``deny``.  Queries scan every
rule; the last one that matches decides.  No match means deny.
"""

from ability_manager.ability import Ability, RuleBuilder, create_ability
from ability_manager.conditions import MISSING, ConditionMatcher, matches_condition
from ability_manager.context import (
    can,
    cannot,
    get_reason,
    provide_ability,
    throw_if_not_allowed,
    use_ability,
)
from ability_manager.exceptions import (
    AbilityConfigError,
    AbilityError,
    ForbiddenError,
    VocabularyError,
)
from ability_manager.result import Decision
from ability_manager.rule import ALL, MANAGE, Rule

__all__ = [
    "ALL",
    "MANAGE",
    "MISSING",
    "Ability",
    "AbilityConfigError",
    "AbilityError",
    "ConditionMatcher",
    "Decision",
    "ForbiddenError",
    "Rule",
    "RuleBuilder",
    "VocabularyError",
    "can",
    "cannot",
    "create_ability",
    "get_reason",
    "matches_condition",
    "provide_ability",
    "throw_if_not_allowed",
    "use_ability",
]
