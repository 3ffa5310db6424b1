# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Ability factory for building an Ability from rule configuration.

Rules are declared in list order, which is also their priority: a later
rule overrides an earlier one whenever both match a query.
"""

from __future__ import annotations

from ability_manager.ability import Ability, create_ability
from ability_manager.conditions.matcher import ConditionMatcher
from ability_manager.exceptions import VocabularyError

from .schema import RuleSchema, VocabularySchema


class AbilityFactoryError(Exception):
    """Raised when an Ability cannot be built from configuration."""

    pass


class AbilityFactory:
    """Creates Ability instances from configuration.

    Example:
        factory = AbilityFactory()
        ability = factory.build([
            RuleSchema(action="manage", resource="Post"),
            RuleSchema(action="delete", resource="Post", inverted=True, reason="No deletes"),
        ])
    """

    def __init__(self, matcher: ConditionMatcher | None = None) -> None:
        """Initialize factory.

        Args:
            matcher: Condition matcher handed to every built Ability.
        """
        self._matcher = matcher

    def build(
        self,
        rules: list[RuleSchema],
        vocabulary: VocabularySchema | None = None,
    ) -> Ability:
        """Declare every rule, in order, on a fresh Ability.

        Args:
            rules: Rule configurations
            vocabulary: Optional closed vocabulary

        Returns:
            The populated Ability

        Raises:
            AbilityFactoryError: If a rule cannot be declared
        """
        vocabulary = vocabulary or VocabularySchema()
        ability = create_ability(
            actions=vocabulary.actions,
            resources=vocabulary.resources,
            matcher=self._matcher,
        )

        for index, rule in enumerate(rules):
            try:
                self._declare(ability, rule)
            except VocabularyError as e:
                raise AbilityFactoryError(f"Rule #{index} rejected: {e}") from e
            except Exception as e:
                raise AbilityFactoryError(
                    f"Failed to declare rule #{index} ({rule.action!r} on {rule.resource!r}): {e}"
                ) from e

        return ability

    def _declare(self, ability: Ability, rule: RuleSchema) -> None:
        """Declare a single rule.

        Args:
            ability: Ability being populated
            rule: Rule configuration
        """
        declare = ability.deny if rule.inverted else ability.allow
        builder = declare(rule.action, rule.resource, rule.condition)
        if rule.reason is not None:
            builder.reason(rule.reason)
