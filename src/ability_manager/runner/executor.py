# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Executor for evaluating queries against configured rules.

Orchestrates the full flow:
1. Build an Ability from the rule configuration
2. Evaluate every query in order
3. Return structured decisions
"""

from __future__ import annotations

import structlog

from ability_manager.ability import Ability
from ability_manager.conditions.matcher import ConditionMatcher
from ability_manager.result import Decision

from .factory import AbilityFactory, AbilityFactoryError
from .schema import DecisionSchema, QuerySchema, RunnerInput, RunnerOutput

logger = structlog.get_logger(__name__)


class Executor:
    """Evaluates queries against a configured Ability.

    The executor is designed for dependency injection to support testing.
    Pass a custom matcher to control logging and the clock.

    Example:
        executor = Executor()
        output = executor.execute(input_data)
    """

    def __init__(self, matcher: ConditionMatcher | None = None) -> None:
        """Initialize executor with an optional condition matcher.

        Args:
            matcher: Matcher handed to the built Ability.
        """
        self._matcher = matcher

    def execute(self, input_data: RunnerInput) -> RunnerOutput:
        """Build the Ability and evaluate every query.

        Args:
            input_data: Rules and queries

        Returns:
            RunnerOutput with one decision per query, or error details

        Note:
            This method catches all exceptions and returns them as
            RunnerOutput errors, ensuring valid JSON is always returned.
        """
        try:
            return self._execute_internal(input_data)
        except AbilityFactoryError as e:
            logger.warning("ability_build_failed", error=str(e))
            return RunnerOutput(
                success=False,
                error=str(e),
                error_type="AbilityFactoryError",
            )
        except Exception as e:
            logger.exception("execution_failed")
            return RunnerOutput(
                success=False,
                error=str(e),
                error_type=type(e).__name__,
            )

    def _execute_internal(self, input_data: RunnerInput) -> RunnerOutput:
        """Internal execution logic.

        Separated from execute() to allow exception propagation
        for testing while execute() catches all errors.
        """
        ability = AbilityFactory(self._matcher).build(input_data.rules, input_data.vocabulary)
        decisions = [self._evaluate(ability, query) for query in input_data.queries]
        return RunnerOutput(success=True, decisions=decisions)

    def _evaluate(self, ability: Ability, query: QuerySchema) -> DecisionSchema:
        """Evaluate one query.

        Args:
            ability: Populated Ability
            query: Query to evaluate

        Returns:
            DecisionSchema for the query
        """
        decision = ability.decide(query.action, query.resource, query.data)
        return DecisionSchema(
            allowed=decision.allowed,
            reason=decision.reason,
            matched_rule=self._rule_index(ability, decision),
        )

    @staticmethod
    def _rule_index(ability: Ability, decision: Decision) -> int | None:
        if decision.rule is None:
            return None
        for index, rule in enumerate(ability.rules):
            if rule is decision.rule:
                return index
        return None
