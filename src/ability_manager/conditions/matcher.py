"""ConditionMatcher — evaluates a condition tree against a data object.

Evaluation is fail-closed: malformed conditions, unknown operators and
type mismatches make the affected entry *not match*.  Nothing here raises.
"""

from __future__ import annotations

from typing import Any

import structlog

from ability_manager._internal.clock import Clock, SystemClock
from ability_manager.conditions.nodes import And, Condition, FieldEquality, FieldOperator, Not, Or
from ability_manager.conditions.operators import OperatorEnv, lookup
from ability_manager.conditions.parse import parse_condition
from ability_manager.conditions.values import deep_equals, get_deep_value


class ConditionMatcher:
    """Evaluates conditions against data.

    Parameters:
        logger: Structured logger receiving diagnostics such as
                ``unknown_operator``.  Defaults to this module's logger.
        clock:  Time source for ``past_days`` / ``future_days``.
    """

    def __init__(self, logger: Any = None, clock: Clock | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._env = OperatorEnv(logger=self._logger, clock=clock or SystemClock())

    @property
    def logger(self) -> Any:
        return self._logger

    @property
    def clock(self) -> Clock:
        return self._env.clock

    def parse(self, raw: Any) -> Condition:
        return parse_condition(raw, log=self._logger)

    def matches(self, condition: Any, data: Any = None) -> bool:
        """Return ``True`` if *data* satisfies *condition*.

        *condition* may be ``None``, a mapping or an already parsed tree.
        """
        if condition is None:
            return True
        return self._evaluate(self.parse(condition), data)

    # ── evaluation ───────────────────────────────────────────

    def _evaluate(self, node: Condition, data: Any) -> bool:
        if isinstance(node, And):
            return all(self._evaluate(c, data) for c in node.conditions)
        if isinstance(node, Or):
            return any(self._evaluate(c, data) for c in node.conditions)
        if isinstance(node, Not):
            return not self._evaluate(node.condition, data)
        if isinstance(node, FieldEquality):
            return deep_equals(get_deep_value(data, node.path), node.value)
        if isinstance(node, FieldOperator):
            return self._apply(node, get_deep_value(data, node.path))

        self._logger.warning("unknown_condition", node=type(node).__name__)
        return False

    def _apply(self, node: FieldOperator, value: Any) -> bool:
        op = lookup(node.operator)
        if op is None:
            self._logger.warning("unknown_operator", operator=node.operator, field=node.path)
            return False
        try:
            return bool(op(value, node.operand, self._env))
        except Exception as exc:
            self._logger.warning(
                "operator_failed",
                operator=node.operator,
                field=node.path,
                error=str(exc),
            )
            return False


_default = ConditionMatcher()


def matches_condition(condition: Any, data: Any = None) -> bool:
    """Evaluate *condition* against *data* with the default matcher."""
    return _default.matches(condition, data)

