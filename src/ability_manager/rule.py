"""Rule — one (action, resource, condition, polarity, reason) entry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ability_manager.conditions.nodes import Condition

MANAGE = "manage"
ALL = "all"

DEFAULT_ACTIONS: frozenset[str] = frozenset({MANAGE, "create", "read", "update", "delete"})
DEFAULT_RESOURCES: frozenset[str] = frozenset({ALL})


@dataclass
class Rule:
    """A single permission rule held by an :class:`~ability_manager.Ability`.

    Attributes:
        action:    Action identifier.  ``"manage"`` matches every action.
        resource:  Resource identifier.  ``"all"`` matches every resource.
        inverted:  ``False`` for a grant (``allow``), ``True`` for a
                   revocation (``deny``).
        condition: Parsed condition, or ``None`` when the rule always applies.
        reason:    Optional explanation, back-filled through
                   :meth:`RuleBuilder.reason`.
    """

    action: str
    resource: str
    inverted: bool = False
    condition: Condition | None = None
    reason: str | None = None

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of this rule."""
        return {
            "action": self.action,
            "resource": self.resource,
            "inverted": self.inverted,
            "condition": self.condition.export() if self.condition is not None else None,
            "reason": self.reason,
        }
