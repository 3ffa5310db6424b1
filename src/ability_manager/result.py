"""Decision — the outcome of a single permission query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ability_manager.rule import Rule


@dataclass(frozen=True)
class Decision:
    """Immutable result of :meth:`Ability.decide`.

    Attributes:
        allowed: ``True`` if the last matching rule is a grant.
        rule:    The last rule whose condition matched, or ``None`` when no
                 rule matched and the query fell through to default-deny.
        reason:  ``rule.reason`` at decision time.
    """

    allowed: bool
    rule: Rule | None = None
    reason: str | None = None

    # ── Factory helpers ──────────────────────────────────────

    @staticmethod
    def from_rule(rule: Rule) -> Decision:
        return Decision(allowed=not rule.inverted, rule=rule, reason=rule.reason)

    @staticmethod
    def deny_by_default() -> Decision:
        return Decision(allowed=False)

    @property
    def by_default(self) -> bool:
        """``True`` when no rule matched."""
        return self.rule is None
