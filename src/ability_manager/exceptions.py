"""Custom exceptions for the ability_manager package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ability_manager.result import Decision

DEFAULT_DENY_MESSAGE = "Access denied"


class AbilityError(Exception):
    """Base exception for all ability-related errors."""


class ForbiddenError(AbilityError):
    """Raised when a caller asks for an exception instead of a boolean denial.

    Attributes:
        name:     Stable discriminant, always ``"ForbiddenError"``.
        message:  The reason attached to the deciding rule, or
                  ``"Access denied"`` when none was given.
        decision: The :class:`Decision` that produced the denial, if known.
    """

    name = "ForbiddenError"

    def __init__(
        self,
        message: str | None = None,
        *,
        decision: Decision | None = None,
    ) -> None:
        self.message = message or DEFAULT_DENY_MESSAGE
        self.decision = decision
        super().__init__(self.message)


class AbilityConfigError(AbilityError):
    """Raised when no usable Ability is available where one is required."""


class VocabularyError(AbilityError, ValueError):
    """Raised when a rule names an action or resource outside a closed vocabulary."""

    def __init__(self, kind: str, identifier: str, allowed: frozenset[str]) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(
            f"Unknown {kind} '{identifier}'. Declared {kind}s: {', '.join(sorted(allowed))}"
        )
