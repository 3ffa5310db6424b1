# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for runner input/output.

These Pydantic models define the JSON document the runner reads from
stdin and the one it writes to stdout.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RuleSchema(BaseModel):
    """Single rule declaration.

    Attributes:
        action: Action identifier, or a list of them
        resource: Resource identifier, or a list of them
        inverted: ``True`` for a ``deny`` rule
        condition: Condition mapping using ``$``-keyed operators
        reason: Optional explanation attached to the created rules
    """

    action: str | list[str]
    resource: str | list[str]
    inverted: bool = False
    condition: dict[str, Any] | None = None
    reason: str | None = None


class VocabularySchema(BaseModel):
    """Optional closed vocabulary.

    Attributes:
        actions: Extra actions on top of the builtin ones
        resources: Extra resources on top of ``"all"``
    """

    actions: list[str] | None = None
    resources: list[str] | None = None


class QuerySchema(BaseModel):
    """One permission query.

    Attributes:
        action: Action identifier, or a list of them
        resource: Resource identifier, or a list of them
        data: Data object the rule conditions are matched against
    """

    action: str | list[str]
    resource: str | list[str]
    data: dict[str, Any] | None = None


class DecisionSchema(BaseModel):
    """Outcome of one query.

    Attributes:
        allowed: Whether the query is allowed
        reason: Reason attached to the deciding rule, if any
        matched_rule: Index of the deciding rule, ``None`` on default-deny
    """

    allowed: bool
    reason: str | None = None
    matched_rule: int | None = None


class RunnerInput(BaseModel):
    """Complete input read from stdin.

    Attributes:
        vocabulary: Optional closed vocabulary for the rules
        rules: Rule declarations, in priority order (last wins)
        queries: Queries to evaluate against the rules
    """

    vocabulary: VocabularySchema = Field(default_factory=VocabularySchema)
    rules: list[RuleSchema] = Field(default_factory=list)
    queries: list[QuerySchema] = Field(default_factory=list)


class RunnerOutput(BaseModel):
    """Complete output written to stdout.

    The runner always outputs valid JSON matching this schema,
    even on errors.

    Attributes:
        success: Whether every query was evaluated
        decisions: One decision per query, in input order
        error: Error message (on failure)
        error_type: Error class name (on failure)
    """

    success: bool
    decisions: list[DecisionSchema] = Field(default_factory=list)
    error: str = ""
    error_type: str = ""
