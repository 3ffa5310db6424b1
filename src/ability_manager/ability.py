"""Ability — the ordered rule store and the query algorithm."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from ability_manager.conditions.matcher import ConditionMatcher
from ability_manager.exceptions import ForbiddenError, VocabularyError
from ability_manager.result import Decision
from ability_manager.rule import ALL, DEFAULT_ACTIONS, DEFAULT_RESOURCES, MANAGE, Rule

ResourceMatcher = Callable[[str, Any], bool]


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list | tuple | set | frozenset):
        return list(value)
    return [value]


class RuleBuilder:
    """Handle returned by :meth:`Ability.allow` / :meth:`Ability.deny`.

    Refers to exactly the rules that one declaration created, so that
    ``.reason(...)`` can annotate them.  Further declarations may be chained
    straight off the handle.
    """

    def __init__(self, ability: Ability, rules: list[Rule]) -> None:
        self._ability = ability
        self._rules = rules

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    def reason(self, message: str) -> Ability:
        """Attach *message* to every rule created by this declaration."""
        for rule in self._rules:
            rule.reason = message
        return self._ability

    def allow(self, action: Any, resource: Any, condition: Any = None) -> RuleBuilder:
        return self._ability.allow(action, resource, condition)

    def deny(self, action: Any, resource: Any, condition: Any = None) -> RuleBuilder:
        return self._ability.deny(action, resource, condition)

    can = allow
    cannot = deny


class Ability:
    """Holds an ordered list of rules and answers permission queries.

    Rules are evaluated in **declaration order** and every rule is looked at;
    the last candidate whose condition matches decides.  With no matching
    rule the answer is deny.

    Parameters:
        actions:          Extra action identifiers.  When given, declarations
                          are checked against ``manage, create, read,
                          update, delete`` plus these.  ``None`` keeps the
                          vocabulary open.
        resources:        Extra resource identifiers, checked the same way
                          (``"all"`` is always accepted).
        resource_matcher: Optional ``(rule_resource, requested) -> bool``
                          predicate for resource identities that are not
                          plain string equality.
        matcher:          :class:`ConditionMatcher` used for conditions.
    """

    def __init__(
        self,
        *,
        actions: Iterable[str] | None = None,
        resources: Iterable[str] | None = None,
        resource_matcher: ResourceMatcher | None = None,
        matcher: ConditionMatcher | None = None,
    ) -> None:
        self._rules: list[Rule] = []
        self._actions = DEFAULT_ACTIONS | frozenset(actions) if actions is not None else None
        self._resources = (
            DEFAULT_RESOURCES | frozenset(resources) if resources is not None else None
        )
        self._resource_matcher = resource_matcher
        self._matcher = matcher or ConditionMatcher()

    # ── declaration ──────────────────────────────────────────

    def allow(self, action: Any, resource: Any, condition: Any = None) -> RuleBuilder:
        """Append one grant rule per (action, resource) pair."""
        return self._declare(action, resource, condition, inverted=False)

    def deny(self, action: Any, resource: Any, condition: Any = None) -> RuleBuilder:
        """Append one revocation rule per (action, resource) pair."""
        return self._declare(action, resource, condition, inverted=True)

    can = allow
    cannot = deny

    def _declare(
        self,
        action: Any,
        resource: Any,
        condition: Any,
        *,
        inverted: bool,
    ) -> RuleBuilder:
        actions = _as_list(action)
        resources = _as_list(resource)
        self._check_vocabulary("action", actions, self._actions)
        self._check_vocabulary("resource", resources, self._resources)

        parsed = self._matcher.parse(condition) if condition is not None else None
        created: list[Rule] = []
        for act in actions:
            for res in resources:
                rule = Rule(action=act, resource=res, inverted=inverted, condition=parsed)
                self._rules.append(rule)
                created.append(rule)
        return RuleBuilder(self, created)

    @staticmethod
    def _check_vocabulary(kind: str, values: list[Any], allowed: frozenset[str] | None) -> None:
        if allowed is None:
            return
        for value in values:
            if value not in allowed:
                raise VocabularyError(kind, str(value), allowed)

    # ── evaluation ───────────────────────────────────────────

    def _resource_matches(self, rule: Rule, resources: list[Any]) -> bool:
        if rule.resource == ALL or rule.resource in resources:
            return True
        if self._resource_matcher is None:
            return False
        return any(self._resource_matcher(rule.resource, res) for res in resources)

    def _is_candidate(self, rule: Rule, actions: list[Any], resources: list[Any]) -> bool:
        if not self._resource_matches(rule, resources):
            return False
        return rule.action == MANAGE or rule.action in actions

    def decide(self, action: Any, resource: Any, data: Any = None) -> Decision:
        """Scan every rule and return the decision of the last one that matches.

        * A rule is a candidate when its resource is ``"all"`` or one of
          *resource*, and its action is ``"manage"`` or one of *action*.
        * A candidate matches when it has no condition or its condition
          holds for *data*.
        * Later matches override earlier ones; no match means deny.
        """
        actions_to_check = _as_list(action)
        resources_to_check = _as_list(resource)

        decision = Decision.deny_by_default()
        for rule in self._rules:
            if not self._is_candidate(rule, actions_to_check, resources_to_check):
                continue
            if rule.condition is None or self._matcher.matches(rule.condition, data):
                decision = Decision.from_rule(rule)
        return decision

    def is_allowed(self, action: Any, resource: Any, data: Any = None) -> bool:
        return self.decide(action, resource, data).allowed

    def not_allowed(self, action: Any, resource: Any, data: Any = None) -> bool:
        return not self.is_allowed(action, resource, data)

    def reason_for(self, action: Any, resource: Any, data: Any = None) -> str | None:
        """Reason attached to the last matching rule, if it carries one."""
        return self.decide(action, resource, data).reason

    def throw_if_denied(self, action: Any, resource: Any, data: Any = None) -> None:
        """Raise :class:`ForbiddenError` unless the query is allowed."""
        decision = self.decide(action, resource, data)
        if not decision.allowed:
            raise ForbiddenError(decision.reason, decision=decision)

    # ── introspection ────────────────────────────────────────

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Declared rules in declaration order."""
        return tuple(self._rules)

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of all declared rules."""
        rules = [r.export() for r in self._rules]
        return {
            "rules": rules,
            "rule_count": len(rules),
        }


def create_ability(
    actions: Iterable[str] | None = None,
    resources: Iterable[str] | None = None,
    *,
    resource_matcher: ResourceMatcher | None = None,
    matcher: ConditionMatcher | None = None,
) -> Ability:
    """Create an empty :class:`Ability`.

    Example::

        ability = create_ability()
        ability.allow("manage", "Post")
        ability.deny("delete", "Post").reason("Posts are permanent")

        ability.is_allowed("update", "Post")   # True
        ability.reason_for("delete", "Post")   # "Posts are permanent"
    """
    return Ability(
        actions=actions,
        resources=resources,
        resource_matcher=resource_matcher,
        matcher=matcher,
    )
