"""Context binding — make one Ability available to everything below a scope.

Application code wraps a unit of work (a request, a task, a CLI command)
in :func:`provide_ability` and calls the helpers anywhere inside it::

    with provide_ability(build_ability(current_user)):
        ...
        if can("update", "Post", post):
            ...
        throw_if_not_allowed("delete", "Post", post)

The binding lives in a :class:`contextvars.ContextVar`, so each thread and
each asyncio task sees its own Ability.  Helpers look the Ability up on
every call; swapping it with a nested provider takes effect immediately.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from ability_manager.ability import Ability
from ability_manager.exceptions import AbilityConfigError

_current_ability: ContextVar[Ability | None] = ContextVar("current_ability", default=None)


@contextmanager
def provide_ability(ability: Ability) -> Iterator[Ability]:
    """Bind *ability* for the duration of the ``with`` block."""
    if not isinstance(ability, Ability):
        raise AbilityConfigError(
            "Ability instance not found in provide_ability. Did you pass the `ability` argument?"
        )

    token = _current_ability.set(ability)
    try:
        yield ability
    finally:
        _current_ability.reset(token)


def use_ability() -> Ability:
    """Return the Ability bound by the innermost :func:`provide_ability`."""
    ability = _current_ability.get()
    if ability is None:
        raise AbilityConfigError("use_ability must be called within provide_ability")
    return ability


def can(action: Any, resource: Any, data: Any = None) -> bool:
    return use_ability().is_allowed(action, resource, data)


def cannot(action: Any, resource: Any, data: Any = None) -> bool:
    return use_ability().not_allowed(action, resource, data)


def get_reason(action: Any, resource: Any, data: Any = None) -> str | None:
    return use_ability().reason_for(action, resource, data)


def throw_if_not_allowed(action: Any, resource: Any, data: Any = None) -> None:
    use_ability().throw_if_denied(action, resource, data)
