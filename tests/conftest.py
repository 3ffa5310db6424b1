"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from ability_manager import ConditionMatcher, create_ability
from ability_manager._internal.clock import FixedClock

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


class RecordingLogger:
    """Stand-in logger that keeps every warning it receives."""

    def __init__(self):
        self.warnings = []

    def warning(self, event, **kw):
        self.warnings.append((event, kw))


@pytest.fixture
def ability():
    return create_ability()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def recorder():
    return RecordingLogger()


@pytest.fixture
def matcher(recorder, clock):
    return ConditionMatcher(logger=recorder, clock=clock)


@pytest.fixture
def blog_ability():
    """Editor-style ability: manage posts, no deletes, then a late global delete."""
    ability = create_ability()
    ability.allow("manage", "Post")
    ability.deny("delete", "Post")
    ability.allow("delete", "all")
    return ability
