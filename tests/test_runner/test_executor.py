"""Tests for the runner executor."""

import pytest
from structlog.testing import capture_logs

from ability_manager.conditions.matcher import ConditionMatcher
from ability_manager.runner.executor import Executor
from ability_manager.runner.schema import (
    QuerySchema,
    RuleSchema,
    RunnerInput,
    VocabularySchema,
)


@pytest.fixture
def blog_input():
    return RunnerInput(
        rules=[
            RuleSchema(action="manage", resource="Post"),
            RuleSchema(action="delete", resource="Post", inverted=True, reason="Posts are permanent"),
            RuleSchema(action="delete", resource="all"),
        ],
        queries=[
            QuerySchema(action=["create", "update", "delete"], resource="Post"),
            QuerySchema(action="create", resource="Comment"),
            QuerySchema(action="delete", resource="Comment"),
        ],
    )


class TestExecute:
    """Tests for Executor.execute()."""

    def test_one_decision_per_query(self, blog_input):
        """Test that decisions come back in query order."""
        output = Executor().execute(blog_input)

        assert output.success
        assert [d.allowed for d in output.decisions] == [True, False, True]

    def test_matched_rule_index(self, blog_input):
        """Test that each decision names the rule that decided it."""
        output = Executor().execute(blog_input)

        assert output.decisions[0].matched_rule == 2
        assert output.decisions[1].matched_rule is None
        assert output.decisions[2].matched_rule == 2

    def test_reason_is_reported(self):
        """Test that the deciding rule's reason is copied into the decision."""
        input_data = RunnerInput(
            rules=[
                RuleSchema(action="read", resource="Post"),
                RuleSchema(
                    action="read",
                    resource="Post",
                    inverted=True,
                    condition={"private": True},
                    reason="Private post",
                ),
            ],
            queries=[
                QuerySchema(action="read", resource="Post", data={"private": True}),
                QuerySchema(action="read", resource="Post", data={"private": False}),
            ],
        )

        output = Executor().execute(input_data)

        first, second = output.decisions
        assert (first.allowed, first.reason, first.matched_rule) == (False, "Private post", 1)
        assert (second.allowed, second.reason, second.matched_rule) == (True, None, 0)

    def test_no_queries(self):
        """Test that an input without queries succeeds with no decisions."""
        output = Executor().execute(RunnerInput())

        assert output.success
        assert output.decisions == []

    def test_vocabulary_error_becomes_output(self):
        """Test that a rejected rule is reported instead of raised."""
        input_data = RunnerInput(
            vocabulary=VocabularySchema(resources=["Post"]),
            rules=[RuleSchema(action="read", resource="Invoice")],
            queries=[QuerySchema(action="read", resource="Invoice")],
        )

        with capture_logs() as logs:
            output = Executor().execute(input_data)

        assert not output.success
        assert output.error_type == "AbilityFactoryError"
        assert "Unknown resource 'Invoice'" in output.error
        assert output.decisions == []
        assert logs[0]["event"] == "ability_build_failed"

    def test_unexpected_error_becomes_output(self, blog_input):
        """Test that any other failure is reported with its class name."""

        class BrokenMatcher(ConditionMatcher):
            def matches(self, condition, data=None):
                raise RuntimeError("matcher exploded")

        blog_input.rules[0].condition = {"x": 1}

        with capture_logs() as logs:
            output = Executor(BrokenMatcher()).execute(blog_input)

        assert not output.success
        assert output.error == "matcher exploded"
        assert output.error_type == "RuntimeError"
        assert logs[0]["event"] == "execution_failed"
        assert logs[0]["log_level"] == "error"
