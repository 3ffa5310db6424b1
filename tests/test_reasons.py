"""Tests for rule reasons and ForbiddenError raising."""

import pytest

from ability_manager import ForbiddenError, create_ability


def test_reasons_on_deny_rules(ability):
    ability.allow("read", "Post")
    ability.allow("update", "Post", {"userId": 1})
    ability.deny("publish", "Post", {"status": "draft"}).reason("Cannot publish draft posts")
    ability.deny("delete", "Post").reason("Deletion not allowed")

    assert ability.reason_for("publish", "Post", {"status": "draft"}) == "Cannot publish draft posts"
    assert ability.reason_for("delete", "Post") == "Deletion not allowed"


def test_rules_without_reasons(ability):
    ability.allow("read", "Post")
    ability.deny("delete", "Post")

    assert ability.reason_for("read", "Post") is None
    assert ability.reason_for("delete", "Post") is None
    assert ability.reason_for("update", "Post") is None


def test_reason_comes_from_the_last_matching_rule(ability):
    ability.allow("read", "Post")
    ability.deny("read", "Post", {"private": True}).reason("First reason")
    ability.deny("read", "Post", {"archived": True}).reason("Second reason")

    assert ability.reason_for("read", "Post", {"private": True, "archived": False}) == "First reason"
    assert ability.reason_for("read", "Post", {"private": False, "archived": True}) == "Second reason"
    assert ability.reason_for("read", "Post", {"private": True, "archived": True}) == "Second reason"


def test_reason_only_when_condition_matches(ability):
    ability.allow("update", "Post")
    ability.deny("update", "Post", {"locked": True}).reason("Post is locked")

    assert ability.reason_for("update", "Post", {"locked": False}) is None
    assert ability.reason_for("update", "Post", {"locked": True}) == "Post is locked"
    assert ability.reason_for("update", "Post", {"userId": 2}) is None


def test_reason_on_allow_rule_is_reported(ability):
    ability.allow("read", "Post").reason("Public content")
    assert ability.reason_for("read", "Post") == "Public content"


def test_reason_applies_to_every_expanded_rule(ability):
    ability.deny(["update", "delete"], ["Post", "Comment"]).reason("Read only")
    assert all(rule.reason == "Read only" for rule in ability.rules)


def test_reason_only_touches_its_own_declaration(ability):
    ability.deny("read", "Post")
    ability.deny("update", "Post").reason("Locked")
    assert ability.rules[0].reason is None
    assert ability.rules[1].reason == "Locked"


def test_chained_definitions():
    ability = (
        create_ability()
        .allow("read", "Post")
        .allow("update", "Post", {"authorId": 123})
        .deny("delete", "Post")
        .reason("Deletion forbidden")
        .allow("create", "Comment")
        .deny("update", "Comment", {"locked": True})
        .reason("Comment is locked")
    )

    assert ability.reason_for("delete", "Post") == "Deletion forbidden"
    assert ability.reason_for("update", "Comment", {"locked": True}) == "Comment is locked"
    assert ability.reason_for("read", "Post") is None
    assert ability.reason_for("create", "Comment") is None


def test_chained_reasons_per_action():
    ability = (
        create_ability()
        .cannot("read", "Post")
        .reason("Read access denied")
        .cannot("update", "Post")
        .reason("Update access denied")
        .cannot("delete", "Post")
        .reason("Delete access denied")
    )

    assert ability.reason_for("read", "Post") == "Read access denied"
    assert ability.reason_for("update", "Post") == "Update access denied"
    assert ability.reason_for("delete", "Post") == "Delete access denied"


def test_manage_grant_with_specific_deny(ability):
    ability.allow("manage", "Post")
    ability.deny("delete", "Post").reason("Deletion disabled")

    assert ability.is_allowed("create", "Post")
    assert not ability.is_allowed("delete", "Post")
    assert ability.reason_for("create", "Post") is None
    assert ability.reason_for("delete", "Post") == "Deletion disabled"


# ── throw_if_denied ──────────────────────────────────────────


def test_throw_if_denied_uses_rule_reason(ability):
    ability.allow("read", "Post")
    ability.deny("delete", "Post").reason("Deletion not allowed")

    ability.throw_if_denied("read", "Post")
    with pytest.raises(ForbiddenError, match="Deletion not allowed"):
        ability.throw_if_denied("delete", "Post")


def test_throw_if_denied_default_message(ability):
    ability.deny("write", "Post")
    with pytest.raises(ForbiddenError, match="Access denied"):
        ability.throw_if_denied("write", "Post")


def test_throw_if_denied_without_rules(ability):
    with pytest.raises(ForbiddenError) as exc_info:
        ability.throw_if_denied("write", "Post")
    assert exc_info.value.message == "Access denied"
    assert exc_info.value.decision.by_default


def test_throw_if_denied_with_condition(ability):
    ability.allow("update", "Post")
    ability.deny("update", "Post", {"locked": True}).reason("Post is locked for editing")

    ability.throw_if_denied("update", "Post", {"locked": False})
    with pytest.raises(ForbiddenError, match="Post is locked for editing") as exc_info:
        ability.throw_if_denied("update", "Post", {"locked": True})
    assert exc_info.value.decision.rule is ability.rules[1]


def test_forbidden_error_shape(ability):
    ability.deny("delete", "Post").reason("Custom error message")

    with pytest.raises(ForbiddenError) as exc_info:
        ability.throw_if_denied("delete", "Post")

    error = exc_info.value
    assert isinstance(error, Exception)
    assert error.name == "ForbiddenError"
    assert error.message == "Custom error message"
    assert str(error) == "Custom error message"
