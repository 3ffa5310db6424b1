"""Tests for the $-keyed field operators."""

import re
from datetime import date, datetime

import pytest
from structlog.testing import capture_logs

from ability_manager import ConditionMatcher, matches_condition

# ── equality ─────────────────────────────────────────────────


def test_eq_and_ne():
    assert matches_condition({"status": {"$eq": "open"}}, {"status": "open"})
    assert not matches_condition({"status": {"$eq": "open"}}, {"status": "closed"})
    assert matches_condition({"status": {"$ne": "open"}}, {"status": "closed"})
    assert not matches_condition({"status": {"$ne": "open"}}, {"status": "open"})


def test_eq_null():
    assert matches_condition({"value": {"$eq": None}}, {"value": None})
    assert not matches_condition({"value": {"$eq": "some value"}}, {"value": None})


def test_ne_null():
    assert matches_condition({"value": {"$ne": "some value"}}, {"value": None})
    assert not matches_condition({"value": {"$ne": None}}, {"value": None})


def test_ne_matches_missing_field():
    assert matches_condition({"value": {"$ne": None}}, {})


def test_eq_does_not_confuse_bool_and_int():
    assert not matches_condition({"flag": {"$eq": 1}}, {"flag": True})
    assert matches_condition({"count": {"$eq": 1}}, {"count": 1.0})


# ── membership ───────────────────────────────────────────────


def test_in_scalar():
    condition = {"role": {"$in": ["admin", "editor"]}}
    assert matches_condition(condition, {"role": "editor"})
    assert not matches_condition(condition, {"role": "viewer"})


def test_in_list_value_intersects():
    condition = {"tags": {"$in": ["urgent", "vip"]}}
    assert matches_condition(condition, {"tags": ["low", "vip"]})
    assert not matches_condition(condition, {"tags": ["low"]})


def test_nin():
    condition = {"role": {"$nin": ["banned", "guest"]}}
    assert matches_condition(condition, {"role": "member"})
    assert not matches_condition(condition, {"role": "guest"})
    assert not matches_condition({"tags": {"$nin": ["x"]}}, {"tags": ["a", "x"]})
    assert matches_condition({"tags": {"$nin": ["x"]}}, {"tags": ["a", "b"]})


@pytest.mark.parametrize("operator", ["$in", "$nin"])
def test_membership_requires_list_operand(operator, matcher, recorder):
    assert not matcher.matches({"role": {operator: "admin"}}, {"role": "admin"})
    assert recorder.warnings == [
        ("invalid_operand", {"operator": operator, "expected": "array"}),
    ]


# ── numeric comparison ───────────────────────────────────────


def test_comparisons():
    assert matches_condition({"views": {"$gt": 10}}, {"views": 11})
    assert not matches_condition({"views": {"$gt": 10}}, {"views": 10})
    assert matches_condition({"views": {"$gte": 10}}, {"views": 10})
    assert matches_condition({"views": {"$lt": 10}}, {"views": 9.5})
    assert not matches_condition({"views": {"$lt": 10}}, {"views": 10})
    assert matches_condition({"views": {"$lte": 10}}, {"views": 10})


def test_comparisons_reject_non_numbers():
    assert not matches_condition({"views": {"$gt": 10}}, {"views": "11"})
    assert not matches_condition({"views": {"$gt": "10"}}, {"views": 11})
    assert not matches_condition({"views": {"$gte": 0}}, {"views": True})
    assert not matches_condition({"views": {"$lt": 10}}, {})


def test_implicit_and_between_operators():
    condition = {"age": {"$gte": 18, "$lt": 65}}
    assert matches_condition(condition, {"age": 30})
    assert not matches_condition(condition, {"age": 17})
    assert not matches_condition(condition, {"age": 65})


# ── $between ─────────────────────────────────────────────────


def test_between_numbers_inclusive():
    condition = {"score": {"$between": [1, 5]}}
    assert matches_condition(condition, {"score": 1})
    assert matches_condition(condition, {"score": 5})
    assert not matches_condition(condition, {"score": 6})


def test_between_dates():
    condition = {"created": {"$between": [datetime(2022, 12, 31), datetime(2023, 1, 2)]}}
    assert matches_condition(condition, {"created": datetime(2023, 1, 1)})
    assert not matches_condition(condition, {"created": datetime(2023, 2, 1)})


def test_between_mixed_date_kinds_does_not_raise():
    condition = {"created": {"$between": [date(2023, 1, 1), datetime(2023, 1, 31, 23, 59)]}}
    assert matches_condition(condition, {"created": date(2023, 1, 15)})


def test_between_mismatched_types():
    assert not matches_condition({"x": {"$between": [1, datetime(2023, 1, 1)]}}, {"x": 2})
    assert not matches_condition({"x": {"$between": [1, 5]}}, {"x": datetime(2023, 1, 1)})
    assert not matches_condition({"x": {"$between": [1, 2, 3]}}, {"x": 2})
    assert not matches_condition({"x": {"$between": 3}}, {"x": 3})


# ── strings ──────────────────────────────────────────────────


def test_regex():
    condition = {"email": {"$regex": re.compile(r"@example\.com$")}}
    assert matches_condition(condition, {"email": "ana@example.com"})
    assert not matches_condition(condition, {"email": "ana@example.org"})
    assert not matches_condition(condition, {"email": 42})


def test_regex_string_pattern():
    assert matches_condition({"code": {"$regex": r"^A\d+"}}, {"code": "A123"})


def test_regex_invalid_pattern_fails_closed(matcher, recorder):
    assert not matcher.matches({"code": {"$regex": "("}}, {"code": "("})
    assert recorder.warnings[0][0] == "invalid_pattern"


def test_string_operators():
    assert matches_condition({"title": {"$contains": "ell"}}, {"title": "hello"})
    assert matches_condition({"title": {"$startsWith": "he"}}, {"title": "hello"})
    assert matches_condition({"title": {"$endsWith": "lo"}}, {"title": "hello"})
    assert not matches_condition({"title": {"$startsWith": "lo"}}, {"title": "hello"})
    assert not matches_condition({"title": {"$contains": 1}}, {"title": "a1"})
    assert not matches_condition({"title": {"$contains": "1"}}, {"title": 1})


# ── unknown operators and plain keys ─────────────────────────


def test_unknown_operator_fails_closed():
    with capture_logs() as logs:
        assert not matches_condition({"views": {"$unknownOperator": 100}}, {"views": 150})

    assert len(logs) == 1
    assert logs[0]["event"] == "unknown_operator"
    assert logs[0]["log_level"] == "warning"
    assert logs[0]["operator"] == "$unknownOperator"
    assert logs[0]["field"] == "views"


def test_unknown_operator_fails_whole_field(matcher):
    assert not matcher.matches({"views": {"$gt": 1, "$bogus": 1}}, {"views": 150})


def test_plain_key_among_operators_checks_nested_field():
    condition = {"author": {"$ne": None, "id": 7}}
    assert matches_condition(condition, {"author": {"id": 7}})
    assert not matches_condition(condition, {"author": {"id": 8}})
    assert not matches_condition(condition, {"author": "someone"})


def test_operator_exceptions_are_absorbed(recorder):
    class Exploding:
        def __eq__(self, other):
            raise RuntimeError("boom")

        __hash__ = object.__hash__

    matcher = ConditionMatcher(logger=recorder)
    assert not matcher.matches({"x": {"$in": [Exploding()]}}, {"x": 1})
