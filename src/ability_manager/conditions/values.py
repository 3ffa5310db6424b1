"""Value helpers shared by the condition tree and the operator tables.

Data objects handed to the matcher are arbitrary: dicts, dataclasses,
pydantic models, plain objects.  Everything here works on "whatever came
in" and never raises.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from typing import Any, Final


class _Missing:
    """Sentinel for a field path that does not resolve on the data object."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

# ── type guards ──────────────────────────────────────────────


def is_number(value: Any) -> bool:
    """``True`` for ints and floats.  Booleans are *not* numbers here."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_record(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """Lists and tuples only.  Strings and bytes are scalars."""
    return isinstance(value, list | tuple)


def is_date_like(value: Any) -> bool:
    """``True`` for dates, datetimes and ISO-8601 strings."""
    return to_datetime(value) is not None


# ── path resolution ─────────────────────────────────────────


def _own_attributes(obj: Any) -> dict[str, Any] | None:
    try:
        return vars(obj)
    except TypeError:
        return None


def get_deep_value(data: Any, path: str) -> Any:
    """Resolve a dot-separated *path* on *data*.

    Each segment must be an own key of a mapping, an own attribute of an
    object, or an integer index into a list/tuple.  Returns ``MISSING`` as
    soon as a segment does not resolve.
    """
    if data is None or data is MISSING:
        return MISSING

    current = data
    for key in path.split("."):
        if isinstance(current, Mapping):
            if key not in current:
                return MISSING
            current = current[key]
        elif is_sequence(current):
            if not key.isdigit() or int(key) >= len(current):
                return MISSING
            current = current[int(key)]
        elif current is None or isinstance(current, str | bytes | int | float | date):
            return MISSING
        else:
            attrs = _own_attributes(current)
            if attrs is None or key not in attrs:
                return MISSING
            current = attrs[key]
    return current


# ── equality ─────────────────────────────────────────────────


def strict_equals(left: Any, right: Any) -> bool:
    """Scalar equality that does not let ``True`` stand in for ``1``."""
    if left is right:
        return True
    if left is MISSING or right is MISSING:
        return False
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    try:
        return bool(left == right)
    except Exception:
        return False


def compare_arrays(left: list[Any] | tuple[Any, ...], right: list[Any] | tuple[Any, ...]) -> bool:
    if len(left) != len(right):
        return False
    return all(deep_equals(a, b) for a, b in zip(left, right, strict=True))


def compare_objects(left: Mapping[str, Any], right: Mapping[str, Any]) -> bool:
    if len(left) != len(right):
        return False
    for key, value in left.items():
        if key not in right:
            return False
        if not deep_equals(value, right[key]):
            return False
    return True


def deep_equals(left: Any, right: Any) -> bool:
    """Structural equality for lists/tuples and mappings, strict otherwise."""
    if is_sequence(left) and is_sequence(right):
        return compare_arrays(left, right)
    if is_record(left) and is_record(right):
        return compare_objects(left, right)
    if is_sequence(left) or is_sequence(right) or is_record(left) or is_record(right):
        return False
    return strict_equals(left, right)


def contains_value(collection: Any, value: Any) -> bool:
    """Membership using :func:`deep_equals` rather than ``==``."""
    return any(deep_equals(item, value) for item in collection)


# ── dates ────────────────────────────────────────────────────


def to_datetime(value: Any) -> datetime | None:
    """Normalise a date-like value to an aware UTC ``datetime``.

    Plain dates become midnight, naive datetimes are taken to be UTC and
    strings are parsed as ISO-8601.  Anything else yields ``None``.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            result = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if result.tzinfo is None:
        return result.replace(tzinfo=UTC)
    return result


def is_date(value: Any) -> bool:
    """``True`` for real date/datetime instances (strings excluded)."""
    return isinstance(value, date)
