"""Shared fixtures, including an in-memory evaluator for compiled predicates."""

import re
from datetime import datetime
from typing import Any, Dict, Tuple

import pytest

from view_filters.models.field import get_field_catalog

_MISSING = object()

REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def _lookup(record: Dict[str, Any], path: str) -> Tuple[bool, Any]:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return False, None
        value = value[part]
    return True, value


def _equals(exists: bool, value: Any, expected: Any) -> bool:
    if not exists:
        return expected is None
    if value == expected and type(value) is type(expected) or (value is None and expected is None):
        return True
    if isinstance(value, (int, float)) and isinstance(expected, (int, float)) and not isinstance(value, bool):
        return value == expected
    if isinstance(value, list) and not isinstance(expected, list):
        return any(_equals(True, item, expected) for item in value)
    return False


def _compare(value: Any, expected: Any, op: str) -> bool:
    numeric = (int, float)
    if isinstance(value, bool) or isinstance(expected, bool):
        return False
    if not (
        isinstance(value, numeric) and isinstance(expected, numeric)
        or isinstance(value, datetime) and isinstance(expected, datetime)
        or isinstance(value, str) and isinstance(expected, str)
    ):
        return False
    return {
        "$gt": value > expected,
        "$gte": value >= expected,
        "$lt": value < expected,
        "$lte": value <= expected,
    }[op]


def _regex_match(value: Any, pattern: str, options: str) -> bool:
    flags = 0
    for option in options:
        flags |= REGEX_FLAGS.get(option, 0)
    if isinstance(value, list):
        return any(_regex_match(item, pattern, options) for item in value)
    return isinstance(value, str) and re.search(pattern, value, flags) is not None


def _field_matches(exists: bool, value: Any, condition: Dict[str, Any]) -> bool:
    for op, expected in condition.items():
        if op == "$options":
            continue
        if op == "$eq":
            ok = _equals(exists, value, expected)
        elif op == "$ne":
            ok = not _equals(exists, value, expected)
        elif op == "$exists":
            ok = exists == expected
        elif op in ("$gt", "$gte", "$lt", "$lte"):
            ok = exists and _compare(value, expected, op)
        elif op == "$in":
            ok = any(_equals(exists, value, item) for item in expected)
        elif op == "$nin":
            ok = not any(_equals(exists, value, item) for item in expected)
        elif op == "$regex":
            ok = exists and _regex_match(value, expected, condition.get("$options", ""))
        elif op == "$not":
            ok = not _field_matches(exists, value, expected)
        else:
            raise ValueError(f"Unsupported operator in predicate: {op}")
        if not ok:
            return False
    return True


def evaluate(predicate: Dict[str, Any], record: Dict[str, Any]) -> bool:
    """Evaluate the subset of MongoDB query syntax the compiler emits."""
    for key, condition in predicate.items():
        if key == "$and":
            ok = all(evaluate(sub, record) for sub in condition)
        elif key == "$or":
            ok = any(evaluate(sub, record) for sub in condition)
        elif key.startswith("$"):
            raise ValueError(f"Unsupported top-level operator: {key}")
        else:
            exists, value = _lookup(record, key)
            ok = _field_matches(exists, value, condition)
        if not ok:
            return False
    return True


@pytest.fixture
def matches():
    return evaluate


@pytest.fixture
def now():
    """Wednesday afternoon, naive wall-clock time."""
    return datetime(2024, 6, 12, 15, 0, 0)


@pytest.fixture
def contact_catalog():
    return get_field_catalog("contact")
