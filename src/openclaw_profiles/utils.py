"""Utility functions for openclaw-profiles."""

from datetime import UTC
from datetime import datetime
from typing import Any


def get_path(document: dict[str, Any], path: tuple[str, ...], default: Any = None) -> Any:
    """Read a nested value by key path.

    Examples:
        >>> get_path({"a": {"b": 1}}, ("a", "b"))
        1

        >>> get_path({"a": 1}, ("a", "b"), "missing")
        'missing'
    """
    current: Any = document
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def set_path(document: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested value in place, creating intermediate objects.

    A non-object found on the way is replaced by an object, the same way
    assigning to a missing path behaves.

    Examples:
        >>> doc = {"a": {"keep": True}}
        >>> set_path(doc, ("a", "b", "c"), 1)
        >>> doc
        {'a': {'keep': True, 'b': {'c': 1}}}
    """
    current = document
    for key in path[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[path[-1]] = value


def delete_path(document: dict[str, Any], path: tuple[str, ...]) -> bool:
    """Delete a nested key in place.

    Returns:
        True if the key existed and was removed, False otherwise
    """
    parent = get_path(document, path[:-1]) if len(path) > 1 else document
    if not isinstance(parent, dict) or path[-1] not in parent:
        return False
    del parent[path[-1]]
    return True


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality of two parsed JSON values.

    Object key order is ignored, array order is significant. Numbers compare
    by value (``1 == 1.0``) but booleans never equal numbers, which plain
    ``==`` would allow.

    Examples:
        >>> json_equal({"a": [1, 2], "b": None}, {"b": None, "a": [1.0, 2]})
        True

        >>> json_equal({"a": [1, 2]}, {"a": [2, 1]})
        False

        >>> json_equal(True, 1)
        False
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, dict):
        if not isinstance(right, dict) or left.keys() != right.keys():
            return False
        return all(json_equal(value, right[key]) for key, value in left.items())

    if isinstance(left, list):
        if not isinstance(right, list) or len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right, strict=True))

    if isinstance(right, dict | list):
        return False

    return left == right


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix.

    Examples:
        >>> utc_timestamp(datetime(2026, 1, 30, 12, 0, 5, 250000, tzinfo=UTC))
        '2026-01-30T12:00:05.250Z'
    """
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
