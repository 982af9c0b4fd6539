"""Tests for utility functions."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from datetime import timezone

from openclaw_profiles.utils import delete_path
from openclaw_profiles.utils import get_path
from openclaw_profiles.utils import json_equal
from openclaw_profiles.utils import set_path
from openclaw_profiles.utils import utc_timestamp


class TestPathHelpers:
    """Test get_path, set_path and delete_path."""

    def test_get_existing_nested_value(self):
        """Test reading a nested value."""
        doc = {"agents": {"defaults": {"model": {"primary": "x"}}}}
        assert get_path(doc, ("agents", "defaults", "model", "primary")) == "x"

    def test_get_missing_returns_default(self):
        """Test missing keys return the default."""
        assert get_path({}, ("a", "b")) is None
        assert get_path({"a": 1}, ("a", "b"), "fallback") == "fallback"

    def test_get_explicit_null(self):
        """Test an explicit null is returned, not the default."""
        assert get_path({"a": None}, ("a",), "fallback") is None

    def test_set_creates_intermediate_objects(self):
        """Test set_path creates missing parents."""
        doc = {}
        set_path(doc, ("a", "b", "c"), 1)
        assert doc == {"a": {"b": {"c": 1}}}

    def test_set_replaces_non_object_parent(self):
        """Test set_path replaces a scalar that sits on the path."""
        doc = {"a": "scalar"}
        set_path(doc, ("a", "b"), 1)
        assert doc == {"a": {"b": 1}}

    def test_set_keeps_siblings_and_key_order(self):
        """Test set_path leaves siblings alone and keeps key positions."""
        doc = {"first": 1, "a": {"x": 1, "b": 2}, "last": 3}
        set_path(doc, ("a", "b"), 20)
        assert doc == {"first": 1, "a": {"x": 1, "b": 20}, "last": 3}
        assert list(doc) == ["first", "a", "last"]
        assert list(doc["a"]) == ["x", "b"]

    def test_delete_existing(self):
        """Test deleting a nested key."""
        doc = {"a": {"b": 1, "c": 2}}
        assert delete_path(doc, ("a", "b")) is True
        assert doc == {"a": {"c": 2}}

    def test_delete_top_level(self):
        """Test deleting a top-level key."""
        doc = {"models": {}, "skills": {}}
        assert delete_path(doc, ("models",)) is True
        assert doc == {"skills": {}}

    def test_delete_missing(self):
        """Test deleting a missing key is a no-op."""
        doc = {"a": 1}
        assert delete_path(doc, ("b",)) is False
        assert delete_path(doc, ("a", "b")) is False
        assert doc == {"a": 1}


class TestJsonEqual:
    """Test json_equal function."""

    def test_key_order_ignored(self):
        """Test object key order does not matter."""
        assert json_equal({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"d": 3, "c": 2}, "a": 1})

    def test_array_order_matters(self):
        """Test arrays are ordered data."""
        assert not json_equal({"a": [1, 2]}, {"a": [2, 1]})

    def test_numbers_compare_by_value(self):
        """Test 1 and 1.0 are the same JSON number."""
        assert json_equal({"n": 1}, {"n": 1.0})

    def test_bool_not_equal_to_number(self):
        """Test booleans never equal numbers."""
        assert not json_equal({"flag": True}, {"flag": 1})
        assert not json_equal([0], [False])

    def test_null_vs_missing(self):
        """Test an explicit null differs from a missing key."""
        assert not json_equal({"a": None}, {})

    def test_type_mismatch(self):
        """Test objects, arrays and scalars never compare equal."""
        assert not json_equal({}, [])
        assert not json_equal("1", 1)
        assert not json_equal([1], 1)

    def test_nested_difference_detected(self):
        """Test a deep difference is found."""
        left = {"skills": {"entries": {"a": {"apiKey": "k1"}}}}
        right = {"skills": {"entries": {"a": {"apiKey": "k2"}}}}
        assert not json_equal(left, right)


class TestUtcTimestamp:
    """Test utc_timestamp function."""

    def test_format(self):
        """Test millisecond precision and Z suffix."""
        stamp = utc_timestamp(datetime(2026, 1, 30, 12, 0, 5, 250000, tzinfo=UTC))
        assert stamp == "2026-01-30T12:00:05.250Z"

    def test_converts_to_utc(self):
        """Test aware datetimes in other zones are converted."""
        plus_two = timezone(timedelta(hours=2))
        stamp = utc_timestamp(datetime(2026, 1, 30, 14, 0, 0, tzinfo=plus_two))
        assert stamp == "2026-01-30T12:00:00.000Z"

    def test_default_is_now(self):
        """Test the default stamp parses as the current UTC time."""
        stamp = utc_timestamp()
        parsed = datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%S.%fZ").replace(tzinfo=UTC)
        assert abs(datetime.now(UTC) - parsed) < timedelta(minutes=1)
