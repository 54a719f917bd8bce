"""Tests for SnapshotDiff."""

from datetime import date, datetime, timezone

import pytest

from app.domain.policies.snapshot_diff import calculate_diff, canonical, to_json_native
from app.domain.value_objects.enums import DiffType
from app.domain.value_objects.version_diff import VersionDiff


def test_modified_and_added_fields():
    diffs = calculate_diff({"a": 1, "b": 2}, {"a": 1, "b": 3, "c": 4})
    assert set(diffs) == {
        VersionDiff("b", 2, 3, DiffType.MODIFIED),
        VersionDiff("c", None, 4, DiffType.ADDED),
    }


def test_deleted_field():
    diffs = calculate_diff({"a": 1, "gone": "x"}, {"a": 1})
    assert diffs == [VersionDiff("gone", "x", None, DiffType.DELETED)]


def test_identical_snapshots_produce_no_diff():
    snap = {"a": 1, "nested": {"x": [1, 2, {"y": True}]}}
    assert calculate_diff(snap, dict(snap)) == []


def test_deep_equality_ignores_key_order():
    old = {"address": {"city": "Austin", "zip": "78701"}}
    new = {"address": {"zip": "78701", "city": "Austin"}}
    assert calculate_diff(old, new) == []


def test_nested_change_is_reported_on_top_level_field():
    old = {"items": [{"sku": "A", "qty": 1}]}
    new = {"items": [{"sku": "A", "qty": 2}]}
    diffs = calculate_diff(old, new)
    assert len(diffs) == 1
    assert diffs[0].field == "items"
    assert diffs[0].type == DiffType.MODIFIED


def test_none_value_counts_as_present():
    """A key set to None is not the same as a missing key."""
    diffs = calculate_diff({"notes": None}, {"notes": "called carrier"})
    assert diffs == [VersionDiff("notes", None, "called carrier", DiffType.MODIFIED)]

    diffs = calculate_diff({}, {"notes": None})
    assert diffs == [VersionDiff("notes", None, None, DiffType.ADDED)]


def test_empty_snapshots():
    assert calculate_diff({}, {}) == []


def test_canonical_is_order_independent():
    assert canonical({"b": 1, "a": 2}) == canonical({"a": 2, "b": 1})


def test_canonical_tolerates_mixed_key_types():
    assert canonical({1: "a", "b": 2}) == canonical({"b": 2, "1": "a"})


def test_diff_to_change_drops_type():
    change = VersionDiff("b", 2, 3, DiffType.MODIFIED).to_change()
    assert change.to_dict() == {"field": "b", "oldValue": 2, "newValue": 3}


# ─── to_json_native ──────────────────────────────────────────────────


def test_json_native_dates_become_iso_strings():
    value = {"at": datetime(2025, 3, 4, 5, 6, tzinfo=timezone.utc), "on": date(2025, 3, 4)}
    assert to_json_native(value) == {"at": "2025-03-04T05:06:00+00:00", "on": "2025-03-04"}


def test_json_native_copies_plain_values():
    value = {"items": [1, {"k": (2, 3)}]}
    native = to_json_native(value)
    assert native == {"items": [1, {"k": [2, 3]}]}
    native["items"].append(9)
    assert value["items"] == [1, {"k": (2, 3)}]


def test_json_native_rejects_tuple_keys():
    with pytest.raises(ValueError):
        to_json_native({(1, 2): "x"})
