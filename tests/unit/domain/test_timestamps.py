"""Tests for timestamp and id helpers."""

import re
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.value_objects.timestamps import format_timestamp, new_id, parse_timestamp, utc_now


def test_utc_now_is_millisecond_precision():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.microsecond % 1000 == 0


def test_format_timestamp_uses_z_suffix():
    ts = datetime(2025, 1, 7, 10, 0, 0, 5000, tzinfo=timezone.utc)
    assert format_timestamp(ts) == "2025-01-07T10:00:00.005Z"


def test_format_converts_to_utc():
    ts = datetime(2025, 1, 7, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(ts) == "2025-01-07T10:00:00.000Z"


def test_parse_round_trips_format():
    ts = utc_now()
    assert parse_timestamp(format_timestamp(ts)) == ts


def test_parse_accepts_offsets():
    assert parse_timestamp("2025-01-07T12:00:00+02:00") == datetime(2025, 1, 7, 10, 0, tzinfo=timezone.utc)


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp("yesterday")
    with pytest.raises(ValueError):
        parse_timestamp(12345)


def test_new_id_shape():
    assert re.fullmatch(r"v_\d{13}_[0-9a-f]{9}", new_id("v"))
    assert new_id("assign") != new_id("assign")
