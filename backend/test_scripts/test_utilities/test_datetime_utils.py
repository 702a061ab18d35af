"""
Test datetime utilities.
All test is independent of the others, so help use pytest features.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from backend.app.utils.datetime_utils import (
    add_years,
    parse_ISO_date,
    parse_ISO_datetime,
    parse_duration,
    utcnow,
    )


# ============================================================================
# TESTS: utcnow
# ============================================================================

def test_utcnow_has_timezone_info():
    """Test that utcnow() returns timezone-aware datetime."""
    result = utcnow()
    assert isinstance(result, datetime)
    assert result.tzinfo == timezone.utc


def test_utcnow_returns_current_time():
    """Test that utcnow() returns approximately current time."""
    before = datetime.now(timezone.utc)
    result = utcnow()
    after = datetime.now(timezone.utc)
    assert before <= result <= after


# ============================================================================
# TESTS: ISO parsing
# ============================================================================

def test_parse_iso_date_accepts_datetime_and_string():
    assert parse_ISO_date("2024-03-15") == date(2024, 3, 15)
    assert parse_ISO_date(datetime(2024, 3, 15, 10, 30)) == date(2024, 3, 15)
    assert parse_ISO_date(date(2024, 3, 15)) == date(2024, 3, 15)


def test_parse_iso_date_rejects_garbage():
    with pytest.raises(ValueError):
        parse_ISO_date("15/03/2024")
    with pytest.raises(TypeError):
        parse_ISO_date(20240315)


def test_parse_iso_datetime_plain_date_is_midnight_utc():
    assert parse_ISO_datetime("2024-03-15") == datetime(2024, 3, 15, tzinfo=timezone.utc)


def test_parse_iso_datetime_zulu_and_offsets():
    assert parse_ISO_datetime("2024-03-15T10:00:00Z") == datetime(2024, 3, 15, 10, tzinfo=timezone.utc)
    assert parse_ISO_datetime("2024-03-15T12:00:00+02:00") == datetime(2024, 3, 15, 10, tzinfo=timezone.utc)


def test_parse_iso_datetime_naive_is_utc():
    assert parse_ISO_datetime("2024-03-15T08:15:00").tzinfo == timezone.utc


@pytest.mark.parametrize("text", ["not-a-date", "", "2024-13-01", "2024-02-30"])
def test_parse_iso_datetime_invalid(text):
    with pytest.raises(ValueError):
        parse_ISO_datetime(text)


# ============================================================================
# TESTS: add_years / parse_duration
# ============================================================================

def test_add_years_regular_day():
    moment = datetime(2024, 6, 1, 12, tzinfo=timezone.utc)
    assert add_years(moment, 1) == datetime(2025, 6, 1, 12, tzinfo=timezone.utc)


def test_add_years_leap_day_clamps():
    assert add_years(datetime(2024, 2, 29), 1) == datetime(2025, 2, 28)


@pytest.mark.parametrize("value, expected", [
    ("7d", timedelta(days=7)),
    ("12h", timedelta(hours=12)),
    ("30m", timedelta(minutes=30)),
    ("45s", timedelta(seconds=45)),
    ("2w", timedelta(weeks=2)),
    ("3600", timedelta(seconds=3600)),
    (3600, timedelta(seconds=3600)),
    ])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "7y", "abc", "-5d"])
def test_parse_duration_invalid(value):
    with pytest.raises(ValueError):
        parse_duration(value)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
