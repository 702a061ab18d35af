"""
Date and time utilities for the expense tracker.

Provides timezone-aware datetime helpers, tolerant ISO parsing and
duration strings ("7d", "12h") used by token expiry settings.
"""
import re
from datetime import datetime, timezone, date, timedelta

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
    }


def utcnow() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        datetime: Current datetime in UTC with tzinfo set to timezone.utc

    Note:
        Always use this function instead of datetime.now() to ensure
        timezone-aware timestamps across the application.
    """
    return datetime.now(timezone.utc)


def parse_ISO_date(v) -> date:
    """Coerce a date, datetime or ISO date string to a calendar date."""
    # datetime is a subclass of date: check it first
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        try:
            return date.fromisoformat(v)
        except ValueError as e:
            raise ValueError(f"Input must be an ISO date string (YYYY-MM-DD). Error: {e}")
    raise TypeError(f"Input must be a str, date or datetime, got {type(v)}")


def parse_ISO_datetime(v: str) -> datetime:
    """
    Parse an ISO date or datetime string into an aware UTC datetime.

    Plain dates map to midnight UTC; naive datetimes are assumed to be UTC.
    A trailing "Z" is accepted.

    Raises:
        ValueError: If the string is neither an ISO date nor an ISO datetime
    """
    text = v.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def add_years(moment: datetime, years: int) -> datetime:
    """
    Shift a datetime by whole calendar years.

    February 29 clamps to February 28 when the target year is not a leap year.
    """
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def parse_duration(value) -> timedelta:
    """
    Parse a duration such as "7d", "12h", "30m", "45s", "2w" or a bare number of seconds.

    Examples:
        >>> parse_duration("7d")
        datetime.timedelta(days=7)
        >>> parse_duration(3600)
        datetime.timedelta(seconds=3600)
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. 3600, 30m, 12h, 7d)")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})
