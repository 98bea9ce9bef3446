"""
Datetime utility functions.

Sessions store their schedule as separate ``YYYY-MM-DD`` date and ``HH:MM``
time strings in the application's wall-clock timezone. These helpers convert
between those strings and timezone-aware datetimes.
"""

import os
from datetime import datetime
from typing import Optional

import pytz

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Singapore")


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def get_app_timezone():
    """Return the pytz timezone sessions are scheduled in."""
    return pytz.timezone(APP_TIMEZONE)


def local_now() -> datetime:
    """Current time as an aware datetime in the application timezone."""
    return utcnow().astimezone(get_app_timezone())


def to_local(value: datetime) -> datetime:
    """
    Express a datetime in the application timezone.

    Naive datetimes are taken to already be application wall-clock time.
    """
    tz = get_app_timezone()
    if value.tzinfo is None:
        return tz.localize(value)
    return value.astimezone(tz)


def parse_session_datetime(date_str: Optional[str], time_str: Optional[str]) -> Optional[datetime]:
    """
    Combine a session date string and time string into an aware datetime.

    Args:
        date_str: Date in YYYY-MM-DD form
        time_str: Time in HH:MM form

    Returns:
        Aware datetime in the application timezone, or None if either part
        is missing or malformed
    """
    if not date_str or not time_str:
        return None
    try:
        parsed = datetime.strptime(f"{date_str.strip()} {time_str.strip()}", f"{DATE_FORMAT} {TIME_FORMAT}")
    except (ValueError, AttributeError):
        return None
    return get_app_timezone().localize(parsed)


def is_valid_date(value: str) -> bool:
    """Check a zero-padded YYYY-MM-DD date string."""
    if not isinstance(value, str) or len(value) != 10:
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
        return True
    except (ValueError, TypeError):
        return False


def is_valid_time(value: str) -> bool:
    """Check a zero-padded HH:MM time string."""
    if not isinstance(value, str) or len(value) != 5:
        return False
    try:
        datetime.strptime(value, TIME_FORMAT)
        return True
    except (ValueError, TypeError):
        return False
