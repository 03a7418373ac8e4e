"""Timezone-aware date/time helpers for the cabin reservation engine."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app

# Canonical storage format for reservation instants (sorts lexicographically)
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Asia/Manila')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """
    Get the current wall-clock time in the configured timezone, as a naive
    datetime comparable with stored reservation instants.
    """
    return datetime.now(get_timezone()).replace(tzinfo=None, microsecond=0)


def to_timestamp(value: datetime) -> str:
    """Format a datetime in the canonical storage format."""
    return value.strftime(TIMESTAMP_FORMAT)


def from_timestamp(value) -> datetime:
    """Parse a stored instant back into a datetime."""
    if isinstance(value, datetime):
        return value
    return datetime.strptime(value, TIMESTAMP_FORMAT)
