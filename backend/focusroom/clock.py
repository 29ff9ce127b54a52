"""Timestamps and user-local calendar days.

Stored datetimes are timezone-aware UTC. Daily stats are bucketed by the
calendar day in the user's timezone.
"""
from datetime import date, datetime, timezone
from typing import Optional

import pytz

DEFAULT_TIMEZONE = "UTC"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_timezone(name: str):
    """Raises ``pytz.UnknownTimeZoneError`` for names outside the tz database."""
    return pytz.timezone(name)


def local_day(moment: Optional[datetime] = None, timezone_name: str = DEFAULT_TIMEZONE) -> date:
    """Calendar day of `moment` (default: now) in `timezone_name`.

    Naive datetimes are taken to be UTC.
    """
    if moment is None:
        moment = utcnow()
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(get_timezone(timezone_name)).date()
