from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone, tzinfo

from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE_NAME = "UTC"
DEFAULT_TZ = timezone.utc


def local_today(tz: tzinfo | str | None = DEFAULT_TZ) -> date:
    """Return the calendar date "today" in the given zone."""
    if isinstance(tz, str):
        tz = DEFAULT_TZ if tz.upper() == DEFAULT_TIMEZONE_NAME else ZoneInfo(tz)
    return datetime.now(tz or DEFAULT_TZ).date()


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Signed whole days from ``start`` to ``end``."""
    return (end - start).days


def add_months(d: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's length."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
