from __future__ import annotations

from datetime import date, datetime

from reprotrack.application.errors import InvalidDate


def parse_calendar_date(value: object, field: str) -> date:
    """Coerce ``value`` into a calendar date or raise ``InvalidDate``.

    Accepts ``date`` objects and ISO strings. A trailing time component is
    discarded without timezone conversion, so ``2026-03-15T23:00:00-05:00``
    stays on the 15th.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) > 10 and text[10] in "T ":
                return datetime.fromisoformat(text).date()
            return date.fromisoformat(text)
        except ValueError as exc:
            raise InvalidDate(
                f"Invalid date format for {field}: {value!r} (expected YYYY-MM-DD)", field=field
            ) from exc
    raise InvalidDate(f"Invalid date for {field}: {value!r}", field=field)


def parse_optional_date(value: object, field: str) -> date | None:
    if value is None:
        return None
    return parse_calendar_date(value, field)
