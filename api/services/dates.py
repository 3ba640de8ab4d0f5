"""
Date Normalizer — every date the engine compares is a calendar day
in the configured TIMEZONE.

Accepted inputs:
  - date            → returned as-is
  - aware datetime  → converted to TIMEZONE, then truncated
  - naive datetime  → taken as already in TIMEZONE, then truncated
  - ISO-8601 string → parsed as date or datetime, then as above
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from config import settings
from services.errors import InvalidDateError


def _tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def normalize_date(value) -> date:
    """Truncate a date-like value to its calendar day. Raises InvalidDateError."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(_tz())
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDateError()
        # fromisoformat() on Python < 3.11 rejects a trailing "Z"
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return normalize_date(datetime.fromisoformat(text))
        except ValueError:
            raise InvalidDateError() from None

    raise InvalidDateError()


def today(now: datetime | None = None) -> date:
    """Current calendar day in TIMEZONE."""
    return normalize_date(now or datetime.now(_tz()))
