"""Timezone-aware clock used for worklog dates and schedule derivation."""

from datetime import date, datetime

import pytz

from config.settings import settings


def now() -> datetime:
    """Current time in the configured business timezone."""
    return datetime.now(pytz.timezone(settings.timezone))


def today() -> date:
    """Current calendar date in the configured business timezone."""
    return now().date()


def wall_clock(value: datetime) -> datetime:
    """Naive wall-clock time in the business timezone, for ordering timestamps.

    SQLite returns naive datetimes while fresh values are aware; comparing
    both as business-timezone wall-clock keeps ``max()`` well-defined.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.timezone(settings.timezone)).replace(tzinfo=None)
