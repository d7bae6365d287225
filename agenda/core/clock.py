# agenda/core/clock.py
import calendar
from datetime import date, datetime, timezone
from typing import Tuple


def utcnow() -> datetime:
    # tz-aware UTC, stored as naive UTC (SQLite-friendly)
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utcnow().date()


def month_window(day: date) -> Tuple[date, date]:
    """First and last calendar day of the month containing ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)
