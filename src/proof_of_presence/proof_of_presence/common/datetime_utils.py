from __future__ import annotations

from datetime import datetime, time, timedelta


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it easily.
    """
    return datetime.now()


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def days_ago(value: datetime, days: int) -> datetime:
    return value - timedelta(days=days)
