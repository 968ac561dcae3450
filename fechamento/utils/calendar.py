# fechamento/utils/calendar.py
from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta, timezone


def fixed_offset(hours: int) -> timezone:
    return timezone(timedelta(hours=hours))


def local_today(offset_hours: int, now: datetime | None = None) -> date:
    """Current date at a fixed UTC offset (no DST rules applied)."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(fixed_offset(offset_hours)).date()


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def zeroed_daily_values(year: int, month: int) -> list[dict]:
    return [{"day": d, "value": 0} for d in range(1, days_in_month(year, month) + 1)]


def utcnow_naive() -> datetime:
    """Current UTC time without tzinfo, the way timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
