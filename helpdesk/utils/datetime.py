# helpdesk/utils/datetime.py
from __future__ import annotations

from datetime import UTC, date, datetime, time


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (DB columns are naive)."""
    return datetime.now(UTC).replace(tzinfo=None)


def start_of_day(d: date | None) -> datetime | None:
    if d is None:
        return None
    return datetime.combine(d, time.min)


def end_of_day(d: date | None) -> datetime | None:
    """Inclusive upper bound covering the whole calendar day."""
    if d is None:
        return None
    return datetime.combine(d, time.max)


def month_label(year: int, month: int) -> str:
    return f"{int(year):04d}-{int(month):02d}"


def trailing_months_start(now: datetime, months: int = 12) -> datetime:
    """First instant of the month `months - 1` months before `now`'s month."""
    index = now.year * 12 + (now.month - 1) - (months - 1)
    return datetime(index // 12, index % 12 + 1, 1)
