from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Start and end of a local calendar day, both inclusive."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def retention_cutoff(now: datetime, days: int) -> datetime:
    return now - timedelta(days=int(days))
