# wellness/achievements/clock.py
from datetime import datetime, timedelta
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Server-local wall clock. Naive datetimes, same as the stored rows."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """A clock that only moves when told to (tests, backfills)."""

    def __init__(self, current: Optional[datetime] = None):
        self.current = current or datetime.now()

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(moment: datetime) -> datetime:
    """Most recent Sunday 00:00 (weeks start on Sunday)."""
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (moment.weekday() + 1) % 7
    return start_of_day(moment) - timedelta(days=days_since_sunday)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)
