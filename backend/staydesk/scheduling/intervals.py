"""Half-open time intervals.

An ``Interval`` is ``[start, end)``: a stay checking out on day N and another
checking in on day N touch but do not overlap. Date endpoints are normalised
to midnight datetimes so day-granularity stays and minute-granularity viewing
slots are compared with one representation.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from staydesk.scheduling.errors import InvalidInterval

ONE_DAY = timedelta(days=1)


def as_datetime(value: date | datetime) -> datetime:
    """Promote a ``date`` to midnight; pass datetimes through unchanged."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def is_midnight(value: datetime) -> bool:
    return value.time() == time.min


@dataclass(frozen=True, init=False)
class Interval:
    """A non-empty half-open interval ``[start, end)``."""

    start: datetime
    end: datetime

    def __init__(self, start: date | datetime, end: date | datetime) -> None:
        start_dt = as_datetime(start)
        end_dt = as_datetime(end)
        if start_dt >= end_dt:
            raise InvalidInterval(f"Interval start {start_dt.isoformat()} must be before end {end_dt.isoformat()}")
        object.__setattr__(self, "start", start_dt)
        object.__setattr__(self, "end", end_dt)

    @classmethod
    def from_dates(cls, check_in: date, check_out: date) -> Interval:
        """Build a stay interval; ``check_out`` is exclusive."""
        return cls(check_in, check_out)

    @classmethod
    def for_day(cls, day: date) -> Interval:
        return cls(day, day + ONE_DAY)

    def overlaps(self, other: Interval) -> bool:
        return self.start < other.end and other.start < self.end

    def clip(self, other: Interval) -> Interval | None:
        """Return the intersection with ``other``, or None if they don't overlap."""
        if not self.overlaps(other):
            return None
        return Interval(max(self.start, other.start), min(self.end, other.end))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def nights(self) -> int:
        """Whole days covered (the night count for a stay)."""
        return self.duration.days

    @property
    def is_day_aligned(self) -> bool:
        return is_midnight(self.start) and is_midnight(self.end)

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def days(self) -> Iterator[date]:
        """Yield every calendar date that the interval touches."""
        day = self.start_date
        while as_datetime(day) < self.end:
            yield day
            day += ONE_DAY

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"
