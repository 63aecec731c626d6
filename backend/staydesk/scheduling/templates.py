"""Weekly working-hours templates for minute-granularity resources.

A template maps each weekday to zero or more working windows, e.g. Monday
09:00-17:00, plus the length of one bookable slot. It is stored on the agent's
resource row as JSON::

    {
        "slot_minutes": 60,
        "windows": {"monday": [["09:00", "12:00"], ["13:00", "17:00"]]}
    }
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from staydesk.scheduling.errors import InvalidInterval

WEEKDAY_NAMES: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_SLOT_MINUTES = 60


def _weekday_index(key: str | int) -> int:
    if isinstance(key, int) or key.isdigit():
        return int(key)
    try:
        return WEEKDAY_NAMES.index(key.lower())
    except ValueError:
        raise InvalidInterval(f"Unknown weekday {key!r}") from None


def _parse_time(value: str | time) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


@dataclass(frozen=True)
class WorkingWindow:
    """One contiguous stretch of working hours within a day."""

    start: time
    end: time

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidInterval(f"Working window start {self.start} must be before end {self.end}")

    def partition(self, day: date, slot_length: timedelta) -> Iterator[tuple[datetime, datetime]]:
        """Yield consecutive ``(start, end)`` slots that fit entirely in the window."""
        cursor = datetime.combine(day, self.start)
        window_end = datetime.combine(day, self.end)
        while cursor + slot_length <= window_end:
            yield cursor, cursor + slot_length
            cursor += slot_length


@dataclass(frozen=True)
class WeeklyTemplate:
    """Working windows per weekday (0 = Monday) and a fixed slot length."""

    windows: Mapping[int, tuple[WorkingWindow, ...]] = field(default_factory=dict)
    slot_minutes: int = DEFAULT_SLOT_MINUTES

    def __post_init__(self) -> None:
        if self.slot_minutes <= 0:
            raise InvalidInterval("slot_minutes must be positive")
        for weekday in self.windows:
            if weekday not in range(7):
                raise InvalidInterval(f"Unknown weekday index {weekday}")

    @property
    def slot_length(self) -> timedelta:
        return timedelta(minutes=self.slot_minutes)

    def windows_for(self, day: date) -> tuple[WorkingWindow, ...]:
        return tuple(self.windows.get(day.weekday(), ()))

    def slot_bounds(self, day: date) -> Iterator[tuple[datetime, datetime]]:
        """Yield every slot boundary pair the template produces on ``day``."""
        for window in self.windows_for(day):
            yield from window.partition(day, self.slot_length)

    def generates(self, start: datetime, end: datetime) -> bool:
        """True if ``[start, end)`` is exactly one of the template's slots."""
        return (start, end) in set(self.slot_bounds(start.date()))

    @classmethod
    def from_dict(cls, data: Mapping, slot_minutes: int | None = None) -> WeeklyTemplate:
        """Build a template from its JSON form (weekday names or 0-6 keys)."""
        raw_windows = data.get("windows", {})
        windows: dict[int, tuple[WorkingWindow, ...]] = {}
        for key, pairs in raw_windows.items():
            weekday = _weekday_index(key)
            windows[weekday] = tuple(
                sorted(
                    (WorkingWindow(_parse_time(start), _parse_time(end)) for start, end in pairs),
                    key=lambda w: w.start,
                )
            )
        minutes = slot_minutes if slot_minutes is not None else data.get("slot_minutes", DEFAULT_SLOT_MINUTES)
        return cls(windows=windows, slot_minutes=int(minutes))

    def to_dict(self) -> dict:
        return {
            "slot_minutes": self.slot_minutes,
            "windows": {
                WEEKDAY_NAMES[weekday]: [[w.start.strftime("%H:%M"), w.end.strftime("%H:%M")] for w in windows]
                for weekday, windows in sorted(self.windows.items())
            },
        }
