"""Month calendar projection.

A month always renders as six full weeks (42 cells) starting on the Sunday on
or before the 1st, so the grid shape never depends on month length or on which
weekday the month starts.
"""

import calendar
import uuid
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta

from staydesk.scheduling.enums import DayStatus
from staydesk.scheduling.errors import InvalidPeriod
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.records import (
    BlockedPeriod,
    CalendarDay,
    Reservation,
    ReservationSummary,
)
from staydesk.scheduling.store import ReservationStore, ResourceRegistry

GRID_DAYS = 42
MIN_YEAR = date.min.year
MAX_YEAR = date.max.year


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    if not 1 <= month <= 12:
        raise InvalidPeriod(f"Month must be between 1 and 12, got {month}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidPeriod(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    try:
        return first, first + timedelta(days=days_in_month)
    except OverflowError:
        raise InvalidPeriod(f"{year}-{month:02d} is outside the supported calendar range") from None


def grid_start(year: int, month: int) -> date:
    """The Sunday on or before the 1st of the month."""
    first, _ = month_bounds(year, month)
    # date.weekday(): Monday=0 .. Sunday=6
    try:
        return first - timedelta(days=(first.weekday() + 1) % 7)
    except OverflowError:
        raise InvalidPeriod(f"{year}-{month:02d} is outside the supported calendar range") from None


def grid_window(year: int, month: int) -> Interval:
    start = grid_start(year, month)
    try:
        return Interval(start, start + timedelta(days=GRID_DAYS))
    except OverflowError:
        raise InvalidPeriod(f"{year}-{month:02d} is outside the supported calendar range") from None


def project_month(
    year: int,
    month: int,
    reservations: Iterable[Reservation],
    blocks: Iterable[BlockedPeriod],
    today: date,
) -> list[CalendarDay]:
    """Merge holds into a 42-cell grid. Pure; terminal reservations are ignored."""
    active = sorted((r for r in reservations if r.is_active), key=lambda r: r.interval.start)
    blocks = list(blocks)
    start = grid_start(year, month)

    days: list[CalendarDay] = []
    for offset in range(GRID_DAYS):
        day = start + timedelta(days=offset)
        cell = Interval.for_day(day)

        booking = next((r for r in active if r.interval.overlaps(cell)), None)
        block = None if booking else next((b for b in blocks if b.interval.overlaps(cell)), None)

        if booking is not None:
            status = DayStatus.RESERVED
            summary = ReservationSummary(
                reservation_id=booking.id,
                requester_id=booking.requester_id,
                status=booking.status,
                is_check_in=booking.interval.start_date == day,
                # checkout date itself is free, so flag the last night
                is_check_out=booking.interval.end_date == day + timedelta(days=1),
            )
        else:
            status = DayStatus.BLOCKED if block is not None else DayStatus.FREE
            summary = None

        days.append(
            CalendarDay(
                date=day,
                in_current_month=(day.year, day.month) == (year, month),
                is_today=day == today,
                is_available=status is DayStatus.FREE and day > today,
                status=status,
                reservation=summary,
                block_reason=block.reason if block else None,
            )
        )
    return days


class CalendarProjector:
    def __init__(
        self,
        store: ReservationStore,
        registry: ResourceRegistry,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.registry = registry
        self.clock = clock

    async def render_month(self, resource_id: uuid.UUID, year: int, month: int) -> list[CalendarDay]:
        window = grid_window(year, month)
        await self.registry.get(resource_id)

        reservations = await self.store.find_active_for_resource(resource_id, window=window)
        blocks = await self.store.list_blocks(resource_id, window=window)
        return project_month(year, month, reservations, blocks, self.clock().date())
