"""Occupancy and revenue aggregation over a reporting period."""

import uuid
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from staydesk.scheduling.calendar_grid import month_bounds
from staydesk.scheduling.enums import REVENUE_STATUSES
from staydesk.scheduling.errors import InvalidInterval, InvalidPeriod
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.records import OccupancySummary, Reservation
from staydesk.scheduling.store import ReservationStore, ResourceRegistry

CENTS = Decimal("0.01")


def period_interval(period_start: date, period_end: date) -> Interval:
    """The half-open reporting window; empty or inverted periods are rejected."""
    try:
        return Interval.from_dates(period_start, period_end)
    except InvalidInterval:
        raise InvalidPeriod(
            f"Period end {period_end.isoformat()} must be after period start {period_start.isoformat()}"
        ) from None


def occupancy_rate(booked_nights: int, days_in_period: int) -> int:
    """Booked share of the period as a whole percentage, rounded half-up."""
    rate = Decimal(booked_nights * 100) / Decimal(days_in_period)
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def commission_for(revenue: Decimal, rate: Decimal) -> Decimal:
    return (revenue * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


def summarize_reservations(
    resource_id: uuid.UUID,
    reservations: Iterable[Reservation],
    period_start: date,
    period_end: date,
) -> OccupancySummary:
    """Aggregate confirmed and completed reservations over the period.

    Each reservation contributes only the nights that fall inside the period.
    Revenue is the full amount of every counted reservation.
    """
    period = period_interval(period_start, period_end)
    days_in_period = period.nights

    booked_nights = 0
    revenue = Decimal("0")
    count = 0
    for reservation in reservations:
        if reservation.status not in REVENUE_STATUSES:
            continue
        overlap = reservation.interval.clip(period)
        if overlap is None:
            continue
        booked_nights += overlap.nights
        revenue += reservation.amount
        count += 1

    return OccupancySummary(
        resource_id=resource_id,
        period_start=period_start,
        period_end=period_end,
        days_in_period=days_in_period,
        booked_nights=booked_nights,
        occupancy_rate=occupancy_rate(booked_nights, days_in_period),
        revenue=revenue.quantize(CENTS, rounding=ROUND_HALF_UP),
        reservation_count=count,
    )


class OccupancyAggregator:
    def __init__(self, store: ReservationStore, registry: ResourceRegistry) -> None:
        self.store = store
        self.registry = registry

    async def summarize(self, resource_id: uuid.UUID, period_start: date, period_end: date) -> OccupancySummary:
        period = period_interval(period_start, period_end)
        await self.registry.get(resource_id)

        reservations = await self.store.find_in_window(resource_id, period, REVENUE_STATUSES)
        return summarize_reservations(resource_id, reservations, period_start, period_end)

    async def summarize_month(self, resource_id: uuid.UUID, year: int, month: int) -> OccupancySummary:
        first, next_first = month_bounds(year, month)
        return await self.summarize(resource_id, first, next_first)
