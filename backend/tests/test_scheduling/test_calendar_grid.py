"""Tests for the 42-day month calendar."""

import uuid
from datetime import date, timedelta

import pytest

from staydesk.scheduling.calendar_grid import GRID_DAYS, grid_start, grid_window, month_bounds
from staydesk.scheduling.enums import DayStatus, ReservationStatus
from staydesk.scheduling.errors import InvalidPeriod, ResourceNotFound
from staydesk.scheduling.intervals import Interval


def _by_date(days):
    return {d.date: d for d in days}


class TestGridShape:
    @pytest.mark.parametrize(
        "year,month,expected_start",
        [
            (2024, 3, date(2024, 2, 25)),  # starts on a Friday
            (2024, 9, date(2024, 9, 1)),  # starts on a Sunday
            (2015, 2, date(2015, 2, 1)),  # 28 days starting Sunday
            (2024, 6, date(2024, 5, 26)),  # starts on a Saturday, spans six weeks
        ],
    )
    def test_grid_starts_on_sunday(self, year, month, expected_start):
        start = grid_start(year, month)
        assert start == expected_start
        assert start.weekday() == 6

    def test_month_bounds_handles_december(self):
        assert month_bounds(2024, 12) == (date(2024, 12, 1), date(2025, 1, 1))

    @pytest.mark.parametrize("month", [0, 13])
    def test_bad_month_rejected(self, month):
        with pytest.raises(InvalidPeriod):
            month_bounds(2024, month)

    @pytest.mark.parametrize("year", [0, 10000, -5])
    def test_unrepresentable_year_rejected(self, year):
        with pytest.raises(InvalidPeriod):
            month_bounds(year, 1)

    @pytest.mark.parametrize("year,month", [(9999, 12), (1, 1)])
    def test_grid_past_calendar_limits_rejected(self, year, month):
        # December 9999 ends past date.max, January 1 starts before date.min
        with pytest.raises(InvalidPeriod):
            grid_window(year, month)

    def test_last_renderable_month(self):
        assert grid_window(9999, 11).end.date() == date(9999, 12, 12)


@pytest.mark.asyncio
class TestRenderMonth:
    @pytest.mark.parametrize("year,month", [(2024, 2), (2024, 3), (2024, 6), (2024, 9), (2015, 2), (2025, 12)])
    async def test_always_42_days(self, service, stay, year, month):
        days = await service.render_month(stay.id, year, month)

        assert len(days) == GRID_DAYS
        assert days[0].date.weekday() == 6
        assert all(b.date - a.date == timedelta(days=1) for a, b in zip(days, days[1:]))
        in_month = [d for d in days if d.in_current_month]
        assert in_month[0].date == date(year, month, 1)
        assert all((d.date.year, d.date.month) == (year, month) for d in in_month)

    async def test_reserved_blocked_and_free(self, service, stay):
        booking = await service.create_reservation(
            stay.id, Interval.from_dates(date(2024, 3, 10), date(2024, 3, 13)), uuid.uuid4()
        )
        await service.block_period(stay.id, Interval.from_dates(date(2024, 3, 20), date(2024, 3, 22)), "Repainting")

        days = _by_date(await service.render_month(stay.id, 2024, 3))

        for day in (date(2024, 3, 10), date(2024, 3, 11), date(2024, 3, 12)):
            assert days[day].status is DayStatus.RESERVED
            assert days[day].reservation.reservation_id == booking.id
            assert days[day].reservation.status is ReservationStatus.REQUESTED
            assert not days[day].is_available
        assert days[date(2024, 3, 10)].reservation.is_check_in
        assert days[date(2024, 3, 12)].reservation.is_check_out
        # checkout day is free again
        assert days[date(2024, 3, 13)].status is DayStatus.FREE

        assert days[date(2024, 3, 20)].status is DayStatus.BLOCKED
        assert days[date(2024, 3, 21)].block_reason == "Repainting"
        assert days[date(2024, 3, 22)].status is DayStatus.FREE

    async def test_cancelled_reservation_not_shown(self, service, stay):
        booking = await service.create_reservation(
            stay.id, Interval.from_dates(date(2024, 3, 10), date(2024, 3, 13)), uuid.uuid4()
        )
        await service.transition(booking.id, ReservationStatus.CANCELLED)

        days = _by_date(await service.render_month(stay.id, 2024, 3))

        assert days[date(2024, 3, 11)].status is DayStatus.FREE
        assert days[date(2024, 3, 11)].reservation is None

    async def test_only_future_free_days_available(self, service, stay):
        # clock is fixed at 1 March 2024
        days = _by_date(await service.render_month(stay.id, 2024, 3))

        assert days[date(2024, 3, 1)].is_today
        assert not days[date(2024, 3, 1)].is_available
        assert not days[date(2024, 2, 29)].is_available
        assert days[date(2024, 3, 2)].is_available
        assert sum(d.is_today for d in days.values()) == 1

    async def test_adjacent_month_days_show_real_status(self, service, stay):
        await service.create_reservation(stay.id, Interval.from_dates(date(2024, 4, 2), date(2024, 4, 4)), uuid.uuid4())

        days = _by_date(await service.render_month(stay.id, 2024, 3))

        # 2 April is a trailing cell of the March grid
        assert not days[date(2024, 4, 2)].in_current_month
        assert days[date(2024, 4, 2)].status is DayStatus.RESERVED

    async def test_invalid_month(self, service, stay):
        with pytest.raises(InvalidPeriod):
            await service.render_month(stay.id, 2024, 13)

    async def test_unknown_resource(self, service):
        with pytest.raises(ResourceNotFound):
            await service.render_month(uuid.uuid4(), 2024, 3)
