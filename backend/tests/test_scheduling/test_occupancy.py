"""Tests for occupancy and revenue aggregation."""

import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest

from staydesk.scheduling.enums import ReservationStatus
from staydesk.scheduling.errors import InvalidPeriod, ResourceNotFound
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.occupancy import commission_for, occupancy_rate, summarize_reservations
from staydesk.scheduling.records import NewReservation


async def _seed(store, resource_id, check_in, check_out, status, amount="100.00"):
    return await store.create(
        NewReservation(
            resource_id=resource_id,
            requester_id=uuid.uuid4(),
            interval=Interval.from_dates(check_in, check_out),
            status=status,
            amount=Decimal(amount),
            created_at=datetime(2024, 1, 1),
        )
    )


class TestHelpers:
    @pytest.mark.parametrize(
        "nights,days,expected",
        [(0, 31, 0), (8, 31, 26), (1, 8, 13), (3, 8, 38), (31, 31, 100), (1, 3, 33)],
    )
    def test_rate_rounds_half_up(self, nights, days, expected):
        assert occupancy_rate(nights, days) == expected

    def test_commission(self):
        assert commission_for(Decimal("800.00"), Decimal("0.10")) == Decimal("80.00")
        assert commission_for(Decimal("123.45"), Decimal("0.15")) == Decimal("18.52")

    def test_empty_period_rejected(self):
        with pytest.raises(InvalidPeriod):
            summarize_reservations(uuid.uuid4(), [], date(2024, 3, 1), date(2024, 3, 1))

    def test_inverted_period_rejected(self):
        with pytest.raises(InvalidPeriod):
            summarize_reservations(uuid.uuid4(), [], date(2024, 3, 10), date(2024, 3, 1))


@pytest.mark.asyncio
class TestSummarize:
    async def test_counts_confirmed_and_completed_only(self, service, store, stay):
        await _seed(store, stay.id, date(2024, 3, 10), date(2024, 3, 15), ReservationStatus.CONFIRMED, "500.00")
        await _seed(store, stay.id, date(2024, 3, 15), date(2024, 3, 18), ReservationStatus.COMPLETED, "300.00")
        await _seed(store, stay.id, date(2024, 3, 20), date(2024, 3, 22), ReservationStatus.REQUESTED)
        cancelled = await _seed(store, stay.id, date(2024, 3, 25), date(2024, 3, 28), ReservationStatus.REQUESTED)
        await store.update_status(cancelled.id, ReservationStatus.CANCELLED, datetime(2024, 1, 2))

        summary = await service.summarize(stay.id, date(2024, 3, 1), date(2024, 4, 1))

        assert summary.days_in_period == 31
        assert summary.booked_nights == 8
        assert summary.occupancy_rate == 26
        assert summary.revenue == Decimal("800.00")
        assert summary.reservation_count == 2

    async def test_straddling_reservation_clipped(self, service, store, stay):
        await _seed(store, stay.id, date(2024, 2, 27), date(2024, 3, 3), ReservationStatus.CONFIRMED, "400.00")

        march = await service.summarize_month(stay.id, 2024, 3)
        february = await service.summarize_month(stay.id, 2024, 2)

        assert march.booked_nights == 2
        assert february.booked_nights == 3
        assert february.days_in_period == 29
        # revenue is attributed in full to every period the stay touches
        assert march.revenue == february.revenue == Decimal("400.00")

    async def test_no_reservations(self, service, stay):
        summary = await service.summarize(stay.id, date(2024, 3, 1), date(2024, 3, 8))

        assert summary.booked_nights == 0
        assert summary.occupancy_rate == 0
        assert summary.revenue == Decimal("0.00")

    async def test_period_end_is_exclusive(self, service, store, stay):
        await _seed(store, stay.id, date(2024, 3, 8), date(2024, 3, 10), ReservationStatus.CONFIRMED)

        summary = await service.summarize(stay.id, date(2024, 3, 1), date(2024, 3, 8))

        assert summary.booked_nights == 0
        assert summary.reservation_count == 0

    async def test_idempotent(self, service, store, stay):
        await _seed(store, stay.id, date(2024, 3, 10), date(2024, 3, 15), ReservationStatus.CONFIRMED, "500.00")

        first = await service.summarize(stay.id, date(2024, 3, 1), date(2024, 4, 1))
        second = await service.summarize(stay.id, date(2024, 3, 1), date(2024, 4, 1))

        assert first == second

    async def test_other_resources_ignored(self, service, store, stay, instant_stay):
        await _seed(store, instant_stay.id, date(2024, 3, 10), date(2024, 3, 15), ReservationStatus.CONFIRMED)

        summary = await service.summarize(stay.id, date(2024, 3, 1), date(2024, 4, 1))

        assert summary.booked_nights == 0

    async def test_invalid_period(self, service, stay):
        with pytest.raises(InvalidPeriod):
            await service.summarize(stay.id, date(2024, 3, 31), date(2024, 3, 1))

    async def test_unknown_resource(self, service):
        with pytest.raises(ResourceNotFound):
            await service.summarize(uuid.uuid4(), date(2024, 3, 1), date(2024, 4, 1))
