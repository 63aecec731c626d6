"""Pydantic v2 schemas for the month calendar and owner blocks."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from staydesk.scheduling.enums import DayStatus, ReservationStatus
from staydesk.scheduling.records import BlockedPeriod, CalendarDay
from staydesk.schemas.common import IntervalInput


class ReservationSummaryResponse(BaseModel):
    reservation_id: uuid.UUID
    requester_id: uuid.UUID
    status: ReservationStatus
    is_check_in: bool
    is_check_out: bool


class CalendarDayResponse(BaseModel):
    date: date
    in_current_month: bool
    is_today: bool
    is_available: bool
    status: DayStatus
    reservation: ReservationSummaryResponse | None = None
    block_reason: str | None = None

    @classmethod
    def from_day(cls, day: CalendarDay) -> "CalendarDayResponse":
        summary = None
        if day.reservation is not None:
            summary = ReservationSummaryResponse(
                reservation_id=day.reservation.reservation_id,
                requester_id=day.reservation.requester_id,
                status=day.reservation.status,
                is_check_in=day.reservation.is_check_in,
                is_check_out=day.reservation.is_check_out,
            )
        return cls(
            date=day.date,
            in_current_month=day.in_current_month,
            is_today=day.is_today,
            is_available=day.is_available,
            status=day.status,
            reservation=summary,
            block_reason=day.block_reason,
        )


class CalendarMonthResponse(BaseModel):
    """Six full weeks, Sunday first, covering the requested month."""

    resource_id: uuid.UUID
    year: int
    month: int
    days: list[CalendarDayResponse]


class MonthStatsResponse(BaseModel):
    """Per-month host statistics: day counts by cell status plus occupancy."""

    resource_id: uuid.UUID
    year: int
    month: int
    total_days: int
    reserved_days: int
    blocked_days: int
    available_days: int
    booked_nights: int
    occupancy_rate: int
    revenue: Decimal


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


class BlockCreate(IntervalInput):
    reason: str = Field("Blocked by host", min_length=1, max_length=500)


class BlockResponse(BaseModel):
    id: uuid.UUID
    resource_id: uuid.UUID
    starts_at: datetime
    ends_at: datetime
    reason: str
    created_at: datetime

    @classmethod
    def from_record(cls, block: BlockedPeriod) -> "BlockResponse":
        return cls(
            id=block.id,
            resource_id=block.resource_id,
            starts_at=block.interval.start,
            ends_at=block.interval.end,
            reason=block.reason,
            created_at=block.created_at,
        )


class BlockListResponse(BaseModel):
    items: list[BlockResponse]
    total: int
