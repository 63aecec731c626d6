"""Pydantic v2 request/response schemas for availability and reservation endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from staydesk.scheduling.enums import ReservationStatus
from staydesk.scheduling.records import AvailabilityResult, ConflictDetail, Reservation
from staydesk.schemas.common import IntervalInput

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReservationCreate(IntervalInput):
    """Schema for reserving an interval on a resource."""

    resource_id: uuid.UUID
    requester_id: uuid.UUID
    amount: Decimal = Field(Decimal("0"), ge=0)


class AvailabilityCheck(IntervalInput):
    """Ask whether an interval is free, optionally ignoring one reservation."""

    resource_id: uuid.UUID
    exclude_reservation_id: uuid.UUID | None = None


class ReservationTransition(BaseModel):
    """Move a reservation to another lifecycle status."""

    status: ReservationStatus


class ReservationReschedule(BaseModel):
    """New stay dates for an existing reservation."""

    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_dates(self) -> "ReservationReschedule":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ReservationResponse(BaseModel):
    id: uuid.UUID
    resource_id: uuid.UUID
    requester_id: uuid.UUID
    starts_at: datetime
    ends_at: datetime
    nights: int
    status: ReservationStatus
    amount: Decimal
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            resource_id=reservation.resource_id,
            requester_id=reservation.requester_id,
            starts_at=reservation.interval.start,
            ends_at=reservation.interval.end,
            nights=reservation.interval.nights,
            status=reservation.status,
            amount=reservation.amount,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )


class ConflictResponse(BaseModel):
    """An existing reservation or block that overlaps the requested interval."""

    hold_id: uuid.UUID
    kind: Literal["reservation", "block"]
    starts_at: datetime
    ends_at: datetime
    status: ReservationStatus | None = None
    reason: str | None = None

    @classmethod
    def from_detail(cls, detail: ConflictDetail) -> "ConflictResponse":
        return cls(
            hold_id=detail.hold_id,
            kind=detail.kind,
            starts_at=detail.interval.start,
            ends_at=detail.interval.end,
            status=detail.status,
            reason=detail.reason,
        )


class AvailabilityResponse(BaseModel):
    resource_id: uuid.UUID
    starts_at: datetime
    ends_at: datetime
    available: bool
    conflicts: list[ConflictResponse]

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityResponse":
        return cls(
            resource_id=result.resource_id,
            starts_at=result.interval.start,
            ends_at=result.interval.end,
            available=result.available,
            conflicts=[ConflictResponse.from_detail(c) for c in result.conflicts],
        )


class ReservationListResponse(BaseModel):
    items: list[ReservationResponse]
    total: int
