"""Immutable domain records exchanged between the scheduling core and its stores.

Persistence adapters convert their rows into these records at the boundary,
so the core never branches on the shape of whatever the query layer returned.
``Reservation`` and ``BlockedPeriod`` are the two kinds of hold on a
resource; both carry a ``kind`` tag.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import ClassVar, Literal

from staydesk.scheduling.enums import (
    GRANULARITY_BY_KIND,
    DayStatus,
    Granularity,
    ReservationStatus,
    ResourceKind,
)
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.templates import WeeklyTemplate


@dataclass(frozen=True)
class ResourceInfo:
    """What the core needs to know about a bookable resource."""

    id: uuid.UUID
    kind: ResourceKind
    owner_id: uuid.UUID
    name: str = ""
    instant_book: bool = False
    template: WeeklyTemplate | None = None

    @property
    def granularity(self) -> Granularity:
        return GRANULARITY_BY_KIND[self.kind]


@dataclass(frozen=True)
class Reservation:
    kind: ClassVar[Literal["reservation"]] = "reservation"

    id: uuid.UUID
    resource_id: uuid.UUID
    requester_id: uuid.UUID
    interval: Interval
    status: ReservationStatus
    amount: Decimal
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status.is_active


@dataclass(frozen=True)
class BlockedPeriod:
    kind: ClassVar[Literal["block"]] = "block"

    id: uuid.UUID
    resource_id: uuid.UUID
    interval: Interval
    reason: str
    created_at: datetime


Hold = Reservation | BlockedPeriod


@dataclass(frozen=True)
class NewReservation:
    """A reservation that has not been written yet."""

    resource_id: uuid.UUID
    requester_id: uuid.UUID
    interval: Interval
    status: ReservationStatus
    amount: Decimal
    created_at: datetime
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class NewBlock:
    resource_id: uuid.UUID
    interval: Interval
    reason: str
    created_at: datetime
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class ConflictDetail:
    """One existing hold that overlaps a candidate interval."""

    hold_id: uuid.UUID
    kind: Literal["reservation", "block"]
    interval: Interval
    status: ReservationStatus | None = None
    reason: str | None = None

    @classmethod
    def from_hold(cls, hold: Hold) -> ConflictDetail:
        if isinstance(hold, Reservation):
            return cls(hold_id=hold.id, kind=hold.kind, interval=hold.interval, status=hold.status)
        return cls(hold_id=hold.id, kind=hold.kind, interval=hold.interval, reason=hold.reason)


@dataclass(frozen=True)
class AvailabilityResult:
    resource_id: uuid.UUID
    interval: Interval
    conflicts: tuple[ConflictDetail, ...] = ()

    @property
    def available(self) -> bool:
        return not self.conflicts


@dataclass(frozen=True)
class SlotRef:
    """Identity of a viewing slot: resource, day and time bounds."""

    resource_id: uuid.UUID
    date: date
    start_time: time
    end_time: time

    @property
    def interval(self) -> Interval:
        return Interval(datetime.combine(self.date, self.start_time), datetime.combine(self.date, self.end_time))


@dataclass(frozen=True)
class AvailabilitySlot:
    resource_id: uuid.UUID
    date: date
    start_time: time
    end_time: time
    is_available: bool
    is_booked: bool
    reservation_id: uuid.UUID | None = None
    id: uuid.UUID | None = None

    @property
    def ref(self) -> SlotRef:
        return SlotRef(self.resource_id, self.date, self.start_time, self.end_time)

    @property
    def interval(self) -> Interval:
        return self.ref.interval


@dataclass(frozen=True)
class ReservationSummary:
    reservation_id: uuid.UUID
    requester_id: uuid.UUID
    status: ReservationStatus
    is_check_in: bool
    is_check_out: bool


@dataclass(frozen=True)
class CalendarDay:
    date: date
    in_current_month: bool
    is_today: bool
    is_available: bool
    status: DayStatus
    reservation: ReservationSummary | None = None
    block_reason: str | None = None


@dataclass(frozen=True)
class OccupancySummary:
    resource_id: uuid.UUID
    period_start: date
    period_end: date
    days_in_period: int
    booked_nights: int
    occupancy_rate: int  # whole percentage, 0-100
    revenue: Decimal
    reservation_count: int
