"""Availability and reservation scheduling core.

The core consumes an abstract ``ReservationStore`` and ``ResourceRegistry``;
it knows nothing about HTTP, SQL or the MCP transport. Transports build a
``ReservationService`` per request and call into it.
"""

from staydesk.scheduling.enums import DayStatus, Granularity, ReservationStatus, ResourceKind
from staydesk.scheduling.errors import (
    IllegalTransition,
    InvalidInterval,
    InvalidPeriod,
    NotYetElapsed,
    ReservationConflict,
    ReservationNotFound,
    ResourceNotFound,
    SchedulingError,
    SlotUnavailable,
)
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.records import (
    AvailabilityResult,
    AvailabilitySlot,
    BlockedPeriod,
    CalendarDay,
    ConflictDetail,
    OccupancySummary,
    Reservation,
    ResourceInfo,
    SlotRef,
)
from staydesk.scheduling.service import ReservationService
from staydesk.scheduling.store import ReservationStore, ResourceRegistry
from staydesk.scheduling.templates import WeeklyTemplate, WorkingWindow

__all__ = [
    "AvailabilityResult",
    "AvailabilitySlot",
    "BlockedPeriod",
    "CalendarDay",
    "ConflictDetail",
    "DayStatus",
    "Granularity",
    "IllegalTransition",
    "Interval",
    "InvalidInterval",
    "InvalidPeriod",
    "NotYetElapsed",
    "OccupancySummary",
    "Reservation",
    "ReservationConflict",
    "ReservationNotFound",
    "ReservationService",
    "ReservationStatus",
    "ReservationStore",
    "ResourceInfo",
    "ResourceKind",
    "ResourceNotFound",
    "ResourceRegistry",
    "SchedulingError",
    "SlotRef",
    "SlotUnavailable",
    "WeeklyTemplate",
    "WorkingWindow",
]
