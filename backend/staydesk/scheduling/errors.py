"""Scheduling errors.

Every error is scoped to a single operation and is safe to surface to the
caller. ``ReservationConflict`` (and its ``SlotUnavailable`` subtype) is the
expected contention outcome: callers should re-query availability and pick a
different interval rather than retrying the same one.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from staydesk.scheduling.records import ConflictDetail


class SchedulingError(Exception):
    """Base class for all scheduling core errors."""

    code = "scheduling_error"


class InvalidInterval(SchedulingError, ValueError):
    """An interval with ``start >= end`` or misaligned to the resource."""

    code = "invalid_interval"


class InvalidPeriod(SchedulingError, ValueError):
    """An aggregate or calendar query over an empty or malformed window."""

    code = "invalid_period"


class ResourceNotFound(SchedulingError, LookupError):
    code = "resource_not_found"

    def __init__(self, resource_id: uuid.UUID) -> None:
        self.resource_id = resource_id
        super().__init__(f"Resource {resource_id} not found")


class ReservationNotFound(SchedulingError, LookupError):
    code = "reservation_not_found"

    def __init__(self, reservation_id: uuid.UUID) -> None:
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} not found")


class ReservationConflict(SchedulingError):
    """The candidate interval overlaps an active reservation or a block."""

    code = "conflict"

    def __init__(
        self,
        resource_id: uuid.UUID,
        conflicts: list[ConflictDetail] | None = None,
        message: str | None = None,
    ) -> None:
        self.resource_id = resource_id
        self.conflicts = list(conflicts or [])
        super().__init__(message or f"Interval conflicts with {len(self.conflicts)} existing hold(s) on {resource_id}")


class SlotUnavailable(ReservationConflict):
    code = "slot_unavailable"


class IllegalTransition(SchedulingError):
    code = "illegal_transition"

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition reservation from {current} to {target}")


class NotYetElapsed(SchedulingError):
    """Completion requested before the reservation's interval has ended."""

    code = "not_yet_elapsed"
