"""Booking lifecycle state machine.

    REQUESTED ──► CONFIRMED ──► COMPLETED
        │             │    └──► NO_SHOW
        │             └───────► CANCELLED
        ├───────► DECLINED
        └───────► CANCELLED

Every status other than REQUESTED and CONFIRMED is terminal. Side effects of a
transition (notifications, payment capture) belong to the caller, which
observes the returned reservation.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from staydesk.scheduling.enums import ReservationStatus
from staydesk.scheduling.errors import IllegalTransition, NotYetElapsed
from staydesk.scheduling.records import Reservation
from staydesk.scheduling.store import ReservationStore

logger = logging.getLogger(__name__)

TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.REQUESTED: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.DECLINED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.CANCELLED, ReservationStatus.COMPLETED, ReservationStatus.NO_SHOW}
    ),
}


def allowed_targets(status: ReservationStatus) -> frozenset[ReservationStatus]:
    return TRANSITIONS.get(status, frozenset())


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    return target in allowed_targets(current)


def validate_transition(reservation: Reservation, target: ReservationStatus, now: datetime) -> None:
    """Raise if ``reservation`` may not move to ``target`` at ``now``."""
    if not can_transition(reservation.status, target):
        raise IllegalTransition(reservation.status.value, target.value)
    if target is ReservationStatus.COMPLETED and now < reservation.interval.end:
        raise NotYetElapsed(
            f"Reservation {reservation.id} ends at {reservation.interval.end.isoformat()}; "
            "it cannot be completed before then"
        )


class BookingLifecycle:
    """Validates and persists status changes."""

    def __init__(self, store: ReservationStore, clock: Callable[[], datetime] = datetime.now) -> None:
        self.store = store
        self.clock = clock

    async def transition(self, reservation_id: uuid.UUID, target: ReservationStatus) -> Reservation:
        reservation = await self.store.get(reservation_id)
        now = self.clock()
        validate_transition(reservation, target, now)

        updated = await self.store.update_status(reservation_id, target, now, expected=reservation.status)
        logger.info(
            "Reservation %s moved %s -> %s",
            reservation_id,
            reservation.status.value,
            target.value,
        )
        return updated
