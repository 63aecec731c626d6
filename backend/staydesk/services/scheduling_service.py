"""Wire the scheduling core to the SQL store for one session."""

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.config import settings
from staydesk.scheduling.service import ReservationService
from staydesk.services.reservation_store import SqlReservationStore
from staydesk.services.resource_registry import SqlResourceRegistry


def build_reservation_service(
    session: AsyncSession,
    clock: Callable[[], datetime] = datetime.now,
) -> ReservationService:
    """Return a ``ReservationService`` whose store and registry share ``session``.

    The service must not outlive the session: the store's resource locks are
    held by the session's transaction.
    """
    return ReservationService(
        SqlReservationStore(session),
        SqlResourceRegistry(session),
        clock=clock,
        default_slot_minutes=settings.default_slot_minutes,
    )
