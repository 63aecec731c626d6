"""Shared API dependencies: single import point for all routers.

Re-exports the database session and builds the per-request reservation
service so that router modules can import everything from one place::

    from staydesk.api.deps import get_db, get_reservation_service
"""

from collections.abc import Callable
from datetime import datetime

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.database import get_db
from staydesk.scheduling.service import ReservationService
from staydesk.services.scheduling_service import build_reservation_service


def get_clock() -> Callable[[], datetime]:
    """Local wall clock used for "today" and past-date checks. Overridden in tests.

    Stored timestamps, template windows and tz-aware request timestamps (see
    ``IntervalInput``) all share this local basis.
    """
    return datetime.now


def get_reservation_service(
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ReservationService:
    """Build a reservation service bound to the request's session."""
    return build_reservation_service(db, clock=clock)


__all__ = [
    "get_clock",
    "get_db",
    "get_reservation_service",
]
