"""Availability and reservation API routes.

Every write goes through ``ReservationService``; the SQL store locks the
resource row for the rest of the request, so concurrent requests for the same
dates see each other's writes and exactly one of them wins.
"""

import uuid
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query, status

from staydesk.api.deps import get_reservation_service
from staydesk.api.errors import to_http_exception
from staydesk.scheduling.enums import ReservationStatus
from staydesk.scheduling.errors import SchedulingError
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.service import ReservationService
from staydesk.schemas.reservation import (
    AvailabilityCheck,
    AvailabilityResponse,
    ReservationCreate,
    ReservationListResponse,
    ReservationReschedule,
    ReservationResponse,
    ReservationTransition,
)

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])
availability_router = APIRouter(prefix="/api/v1/availability", tags=["availability"])


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


@availability_router.post(
    "/check",
    response_model=AvailabilityResponse,
    summary="Check whether an interval is free on a resource",
)
async def check_availability(
    body: AvailabilityCheck,
    service: ReservationService = Depends(get_reservation_service),
) -> AvailabilityResponse:
    """Return ``available`` plus the reservations and blocks that overlap.

    An unavailable interval is a normal answer (200), not an error.
    """
    try:
        result = await service.check_availability(
            body.resource_id,
            body.to_interval(),
            exclude_reservation_id=body.exclude_reservation_id,
        )
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return AvailabilityResponse.from_result(result)


# ---------------------------------------------------------------------------
# Reservations
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a reservation",
)
async def create_reservation(
    body: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    """Reserve an interval. Returns 409 when it overlaps an active reservation or a block."""
    try:
        reservation = await service.create_reservation(
            body.resource_id,
            body.to_interval(),
            body.requester_id,
            amount=body.amount,
        )
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return ReservationResponse.from_record(reservation)


@router.get(
    "",
    response_model=ReservationListResponse,
    summary="List a resource's reservations between two dates",
)
async def list_reservations(
    resource_id: uuid.UUID = Query(..., description="Property or agent calendar"),
    start_date: date = Query(..., description="First day (inclusive)"),
    end_date: date = Query(..., description="Last day (inclusive)"),
    status_filter: list[ReservationStatus] | None = Query(None, alias="status", description="Repeat to allow several"),
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationListResponse:
    """Reservations overlapping the window, earliest first, optionally filtered by status."""
    try:
        window = Interval.from_dates(start_date, end_date + timedelta(days=1))
        statuses = frozenset(status_filter) if status_filter else None
        reservations = await service.list_reservations(resource_id, window, statuses)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return ReservationListResponse(
        items=[ReservationResponse.from_record(r) for r in reservations],
        total=len(reservations),
    )


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Get a reservation",
)
async def get_reservation(
    reservation_id: uuid.UUID,
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    try:
        reservation = await service.get_reservation(reservation_id)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return ReservationResponse.from_record(reservation)


@router.post(
    "/{reservation_id}/transition",
    response_model=ReservationResponse,
    summary="Move a reservation to another status",
)
async def transition_reservation(
    reservation_id: uuid.UUID,
    body: ReservationTransition,
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    """Apply a lifecycle transition (confirm, decline, cancel, complete, no-show).

    Illegal transitions and completing a stay that has not ended yet both
    return 409.
    """
    try:
        reservation = await service.transition(reservation_id, body.status)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return ReservationResponse.from_record(reservation)


@router.patch(
    "/{reservation_id}/dates",
    response_model=ReservationResponse,
    summary="Move a stay to new dates",
)
async def reschedule_reservation(
    reservation_id: uuid.UUID,
    body: ReservationReschedule,
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    """Re-run conflict detection excluding the reservation itself, then move it."""
    try:
        interval = Interval.from_dates(body.check_in, body.check_out)
        reservation = await service.reschedule(reservation_id, interval)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return ReservationResponse.from_record(reservation)
