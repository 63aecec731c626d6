"""Viewing-slot routes for agent calendars."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from staydesk.api.deps import get_reservation_service
from staydesk.api.errors import to_http_exception
from staydesk.config import settings
from staydesk.scheduling.errors import SchedulingError
from staydesk.scheduling.records import SlotRef
from staydesk.scheduling.service import ReservationService
from staydesk.scheduling.slots import slot_range
from staydesk.scheduling.templates import WeeklyTemplate
from staydesk.schemas.reservation import ReservationResponse
from staydesk.schemas.slots import (
    SlotBookRequest,
    SlotBookResponse,
    SlotListResponse,
    SlotQuery,
    SlotResponse,
)

router = APIRouter(prefix="/api/v1/slots", tags=["slots"])


async def _list_slots(
    service: ReservationService,
    resource_id: uuid.UUID,
    start_date: date,
    end_date: date,
    template: WeeklyTemplate | None,
    available_only: bool,
) -> SlotListResponse:
    date_range = slot_range(start_date, end_date)
    sequence = await service.generate_slots(resource_id, date_range, template)
    slots = list(sequence.available() if available_only else sequence)
    return SlotListResponse(
        resource_id=resource_id,
        start_date=start_date,
        end_date=end_date,
        slots=[SlotResponse.from_slot(s) for s in slots],
        total=len(slots),
    )


@router.get(
    "/{resource_id}",
    response_model=SlotListResponse,
    summary="List viewing slots from the agent's stored template",
)
async def list_slots(
    resource_id: uuid.UUID,
    start_date: date = Query(..., description="First day (inclusive)"),
    end_date: date = Query(..., description="Last day (inclusive)"),
    available_only: bool = Query(False, description="Hide booked and blocked slots"),
    service: ReservationService = Depends(get_reservation_service),
) -> SlotListResponse:
    try:
        return await _list_slots(service, resource_id, start_date, end_date, None, available_only)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/{resource_id}/search",
    response_model=SlotListResponse,
    summary="List viewing slots for an ad-hoc template",
)
async def search_slots(
    resource_id: uuid.UUID,
    body: SlotQuery,
    available_only: bool = Query(False),
    service: ReservationService = Depends(get_reservation_service),
) -> SlotListResponse:
    """Like ``GET``, but the body may override the stored weekly template."""
    try:
        template = body.template.to_template(settings.default_slot_minutes) if body.template else None
        return await _list_slots(service, resource_id, body.start_date, body.end_date, template, available_only)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/{resource_id}/book",
    response_model=SlotBookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a viewing slot",
)
async def book_slot(
    resource_id: uuid.UUID,
    body: SlotBookRequest,
    service: ReservationService = Depends(get_reservation_service),
) -> SlotBookResponse:
    """Claim one slot. Returns 409 if it is taken, blocked or not a slot the agent offers."""
    slot = SlotRef(
        resource_id=resource_id,
        date=body.date,
        start_time=body.start_time,
        end_time=body.end_time,
    )
    try:
        reservation, claimed = await service.book_slot(slot, body.requester_id, amount=body.amount)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return SlotBookResponse(
        reservation=ReservationResponse.from_record(reservation),
        slot=SlotResponse.from_slot(claimed),
    )
