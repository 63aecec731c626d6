"""Month calendar and owner block routes."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status

from staydesk.api.deps import get_reservation_service
from staydesk.api.errors import to_http_exception
from staydesk.scheduling.calendar_grid import MAX_YEAR, MIN_YEAR
from staydesk.scheduling.enums import DayStatus
from staydesk.scheduling.errors import SchedulingError
from staydesk.scheduling.service import ReservationService
from staydesk.schemas.calendar import (
    BlockCreate,
    BlockListResponse,
    BlockResponse,
    CalendarDayResponse,
    CalendarMonthResponse,
    MonthStatsResponse,
)
from staydesk.schemas.common import MessageResponse

router = APIRouter(prefix="/api/v1/calendar", tags=["calendar"])


@router.get(
    "/{resource_id}",
    response_model=CalendarMonthResponse,
    summary="42-day calendar grid for one month",
)
async def get_month(
    resource_id: uuid.UUID,
    year: int = Query(..., ge=MIN_YEAR, le=MAX_YEAR, description="Calendar year"),
    month: int = Query(..., description="Month 1-12"),
    service: ReservationService = Depends(get_reservation_service),
) -> CalendarMonthResponse:
    """Return six weeks starting on the Sunday on or before the 1st."""
    try:
        days = await service.render_month(resource_id, year, month)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return CalendarMonthResponse(
        resource_id=resource_id,
        year=year,
        month=month,
        days=[CalendarDayResponse.from_day(d) for d in days],
    )


@router.get(
    "/{resource_id}/stats",
    response_model=MonthStatsResponse,
    summary="Host statistics for one month",
)
async def get_month_stats(
    resource_id: uuid.UUID,
    year: int = Query(..., ge=MIN_YEAR, le=MAX_YEAR, description="Calendar year"),
    month: int = Query(..., description="Month 1-12"),
    service: ReservationService = Depends(get_reservation_service),
) -> MonthStatsResponse:
    """Count reserved, blocked and bookable days in the month, plus occupancy.

    Day counts come from the calendar grid (any active reservation);
    occupancy and revenue only count confirmed and completed stays.
    """
    try:
        days = await service.render_month(resource_id, year, month)
        summary = await service.summarize_month(resource_id, year, month)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc

    in_month = [d for d in days if d.in_current_month]
    return MonthStatsResponse(
        resource_id=resource_id,
        year=year,
        month=month,
        total_days=len(in_month),
        reserved_days=sum(1 for d in in_month if d.status is DayStatus.RESERVED),
        blocked_days=sum(1 for d in in_month if d.status is DayStatus.BLOCKED),
        available_days=sum(1 for d in in_month if d.is_available),
        booked_nights=summary.booked_nights,
        occupancy_rate=summary.occupancy_rate,
        revenue=summary.revenue,
    )


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


@router.get(
    "/{resource_id}/blocks",
    response_model=BlockListResponse,
    summary="List owner blocks on a resource",
)
async def list_blocks(
    resource_id: uuid.UUID,
    service: ReservationService = Depends(get_reservation_service),
) -> BlockListResponse:
    try:
        blocks = await service.list_blocks(resource_id)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return BlockListResponse(items=[BlockResponse.from_record(b) for b in blocks], total=len(blocks))


@router.post(
    "/{resource_id}/blocks",
    response_model=BlockResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Block dates on a resource",
)
async def create_block(
    resource_id: uuid.UUID,
    body: BlockCreate,
    service: ReservationService = Depends(get_reservation_service),
) -> BlockResponse:
    """Hold an interval for the owner. Returns 409 if it overlaps an active reservation."""
    try:
        block = await service.block_period(resource_id, body.to_interval(), body.reason)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return BlockResponse.from_record(block)


@router.delete(
    "/{resource_id}/blocks/{block_id}",
    response_model=MessageResponse,
    summary="Remove an owner block",
)
async def delete_block(
    resource_id: uuid.UUID,
    block_id: uuid.UUID,
    service: ReservationService = Depends(get_reservation_service),
) -> dict:
    try:
        removed = await service.unblock_period(resource_id, block_id)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Block not found",
        )
    return {"message": "Block removed"}
