"""Analytics API router: occupancy, revenue and platform commission."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query

from staydesk.api.deps import get_reservation_service
from staydesk.api.errors import to_http_exception
from staydesk.config import settings
from staydesk.scheduling.calendar_grid import MAX_YEAR, MIN_YEAR
from staydesk.scheduling.errors import SchedulingError
from staydesk.scheduling.service import ReservationService
from staydesk.schemas.analytics import OccupancyResponse

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])


@router.get("/occupancy", response_model=OccupancyResponse)
async def get_occupancy(
    resource_id: uuid.UUID = Query(..., description="Resource to report on"),
    period_start: date = Query(..., description="First night of the period"),
    period_end: date = Query(..., description="End of the period (exclusive)"),
    service: ReservationService = Depends(get_reservation_service),
) -> OccupancyResponse:
    """Occupancy and revenue for confirmed and completed stays over ``[period_start, period_end)``.

    Nights outside the period are not counted; revenue is the full amount of
    every stay that touches it. Commission uses the configured platform rate.
    """
    try:
        summary = await service.summarize(resource_id, period_start, period_end)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return OccupancyResponse.from_summary(summary, settings.commission_rate)


@router.get("/occupancy/monthly", response_model=OccupancyResponse)
async def get_monthly_occupancy(
    resource_id: uuid.UUID = Query(..., description="Resource to report on"),
    year: int = Query(..., ge=MIN_YEAR, le=MAX_YEAR, description="Calendar year"),
    month: int = Query(..., description="Month 1-12"),
    service: ReservationService = Depends(get_reservation_service),
) -> OccupancyResponse:
    try:
        summary = await service.summarize_month(resource_id, year, month)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    return OccupancyResponse.from_summary(summary, settings.commission_rate)
