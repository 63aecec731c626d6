"""Pydantic v2 schemas for analytics endpoints."""

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from staydesk.scheduling.occupancy import commission_for
from staydesk.scheduling.records import OccupancySummary


class OccupancyResponse(BaseModel):
    """Occupancy and revenue for one resource over a half-open period."""

    resource_id: uuid.UUID
    period_start: date
    period_end: date
    days_in_period: int
    booked_nights: int
    occupancy_rate: int  # whole percentage 0–100
    revenue: Decimal
    reservation_count: int
    commission_rate: Decimal
    commission: Decimal
    net_revenue: Decimal

    @classmethod
    def from_summary(cls, summary: OccupancySummary, commission_rate: Decimal) -> "OccupancyResponse":
        commission = commission_for(summary.revenue, commission_rate)
        return cls(
            resource_id=summary.resource_id,
            period_start=summary.period_start,
            period_end=summary.period_end,
            days_in_period=summary.days_in_period,
            booked_nights=summary.booked_nights,
            occupancy_rate=summary.occupancy_rate,
            revenue=summary.revenue,
            reservation_count=summary.reservation_count,
            commission_rate=commission_rate,
            commission=commission,
            net_revenue=summary.revenue - commission,
        )
