"""Occupancy analytics MCP tool: booked nights, revenue, and commission."""

import logging
import uuid
from datetime import date, timedelta

from staydesk.config import settings
from staydesk.mcp import get_session_factory, mcp
from staydesk.mcp.serializers import serialize_summary
from staydesk.scheduling.errors import SchedulingError
from staydesk.scheduling.occupancy import commission_for
from staydesk.services.scheduling_service import build_reservation_service

logger = logging.getLogger(__name__)


@mcp.tool()
async def occupancy_summary(
    resource_id: str,
    period_start: str | None = None,
    period_end: str | None = None,
) -> dict:
    """Summarize occupancy and revenue for a property over a period.

    Only confirmed and completed stays count. Nights are clipped to the
    period; revenue is the full amount of each counted stay.

    Args:
        resource_id: UUID of the property resource
        period_start: First night of the period (YYYY-MM-DD, defaults to 30 days ago)
        period_end: End of the period, exclusive (YYYY-MM-DD, defaults to today)

    Returns:
        Dict with booked nights, occupancy rate (whole percent), revenue and
        the platform commission on that revenue.
    """
    today = date.today()
    try:
        rid = uuid.UUID(resource_id)
        p_start = date.fromisoformat(period_start) if period_start else today - timedelta(days=30)
        p_end = date.fromisoformat(period_end) if period_end else today
    except ValueError as e:
        return {"error": f"Invalid input: {e}"}

    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            summary = await service.summarize(rid, p_start, p_end)
    except SchedulingError as e:
        return {"error": str(e)}
    except Exception as e:
        logger.exception("occupancy_summary failed")
        return {"error": str(e)}

    commission = commission_for(summary.revenue, settings.commission_rate)
    return {
        **serialize_summary(summary),
        "commission_rate": str(settings.commission_rate),
        "commission": str(commission),
        "net_revenue": str(summary.revenue - commission),
    }
