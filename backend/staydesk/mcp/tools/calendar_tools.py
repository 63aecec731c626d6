"""Calendar MCP tools: month grids, viewing slots and slot booking."""

import logging
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation

from staydesk.config import settings
from staydesk.mcp import get_session_factory, mcp
from staydesk.mcp.serializers import serialize_day, serialize_reservation, serialize_slot
from staydesk.scheduling.errors import SchedulingError
from staydesk.scheduling.records import SlotRef
from staydesk.scheduling.slots import slot_range
from staydesk.services.scheduling_service import build_reservation_service

logger = logging.getLogger(__name__)


@mcp.tool()
async def calendar_month(resource_id: str, year: int, month: int) -> dict:
    """Render a property's month as a 42-day grid (six weeks, Sunday first).

    Args:
        resource_id: UUID of the property resource
        year: Calendar year (e.g. 2026)
        month: Month number 1-12

    Returns:
        Dict with ``days``: each day's status (free, reserved, blocked),
        availability and check-in/check-out markers.
    """
    try:
        rid = uuid.UUID(resource_id)
    except ValueError as e:
        return {"error": f"Invalid resource_id: {e}", "days": []}

    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            days = await service.render_month(rid, year, month)
            return {
                "resource_id": resource_id,
                "year": year,
                "month": month,
                "days": [serialize_day(d) for d in days],
            }
    except SchedulingError as e:
        return {"error": str(e), "days": []}
    except Exception as e:
        logger.exception("calendar_month failed")
        return {"error": str(e), "days": []}


@mcp.tool()
async def slot_list(
    resource_id: str,
    start_date: str,
    end_date: str | None = None,
    available_only: bool = True,
) -> dict:
    """List an agent's viewing slots between two dates (inclusive).

    Args:
        resource_id: UUID of the agent's calendar resource
        start_date: First day (YYYY-MM-DD)
        end_date: Last day (YYYY-MM-DD, defaults to start_date; at most 31 days)
        available_only: Only return slots that can still be booked (default True)

    Returns:
        Dict with the slots and their booked/available flags.
    """
    try:
        rid = uuid.UUID(resource_id)
        first = date.fromisoformat(start_date)
        last = date.fromisoformat(end_date) if end_date else first
    except ValueError as e:
        return {"error": f"Invalid input: {e}", "slots": [], "total": 0}

    try:
        date_range = slot_range(first, last)
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            sequence = await service.generate_slots(rid, date_range)
            slots = list(sequence.available() if available_only else sequence)
            return {
                "resource_id": resource_id,
                "slots": [serialize_slot(s) for s in slots],
                "total": len(slots),
            }
    except SchedulingError as e:
        return {"error": str(e), "slots": [], "total": 0}
    except Exception as e:
        logger.exception("slot_list failed")
        return {"error": str(e), "slots": [], "total": 0}


@mcp.tool()
async def slot_book(
    resource_id: str,
    requester_id: str,
    slot_date: str,
    start_time: str,
    amount: str | None = None,
) -> dict:
    """Book one viewing slot on an agent's calendar.

    The slot must be one the agent's weekly template offers; its end time is
    derived from the template's slot length.

    Args:
        resource_id: UUID of the agent's calendar resource
        requester_id: UUID of the person booking the viewing
        slot_date: Day of the viewing (YYYY-MM-DD)
        start_time: Slot start (HH:MM), as returned by slot_list
        amount: Viewing fee (optional)

    Returns:
        Dict with the reservation and the claimed slot, or an error.
    """
    try:
        rid = uuid.UUID(resource_id)
        requester = uuid.UUID(requester_id)
        day = date.fromisoformat(slot_date)
        start = time.fromisoformat(start_time)
        price = Decimal(amount) if amount is not None else Decimal("0")
    except (ValueError, InvalidOperation) as e:
        return {"error": f"Invalid input: {e}", "reservation": None}

    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            resource = await service.registry.get(rid)
            slot_minutes = resource.template.slot_minutes if resource.template else settings.default_slot_minutes
            end = (datetime.combine(day, start) + timedelta(minutes=slot_minutes)).time()
            reservation, claimed = await service.book_slot(SlotRef(rid, day, start, end), requester, amount=price)
            await session.commit()
            return {"reservation": serialize_reservation(reservation), "slot": serialize_slot(claimed)}
    except SchedulingError as e:
        return {"error": str(e), "reservation": None}
    except Exception as e:
        logger.exception("slot_book failed")
        return {"error": str(e), "reservation": None}
