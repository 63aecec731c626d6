"""Reservation MCP tools: availability checks, listing, create and status transitions."""

import logging
import uuid
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation

from staydesk.mcp import get_session_factory, mcp
from staydesk.mcp.serializers import serialize_conflict, serialize_reservation
from staydesk.scheduling.enums import ReservationStatus
from staydesk.scheduling.errors import ReservationConflict, SchedulingError
from staydesk.scheduling.intervals import Interval
from staydesk.services.scheduling_service import build_reservation_service

VALID_STATUSES = {s.value for s in ReservationStatus}

logger = logging.getLogger(__name__)


def _parse_stay(check_in: str, check_out: str) -> Interval:
    """Parse ISO dates into a stay interval; raises ValueError on bad input."""
    return Interval.from_dates(date.fromisoformat(check_in), date.fromisoformat(check_out))


@mcp.tool()
async def availability_check(
    resource_id: str,
    check_in: str,
    check_out: str,
    exclude_reservation_id: str | None = None,
) -> dict:
    """Check whether a property is free for the given dates.

    Args:
        resource_id: UUID of the property resource
        check_in: Check-in date (YYYY-MM-DD)
        check_out: Check-out date (YYYY-MM-DD), exclusive
        exclude_reservation_id: Ignore this reservation (when moving it)

    Returns:
        Dict with ``available`` and the overlapping reservations or blocks.
    """
    try:
        rid = uuid.UUID(resource_id)
        exclude = uuid.UUID(exclude_reservation_id) if exclude_reservation_id else None
        stay = _parse_stay(check_in, check_out)
    except ValueError as e:
        return {"error": f"Invalid input: {e}", "available": False, "conflicts": []}

    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            result = await service.check_availability(rid, stay, exclude_reservation_id=exclude)
            return {
                "resource_id": resource_id,
                "check_in": check_in,
                "check_out": check_out,
                "available": result.available,
                "conflicts": [serialize_conflict(c) for c in result.conflicts],
            }
    except SchedulingError as e:
        return {"error": str(e), "available": False, "conflicts": []}
    except Exception as e:
        logger.exception("availability_check failed")
        return {"error": str(e), "available": False, "conflicts": []}


@mcp.tool()
async def reservation_create(
    resource_id: str,
    requester_id: str,
    check_in: str,
    check_out: str,
    amount: str | None = None,
) -> dict:
    """Create a reservation after an atomic availability check.

    Instant-book properties start as "confirmed", all others as "requested".

    Args:
        resource_id: UUID of the property resource
        requester_id: UUID of the guest making the request
        check_in: Check-in date (YYYY-MM-DD)
        check_out: Check-out date (YYYY-MM-DD), exclusive
        amount: Total price for the stay (optional)

    Returns:
        Dict with the created reservation, or an error with any conflicts.
    """
    try:
        rid = uuid.UUID(resource_id)
        requester = uuid.UUID(requester_id)
        stay = _parse_stay(check_in, check_out)
    except ValueError as e:
        return {"error": f"Invalid input: {e}", "reservation": None}

    try:
        price = Decimal(amount) if amount is not None else Decimal("0")
    except InvalidOperation:
        return {"error": f"Invalid amount: '{amount}'", "reservation": None}

    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            try:
                reservation = await service.create_reservation(rid, stay, requester, amount=price)
            except ReservationConflict as e:
                return {
                    "error": "Date conflict: overlapping reservation(s) or blocks exist for this property.",
                    "reservation": None,
                    "conflicts": [serialize_conflict(c) for c in e.conflicts],
                }
            await session.commit()
            return {"reservation": serialize_reservation(reservation)}
    except SchedulingError as e:
        return {"error": str(e), "reservation": None}
    except Exception as e:
        logger.exception("reservation_create failed")
        return {"error": str(e), "reservation": None}


@mcp.tool()
async def reservation_transition(reservation_id: str, status: str) -> dict:
    """Move a reservation to a new status.

    Legal moves: requested -> confirmed | declined | cancelled and
    confirmed -> cancelled | completed | no_show. Completing requires the
    stay to have ended.

    Args:
        reservation_id: UUID of the reservation
        status: Target status

    Returns:
        Dict with the updated reservation, or an error if the move is illegal.
    """
    if status not in VALID_STATUSES:
        return {
            "error": f"Invalid status '{status}'. Must be one of: {', '.join(sorted(VALID_STATUSES))}",
            "reservation": None,
        }
    try:
        reservation_uuid = uuid.UUID(reservation_id)
    except ValueError as e:
        return {"error": f"Invalid reservation_id: {e}", "reservation": None}

    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            reservation = await service.transition(reservation_uuid, ReservationStatus(status))
            await session.commit()
            return {"reservation": serialize_reservation(reservation)}
    except SchedulingError as e:
        return {"error": str(e), "reservation": None}
    except Exception as e:
        logger.exception("reservation_transition failed")
        return {"error": str(e), "reservation": None}


@mcp.tool()
async def reservation_list(
    resource_id: str,
    start_date: str,
    end_date: str,
    status: str | None = None,
) -> dict:
    """List reservations on a property or agent calendar between two dates.

    Args:
        resource_id: UUID of the resource
        start_date: First day (YYYY-MM-DD)
        end_date: Last day (YYYY-MM-DD), inclusive
        status: Only this status (optional); omit to include every status

    Returns:
        Dict with the reservations overlapping the window, earliest first.
    """
    if status is not None and status not in VALID_STATUSES:
        return {
            "error": f"Invalid status '{status}'. Must be one of: {', '.join(sorted(VALID_STATUSES))}",
            "reservations": [],
            "total": 0,
        }
    try:
        rid = uuid.UUID(resource_id)
        window = Interval.from_dates(date.fromisoformat(start_date), date.fromisoformat(end_date) + timedelta(days=1))
    except ValueError as e:
        return {"error": f"Invalid input: {e}", "reservations": [], "total": 0}

    statuses = frozenset({ReservationStatus(status)}) if status else None
    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            service = build_reservation_service(session)
            reservations = await service.list_reservations(rid, window, statuses)
            return {
                "resource_id": resource_id,
                "reservations": [serialize_reservation(r) for r in reservations],
                "total": len(reservations),
            }
    except SchedulingError as e:
        return {"error": str(e), "reservations": [], "total": 0}
    except Exception as e:
        logger.exception("reservation_list failed")
        return {"error": str(e), "reservations": [], "total": 0}
