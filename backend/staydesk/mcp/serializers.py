"""Plain-dict serializers for MCP tool results."""

from staydesk.scheduling.records import (
    AvailabilitySlot,
    CalendarDay,
    ConflictDetail,
    OccupancySummary,
    Reservation,
)


def serialize_reservation(r: Reservation) -> dict:
    return {
        "id": str(r.id),
        "resource_id": str(r.resource_id),
        "requester_id": str(r.requester_id),
        "starts_at": r.interval.start.isoformat(),
        "ends_at": r.interval.end.isoformat(),
        "nights": r.interval.nights,
        "status": r.status.value,
        "amount": str(r.amount),
    }


def serialize_conflict(c: ConflictDetail) -> dict:
    return {
        "hold_id": str(c.hold_id),
        "kind": c.kind,
        "starts_at": c.interval.start.isoformat(),
        "ends_at": c.interval.end.isoformat(),
        "status": c.status.value if c.status else None,
        "reason": c.reason,
    }


def serialize_day(d: CalendarDay) -> dict:
    return {
        "date": d.date.isoformat(),
        "in_current_month": d.in_current_month,
        "is_today": d.is_today,
        "is_available": d.is_available,
        "status": d.status.value,
        "reservation_id": str(d.reservation.reservation_id) if d.reservation else None,
        "is_check_in": d.reservation.is_check_in if d.reservation else False,
        "is_check_out": d.reservation.is_check_out if d.reservation else False,
        "block_reason": d.block_reason,
    }


def serialize_slot(s: AvailabilitySlot) -> dict:
    return {
        "date": s.date.isoformat(),
        "start_time": s.start_time.strftime("%H:%M"),
        "end_time": s.end_time.strftime("%H:%M"),
        "is_available": s.is_available,
        "is_booked": s.is_booked,
        "reservation_id": str(s.reservation_id) if s.reservation_id else None,
    }


def serialize_summary(s: OccupancySummary) -> dict:
    return {
        "resource_id": str(s.resource_id),
        "period_start": s.period_start.isoformat(),
        "period_end": s.period_end.isoformat(),
        "days_in_period": s.days_in_period,
        "booked_nights": s.booked_nights,
        "occupancy_rate": s.occupancy_rate,
        "revenue": str(s.revenue),
        "reservation_count": s.reservation_count,
    }
