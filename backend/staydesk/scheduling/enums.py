"""Scheduling enums: reservation statuses, resource kinds, day states."""

from enum import Enum


class ReservationStatus(str, Enum):
    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"

    @property
    def is_active(self) -> bool:
        """True while the reservation still holds its interval."""
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self not in ACTIVE_STATUSES


class ResourceKind(str, Enum):
    PROPERTY_STAY = "property_stay"
    AGENT_SLOT = "agent_slot"


class Granularity(str, Enum):
    DAY = "day"
    MINUTE = "minute"


class DayStatus(str, Enum):
    FREE = "free"
    RESERVED = "reserved"
    BLOCKED = "blocked"


# Statuses that count toward conflict checks.
ACTIVE_STATUSES: frozenset[ReservationStatus] = frozenset(
    {ReservationStatus.REQUESTED, ReservationStatus.CONFIRMED}
)

# Statuses that count toward occupancy and revenue.
REVENUE_STATUSES: frozenset[ReservationStatus] = frozenset(
    {ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED}
)

GRANULARITY_BY_KIND: dict[ResourceKind, Granularity] = {
    ResourceKind.PROPERTY_STAY: Granularity.DAY,
    ResourceKind.AGENT_SLOT: Granularity.MINUTE,
}
