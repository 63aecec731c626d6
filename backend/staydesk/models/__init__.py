"""SQLAlchemy models for StayDesk.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from staydesk.models.availability_slot import AvailabilitySlot
from staydesk.models.blocked_period import BlockedPeriod
from staydesk.models.reservation import Reservation
from staydesk.models.resource import Resource

__all__ = [
    "AvailabilitySlot",
    "BlockedPeriod",
    "Reservation",
    "Resource",
]
