"""Resource model: anything that can be reserved: a property or an agent's calendar."""

import uuid

from sqlalchemy import JSON, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from staydesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Resource(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A bookable resource registered by the listing subsystem.

    The scheduling core only reads these rows. Reservation writers lock the
    row (``SELECT ... FOR UPDATE``) to serialise conflict checks per resource.
    """

    __tablename__ = "resources"

    owner_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)  # property_stay, agent_slot
    instant_book: Mapped[bool] = mapped_column(Boolean, default=False)
    slot_minutes: Mapped[int | None] = mapped_column(Integer, default=None)
    availability_template: Mapped[dict | None] = mapped_column(JSON, default=None)

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, name={self.name!r}, kind={self.kind!r})>"
