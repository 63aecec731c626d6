"""Availability slot model: a viewing slot that has been claimed at least once.

Unclaimed slots are generated from the agent's weekly template on every read
and never stored.
"""

import uuid
from datetime import date, time

from sqlalchemy import Boolean, Date, ForeignKey, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from staydesk.database import Base, UUIDPrimaryKeyMixin


class AvailabilitySlot(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "availability_slots"

    resource_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slot_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    is_booked: Mapped[bool] = mapped_column(Boolean, default=False)
    reservation_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("resource_id", "date", "start_time", "end_time", name="uq_availability_slots_identity"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilitySlot(resource_id={self.resource_id}, date={self.slot_date}, "
            f"start_time={self.start_time}, is_booked={self.is_booked})>"
        )
