"""Reservation model: a claimed interval on a resource."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staydesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A reservation of ``[starts_at, ends_at)`` on one resource.

    Rows are never deleted; cancelling is a status change.
    """

    __tablename__ = "reservations"

    resource_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    requester_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    starts_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default="requested",
        index=True,
    )  # requested, confirmed, declined, cancelled, completed, no_show
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    # Relationships
    resource: Mapped["Resource"] = relationship(lazy="raise")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        CheckConstraint("starts_at < ends_at", name="ck_reservations_interval"),
        Index("ix_reservations_resource_window", "resource_id", "starts_at", "ends_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, resource_id={self.resource_id}, "
            f"starts_at={self.starts_at}, ends_at={self.ends_at}, status={self.status})>"
        )
