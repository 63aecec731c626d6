"""Blocked period model: an owner's manual hold on a resource."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from staydesk.database import Base, UUIDPrimaryKeyMixin


class BlockedPeriod(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "blocked_periods"

    resource_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    starts_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reason: Mapped[str] = mapped_column(Text, default="Blocked by host")
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    __table_args__ = (
        CheckConstraint("starts_at < ends_at", name="ck_blocked_periods_interval"),
        Index("ix_blocked_periods_resource_window", "resource_id", "starts_at", "ends_at"),
    )

    def __repr__(self) -> str:
        return f"<BlockedPeriod(id={self.id}, resource_id={self.resource_id}, reason={self.reason!r})>"
