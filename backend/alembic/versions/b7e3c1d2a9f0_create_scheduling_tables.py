"""create_scheduling_tables

Revision ID: b7e3c1d2a9f0
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b7e3c1d2a9f0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Step 1: btree_gist lets the exclusion constraint mix "=" on a UUID with "&&" on a range
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # Step 2: Resources
    op.create_table(
        "resources",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("owner_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("instant_book", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("slot_minutes", sa.Integer(), nullable=True),
        sa.Column("availability_template", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_resources_owner_id", "resources", ["owner_id"])

    # Step 3: Reservations
    op.create_table(
        "reservations",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("resource_id", sa.UUID(), sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column("requester_id", sa.UUID(), nullable=False),
        sa.Column("starts_at", sa.DateTime(), nullable=False),
        sa.Column("ends_at", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="requested"),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("starts_at < ends_at", name="ck_reservations_interval"),
    )
    op.create_index("ix_reservations_resource_id", "reservations", ["resource_id"])
    op.create_index("ix_reservations_requester_id", "reservations", ["requester_id"])
    op.create_index("ix_reservations_status", "reservations", ["status"])
    op.create_index("ix_reservations_resource_window", "reservations", ["resource_id", "starts_at", "ends_at"])

    # Step 4: No two active reservations on one resource may overlap (half-open ranges)
    op.execute("""
        ALTER TABLE reservations
        ADD CONSTRAINT ex_reservations_no_overlap
        EXCLUDE USING gist (
            resource_id WITH =,
            tsrange(starts_at, ends_at, '[)') WITH &&
        )
        WHERE (status IN ('requested', 'confirmed'))
    """)

    # Step 5: Owner blocks
    op.create_table(
        "blocked_periods",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("resource_id", sa.UUID(), sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column("starts_at", sa.DateTime(), nullable=False),
        sa.Column("ends_at", sa.DateTime(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False, server_default="Blocked by host"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("starts_at < ends_at", name="ck_blocked_periods_interval"),
    )
    op.create_index("ix_blocked_periods_resource_id", "blocked_periods", ["resource_id"])
    op.create_index(
        "ix_blocked_periods_resource_window", "blocked_periods", ["resource_id", "starts_at", "ends_at"]
    )

    # Step 6: Claimed viewing slots
    op.create_table(
        "availability_slots",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("resource_id", sa.UUID(), sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_booked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "reservation_id", sa.UUID(), sa.ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True
        ),
        sa.UniqueConstraint("resource_id", "date", "start_time", "end_time", name="uq_availability_slots_identity"),
    )
    op.create_index("ix_availability_slots_resource_id", "availability_slots", ["resource_id"])
    op.create_index("ix_availability_slots_reservation_id", "availability_slots", ["reservation_id"])


def downgrade() -> None:
    op.drop_table("availability_slots")
    op.drop_table("blocked_periods")
    op.execute("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS ex_reservations_no_overlap")
    op.drop_table("reservations")
    op.drop_table("resources")
