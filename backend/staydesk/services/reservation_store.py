"""Reservation store backed by SQLAlchemy.

Every conditional write first locks the resource row with
``SELECT ... FOR UPDATE``. The lock lives until the surrounding transaction
(one request, see ``get_db``) commits or rolls back, so two requests targeting
the same resource run their overlap check and insert one after the other.
On PostgreSQL the ``reservations`` table additionally carries an exclusion
constraint over active intervals; a violation surfaces here as
``IntegrityError`` and is reported as a conflict.
"""

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.models.availability_slot import AvailabilitySlot as SlotRow
from staydesk.models.blocked_period import BlockedPeriod as BlockRow
from staydesk.models.reservation import Reservation as ReservationRow
from staydesk.models.resource import Resource
from staydesk.scheduling.conflicts import find_overlaps
from staydesk.scheduling.enums import ACTIVE_STATUSES, ReservationStatus
from staydesk.scheduling.errors import (
    IllegalTransition,
    ReservationConflict,
    ReservationNotFound,
    ResourceNotFound,
    SlotUnavailable,
)
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.records import (
    AvailabilitySlot,
    BlockedPeriod,
    ConflictDetail,
    NewBlock,
    NewReservation,
    Reservation,
    SlotRef,
)
from staydesk.scheduling.store import ReservationStore

logger = logging.getLogger(__name__)

_ACTIVE_VALUES = [s.value for s in ACTIVE_STATUSES]


# ---------------------------------------------------------------------------
# Row -> record conversion
# ---------------------------------------------------------------------------


def to_reservation(row: ReservationRow) -> Reservation:
    return Reservation(
        id=row.id,
        resource_id=row.resource_id,
        requester_id=row.requester_id,
        interval=Interval(row.starts_at, row.ends_at),
        status=ReservationStatus(row.status),
        amount=Decimal(row.amount) if row.amount is not None else Decimal("0"),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_blocked_period(row: BlockRow) -> BlockedPeriod:
    return BlockedPeriod(
        id=row.id,
        resource_id=row.resource_id,
        interval=Interval(row.starts_at, row.ends_at),
        reason=row.reason,
        created_at=row.created_at,
    )


def to_slot(row: SlotRow) -> AvailabilitySlot:
    return AvailabilitySlot(
        resource_id=row.resource_id,
        date=row.slot_date,
        start_time=row.start_time,
        end_time=row.end_time,
        is_available=row.is_available,
        is_booked=row.is_booked,
        reservation_id=row.reservation_id,
        id=row.id,
    )


class SqlReservationStore(ReservationStore):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _lock_resource(self, resource_id: uuid.UUID) -> None:
        """Serialise writers on ``resource_id`` for the rest of the transaction."""
        result = await self.session.execute(select(Resource.id).where(Resource.id == resource_id).with_for_update())
        if result.scalar_one_or_none() is None:
            raise ResourceNotFound(resource_id)

    async def _reservation_rows(
        self,
        resource_id: uuid.UUID,
        window: Interval | None,
        statuses: list[str],
        exclude_reservation_id: uuid.UUID | None = None,
    ) -> list[ReservationRow]:
        query = select(ReservationRow).where(
            ReservationRow.resource_id == resource_id,
            ReservationRow.status.in_(statuses),
        )
        if window is not None:
            query = query.where(ReservationRow.starts_at < window.end, ReservationRow.ends_at > window.start)
        if exclude_reservation_id is not None:
            query = query.where(ReservationRow.id != exclude_reservation_id)

        result = await self.session.execute(query.order_by(ReservationRow.starts_at))
        return list(result.scalars().all())

    async def _block_rows(self, resource_id: uuid.UUID, window: Interval | None) -> list[BlockRow]:
        query = select(BlockRow).where(BlockRow.resource_id == resource_id)
        if window is not None:
            query = query.where(BlockRow.starts_at < window.end, BlockRow.ends_at > window.start)

        result = await self.session.execute(query.order_by(BlockRow.starts_at))
        return list(result.scalars().all())

    async def _conflicts(
        self,
        resource_id: uuid.UUID,
        interval: Interval,
        exclude_reservation_id: uuid.UUID | None = None,
        include_blocks: bool = True,
    ) -> list[ConflictDetail]:
        rows = await self._reservation_rows(resource_id, interval, _ACTIVE_VALUES, exclude_reservation_id)
        blocks = await self._block_rows(resource_id, interval) if include_blocks else []
        return find_overlaps(
            interval,
            [to_reservation(r) for r in rows],
            [to_blocked_period(b) for b in blocks],
        )

    async def _flush_or_conflict(self, resource_id: uuid.UUID, error: type[ReservationConflict]) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            logger.warning("Storage constraint rejected a write on resource %s: %s", resource_id, exc.orig)
            raise error(resource_id, message="Interval was claimed by a concurrent request") from exc

    def _new_row(self, draft: NewReservation) -> ReservationRow:
        return ReservationRow(
            id=draft.id,
            resource_id=draft.resource_id,
            requester_id=draft.requester_id,
            starts_at=draft.interval.start,
            ends_at=draft.interval.end,
            status=draft.status.value,
            amount=draft.amount,
            created_at=draft.created_at,
            updated_at=draft.created_at,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, reservation_id: uuid.UUID) -> Reservation:
        row = await self.session.get(ReservationRow, reservation_id)
        if row is None:
            raise ReservationNotFound(reservation_id)
        return to_reservation(row)

    async def find_active_for_resource(
        self,
        resource_id: uuid.UUID,
        window: Interval | None = None,
    ) -> list[Reservation]:
        rows = await self._reservation_rows(resource_id, window, _ACTIVE_VALUES)
        return [to_reservation(r) for r in rows]

    async def find_in_window(
        self,
        resource_id: uuid.UUID,
        window: Interval,
        statuses: frozenset[ReservationStatus],
    ) -> list[Reservation]:
        rows = await self._reservation_rows(resource_id, window, [s.value for s in statuses])
        return [to_reservation(r) for r in rows]

    async def list_blocks(self, resource_id: uuid.UUID, window: Interval | None = None) -> list[BlockedPeriod]:
        return [to_blocked_period(b) for b in await self._block_rows(resource_id, window)]

    async def list_claimed_slots(self, resource_id: uuid.UUID, first_day: date, last_day: date) -> list[AvailabilitySlot]:
        result = await self.session.execute(
            select(SlotRow)
            .where(
                SlotRow.resource_id == resource_id,
                SlotRow.slot_date >= first_day,
                SlotRow.slot_date <= last_day,
            )
            .order_by(SlotRow.slot_date, SlotRow.start_time)
        )
        return [to_slot(row) for row in result.scalars().all()]

    # ------------------------------------------------------------------
    # Conditional writes
    # ------------------------------------------------------------------

    async def create(self, draft: NewReservation) -> Reservation:
        await self._lock_resource(draft.resource_id)

        conflicts = await self._conflicts(draft.resource_id, draft.interval)
        if conflicts:
            raise ReservationConflict(draft.resource_id, conflicts)

        row = self._new_row(draft)
        self.session.add(row)
        await self._flush_or_conflict(draft.resource_id, ReservationConflict)
        return to_reservation(row)

    async def update_interval(self, reservation_id: uuid.UUID, interval: Interval, now: datetime) -> Reservation:
        row = await self.session.get(ReservationRow, reservation_id)
        if row is None:
            raise ReservationNotFound(reservation_id)
        await self._lock_resource(row.resource_id)
        await self.session.refresh(row)

        if row.status not in _ACTIVE_VALUES:
            raise IllegalTransition(row.status, "rescheduled")
        conflicts = await self._conflicts(row.resource_id, interval, exclude_reservation_id=reservation_id)
        if conflicts:
            raise ReservationConflict(row.resource_id, conflicts)

        row.starts_at = interval.start
        row.ends_at = interval.end
        row.updated_at = now
        await self._flush_or_conflict(row.resource_id, ReservationConflict)
        return to_reservation(row)

    async def create_block(self, draft: NewBlock) -> BlockedPeriod:
        await self._lock_resource(draft.resource_id)

        conflicts = await self._conflicts(draft.resource_id, draft.interval, include_blocks=False)
        if conflicts:
            raise ReservationConflict(draft.resource_id, conflicts, message="Cannot block dates that are already reserved")

        row = BlockRow(
            id=draft.id,
            resource_id=draft.resource_id,
            starts_at=draft.interval.start,
            ends_at=draft.interval.end,
            reason=draft.reason,
            created_at=draft.created_at,
        )
        self.session.add(row)
        await self.session.flush()
        return to_blocked_period(row)

    async def claim_slot(self, slot: SlotRef, draft: NewReservation) -> tuple[Reservation, AvailabilitySlot]:
        await self._lock_resource(slot.resource_id)

        conflicts = await self._conflicts(slot.resource_id, slot.interval)
        if conflicts:
            raise SlotUnavailable(slot.resource_id, conflicts)

        reservation_row = self._new_row(draft)
        self.session.add(reservation_row)
        await self._flush_or_conflict(slot.resource_id, SlotUnavailable)

        result = await self.session.execute(
            select(SlotRow).where(
                SlotRow.resource_id == slot.resource_id,
                SlotRow.slot_date == slot.date,
                SlotRow.start_time == slot.start_time,
                SlotRow.end_time == slot.end_time,
            )
        )
        slot_row = result.scalar_one_or_none()
        if slot_row is None:
            slot_row = SlotRow(
                resource_id=slot.resource_id,
                slot_date=slot.date,
                start_time=slot.start_time,
                end_time=slot.end_time,
            )
            self.session.add(slot_row)
        slot_row.is_available = False
        slot_row.is_booked = True
        slot_row.reservation_id = reservation_row.id
        await self._flush_or_conflict(slot.resource_id, SlotUnavailable)

        return to_reservation(reservation_row), to_slot(slot_row)

    # ------------------------------------------------------------------
    # Unconditional writes
    # ------------------------------------------------------------------

    async def update_status(
        self,
        reservation_id: uuid.UUID,
        status: ReservationStatus,
        now: datetime,
        expected: ReservationStatus | None = None,
    ) -> Reservation:
        result = await self.session.execute(
            select(ReservationRow)
            .where(ReservationRow.id == reservation_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ReservationNotFound(reservation_id)
        if expected is not None and row.status != expected.value:
            raise IllegalTransition(row.status, status.value)

        row.status = status.value
        row.updated_at = now
        if status not in ACTIVE_STATUSES:
            await self.session.execute(
                update(SlotRow)
                .where(SlotRow.reservation_id == reservation_id)
                .values(is_booked=False, is_available=True, reservation_id=None)
            )
        await self.session.flush()
        return to_reservation(row)

    async def delete_block(self, resource_id: uuid.UUID, block_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(BlockRow).where(BlockRow.id == block_id, BlockRow.resource_id == resource_id)
        )
        await self.session.flush()
        return result.rowcount > 0
