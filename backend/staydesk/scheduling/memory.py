"""In-process store and registry.

Used by the test-suite and for local experiments. Writers on the same resource
are serialised with one ``asyncio.Lock`` per resource, which gives the same
check-then-write guarantee the SQL store gets from its row lock.
"""

import asyncio
import uuid
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, time

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
    ResourceInfo,
    SlotRef,
)
from staydesk.scheduling.store import ReservationStore, ResourceRegistry


class InMemoryResourceRegistry(ResourceRegistry):
    def __init__(self, resources: Iterable[ResourceInfo] = ()) -> None:
        self._resources: dict[uuid.UUID, ResourceInfo] = {r.id: r for r in resources}

    def add(self, resource: ResourceInfo) -> ResourceInfo:
        self._resources[resource.id] = resource
        return resource

    async def get(self, resource_id: uuid.UUID) -> ResourceInfo:
        try:
            return self._resources[resource_id]
        except KeyError:
            raise ResourceNotFound(resource_id) from None


class InMemoryReservationStore(ReservationStore):
    def __init__(self) -> None:
        self._reservations: dict[uuid.UUID, Reservation] = {}
        self._blocks: dict[uuid.UUID, BlockedPeriod] = {}
        self._slots: dict[tuple[uuid.UUID, date, time, time], AvailabilitySlot] = {}
        self._locks: defaultdict[uuid.UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    # -- helpers -------------------------------------------------------------

    def _for_resource(self, resource_id: uuid.UUID) -> list[Reservation]:
        return sorted(
            (r for r in self._reservations.values() if r.resource_id == resource_id),
            key=lambda r: r.interval.start,
        )

    def _blocks_for(self, resource_id: uuid.UUID) -> list[BlockedPeriod]:
        return sorted(
            (b for b in self._blocks.values() if b.resource_id == resource_id),
            key=lambda b: b.interval.start,
        )

    async def _conflicts(
        self,
        resource_id: uuid.UUID,
        interval: Interval,
        exclude_reservation_id: uuid.UUID | None = None,
        include_blocks: bool = True,
    ) -> list[ConflictDetail]:
        """Overlap check run inside the resource lock, mirroring the SQL store's re-read."""
        return find_overlaps(
            interval,
            self._for_resource(resource_id),
            self._blocks_for(resource_id) if include_blocks else (),
            exclude_reservation_id=exclude_reservation_id,
        )

    def _insert(self, draft: NewReservation) -> Reservation:
        reservation = Reservation(
            id=draft.id,
            resource_id=draft.resource_id,
            requester_id=draft.requester_id,
            interval=draft.interval,
            status=draft.status,
            amount=draft.amount,
            created_at=draft.created_at,
            updated_at=draft.created_at,
        )
        self._reservations[reservation.id] = reservation
        return reservation

    # -- reads ---------------------------------------------------------------

    async def get(self, reservation_id: uuid.UUID) -> Reservation:
        try:
            return self._reservations[reservation_id]
        except KeyError:
            raise ReservationNotFound(reservation_id) from None

    async def find_active_for_resource(
        self,
        resource_id: uuid.UUID,
        window: Interval | None = None,
    ) -> list[Reservation]:
        return [
            r
            for r in self._for_resource(resource_id)
            if r.is_active and (window is None or r.interval.overlaps(window))
        ]

    async def find_in_window(
        self,
        resource_id: uuid.UUID,
        window: Interval,
        statuses: frozenset[ReservationStatus],
    ) -> list[Reservation]:
        return [r for r in self._for_resource(resource_id) if r.status in statuses and r.interval.overlaps(window)]

    async def list_blocks(self, resource_id: uuid.UUID, window: Interval | None = None) -> list[BlockedPeriod]:
        return [b for b in self._blocks_for(resource_id) if window is None or b.interval.overlaps(window)]

    async def list_claimed_slots(self, resource_id: uuid.UUID, first_day: date, last_day: date) -> list[AvailabilitySlot]:
        return sorted(
            (
                s
                for (rid, day, _, _), s in self._slots.items()
                if rid == resource_id and first_day <= day <= last_day
            ),
            key=lambda s: (s.date, s.start_time),
        )

    # -- conditional writes --------------------------------------------------

    async def create(self, draft: NewReservation) -> Reservation:
        async with self._locks[draft.resource_id]:
            conflicts = await self._conflicts(draft.resource_id, draft.interval)
            if conflicts:
                raise ReservationConflict(draft.resource_id, conflicts)
            return self._insert(draft)

    async def update_interval(self, reservation_id: uuid.UUID, interval: Interval, now: datetime) -> Reservation:
        current = await self.get(reservation_id)
        async with self._locks[current.resource_id]:
            current = self._reservations[reservation_id]
            if not current.is_active:
                raise IllegalTransition(current.status.value, "rescheduled")
            conflicts = await self._conflicts(current.resource_id, interval, exclude_reservation_id=reservation_id)
            if conflicts:
                raise ReservationConflict(current.resource_id, conflicts)
            updated = replace(current, interval=interval, updated_at=now)
            self._reservations[reservation_id] = updated
            return updated

    async def create_block(self, draft: NewBlock) -> BlockedPeriod:
        async with self._locks[draft.resource_id]:
            conflicts = await self._conflicts(draft.resource_id, draft.interval, include_blocks=False)
            if conflicts:
                raise ReservationConflict(draft.resource_id, conflicts)
            block = BlockedPeriod(
                id=draft.id,
                resource_id=draft.resource_id,
                interval=draft.interval,
                reason=draft.reason,
                created_at=draft.created_at,
            )
            self._blocks[block.id] = block
            return block

    async def claim_slot(self, slot: SlotRef, draft: NewReservation) -> tuple[Reservation, AvailabilitySlot]:
        async with self._locks[slot.resource_id]:
            conflicts = await self._conflicts(slot.resource_id, slot.interval)
            if conflicts:
                raise SlotUnavailable(slot.resource_id, conflicts)
            reservation = self._insert(draft)
            key = (slot.resource_id, slot.date, slot.start_time, slot.end_time)
            existing = self._slots.get(key)
            claimed = AvailabilitySlot(
                resource_id=slot.resource_id,
                date=slot.date,
                start_time=slot.start_time,
                end_time=slot.end_time,
                is_available=False,
                is_booked=True,
                reservation_id=reservation.id,
                id=existing.id if existing else uuid.uuid4(),
            )
            self._slots[key] = claimed
            return reservation, claimed

    # -- unconditional writes ------------------------------------------------

    async def update_status(
        self,
        reservation_id: uuid.UUID,
        status: ReservationStatus,
        now: datetime,
        expected: ReservationStatus | None = None,
    ) -> Reservation:
        current = await self.get(reservation_id)
        async with self._locks[current.resource_id]:
            current = self._reservations[reservation_id]
            if expected is not None and current.status is not expected:
                raise IllegalTransition(current.status.value, status.value)
            updated = replace(current, status=status, updated_at=now)
            self._reservations[reservation_id] = updated
            if status not in ACTIVE_STATUSES:
                for key, slot in self._slots.items():
                    if slot.reservation_id == reservation_id:
                        self._slots[key] = replace(slot, is_available=True, is_booked=False, reservation_id=None)
            return updated

    async def delete_block(self, resource_id: uuid.UUID, block_id: uuid.UUID) -> bool:
        async with self._locks[resource_id]:
            block = self._blocks.get(block_id)
            if block is None or block.resource_id != resource_id:
                return False
            del self._blocks[block_id]
            return True
