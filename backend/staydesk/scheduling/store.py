"""Persistence interfaces the scheduling core depends on.

Implementations must honour one contract above all: ``create``,
``update_interval``, ``create_block`` and ``claim_slot`` evaluate the overlap
check and perform the write as a single unit with respect to every other
writer on the same resource (a transaction holding a resource-scoped row
lock, a storage-level exclusion constraint, or an in-process lock). A plain
read followed by an unguarded write is not an acceptable implementation.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime

from staydesk.scheduling.enums import ReservationStatus
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.records import (
    AvailabilitySlot,
    BlockedPeriod,
    NewBlock,
    NewReservation,
    Reservation,
    ResourceInfo,
    SlotRef,
)


class ResourceRegistry(ABC):
    """Resolves resource identity, kind and owner (owned by the listing subsystem)."""

    @abstractmethod
    async def get(self, resource_id: uuid.UUID) -> ResourceInfo:
        """Return the resource or raise ``ResourceNotFound``."""


class ReservationStore(ABC):
    """Reservation, block and claimed-slot persistence."""

    # -- reads ---------------------------------------------------------------

    @abstractmethod
    async def get(self, reservation_id: uuid.UUID) -> Reservation:
        """Return one reservation or raise ``ReservationNotFound``."""

    @abstractmethod
    async def find_active_for_resource(
        self,
        resource_id: uuid.UUID,
        window: Interval | None = None,
    ) -> list[Reservation]:
        """Non-terminal reservations, optionally limited to those overlapping ``window``."""

    @abstractmethod
    async def find_in_window(
        self,
        resource_id: uuid.UUID,
        window: Interval,
        statuses: frozenset[ReservationStatus],
    ) -> list[Reservation]:
        """Reservations in ``statuses`` overlapping ``window``, ordered by start."""

    @abstractmethod
    async def list_blocks(
        self,
        resource_id: uuid.UUID,
        window: Interval | None = None,
    ) -> list[BlockedPeriod]:
        """Blocked periods, optionally limited to those overlapping ``window``."""

    @abstractmethod
    async def list_claimed_slots(
        self,
        resource_id: uuid.UUID,
        first_day: date,
        last_day: date,
    ) -> list[AvailabilitySlot]:
        """Persisted (claimed) slots with ``first_day <= date <= last_day``."""

    # -- conditional writes --------------------------------------------------

    @abstractmethod
    async def create(self, draft: NewReservation) -> Reservation:
        """Persist ``draft`` iff its interval is free; raise ``ReservationConflict`` otherwise."""

    @abstractmethod
    async def update_interval(self, reservation_id: uuid.UUID, interval: Interval, now: datetime) -> Reservation:
        """Move an active reservation iff the new interval is free (excluding itself)."""

    @abstractmethod
    async def create_block(self, draft: NewBlock) -> BlockedPeriod:
        """Persist an owner hold iff no active reservation overlaps it."""

    @abstractmethod
    async def claim_slot(self, slot: SlotRef, draft: NewReservation) -> tuple[Reservation, AvailabilitySlot]:
        """Create the reservation and mark the slot booked, or raise ``SlotUnavailable``."""

    # -- unconditional writes ------------------------------------------------

    @abstractmethod
    async def update_status(
        self,
        reservation_id: uuid.UUID,
        status: ReservationStatus,
        now: datetime,
        expected: ReservationStatus | None = None,
    ) -> Reservation:
        """Persist a new status and ``updated_at``; terminal statuses release any claimed slot.

        When ``expected`` is given the write only happens if the stored status
        still equals it; otherwise ``IllegalTransition`` is raised.
        """

    @abstractmethod
    async def delete_block(self, resource_id: uuid.UUID, block_id: uuid.UUID) -> bool:
        """Remove an owner hold. Returns False when it did not exist."""
