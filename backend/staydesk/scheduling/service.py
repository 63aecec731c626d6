"""Reservation service: the single entry point the transports call.

Composes the conflict detector, lifecycle, slot generator, calendar projector
and occupancy aggregator over one store and one resource registry. The
service holds no mutable state of its own; every call reads the store afresh.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from staydesk.scheduling.calendar_grid import CalendarProjector
from staydesk.scheduling.conflicts import ConflictDetector, validate_interval_for
from staydesk.scheduling.enums import Granularity, ReservationStatus
from staydesk.scheduling.errors import IllegalTransition, InvalidInterval
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.lifecycle import BookingLifecycle
from staydesk.scheduling.occupancy import OccupancyAggregator
from staydesk.scheduling.records import (
    AvailabilityResult,
    AvailabilitySlot,
    BlockedPeriod,
    CalendarDay,
    NewBlock,
    NewReservation,
    OccupancySummary,
    Reservation,
    ResourceInfo,
    SlotRef,
)
from staydesk.scheduling.slots import SlotGenerator, SlotSequence
from staydesk.scheduling.store import ReservationStore, ResourceRegistry
from staydesk.scheduling.templates import DEFAULT_SLOT_MINUTES, WeeklyTemplate

logger = logging.getLogger(__name__)


class ReservationService:
    def __init__(
        self,
        store: ReservationStore,
        registry: ResourceRegistry,
        *,
        clock: Callable[[], datetime] = datetime.now,
        default_slot_minutes: int = DEFAULT_SLOT_MINUTES,
    ) -> None:
        self.store = store
        self.registry = registry
        self.clock = clock
        self.conflicts = ConflictDetector(store, registry)
        self.lifecycle = BookingLifecycle(store, clock)
        self.slots = SlotGenerator(store, registry, clock, default_slot_minutes)
        self.calendar = CalendarProjector(store, registry, clock)
        self.occupancy = OccupancyAggregator(store, registry)

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    async def check_availability(
        self,
        resource_id: uuid.UUID,
        interval: Interval,
        exclude_reservation_id: uuid.UUID | None = None,
    ) -> AvailabilityResult:
        return await self.conflicts.check(resource_id, interval, exclude_reservation_id)

    async def is_free(
        self,
        resource_id: uuid.UUID,
        interval: Interval,
        exclude_reservation_id: uuid.UUID | None = None,
    ) -> bool:
        return await self.conflicts.is_free(resource_id, interval, exclude_reservation_id)

    # ------------------------------------------------------------------
    # Reservations
    # ------------------------------------------------------------------

    def _ensure_not_past(self, resource: ResourceInfo, interval: Interval) -> None:
        now = self.clock()
        if resource.granularity is Granularity.DAY:
            if interval.start_date < now.date():
                raise InvalidInterval(f"Check-in {interval.start_date.isoformat()} is in the past")
        elif interval.start < now:
            raise InvalidInterval(f"Start {interval.start.isoformat()} is in the past")

    async def create_reservation(
        self,
        resource_id: uuid.UUID,
        interval: Interval,
        requester_id: uuid.UUID,
        amount: Decimal = Decimal("0"),
    ) -> Reservation:
        """Reserve ``interval`` on the resource.

        The initial status is CONFIRMED for instant-book resources and
        REQUESTED otherwise. Raises ``ReservationConflict`` when the store's
        atomic check finds an overlapping active reservation or block.
        """
        resource = await self.registry.get(resource_id)
        validate_interval_for(resource, interval)
        self._ensure_not_past(resource, interval)

        status = ReservationStatus.CONFIRMED if resource.instant_book else ReservationStatus.REQUESTED
        draft = NewReservation(
            resource_id=resource_id,
            requester_id=requester_id,
            interval=interval,
            status=status,
            amount=amount,
            created_at=self.clock(),
        )
        reservation = await self.store.create(draft)
        logger.info(
            "Created reservation %s on resource %s for %s (%s)",
            reservation.id,
            resource_id,
            interval,
            reservation.status.value,
        )
        return reservation

    async def get_reservation(self, reservation_id: uuid.UUID) -> Reservation:
        return await self.store.get(reservation_id)

    async def list_reservations(
        self,
        resource_id: uuid.UUID,
        window: Interval,
        statuses: frozenset[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        """Reservations on the resource that overlap ``window``, ordered by start.

        Every status is included unless ``statuses`` narrows it, so hosts and
        agents also see declined, cancelled and past bookings.
        """
        await self.registry.get(resource_id)
        return await self.store.find_in_window(resource_id, window, statuses or frozenset(ReservationStatus))

    async def transition(self, reservation_id: uuid.UUID, target: ReservationStatus) -> Reservation:
        return await self.lifecycle.transition(reservation_id, target)

    async def reschedule(self, reservation_id: uuid.UUID, interval: Interval) -> Reservation:
        """Move an active stay to new dates, re-checked against everything but itself."""
        reservation = await self.store.get(reservation_id)
        if not reservation.is_active:
            raise IllegalTransition(reservation.status.value, "rescheduled")

        resource = await self.registry.get(reservation.resource_id)
        if resource.granularity is not Granularity.DAY:
            raise InvalidInterval("Slot bookings cannot be moved; cancel and book another slot")
        validate_interval_for(resource, interval)
        self._ensure_not_past(resource, interval)

        updated = await self.store.update_interval(reservation_id, interval, self.clock())
        logger.info("Rescheduled reservation %s from %s to %s", reservation_id, reservation.interval, interval)
        return updated

    # ------------------------------------------------------------------
    # Owner holds
    # ------------------------------------------------------------------

    async def block_period(self, resource_id: uuid.UUID, interval: Interval, reason: str) -> BlockedPeriod:
        resource = await self.registry.get(resource_id)
        validate_interval_for(resource, interval)
        block = await self.store.create_block(
            NewBlock(resource_id=resource_id, interval=interval, reason=reason, created_at=self.clock())
        )
        logger.info("Blocked %s on resource %s: %s", interval, resource_id, reason)
        return block

    async def unblock_period(self, resource_id: uuid.UUID, block_id: uuid.UUID) -> bool:
        await self.registry.get(resource_id)
        return await self.store.delete_block(resource_id, block_id)

    async def list_blocks(self, resource_id: uuid.UUID, window: Interval | None = None) -> list[BlockedPeriod]:
        await self.registry.get(resource_id)
        return await self.store.list_blocks(resource_id, window=window)

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    async def generate_slots(
        self,
        resource_id: uuid.UUID,
        date_range: Interval,
        template: WeeklyTemplate | None = None,
    ) -> SlotSequence:
        return await self.slots.generate_slots(resource_id, date_range, template)

    async def book_slot(
        self,
        slot: SlotRef,
        requester_id: uuid.UUID,
        amount: Decimal = Decimal("0"),
        template: WeeklyTemplate | None = None,
    ) -> tuple[Reservation, AvailabilitySlot]:
        return await self.slots.book_slot(slot, requester_id, amount, template)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    async def render_month(self, resource_id: uuid.UUID, year: int, month: int) -> list[CalendarDay]:
        return await self.calendar.render_month(resource_id, year, month)

    async def summarize(self, resource_id: uuid.UUID, period_start: date, period_end: date) -> OccupancySummary:
        return await self.occupancy.summarize(resource_id, period_start, period_end)

    async def summarize_month(self, resource_id: uuid.UUID, year: int, month: int) -> OccupancySummary:
        return await self.occupancy.summarize_month(resource_id, year, month)
