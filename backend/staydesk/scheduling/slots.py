"""Viewing-slot generation for minute-granularity resources.

Slots are never the source of truth. ``expand_slots`` derives them from the
weekly template plus the current reservations, blocks and claimed slots, so a
sequence can be regenerated on every read without drifting out of sync. Only
claimed slots are persisted; those are returned by identity instead of being
regenerated.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Iterator
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from staydesk.scheduling.conflicts import find_overlaps
from staydesk.scheduling.enums import Granularity, ReservationStatus
from staydesk.scheduling.errors import InvalidInterval, InvalidPeriod, SlotUnavailable
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.records import (
    AvailabilitySlot,
    BlockedPeriod,
    NewReservation,
    Reservation,
    ResourceInfo,
    SlotRef,
)
from staydesk.scheduling.store import ReservationStore, ResourceRegistry
from staydesk.scheduling.templates import DEFAULT_SLOT_MINUTES, WeeklyTemplate

logger = logging.getLogger(__name__)

SlotKey = tuple[date, time, time]

# longest listing a caller may request in one go
MAX_SLOT_DAYS = 31


def slot_range(first_day: date, last_day: date) -> Interval:
    """Half-open range covering ``first_day`` through ``last_day`` inclusive."""
    if last_day < first_day:
        raise InvalidPeriod("end_date must not be before start_date")
    if (last_day - first_day).days >= MAX_SLOT_DAYS:
        raise InvalidPeriod(f"Date range is limited to {MAX_SLOT_DAYS} days")
    return Interval.from_dates(first_day, last_day + timedelta(days=1))


def expand_slots(
    resource_id: uuid.UUID,
    days: Iterable[date],
    template: WeeklyTemplate,
    reservations: Iterable[Reservation],
    blocks: Iterable[BlockedPeriod] = (),
    claimed: Iterable[AvailabilitySlot] = (),
) -> Iterator[AvailabilitySlot]:
    """Yield the slots ``template`` produces on ``days``, marked against current holds."""
    reservations = list(reservations)
    blocks = list(blocks)
    claimed_by_key: dict[SlotKey, AvailabilitySlot] = {
        (slot.date, slot.start_time, slot.end_time): slot for slot in claimed if slot.is_booked
    }

    for day in days:
        for start, end in template.slot_bounds(day):
            key = (day, start.time(), end.time())
            if key in claimed_by_key:
                yield claimed_by_key[key]
                continue

            overlaps = find_overlaps(Interval(start, end), reservations, blocks)
            booking = next((c for c in overlaps if c.kind == "reservation"), None)
            yield AvailabilitySlot(
                resource_id=resource_id,
                date=day,
                start_time=start.time(),
                end_time=end.time(),
                is_available=not overlaps,
                is_booked=booking is not None,
                reservation_id=booking.hold_id if booking else None,
            )


class SlotSequence:
    """A finite, restartable view of generated slots.

    Each iteration re-runs ``expand_slots`` over the snapshot taken when the
    sequence was built; nothing is cached between iterations.
    """

    def __init__(
        self,
        resource_id: uuid.UUID,
        date_range: Interval,
        template: WeeklyTemplate,
        reservations: list[Reservation],
        blocks: list[BlockedPeriod],
        claimed: list[AvailabilitySlot],
    ) -> None:
        self.resource_id = resource_id
        self.date_range = date_range
        self.template = template
        self._reservations = reservations
        self._blocks = blocks
        self._claimed = claimed

    def __iter__(self) -> Iterator[AvailabilitySlot]:
        return expand_slots(
            self.resource_id,
            self.date_range.days(),
            self.template,
            self._reservations,
            self._blocks,
            self._claimed,
        )

    def available(self) -> Iterator[AvailabilitySlot]:
        return (slot for slot in self if slot.is_available)


class SlotGenerator:
    def __init__(
        self,
        store: ReservationStore,
        registry: ResourceRegistry,
        clock: Callable[[], datetime] = datetime.now,
        default_slot_minutes: int = DEFAULT_SLOT_MINUTES,
    ) -> None:
        self.store = store
        self.registry = registry
        self.clock = clock
        self.default_slot_minutes = default_slot_minutes

    def _template_for(self, resource: ResourceInfo, template: WeeklyTemplate | None) -> WeeklyTemplate:
        if template is not None:
            return template
        if resource.template is not None:
            return resource.template
        return WeeklyTemplate(slot_minutes=self.default_slot_minutes)

    async def _slot_resource(self, resource_id: uuid.UUID) -> ResourceInfo:
        resource = await self.registry.get(resource_id)
        if resource.granularity is not Granularity.MINUTE:
            raise InvalidInterval(f"Resource {resource_id} is booked by the day and has no time slots")
        return resource

    async def generate_slots(
        self,
        resource_id: uuid.UUID,
        date_range: Interval,
        template: WeeklyTemplate | None = None,
    ) -> SlotSequence:
        """Snapshot current holds for ``date_range`` and return the slot sequence."""
        resource = await self._slot_resource(resource_id)
        if not date_range.is_day_aligned:
            raise InvalidInterval("Slot date ranges must start and end on whole days")

        reservations = await self.store.find_active_for_resource(resource_id, window=date_range)
        blocks = await self.store.list_blocks(resource_id, window=date_range)
        last_day = date_range.end_date - timedelta(days=1)
        claimed = await self.store.list_claimed_slots(resource_id, date_range.start_date, last_day)

        return SlotSequence(
            resource_id=resource_id,
            date_range=date_range,
            template=self._template_for(resource, template),
            reservations=reservations,
            blocks=blocks,
            claimed=claimed,
        )

    async def book_slot(
        self,
        slot: SlotRef,
        requester_id: uuid.UUID,
        amount: Decimal = Decimal("0"),
        template: WeeklyTemplate | None = None,
    ) -> tuple[Reservation, AvailabilitySlot]:
        """Claim ``slot`` for ``requester_id``.

        Raises ``SlotUnavailable`` if the slot is outside the template or the
        store's atomic check finds an overlapping reservation or block.
        """
        resource = await self._slot_resource(slot.resource_id)
        interval = slot.interval
        active_template = self._template_for(resource, template)
        if not active_template.generates(interval.start, interval.end):
            raise SlotUnavailable(slot.resource_id, message=f"{interval} is not a bookable slot for {slot.resource_id}")

        now = self.clock()
        if interval.start < now:
            raise InvalidInterval(f"Slot {interval} has already started")

        status = ReservationStatus.CONFIRMED if resource.instant_book else ReservationStatus.REQUESTED
        draft = NewReservation(
            resource_id=slot.resource_id,
            requester_id=requester_id,
            interval=interval,
            status=status,
            amount=amount,
            created_at=now,
        )
        reservation, claimed = await self.store.claim_slot(slot, draft)
        logger.info("Slot %s on resource %s claimed by reservation %s", interval, slot.resource_id, reservation.id)
        return reservation, claimed
