"""Conflict detection: is a candidate interval free on a resource?"""

import logging
import uuid
from collections.abc import Iterable

from staydesk.scheduling.enums import Granularity
from staydesk.scheduling.errors import InvalidInterval
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.records import (
    AvailabilityResult,
    BlockedPeriod,
    ConflictDetail,
    Reservation,
    ResourceInfo,
)
from staydesk.scheduling.store import ReservationStore, ResourceRegistry

logger = logging.getLogger(__name__)


def validate_interval_for(resource: ResourceInfo, interval: Interval) -> None:
    """Day-granularity resources only accept midnight-aligned intervals."""
    if resource.granularity is Granularity.DAY and not interval.is_day_aligned:
        raise InvalidInterval(f"Resource {resource.id} is booked by the day; got {interval}")


def find_overlaps(
    candidate: Interval,
    reservations: Iterable[Reservation],
    blocks: Iterable[BlockedPeriod] = (),
    exclude_reservation_id: uuid.UUID | None = None,
) -> list[ConflictDetail]:
    """Return every active reservation or block that overlaps ``candidate``.

    Terminal reservations never conflict, so callers may pass an unfiltered
    list. Results are ordered by start time.
    """
    conflicts = [
        ConflictDetail.from_hold(r)
        for r in reservations
        if r.is_active and r.id != exclude_reservation_id and r.interval.overlaps(candidate)
    ]
    conflicts.extend(ConflictDetail.from_hold(b) for b in blocks if b.interval.overlaps(candidate))
    conflicts.sort(key=lambda c: c.interval.start)
    return conflicts


class ConflictDetector:
    """Answers availability questions against the current store contents.

    The answer is advisory: between this read and a later write another caller
    may claim the interval. Writers must go through the store's conditional
    writes, which repeat the check atomically.
    """

    def __init__(self, store: ReservationStore, registry: ResourceRegistry) -> None:
        self.store = store
        self.registry = registry

    async def find_conflicts(
        self,
        resource_id: uuid.UUID,
        candidate: Interval,
        exclude_reservation_id: uuid.UUID | None = None,
    ) -> list[ConflictDetail]:
        resource = await self.registry.get(resource_id)
        validate_interval_for(resource, candidate)

        reservations = await self.store.find_active_for_resource(resource_id, window=candidate)
        blocks = await self.store.list_blocks(resource_id, window=candidate)
        conflicts = find_overlaps(candidate, reservations, blocks, exclude_reservation_id)
        if conflicts:
            logger.info(
                "Interval %s on resource %s overlaps %d hold(s)",
                candidate,
                resource_id,
                len(conflicts),
            )
        return conflicts

    async def is_free(
        self,
        resource_id: uuid.UUID,
        candidate: Interval,
        exclude_reservation_id: uuid.UUID | None = None,
    ) -> bool:
        return not await self.find_conflicts(resource_id, candidate, exclude_reservation_id)

    async def check(
        self,
        resource_id: uuid.UUID,
        candidate: Interval,
        exclude_reservation_id: uuid.UUID | None = None,
    ) -> AvailabilityResult:
        conflicts = await self.find_conflicts(resource_id, candidate, exclude_reservation_id)
        return AvailabilityResult(resource_id=resource_id, interval=candidate, conflicts=tuple(conflicts))
