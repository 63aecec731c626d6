"""Seed the database with sample stays, reservations, blocks and an agent calendar.

Reservations are written through ``ReservationService`` so the seed data obeys
the same overlap and lifecycle rules as live traffic.

Run inside Docker:
    docker compose exec backend python -m scripts.seed_data
"""

import asyncio
import sys
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from staydesk.database import async_session_factory, engine
from staydesk.models.resource import Resource
from staydesk.scheduling.enums import ReservationStatus
from staydesk.scheduling.intervals import Interval
from staydesk.scheduling.templates import WeeklyTemplate
from staydesk.services.scheduling_service import build_reservation_service

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_OWNER_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")

STAYS = [
    {"name": "Le Ayu Villa Canggu", "instant_book": True, "nightly": Decimal("129.00")},
    {"name": "Pitu Village Escape", "instant_book": False, "nightly": Decimal("86.00")},
    {"name": "Umah Anyar Villas Ubud", "instant_book": False, "nightly": Decimal("163.00")},
]

AGENT = {
    "name": "Viewing calendar: Canggu office",
    "template": {
        "slot_minutes": 60,
        "windows": {
            "monday": [["09:00", "12:00"], ["13:00", "17:00"]],
            "tuesday": [["09:00", "12:00"], ["13:00", "17:00"]],
            "wednesday": [["09:00", "12:00"]],
            "thursday": [["09:00", "12:00"], ["13:00", "17:00"]],
            "friday": [["09:00", "15:00"]],
        },
    },
}

# (stay index, offset from today in days, nights, final status)
RESERVATIONS = [
    (0, 3, 4, ReservationStatus.CONFIRMED),
    (0, 9, 5, ReservationStatus.CONFIRMED),
    (0, 20, 3, ReservationStatus.CANCELLED),
    (1, 2, 2, ReservationStatus.REQUESTED),
    (1, 6, 7, ReservationStatus.CONFIRMED),
    (1, 14, 3, ReservationStatus.DECLINED),
    (2, 1, 3, ReservationStatus.CONFIRMED),
    (2, 12, 6, ReservationStatus.REQUESTED),
]

# (stay index, offset from today in days, nights, reason)
BLOCKS = [
    (0, 16, 2, "Pool maintenance"),
    (2, 25, 4, "Owner staying"),
]


async def seed() -> None:
    """Populate the database with sample scheduling data.

    Idempotent: deletes the demo owner's resources (reservations, blocks and
    slots cascade) and re-seeds them.
    """
    today = date.today()

    async with async_session_factory() as session:
        result = await session.execute(select(Resource.id).where(Resource.owner_id == DEMO_OWNER_ID))
        if result.first() is not None:
            print("⚠️  Demo resources already exist. Deleting and re-seeding...")
            await session.execute(delete(Resource).where(Resource.owner_id == DEMO_OWNER_ID))
            await session.flush()

        # ------------------------------------------------------------------
        # 1. Resources
        # ------------------------------------------------------------------
        stays = []
        for entry in STAYS:
            resource = Resource(
                owner_id=DEMO_OWNER_ID,
                name=entry["name"],
                kind="property_stay",
                instant_book=entry["instant_book"],
            )
            session.add(resource)
            stays.append(resource)

        template = WeeklyTemplate.from_dict(AGENT["template"])
        agent = Resource(
            owner_id=DEMO_OWNER_ID,
            name=AGENT["name"],
            kind="agent_slot",
            instant_book=True,
            slot_minutes=template.slot_minutes,
            availability_template=template.to_dict(),
        )
        session.add(agent)
        await session.flush()
        print(f"✅ Created {len(stays)} stays and 1 agent calendar")

        service = build_reservation_service(session)

        # ------------------------------------------------------------------
        # 2. Reservations, moved through the lifecycle
        # ------------------------------------------------------------------
        for index, offset, nights, final_status in RESERVATIONS:
            stay = stays[index]
            check_in = today + timedelta(days=offset)
            reservation = await service.create_reservation(
                stay.id,
                Interval.from_dates(check_in, check_in + timedelta(days=nights)),
                requester_id=uuid.uuid4(),
                amount=STAYS[index]["nightly"] * nights,
            )
            if reservation.status is ReservationStatus.REQUESTED and final_status is not ReservationStatus.REQUESTED:
                if final_status is not ReservationStatus.DECLINED:
                    reservation = await service.transition(reservation.id, ReservationStatus.CONFIRMED)
                else:
                    reservation = await service.transition(reservation.id, ReservationStatus.DECLINED)
            if final_status is ReservationStatus.CANCELLED:
                await service.transition(reservation.id, ReservationStatus.CANCELLED)
        print(f"✅ Created {len(RESERVATIONS)} reservations")

        # ------------------------------------------------------------------
        # 3. Owner blocks
        # ------------------------------------------------------------------
        for index, offset, nights, reason in BLOCKS:
            start = today + timedelta(days=offset)
            await service.block_period(stays[index].id, Interval.from_dates(start, start + timedelta(days=nights)), reason)
        print(f"✅ Created {len(BLOCKS)} blocked periods")

        # ------------------------------------------------------------------
        # 4. One booked viewing on the next working day
        # ------------------------------------------------------------------
        next_week = Interval.from_dates(today + timedelta(days=1), today + timedelta(days=8))
        slots = await service.generate_slots(agent.id, next_week)
        first_open = next(iter(slots.available()), None)
        if first_open is not None and first_open.interval.start > datetime.now():
            await service.book_slot(first_open.ref, requester_id=uuid.uuid4())
            print(f"✅ Booked viewing slot {first_open.date} {first_open.start_time:%H:%M}")

        await session.commit()

    await engine.dispose()
    print("🌱 Seed complete")


if __name__ == "__main__":
    asyncio.run(seed())
