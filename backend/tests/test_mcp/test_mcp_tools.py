"""Tests for MCP tool functions: called directly (not through MCP protocol).

The MCP session factory is overridden to return the same db_session used by
conftest fixtures, so tool functions see test data within the same
transaction (which rolls back after each test). Tools read the wall clock, so
dates here are relative to today.
"""

import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.mcp import set_session_factory
from staydesk.mcp.tools.analytics_tools import occupancy_summary
from staydesk.mcp.tools.calendar_tools import calendar_month, slot_book, slot_list
from staydesk.mcp.tools.reservation_tools import (
    availability_check,
    reservation_create,
    reservation_list,
    reservation_transition,
)

pytestmark = pytest.mark.asyncio


# ---------------------------------------------------------------------------
# MCP session factory setup: share the test db_session with MCP tools
# ---------------------------------------------------------------------------


class _TestSessionContext:
    """Async context manager that yields the shared test session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def __aenter__(self) -> AsyncSession:
        return self._session

    async def __aexit__(self, *args):
        # Don't close, the conftest fixture handles lifecycle
        pass


class _TestSessionFactory:
    def __init__(self, session: AsyncSession):
        self._session = session

    def __call__(self) -> _TestSessionContext:
        return _TestSessionContext(self._session)


@pytest.fixture(autouse=True)
def setup_mcp_session(db_session: AsyncSession):
    """Override MCP session factory to share the test db_session."""
    set_session_factory(_TestSessionFactory(db_session))
    yield


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _days_ahead(offset: int) -> str:
    return (date.today() + timedelta(days=offset)).isoformat()


def _next_monday() -> date:
    """A Monday at least a week away, inside the agent's template."""
    day = date.today() + timedelta(days=7)
    return day + timedelta(days=(7 - day.weekday()) % 7)


async def _create(resource_id, check_in: str, check_out: str, amount: str | None = "500.00") -> dict:
    return await reservation_create(
        resource_id=str(resource_id),
        requester_id=str(uuid.uuid4()),
        check_in=check_in,
        check_out=check_out,
        amount=amount,
    )


# ---------------------------------------------------------------------------
# availability_check / reservation_create
# ---------------------------------------------------------------------------


class TestReservationTools:
    async def test_create_and_conflict(self, stay_row) -> None:
        created = await _create(stay_row.id, _days_ahead(30), _days_ahead(35))

        assert "error" not in created
        reservation = created["reservation"]
        assert reservation["status"] == "requested"
        assert reservation["nights"] == 5
        assert reservation["amount"] == "500.00"

        clash = await _create(stay_row.id, _days_ahead(32), _days_ahead(38))
        assert clash["reservation"] is None
        assert "conflict" in clash["error"].lower()
        assert clash["conflicts"][0]["hold_id"] == reservation["id"]

        back_to_back = await _create(stay_row.id, _days_ahead(35), _days_ahead(38))
        assert back_to_back["reservation"] is not None

    async def test_instant_book_confirmed(self, instant_row) -> None:
        created = await _create(instant_row.id, _days_ahead(30), _days_ahead(32))
        assert created["reservation"]["status"] == "confirmed"

    async def test_availability(self, stay_row) -> None:
        created = await _create(stay_row.id, _days_ahead(30), _days_ahead(35))

        busy = await availability_check(str(stay_row.id), _days_ahead(33), _days_ahead(36))
        own = await availability_check(
            str(stay_row.id),
            _days_ahead(33),
            _days_ahead(36),
            exclude_reservation_id=created["reservation"]["id"],
        )
        free = await availability_check(str(stay_row.id), _days_ahead(35), _days_ahead(36))

        assert busy["available"] is False
        assert busy["conflicts"][0]["kind"] == "reservation"
        assert own["available"] is True
        assert free["available"] is True

    async def test_invalid_dates(self, stay_row) -> None:
        result = await _create(stay_row.id, "not-a-date", _days_ahead(3))
        assert "Invalid input" in result["error"]

        inverted = await _create(stay_row.id, _days_ahead(5), _days_ahead(3))
        assert "error" in inverted

    async def test_invalid_amount(self, stay_row) -> None:
        result = await _create(stay_row.id, _days_ahead(30), _days_ahead(32), amount="lots")
        assert "Invalid amount" in result["error"]

    async def test_past_dates_rejected(self, stay_row) -> None:
        result = await _create(stay_row.id, _days_ahead(-5), _days_ahead(-2))
        assert result["reservation"] is None
        assert "past" in result["error"]

    async def test_unknown_resource(self) -> None:
        result = await availability_check(str(uuid.uuid4()), _days_ahead(30), _days_ahead(32))
        assert "not found" in result["error"]


# ---------------------------------------------------------------------------
# reservation_transition
# ---------------------------------------------------------------------------


class TestTransitionTool:
    async def test_confirm_and_cancel(self, stay_row) -> None:
        created = await _create(stay_row.id, _days_ahead(30), _days_ahead(35))
        reservation_id = created["reservation"]["id"]

        confirmed = await reservation_transition(reservation_id, "confirmed")
        assert confirmed["reservation"]["status"] == "confirmed"

        cancelled = await reservation_transition(reservation_id, "cancelled")
        assert cancelled["reservation"]["status"] == "cancelled"

        free = await availability_check(str(stay_row.id), _days_ahead(30), _days_ahead(35))
        assert free["available"] is True

    async def test_illegal_move(self, stay_row) -> None:
        created = await _create(stay_row.id, _days_ahead(30), _days_ahead(35))

        result = await reservation_transition(created["reservation"]["id"], "completed")

        assert result["reservation"] is None
        assert "Cannot transition" in result["error"]

    async def test_unknown_status(self) -> None:
        result = await reservation_transition(str(uuid.uuid4()), "checked_in")
        assert "Invalid status" in result["error"]

    async def test_missing_reservation(self) -> None:
        result = await reservation_transition(str(uuid.uuid4()), "confirmed")
        assert "not found" in result["error"]


class TestListTool:
    async def test_window_and_status_filter(self, stay_row) -> None:
        first = await _create(stay_row.id, _days_ahead(30), _days_ahead(32))
        second = await _create(stay_row.id, _days_ahead(40), _days_ahead(42))
        await reservation_transition(first["reservation"]["id"], "declined")

        everything = await reservation_list(str(stay_row.id), _days_ahead(25), _days_ahead(45))
        requested = await reservation_list(str(stay_row.id), _days_ahead(25), _days_ahead(45), status="requested")
        narrow = await reservation_list(str(stay_row.id), _days_ahead(25), _days_ahead(30))

        assert [r["id"] for r in everything["reservations"]] == [first["reservation"]["id"], second["reservation"]["id"]]
        assert everything["total"] == 2
        assert [r["id"] for r in requested["reservations"]] == [second["reservation"]["id"]]
        # last day is inclusive, so the first stay's check-in day is in range
        assert narrow["total"] == 1

    async def test_unknown_status(self, stay_row) -> None:
        result = await reservation_list(str(stay_row.id), _days_ahead(1), _days_ahead(5), status="checked_in")
        assert "Invalid status" in result["error"]
        assert result["total"] == 0

    async def test_inverted_dates(self, stay_row) -> None:
        result = await reservation_list(str(stay_row.id), _days_ahead(5), _days_ahead(1))
        assert "error" in result

    async def test_unknown_resource(self) -> None:
        result = await reservation_list(str(uuid.uuid4()), _days_ahead(1), _days_ahead(5))
        assert "not found" in result["error"]


# ---------------------------------------------------------------------------
# calendar_month / slot tools
# ---------------------------------------------------------------------------


class TestCalendarTools:
    async def test_month_grid(self, stay_row) -> None:
        check_in = date.today() + timedelta(days=40)
        await _create(stay_row.id, check_in.isoformat(), (check_in + timedelta(days=1)).isoformat())

        result = await calendar_month(str(stay_row.id), check_in.year, check_in.month)

        assert len(result["days"]) == 42
        day = next(d for d in result["days"] if d["date"] == check_in.isoformat())
        assert day["status"] == "reserved"
        assert day["is_check_in"] is True
        assert day["is_check_out"] is True

    async def test_bad_month(self, stay_row) -> None:
        result = await calendar_month(str(stay_row.id), 2026, 13)
        assert result["days"] == []
        assert "error" in result

    async def test_slot_list_and_book(self, agent_row) -> None:
        monday = _next_monday()

        listed = await slot_list(str(agent_row.id), monday.isoformat())
        assert [s["start_time"] for s in listed["slots"]] == ["09:00", "10:00", "11:00"]

        booked = await slot_book(str(agent_row.id), str(uuid.uuid4()), monday.isoformat(), "10:00")
        assert booked["reservation"]["status"] == "confirmed"
        assert booked["slot"]["end_time"] == "11:00"

        again = await slot_book(str(agent_row.id), str(uuid.uuid4()), monday.isoformat(), "10:00")
        assert again["reservation"] is None
        assert "error" in again

        remaining = await slot_list(str(agent_row.id), monday.isoformat())
        assert [s["start_time"] for s in remaining["slots"]] == ["09:00", "11:00"]

    async def test_slot_outside_template(self, agent_row) -> None:
        result = await slot_book(str(agent_row.id), str(uuid.uuid4()), _next_monday().isoformat(), "13:00")
        assert result["reservation"] is None
        assert "not a bookable slot" in result["error"]

    async def test_slot_range_limit(self, agent_row) -> None:
        result = await slot_list(str(agent_row.id), _days_ahead(1), _days_ahead(40))
        assert "limited" in result["error"]

    async def test_slots_on_stay_resource(self, stay_row) -> None:
        result = await slot_list(str(stay_row.id), _days_ahead(1))
        assert result["total"] == 0
        assert "error" in result


# ---------------------------------------------------------------------------
# occupancy_summary
# ---------------------------------------------------------------------------


class TestOccupancyTool:
    async def test_summary_with_commission(self, instant_row) -> None:
        await _create(instant_row.id, _days_ahead(10), _days_ahead(15), amount="500.00")
        await _create(instant_row.id, _days_ahead(15), _days_ahead(18), amount="300.00")

        result = await occupancy_summary(str(instant_row.id), _days_ahead(10), _days_ahead(30))

        assert result["booked_nights"] == 8
        assert result["days_in_period"] == 20
        assert result["occupancy_rate"] == 40
        assert result["revenue"] == "800.00"
        assert result["commission"] == "80.00"
        assert result["net_revenue"] == "720.00"

    async def test_invalid_period(self, instant_row) -> None:
        result = await occupancy_summary(str(instant_row.id), _days_ahead(10), _days_ahead(5))
        assert "error" in result

    async def test_default_period(self, instant_row) -> None:
        result = await occupancy_summary(str(instant_row.id))
        assert result["days_in_period"] == 30
        assert result["booked_nights"] == 0
