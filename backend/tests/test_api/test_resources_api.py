"""Tests for resource registration endpoints."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestResources:
    async def test_register_stay(self, client: AsyncClient) -> None:
        owner = str(uuid.uuid4())

        response = await client.post(
            "/api/v1/resources",
            json={"owner_id": owner, "name": "Villa Seminyak", "kind": "property_stay", "instant_book": True},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["owner_id"] == owner
        assert data["kind"] == "property_stay"
        assert data["instant_book"] is True
        assert data["availability_template"] is None

        fetched = await client.get(f"/api/v1/resources/{data['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Villa Seminyak"

    async def test_register_agent_with_template(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/resources",
            json={
                "owner_id": str(uuid.uuid4()),
                "name": "Agent calendar",
                "kind": "agent_slot",
                "availability_template": {"slot_minutes": 30, "windows": {"Tuesday": [["10:00", "12:00"]]}},
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slot_minutes"] == 30
        assert data["availability_template"] == {"slot_minutes": 30, "windows": {"tuesday": [["10:00", "12:00"]]}}

        slots = await client.get(
            f"/api/v1/slots/{data['id']}",
            params={"start_date": "2024-03-05", "end_date": "2024-03-05"},
        )
        assert slots.json()["total"] == 4

    async def test_template_on_stay_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/resources",
            json={
                "owner_id": str(uuid.uuid4()),
                "name": "Villa",
                "kind": "property_stay",
                "availability_template": {"windows": {"monday": [["09:00", "12:00"]]}},
            },
        )
        assert response.status_code == 400

    async def test_inverted_window_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/resources",
            json={
                "owner_id": str(uuid.uuid4()),
                "name": "Agent",
                "kind": "agent_slot",
                "availability_template": {"windows": {"monday": [["12:00", "09:00"]]}},
            },
        )
        assert response.status_code == 400

    async def test_unknown_kind_422(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/resources",
            json={"owner_id": str(uuid.uuid4()), "name": "Boat", "kind": "yacht_charter"},
        )
        assert response.status_code == 422

    async def test_missing_404(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/resources/{uuid.uuid4()}")
        assert response.status_code == 404


class TestUpdateTemplate:
    async def test_slots_follow_new_hours(self, client: AsyncClient, agent_row) -> None:
        response = await client.put(
            f"/api/v1/resources/{agent_row.id}/template",
            json={"slot_minutes": 30, "windows": {"Tuesday": [["14:00", "15:00"]]}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["slot_minutes"] == 30
        assert data["availability_template"] == {"slot_minutes": 30, "windows": {"tuesday": [["14:00", "15:00"]]}}

        monday = await client.get(
            f"/api/v1/slots/{agent_row.id}",
            params={"start_date": "2024-03-04", "end_date": "2024-03-04"},
        )
        tuesday = await client.get(
            f"/api/v1/slots/{agent_row.id}",
            params={"start_date": "2024-03-05", "end_date": "2024-03-05"},
        )
        assert monday.json()["total"] == 0
        assert [s["start_time"] for s in tuesday.json()["slots"]] == ["14:00:00", "14:30:00"]

    async def test_default_slot_length(self, client: AsyncClient, agent_row) -> None:
        response = await client.put(
            f"/api/v1/resources/{agent_row.id}/template",
            json={"windows": {"friday": [["10:00", "12:00"]]}},
        )
        assert response.json()["slot_minutes"] == 60

    async def test_existing_booking_kept(self, client: AsyncClient, agent_row) -> None:
        booked = await client.post(
            f"/api/v1/slots/{agent_row.id}/book",
            json={"date": "2024-03-04", "start_time": "09:00", "end_time": "10:00", "requester_id": str(uuid.uuid4())},
        )
        reservation_id = booked.json()["reservation"]["id"]

        await client.put(
            f"/api/v1/resources/{agent_row.id}/template",
            json={"windows": {"tuesday": [["09:00", "10:00"]]}},
        )

        kept = await client.get(f"/api/v1/reservations/{reservation_id}")
        assert kept.json()["status"] == "confirmed"

    async def test_stay_resource_400(self, client: AsyncClient, stay_row) -> None:
        response = await client.put(
            f"/api/v1/resources/{stay_row.id}/template",
            json={"windows": {"monday": [["09:00", "12:00"]]}},
        )
        assert response.status_code == 400

    async def test_inverted_window_400(self, client: AsyncClient, agent_row) -> None:
        response = await client.put(
            f"/api/v1/resources/{agent_row.id}/template",
            json={"windows": {"monday": [["12:00", "09:00"]]}},
        )
        assert response.status_code == 400

    async def test_unknown_weekday_422(self, client: AsyncClient, agent_row) -> None:
        response = await client.put(
            f"/api/v1/resources/{agent_row.id}/template",
            json={"windows": {"caturday": [["09:00", "12:00"]]}},
        )
        assert response.status_code == 422

    async def test_missing_404(self, client: AsyncClient) -> None:
        response = await client.put(
            f"/api/v1/resources/{uuid.uuid4()}/template",
            json={"windows": {"monday": [["09:00", "12:00"]]}},
        )
        assert response.status_code == 404
