"""Pydantic v2 schemas for viewing-slot endpoints."""

import uuid
from datetime import date, time
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from staydesk.scheduling.records import AvailabilitySlot
from staydesk.schemas.reservation import ReservationResponse
from staydesk.schemas.resource import TemplateInput


class SlotQuery(BaseModel):
    """Body for listing slots with an ad-hoc template instead of the stored one."""

    start_date: date
    end_date: date
    template: TemplateInput | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "SlotQuery":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SlotBookRequest(BaseModel):
    date: date
    start_time: time
    end_time: time
    requester_id: uuid.UUID
    amount: Decimal = Field(Decimal("0"), ge=0)


class SlotResponse(BaseModel):
    id: uuid.UUID | None = None
    resource_id: uuid.UUID
    date: date
    start_time: time
    end_time: time
    is_available: bool
    is_booked: bool
    reservation_id: uuid.UUID | None = None

    @classmethod
    def from_slot(cls, slot: AvailabilitySlot) -> "SlotResponse":
        return cls(
            id=slot.id,
            resource_id=slot.resource_id,
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            is_available=slot.is_available,
            is_booked=slot.is_booked,
            reservation_id=slot.reservation_id,
        )


class SlotListResponse(BaseModel):
    resource_id: uuid.UUID
    start_date: date
    end_date: date
    slots: list[SlotResponse]
    total: int


class SlotBookResponse(BaseModel):
    reservation: ReservationResponse
    slot: SlotResponse
