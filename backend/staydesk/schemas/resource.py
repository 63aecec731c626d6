"""Pydantic v2 request/response schemas for resource endpoints."""

import uuid
from datetime import datetime, time

from pydantic import BaseModel, ConfigDict, Field, field_validator

from staydesk.scheduling.templates import WEEKDAY_NAMES, WeeklyTemplate

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TemplateInput(BaseModel):
    """Weekly working hours, e.g. ``{"monday": [["09:00", "17:00"]]}``."""

    slot_minutes: int | None = Field(None, ge=5, le=24 * 60)
    windows: dict[str, list[tuple[time, time]]]

    @field_validator("windows")
    @classmethod
    def check_weekdays(cls, value: dict[str, list[tuple[time, time]]]) -> dict[str, list[tuple[time, time]]]:
        unknown = [key for key in value if key.lower() not in WEEKDAY_NAMES]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(sorted(unknown))}")
        return value

    def to_template(self, default_slot_minutes: int) -> WeeklyTemplate:
        return WeeklyTemplate.from_dict(self.to_json(), slot_minutes=self.slot_minutes or default_slot_minutes)

    def to_json(self) -> dict:
        """The JSON form stored in ``resources.availability_template``."""
        data: dict = {
            "windows": {
                day.lower(): [[start.strftime("%H:%M"), end.strftime("%H:%M")] for start, end in windows]
                for day, windows in self.windows.items()
            }
        }
        if self.slot_minutes is not None:
            data["slot_minutes"] = self.slot_minutes
        return data


class ResourceCreate(BaseModel):
    """Register a bookable resource."""

    owner_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    kind: str = Field(..., pattern="^(property_stay|agent_slot)$")
    instant_book: bool = False
    availability_template: TemplateInput | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ResourceResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    kind: str
    instant_book: bool
    slot_minutes: int | None = None
    availability_template: dict | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
