"""Schemas shared by several routers."""

from datetime import date, datetime

from pydantic import BaseModel, model_validator

from staydesk.scheduling.intervals import Interval


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


def _naive_local(value: datetime) -> datetime:
    # the clock, stored timestamps and template windows are all local wall time
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class IntervalInput(BaseModel):
    """A half-open interval given either as stay dates or as timestamps.

    Property stays send ``check_in`` / ``check_out``; viewing slots send
    ``starts_at`` / ``ends_at``. Exactly one pair must be present.
    """

    check_in: date | None = None
    check_out: date | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @model_validator(mode="after")
    def check_bounds(self) -> "IntervalInput":
        """Require exactly one complete pair with its end after its start."""
        has_dates = self.check_in is not None or self.check_out is not None
        has_times = self.starts_at is not None or self.ends_at is not None
        if has_dates == has_times:
            raise ValueError("Provide either check_in/check_out or starts_at/ends_at")
        if has_dates:
            if self.check_in is None or self.check_out is None:
                raise ValueError("check_in and check_out are both required")
            if self.check_out <= self.check_in:
                raise ValueError("check_out must be after check_in")
        else:
            if self.starts_at is None or self.ends_at is None:
                raise ValueError("starts_at and ends_at are both required")
            if _naive_local(self.ends_at) <= _naive_local(self.starts_at):
                raise ValueError("ends_at must be after starts_at")
        return self

    def to_interval(self) -> Interval:
        if self.check_in is not None and self.check_out is not None:
            return Interval.from_dates(self.check_in, self.check_out)
        return Interval(_naive_local(self.starts_at), _naive_local(self.ends_at))
