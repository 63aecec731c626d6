"""Translate scheduling errors into HTTP responses."""

from fastapi import HTTPException, status

from staydesk.scheduling.errors import (
    IllegalTransition,
    InvalidInterval,
    InvalidPeriod,
    NotYetElapsed,
    ReservationConflict,
    ReservationNotFound,
    ResourceNotFound,
    SchedulingError,
)

_STATUS_CODES: list[tuple[type[SchedulingError], int]] = [
    (ResourceNotFound, status.HTTP_404_NOT_FOUND),
    (ReservationNotFound, status.HTTP_404_NOT_FOUND),
    (ReservationConflict, status.HTTP_409_CONFLICT),  # includes SlotUnavailable
    (IllegalTransition, status.HTTP_409_CONFLICT),
    (NotYetElapsed, status.HTTP_409_CONFLICT),
    (InvalidInterval, status.HTTP_400_BAD_REQUEST),
    (InvalidPeriod, status.HTTP_400_BAD_REQUEST),
]


def to_http_exception(exc: SchedulingError) -> HTTPException:
    """Map a scheduling error onto an ``HTTPException`` with a readable detail."""
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
