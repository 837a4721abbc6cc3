from typing import Any, Dict, Optional

from fastapi import status


class KaraokeError(Exception):
    """
    Base class for errors raised by the stores and the booking validator.

    Each subclass maps to one HTTP status code and a short machine-readable
    ``error`` code so that clients can branch on the kind of failure.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "detail": self.detail}


class ValidationError(KaraokeError):
    """Malformed or missing field, bad time range, or a uniqueness violation."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"


class NotFoundError(KaraokeError):
    """The referenced room, customer or booking does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class ConflictError(KaraokeError):
    """
    A proposed booking overlaps an existing non-cancelled booking.

    Attributes
    ----------
    booking : Optional[Booking]
        The existing booking the proposal collides with.
    """

    status_code = status.HTTP_409_CONFLICT
    error = "conflict"

    def __init__(self, detail: str = "Room is already booked for this time slot", booking: Optional[Any] = None):
        super().__init__(detail)
        self.booking = booking

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["conflicting_booking_id"] = self.booking.id if self.booking is not None else None
        return data
