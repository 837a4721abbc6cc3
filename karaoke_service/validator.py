"""
Booking conflict validation.

The functions here never write: they decide whether a proposed time slot
is well-formed and free, and the booking store persists only after a
clean result.
"""
import logging
from datetime import date
from typing import TYPE_CHECKING, Optional, Tuple

from . import models
from .errors import ConflictError, ValidationError
from .values import TimeOfDay

if TYPE_CHECKING:
    from .stores import BookingStore

logger = logging.getLogger(__name__)


def ensure_time_valid(start_time, end_time) -> Tuple[TimeOfDay, TimeOfDay]:
    """
    Validate that a booking time range is well-formed.

    Both values must be ``HH:MM`` strings and ``end_time`` must be strictly
    after ``start_time`` on the same day, so a booking can never span
    midnight.

    Parameters
    ----------
    start_time : str
        Start of the requested slot.
    end_time : str
        End of the requested slot.

    Returns
    -------
    Tuple[TimeOfDay, TimeOfDay]
        The parsed start and end times.

    Raises
    ------
    ValidationError
        If either value is malformed or end_time is not after start_time.
    """
    start = TimeOfDay.parse(start_time, "start_time")
    end = TimeOfDay.parse(end_time, "end_time")
    if end <= start:
        raise ValidationError("End time must be after start time")
    return start, end


def overlaps(start_a: TimeOfDay, end_a: TimeOfDay, start_b: TimeOfDay, end_b: TimeOfDay) -> bool:
    """Half-open interval test: shared endpoints do not overlap."""
    return start_a < end_b and start_b < end_a


def find_conflict(
    bookings: "BookingStore",
    room_id: int,
    day: date,
    start_time,
    end_time,
    exclude_booking_id: Optional[int] = None,
) -> Optional[models.Booking]:
    """
    Find an existing booking that collides with the proposed slot.

    Candidates are the bookings in the same room on the same day whose
    status is not ``cancelled``, excluding ``exclude_booking_id``. A
    candidate conflicts when
    ``existing.start_time < end_time and existing.end_time > start_time``.

    Parameters
    ----------
    bookings : BookingStore
        Store used to list the room's bookings for the day.
    room_id : int
        Room identifier.
    day : date
        Calendar day of the proposed booking.
    start_time, end_time : str or TimeOfDay
        Proposed slot.
    exclude_booking_id : Optional[int]
        Booking to ignore, used when validating an update.

    Returns
    -------
    Optional[Booking]
        The first conflicting booking in start-time order, or None.

    Raises
    ------
    ValidationError
        If the proposed slot itself is malformed.
    """
    start, end = ensure_time_valid(start_time, end_time)

    for existing in bookings.list_by_room_and_date(room_id, day):
        if existing.status == models.BookingStatus.CANCELLED:
            continue
        if exclude_booking_id is not None and existing.id == exclude_booking_id:
            continue
        if overlaps(TimeOfDay.parse(existing.start_time), TimeOfDay.parse(existing.end_time), start, end):
            return existing
    return None


def ensure_no_conflict(
    bookings: "BookingStore",
    room_id: int,
    day: date,
    start_time,
    end_time,
    exclude_booking_id: Optional[int] = None,
) -> None:
    """
    Raise :class:`ConflictError` if the proposed slot collides with a booking.

    The raised error carries the colliding booking so that callers can
    point the user at it.
    """
    conflict = find_conflict(bookings, room_id, day, start_time, end_time, exclude_booking_id)
    if conflict is not None:
        logger.info(
            "Rejected slot room=%s date=%s %s-%s: overlaps booking %s (%s-%s)",
            room_id, day, start_time, end_time,
            conflict.id, conflict.start_time, conflict.end_time,
        )
        raise ConflictError(booking=conflict)
