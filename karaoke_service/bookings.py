from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from . import models, schemas
from .rate_limiter import booking_rate_limiter
from .stores import BookingStore, get_booking_store
from .validator import ensure_time_valid, find_conflict
from .values import to_day

router = APIRouter(prefix="/bookings", tags=["bookings"])


# ---------- Check room availability ----------


@router.get("/availability", response_model=schemas.AvailabilityRead)
def check_availability(
    room_id: int = Query(..., ge=1),
    date: str = Query(...),
    start_time: str = Query(...),
    end_time: str = Query(...),
    exclude_booking_id: Optional[int] = Query(default=None, ge=1),
    bookings: BookingStore = Depends(get_booking_store),
):
    """
    Check if a room is free during a time slot without booking it.

    Parameters
    ----------
    room_id : int
        Room to check.
    date : str
        Day of the slot (``YYYY-MM-DD``; a datetime's time part is ignored).
    start_time, end_time : str
        Slot boundaries as ``HH:MM``.
    exclude_booking_id : Optional[int]
        Booking being edited, ignored in the search.

    Returns
    -------
    AvailabilityRead
        ``available`` is False when the slot overlaps a non-cancelled
        booking, whose id is returned as ``conflicting_booking_id``.

    Raises
    ------
    ValidationError
        If the date or time range is invalid.
    """
    day = to_day(date)
    start, end = ensure_time_valid(start_time, end_time)
    conflict = find_conflict(bookings, room_id, day, start, end, exclude_booking_id)
    return {
        "room_id": room_id,
        "date": day,
        "start_time": str(start),
        "end_time": str(end),
        "available": conflict is None,
        "conflicting_booking_id": conflict.id if conflict is not None else None,
    }


# ---------- Create booking ----------


@router.post(
    "",
    response_model=schemas.BookingRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_rate_limiter)],
)
def create_booking(
    booking_in: schemas.BookingCreate,
    bookings: BookingStore = Depends(get_booking_store),
):
    """
    Create a new booking.

    Behavior
    --------
    - Validates that the time range is correct (end after start, same day).
    - Requires the room and the customer to exist.
    - Rejects bookings that overlap an existing non-cancelled booking of the
      same room on the same day; touching slots are allowed.

    Parameters
    ----------
    booking_in : BookingCreate
        Room, customer, day and time slot for the new booking.
    bookings : BookingStore
        Booking store bound to the request's session.

    Returns
    -------
    BookingRead
        The newly created booking.

    Raises
    ------
    ValidationError
        If the time range is invalid.
    NotFoundError
        If the room or the customer does not exist.
    ConflictError
        If the room is already booked for this time slot.
    """
    return bookings.insert(**booking_in.model_dump())


# ---------- List bookings ----------


@router.get("", response_model=List[schemas.BookingRead])
def list_bookings(
    date: Optional[str] = None,
    room_id: Optional[int] = Query(default=None, ge=1),
    customer_id: Optional[int] = Query(default=None, ge=1),
    status: Optional[models.BookingStatus] = None,
    bookings: BookingStore = Depends(get_booking_store),
):
    """
    List bookings with optional filters.

    Parameters
    ----------
    date : Optional[str]
        Only bookings on this day.
    room_id : Optional[int]
        Only bookings for this room.
    customer_id : Optional[int]
        Only bookings made by this customer.
    status : Optional[BookingStatus]
        Only bookings in this status.

    Returns
    -------
    List[BookingRead]
        Matching bookings ordered by date ascending, then start time.
    """
    day = to_day(date) if date else None
    return bookings.list(day=day, room_id=room_id, customer_id=customer_id, status=status)


@router.get("/{booking_id}", response_model=schemas.BookingRead)
def get_booking(booking_id: int, bookings: BookingStore = Depends(get_booking_store)):
    return bookings.get(booking_id)


# ---------- Update booking ----------


@router.put(
    "/{booking_id}",
    response_model=schemas.BookingRead,
    dependencies=[Depends(booking_rate_limiter)],
)
def update_booking(
    booking_id: int,
    update_data: schemas.BookingUpdate,
    bookings: BookingStore = Depends(get_booking_store),
):
    """
    Update an existing booking's room, customer, slot or status.

    Behavior
    --------
    - Applies only the fields provided in BookingUpdate.
    - Re-validates the merged time range.
    - Ensures no conflicts with other non-cancelled bookings, ignoring the
      booking itself.

    Raises
    ------
    NotFoundError
        If the booking (or a newly referenced room/customer) is not found.
    ValidationError
        If the time range is invalid.
    ConflictError
        If the new slot collides with another booking.
    """
    return bookings.update(booking_id, **update_data.model_dump(exclude_unset=True))


# ---------- Delete booking ----------


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(booking_rate_limiter)],
)
def delete_booking(booking_id: int, bookings: BookingStore = Depends(get_booking_store)):
    """
    Permanently delete a booking.

    Deleting an unknown id reports not-found every time it is attempted.
    """
    bookings.delete(booking_id)
    return
