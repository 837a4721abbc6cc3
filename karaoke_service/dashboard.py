from datetime import date as Day
from typing import Optional

from fastapi import APIRouter, Depends

from . import models, schemas
from .stores import BookingStore, get_booking_store
from .values import to_day

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

UPCOMING_LIMIT = 5


@router.get("", response_model=schemas.DashboardRead)
def dashboard(
    date: Optional[str] = None,
    bookings: BookingStore = Depends(get_booking_store),
):
    """
    Summarize rooms, customers and one day's bookings.

    Parameters
    ----------
    date : Optional[str]
        Day to summarize; defaults to today (server local time).

    Returns
    -------
    DashboardRead
        Room counts by stored status, the customer count, the day's booking
        counts and up to five of the day's ``booked`` bookings in start-time
        order.
    """
    day = to_day(date) if date else Day.today()

    rooms = bookings.rooms.list()
    available = sum(1 for room in rooms if room.status == models.RoomStatus.AVAILABLE)
    day_bookings = bookings.list(day=day)
    active = [b for b in day_bookings if b.status == models.BookingStatus.BOOKED]

    return {
        "date": day,
        "total_rooms": len(rooms),
        "available_rooms": available,
        "occupied_rooms": len(rooms) - available,
        "total_customers": len(bookings.customers.list()),
        "day_bookings": len(day_bookings),
        "active_bookings": len(active),
        "upcoming": [schemas.BookingRead.model_validate(b) for b in active[:UPCOMING_LIMIT]],
    }
