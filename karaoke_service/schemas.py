import datetime as dt
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .errors import ValidationError
from .models import BookingStatus, RoomStatus
from .values import MAX_NAME_LENGTH, MAX_ROOM_CAPACITY, MIN_ROOM_CAPACITY, to_day


# ---------- Rooms ----------


class RoomBase(BaseModel):
    """
    Base schema for room information.

    Shared fields used when creating and reading rooms.
    """
    room_number: str = Field(..., min_length=1, max_length=50)
    capacity: int = Field(..., ge=MIN_ROOM_CAPACITY, le=MAX_ROOM_CAPACITY)
    status: RoomStatus = RoomStatus.AVAILABLE


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    """
    Schema for partial updates to a room.

    All fields are optional and only provided values will be updated.
    """
    room_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    capacity: Optional[int] = Field(default=None, ge=MIN_ROOM_CAPACITY, le=MAX_ROOM_CAPACITY)
    status: Optional[RoomStatus] = None


class RoomRead(RoomBase):
    id: int
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class RoomSummary(BaseModel):
    """Room fields embedded in booking reads."""
    id: int
    room_number: str
    capacity: int

    model_config = ConfigDict(from_attributes=True)


# ---------- Customers ----------


class CustomerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    phone: str = Field(..., min_length=1, max_length=20)
    email: str = Field(..., min_length=3, max_length=255)


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=20)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)


class CustomerRead(CustomerBase):
    id: int
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class CustomerSummary(BaseModel):
    """Customer fields embedded in booking reads."""
    id: int
    name: str
    phone: str
    email: str

    model_config = ConfigDict(from_attributes=True)


# ---------- Bookings ----------


def _normalize_day(value):
    # Only strip the time part here; malformed days are left to pydantic
    if isinstance(value, (dt.date, str)) and value != "":
        try:
            return to_day(value)
        except ValidationError:
            return value
    return value


BookingDay = Annotated[dt.date, BeforeValidator(_normalize_day)]


class BookingBase(BaseModel):
    """
    Base schema for a booking's room, customer and time slot.

    ``date`` accepts either a day or an ISO datetime; the time part of
    a datetime is dropped. ``start_time``/``end_time`` are validated as
    ``HH:MM`` by the booking store.
    """
    room_id: int = Field(..., ge=1)
    customer_id: int = Field(..., ge=1)
    date: BookingDay
    start_time: str
    end_time: str


class BookingCreate(BookingBase):
    status: Optional[BookingStatus] = None


class BookingUpdate(BaseModel):
    """
    Schema for partially updating an existing booking.

    All fields are optional; only provided values will be applied.
    """
    room_id: Optional[int] = Field(default=None, ge=1)
    customer_id: Optional[int] = Field(default=None, ge=1)
    date: Optional[BookingDay] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: Optional[BookingStatus] = None


class BookingRead(BookingBase):
    """
    Schema returned when reading booking information.

    Embeds summaries of the referenced room and customer; either is
    ``None`` once the referenced record has been deleted.
    """
    id: int
    status: BookingStatus
    created_at: dt.datetime
    updated_at: dt.datetime
    room: Optional[RoomSummary] = None
    customer: Optional[CustomerSummary] = None

    model_config = ConfigDict(from_attributes=True)


class AvailabilityRead(BaseModel):
    room_id: int
    date: dt.date
    start_time: str
    end_time: str
    available: bool
    conflicting_booking_id: Optional[int] = None


class DashboardRead(BaseModel):
    """Per-day summary shown on the admin dashboard."""
    date: dt.date
    total_rooms: int
    available_rooms: int
    occupied_rooms: int
    total_customers: int
    day_bookings: int
    active_bookings: int
    upcoming: List[BookingRead]
