from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import Column, Date, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from .database import Base


class RoomStatus(str, PyEnum):
    """
    Enumeration of room statuses.

    The status is toggled manually by staff and is not derived from bookings.
    """
    AVAILABLE = "available"
    OCCUPIED = "occupied"


class BookingStatus(str, PyEnum):
    """
    Enumeration of possible booking statuses.

    Values
    ------
    booked
        Booking holds the room for its time slot.
    completed
        The session took place; still counts as holding the slot.
    cancelled
        Booking has been cancelled and does not block the room.
    """
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Room(Base):
    """
    SQLAlchemy model representing a karaoke room.

    Attributes
    ----------
    id : int
        Primary key.
    room_number : str
        Unique room label shown to staff (e.g. '101').
    capacity : int
        Maximum number of guests, between 1 and 20.
    status : RoomStatus
        Manually maintained availability flag.
    created_at : datetime
        Timestamp when the room was created.
    updated_at : datetime
        Timestamp of the last modification.
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(50), unique=True, nullable=False, index=True)
    capacity = Column(Integer, nullable=False)
    status = Column(Enum(RoomStatus), nullable=False, default=RoomStatus.AVAILABLE)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Customer(Base):
    """
    SQLAlchemy model representing a venue customer.

    Attributes
    ----------
    id : int
        Primary key.
    name : str
        Customer's display name.
    phone : str
        Contact phone number.
    email : str
        Lower-cased, unique e-mail address.
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Booking(Base):
    """
    SQLAlchemy model representing a room booking for one time slot.

    Rooms and customers are referenced by id only (no foreign-key
    constraint), so deleting either leaves the booking in place and the
    ``room``/``customer`` relationships resolve to ``None``.

    Attributes
    ----------
    id : int
        Primary key.
    room_id : int
        Identifier of the booked room.
    customer_id : int
        Identifier of the customer who made the booking.
    date : date
        Calendar day of the booking.
    start_time : str
        Zero-padded ``HH:MM`` start of the slot.
    end_time : str
        Zero-padded ``HH:MM`` end of the slot (exclusive).
    status : BookingStatus
        Current status of the booking (booked/completed/cancelled).
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, index=True, nullable=False)
    customer_id = Column(Integer, index=True, nullable=False)
    date = Column(Date, index=True, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    status = Column(Enum(BookingStatus), nullable=False, default=BookingStatus.BOOKED)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship(
        "Room",
        primaryjoin="foreign(Booking.room_id) == Room.id",
        viewonly=True,
        lazy="joined",
    )
    customer = relationship(
        "Customer",
        primaryjoin="foreign(Booking.customer_id) == Customer.id",
        viewonly=True,
        lazy="joined",
    )
