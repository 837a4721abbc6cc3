"""
Persistence handles for rooms, customers and bookings.

Each store wraps one SQLAlchemy session and is handed to the routes through
FastAPI dependencies. The stores own field validation, uniqueness checks and
commits; the booking store additionally runs the conflict validator right
before every write.
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .database import get_db
from .errors import NotFoundError, ValidationError
from .locks import slot_lock
from .validator import ensure_no_conflict, ensure_time_valid
from .values import (
    EmailAddress,
    PhoneNumber,
    check_capacity,
    clean_name,
    clean_room_number,
    to_day,
)

logger = logging.getLogger(__name__)


def _provided(fields: dict) -> dict:
    # None means "leave unchanged" in partial updates
    return {key: value for key, value in fields.items() if value is not None}


class RoomStore:
    """Keyed CRUD for rooms; room numbers are unique."""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[models.Room]:
        return self.db.query(models.Room).order_by(models.Room.room_number.asc()).all()

    def find_by_id(self, room_id: int, for_update: bool = False) -> Optional[models.Room]:
        query = self.db.query(models.Room).filter(models.Room.id == room_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get(self, room_id: int, for_update: bool = False) -> models.Room:
        room = self.find_by_id(room_id, for_update=for_update)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    def find_by_number(self, room_number: str) -> Optional[models.Room]:
        return self.db.query(models.Room).filter(models.Room.room_number == room_number).first()

    def _ensure_number_free(self, room_number: str, room_id: Optional[int] = None) -> None:
        existing = self.find_by_number(room_number)
        if existing is not None and existing.id != room_id:
            raise ValidationError("Room number already exists")

    def insert(self, room_number: str, capacity: int, status=None) -> models.Room:
        """
        Create a room.

        Raises
        ------
        ValidationError
            If a field is invalid or the room number is taken.
        """
        room_number = clean_room_number(room_number)
        self._ensure_number_free(room_number)
        room = models.Room(
            room_number=room_number,
            capacity=check_capacity(capacity),
            status=models.RoomStatus(status or models.RoomStatus.AVAILABLE),
        )
        self.db.add(room)
        self._commit("Room number already exists")
        self.db.refresh(room)
        logger.info("Created room %s (%s)", room.id, room.room_number)
        return room

    def update(self, room_id: int, **fields) -> models.Room:
        room = self.get(room_id)
        changes = _provided(fields)

        if "room_number" in changes:
            room_number = clean_room_number(changes["room_number"])
            if room_number != room.room_number:
                self._ensure_number_free(room_number, room.id)
            room.room_number = room_number
        if "capacity" in changes:
            room.capacity = check_capacity(changes["capacity"])
        if "status" in changes:
            room.status = models.RoomStatus(changes["status"])

        self.db.add(room)
        self._commit("Room number already exists")
        self.db.refresh(room)
        logger.info("Updated room %s", room.id)
        return room

    def delete(self, room_id: int) -> None:
        # Bookings referencing the room are left in place
        room = self.get(room_id)
        self.db.delete(room)
        self.db.commit()
        logger.info("Deleted room %s", room_id)

    def _commit(self, duplicate_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError(duplicate_message)


class CustomerStore:
    """Keyed CRUD for customers; e-mail addresses are unique."""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[models.Customer]:
        return self.db.query(models.Customer).order_by(models.Customer.name.asc()).all()

    def find_by_id(self, customer_id: int) -> Optional[models.Customer]:
        return self.db.query(models.Customer).filter(models.Customer.id == customer_id).first()

    def get(self, customer_id: int) -> models.Customer:
        customer = self.find_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        return customer

    def _ensure_email_free(self, email: str, customer_id: Optional[int] = None) -> None:
        existing = self.db.query(models.Customer).filter(models.Customer.email == email).first()
        if existing is not None and existing.id != customer_id:
            raise ValidationError("Email already exists")

    def insert(self, name: str, phone: str, email: str) -> models.Customer:
        email = EmailAddress(email)
        customer = models.Customer(
            name=clean_name(name),
            phone=str(PhoneNumber(phone)),
            email=str(email),
        )
        self._ensure_email_free(customer.email)
        self.db.add(customer)
        self._commit()
        self.db.refresh(customer)
        logger.info("Created customer %s", customer.id)
        return customer

    def update(self, customer_id: int, **fields) -> models.Customer:
        customer = self.get(customer_id)
        changes = _provided(fields)

        if "name" in changes:
            customer.name = clean_name(changes["name"])
        if "phone" in changes:
            customer.phone = str(PhoneNumber(changes["phone"]))
        if "email" in changes:
            email = str(EmailAddress(changes["email"]))
            if email != customer.email:
                self._ensure_email_free(email, customer.id)
            customer.email = email

        self.db.add(customer)
        self._commit()
        self.db.refresh(customer)
        logger.info("Updated customer %s", customer.id)
        return customer

    def delete(self, customer_id: int) -> None:
        customer = self.get(customer_id)
        self.db.delete(customer)
        self.db.commit()
        logger.info("Deleted customer %s", customer_id)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("Email already exists")


class BookingStore:
    """
    Booking persistence with conflict validation on every write.

    Depends on the room and customer stores for referential checks.
    ``insert`` and ``update`` hold the per-room-per-day slot lock and a row
    lock on the room across the conflict check and the commit.
    """

    def __init__(self, db: Session, rooms: RoomStore, customers: CustomerStore):
        self.db = db
        self.rooms = rooms
        self.customers = customers

    def _ordered(self, query):
        return query.order_by(
            models.Booking.date.asc(),
            models.Booking.start_time.asc(),
            models.Booking.id.asc(),
        )

    def list(
        self,
        day: Optional[date] = None,
        room_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        status: Optional[models.BookingStatus] = None,
    ) -> List[models.Booking]:
        """List bookings ordered by date then start time, with optional filters."""
        query = self.db.query(models.Booking)
        if day is not None:
            query = query.filter(models.Booking.date == to_day(day))
        if room_id is not None:
            query = query.filter(models.Booking.room_id == room_id)
        if customer_id is not None:
            query = query.filter(models.Booking.customer_id == customer_id)
        if status is not None:
            query = query.filter(models.Booking.status == models.BookingStatus(status))
        return self._ordered(query).all()

    def list_by_room_and_date(self, room_id: int, day: date) -> List[models.Booking]:
        return self.list(day=day, room_id=room_id)

    def find_by_id(self, booking_id: int) -> Optional[models.Booking]:
        return self.db.query(models.Booking).filter(models.Booking.id == booking_id).first()

    def get(self, booking_id: int) -> models.Booking:
        booking = self.find_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def insert(
        self,
        room_id: int,
        customer_id: int,
        date,
        start_time: str,
        end_time: str,
        status=None,
    ) -> models.Booking:
        """
        Validate and persist a new booking.

        Raises
        ------
        ValidationError
            If the time range is malformed.
        NotFoundError
            If the room or customer does not exist.
        ConflictError
            If the slot overlaps a non-cancelled booking of the same room and day.
        """
        day = to_day(date)
        start, end = ensure_time_valid(start_time, end_time)
        status = models.BookingStatus(status or models.BookingStatus.BOOKED)
        self.customers.get(customer_id)

        with slot_lock(room_id, day):
            try:
                self.rooms.get(room_id, for_update=True)
                if status != models.BookingStatus.CANCELLED:
                    ensure_no_conflict(self, room_id, day, start, end)
            except Exception:
                self.db.rollback()
                raise

            booking = models.Booking(
                room_id=room_id,
                customer_id=customer_id,
                date=day,
                start_time=str(start),
                end_time=str(end),
                status=status,
            )
            self.db.add(booking)
            self.db.commit()

        self.db.refresh(booking)
        logger.info(
            "Created booking %s room=%s date=%s %s-%s",
            booking.id, room_id, day, booking.start_time, booking.end_time,
        )
        return booking

    def update(self, booking_id: int, **fields) -> models.Booking:
        """
        Apply a partial update to a booking.

        Incoming fields are merged over the stored ones and the merged slot
        is validated, ignoring the booking itself. The conflict search is
        skipped only when the merged status is ``cancelled``.

        Raises
        ------
        NotFoundError
            If the booking, or a newly referenced room or customer, does not exist.
        ValidationError
            If the merged time range is malformed.
        ConflictError
            If the merged slot overlaps another non-cancelled booking.
        """
        booking = self.get(booking_id)
        changes = _provided(fields)

        room_id = changes.get("room_id", booking.room_id)
        customer_id = changes.get("customer_id", booking.customer_id)
        day = to_day(changes.get("date", booking.date))
        start, end = ensure_time_valid(
            changes.get("start_time", booking.start_time),
            changes.get("end_time", booking.end_time),
        )
        status = models.BookingStatus(changes.get("status", booking.status))
        if "customer_id" in changes:
            self.customers.get(customer_id)

        with slot_lock(room_id, day):
            try:
                room = self.rooms.find_by_id(room_id, for_update=True)
                if room is None and "room_id" in changes:
                    raise NotFoundError("Room not found")
                if status != models.BookingStatus.CANCELLED:
                    ensure_no_conflict(self, room_id, day, start, end, exclude_booking_id=booking.id)
            except Exception:
                self.db.rollback()
                raise

            booking.room_id = room_id
            booking.customer_id = customer_id
            booking.date = day
            booking.start_time = str(start)
            booking.end_time = str(end)
            booking.status = status
            self.db.add(booking)
            self.db.commit()

        self.db.refresh(booking)
        logger.info("Updated booking %s", booking.id)
        return booking

    def delete(self, booking_id: int) -> None:
        booking = self.get(booking_id)
        self.db.delete(booking)
        self.db.commit()
        logger.info("Deleted booking %s", booking_id)


def get_room_store(db: Session = Depends(get_db)) -> RoomStore:
    return RoomStore(db)


def get_customer_store(db: Session = Depends(get_db)) -> CustomerStore:
    return CustomerStore(db)


def get_booking_store(db: Session = Depends(get_db)) -> BookingStore:
    return BookingStore(db, RoomStore(db), CustomerStore(db))
