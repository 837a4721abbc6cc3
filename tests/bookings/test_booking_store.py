import threading
from datetime import date

import pytest

from karaoke_service import models
from karaoke_service.database import SessionLocal
from karaoke_service.errors import ConflictError, NotFoundError, ValidationError
from karaoke_service.stores import BookingStore, CustomerStore, RoomStore

DAY = date(2024, 1, 10)


def make_store(session) -> BookingStore:
    return BookingStore(session, RoomStore(session), CustomerStore(session))


@pytest.fixture
def store(db):
    return make_store(db)


@pytest.fixture
def room(store):
    return store.rooms.insert(room_number="R1", capacity=8)


@pytest.fixture
def customer(store):
    return store.customers.insert(name="Ana", phone="5551234", email="ana@example.com")


def test_insert_persists_normalized_booking(store, room, customer):
    booking = store.insert(room.id, customer.id, "2024-01-10", "9:05", "10:00")
    assert booking.id is not None
    assert booking.date == DAY
    assert booking.start_time == "09:05"
    assert booking.status == models.BookingStatus.BOOKED


def test_rejected_insert_writes_nothing(store, room, customer):
    store.insert(room.id, customer.id, DAY, "09:00", "10:00")

    with pytest.raises(ConflictError):
        store.insert(room.id, customer.id, DAY, "09:30", "10:30")
    with pytest.raises(ValidationError):
        store.insert(room.id, customer.id, DAY, "10:30", "10:30")

    assert len(store.list_by_room_and_date(room.id, DAY)) == 1


def test_list_by_room_and_date_includes_cancelled(store, room, customer):
    store.insert(room.id, customer.id, DAY, "09:00", "10:00", status="cancelled")
    store.insert(room.id, customer.id, DAY, "08:00", "09:00")
    store.insert(room.id, customer.id, date(2024, 1, 11), "08:00", "09:00")

    found = store.list_by_room_and_date(room.id, DAY)
    assert [b.start_time for b in found] == ["08:00", "09:00"]


def test_update_only_status_keeps_slot(store, room, customer):
    booking = store.insert(room.id, customer.id, DAY, "09:00", "10:00")
    updated = store.update(booking.id, status=models.BookingStatus.COMPLETED, start_time=None)
    assert updated.status == models.BookingStatus.COMPLETED
    assert updated.start_time == "09:00"


def test_completed_booking_still_blocks(store, room, customer):
    store.insert(room.id, customer.id, DAY, "09:00", "10:00", status="completed")
    with pytest.raises(ConflictError):
        store.insert(room.id, customer.id, DAY, "09:00", "10:00")


def test_update_unknown_customer_is_not_found(store, room, customer):
    booking = store.insert(room.id, customer.id, DAY, "09:00", "10:00")
    with pytest.raises(NotFoundError):
        store.update(booking.id, customer_id=999)


def test_update_of_booking_whose_room_was_deleted(store, room, customer):
    booking = store.insert(room.id, customer.id, DAY, "09:00", "10:00")
    store.rooms.delete(room.id)

    updated = store.update(booking.id, status="completed")
    assert updated.room_id == room.id
    assert updated.room is None


def test_delete_unknown_booking(store):
    for _ in range(2):
        with pytest.raises(NotFoundError):
            store.delete(42)


def test_concurrent_inserts_for_same_slot_book_once(db, room, customer):
    room_id, customer_id = room.id, customer.id
    workers = 8
    barrier = threading.Barrier(workers)
    created, conflicts, failures = [], [], []

    def attempt():
        session = SessionLocal()
        try:
            barrier.wait()
            created.append(make_store(session).insert(room_id, customer_id, DAY, "20:00", "22:00").id)
        except ConflictError:
            conflicts.append(1)
        except Exception as exc:
            failures.append(exc)
        finally:
            session.close()

    threads = [threading.Thread(target=attempt) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert failures == []
    assert len(created) == 1
    assert len(conflicts) == workers - 1
