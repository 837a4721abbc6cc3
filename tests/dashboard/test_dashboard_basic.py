import pytest
from fastapi.testclient import TestClient

from karaoke_service.main import app
from karaoke_service.database import Base, SessionLocal, engine
from karaoke_service.seed import DEFAULT_ROOMS, seed_default_rooms
from karaoke_service.stores import RoomStore

client = TestClient(app)

DAY = "2024-01-10"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def seed():
    db = SessionLocal()
    try:
        return [room.room_number for room in seed_default_rooms(RoomStore(db))]
    finally:
        db.close()


def test_seed_creates_default_rooms_once():
    assert seed() == [number for number, _ in DEFAULT_ROOMS]
    assert seed() == []

    rooms = client.get("/api/v1/rooms").json()
    assert len(rooms) == len(DEFAULT_ROOMS)
    assert all(r["status"] == "available" for r in rooms)


def test_seed_skips_existing_room_numbers():
    client.post("/api/v1/rooms", json={"room_number": "101", "capacity": 2})
    created = seed()
    assert "101" not in created
    assert len(created) == len(DEFAULT_ROOMS) - 1


def test_dashboard_summary():
    seed()
    rooms = client.get("/api/v1/rooms").json()
    client.put(f"/api/v1/rooms/{rooms[0]['id']}", json={"status": "occupied"})
    customer = client.post(
        "/api/v1/customers",
        json={"name": "Kim", "phone": "5551234", "email": "kim@example.com"},
    ).json()

    def book(room, start, end, **extra):
        body = {
            "room_id": room["id"],
            "customer_id": customer["id"],
            "date": DAY,
            "start_time": start,
            "end_time": end,
        }
        body.update(extra)
        assert client.post("/api/v1/bookings", json=body).status_code == 201

    for hour in range(12, 19):
        book(rooms[1], f"{hour}:00", f"{hour}:30")
    book(rooms[2], "11:00", "12:00", status="cancelled")
    book(rooms[2], "10:00", "11:00", status="completed")

    res = client.get("/api/v1/dashboard", params={"date": DAY})
    assert res.status_code == 200
    body = res.json()
    assert body["date"] == DAY
    assert body["total_rooms"] == len(DEFAULT_ROOMS)
    assert body["occupied_rooms"] == 1
    assert body["available_rooms"] == len(DEFAULT_ROOMS) - 1
    assert body["total_customers"] == 1
    assert body["day_bookings"] == 9
    assert body["active_bookings"] == 7
    assert [b["start_time"] for b in body["upcoming"]] == ["12:00", "13:00", "14:00", "15:00", "16:00"]


def test_dashboard_defaults_to_today():
    res = client.get("/api/v1/dashboard")
    assert res.status_code == 200
    assert res.json()["day_bookings"] == 0
