import pytest
from fastapi.testclient import TestClient

from karaoke_service.main import app
from karaoke_service.database import Base, engine

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register(name="Kim", phone="+15551234567", email="kim@example.com"):
    return client.post("/api/v1/customers", json={"name": name, "phone": phone, "email": email})


def test_create_customer_normalizes_email():
    res = register(name="  Kim Lee ", email="  Kim.Lee@Example.COM ")
    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "Kim Lee"
    assert body["email"] == "kim.lee@example.com"
    assert body["phone"] == "+15551234567"


def test_duplicate_email_is_rejected_case_insensitively():
    assert register().status_code == 201

    res = register(name="Other", email="KIM@example.com")
    assert res.status_code == 400
    assert res.json()["detail"] == "Email already exists"


@pytest.mark.parametrize("phone", ["0123456", "phone", "+", "12345678901234567"])
def test_invalid_phone_is_rejected(phone):
    res = register(phone=phone)
    assert res.status_code == 400
    assert res.json()["error"] == "validation_error"


@pytest.mark.parametrize("email", ["no-at-sign", "kim@", "kim@example", "kim@example.c"])
def test_invalid_email_is_rejected(email):
    res = register(email=email)
    assert res.status_code == 400
    assert res.json()["error"] == "validation_error"


def test_name_too_long_is_rejected():
    res = register(name="x" * 101)
    assert res.status_code == 400


def test_list_customers_sorted_by_name():
    register(name="Zoe", email="zoe@example.com")
    register(name="Adam", email="adam@example.com")

    res = client.get("/api/v1/customers")
    assert res.status_code == 200
    assert [c["name"] for c in res.json()] == ["Adam", "Zoe"]


def test_update_customer():
    customer_id = register().json()["id"]

    res = client.put(f"/api/v1/customers/{customer_id}", json={"phone": "5550001", "email": "New@Example.com"})
    assert res.status_code == 200
    assert res.json()["phone"] == "5550001"
    assert res.json()["email"] == "new@example.com"
    assert res.json()["name"] == "Kim"


def test_update_to_taken_email_fails():
    register()
    other_id = register(name="Lee", email="lee@example.com").json()["id"]

    res = client.put(f"/api/v1/customers/{other_id}", json={"email": "kim@example.com"})
    assert res.status_code == 400


def test_delete_customer():
    customer_id = register().json()["id"]

    assert client.delete(f"/api/v1/customers/{customer_id}").status_code == 204
    assert client.get(f"/api/v1/customers/{customer_id}").status_code == 404
    assert client.delete(f"/api/v1/customers/{customer_id}").status_code == 404
