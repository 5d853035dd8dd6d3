import os

os.environ.setdefault("APP_ENV", "test")

import pytest


@pytest.fixture(autouse=True)
def store(tmp_path, monkeypatch):
    """
    A fresh DocumentStore on a temp file for every test. The singleton is
    patched so every service (and the app) sees the SAME object.
    """
    from carrental.models.store import DocumentStore

    st = DocumentStore(tmp_path / "data.pkl")
    monkeypatch.setattr(DocumentStore, "_inst", st)
    return st


@pytest.fixture
def app(store):
    from carrental import create_app
    from carrental.config import TestConfig

    app = create_app({"DATA_PATH": store.path}, config_object=TestConfig)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


# ---------- seeding helpers ----------
def put_vehicle(store, vid="v1", status="available", rate=50.0, **extra):
    data = {
        "make": "Toyota",
        "model": "Corolla",
        "year": 2022,
        "type": "Sedan",
        "rate_per_day": rate,
        "images": ["/static/images/placeholder.png"],
        "availability_status": status,
        "location": "Auckland",
        "rating": 0.0,
        "review_count": 0,
        "insurance_options": [{"name": "Basic", "daily_rate": 10}],
    }
    data.update(extra)
    store.put("vehicles", vid, data)
    return vid


def put_booking(store, bid, vehicle_id="v1", user_id="u1", status="booked",
                start="2030-11-01", end="2030-11-05", created_at="2030-10-01T00:00:00+00:00"):
    store.put("bookings", bid, {
        "user_id": user_id,
        "vehicle_id": vehicle_id,
        "start_date": start,
        "end_date": end,
        "pickup_location": "Auckland",
        "dropoff_location": "Auckland",
        "total_price": 200.0,
        "status": status,
        "insurance": None,
        "created_at": created_at,
    })
    return bid


def make_auth(user_id="u1", role="customer", name="Alice"):
    from carrental.services.auth_service import AuthSession
    return AuthSession(user_id=user_id, email=f"{user_id}@example.com", display_name=name, role=role)
