"""
End-to-end booking over HTTP: book a car, see the confirmation and the
bookings page, cancel, and the login redirect for anonymous users.
"""
from datetime import date, timedelta
from urllib.parse import urlparse, parse_qs

from conftest import put_vehicle

START = (date.today() + timedelta(days=3)).isoformat()
END = (date.today() + timedelta(days=5)).isoformat()


def _login_customer(client, email="cust@example.com"):
    r = client.post("/register", data={"name": "Cust", "email": email, "password": "secret1",
                                       "confirm_password": "secret1"})
    assert r.status_code == 302


def _book(client, vid="v1", **overrides):
    data = {"vehicle_id": vid, "start_date": START, "end_date": END,
            "pickup_location": "Auckland", "dropoff_location": "Auckland", "insurance": ""}
    data.update(overrides)
    return client.post("/bookings", data=data, follow_redirects=False)


def test_anonymous_booking_redirects_to_login_with_return_path(client, store):
    put_vehicle(store, "v1")
    r = _book(client)
    assert r.status_code == 302
    assert "/login" in r.headers["Location"]
    assert parse_qs(urlparse(r.headers["Location"]).query)["next"] == ["/cars/v1"]
    assert store.count("bookings") == 0


def test_book_confirm_list_and_cancel(client, store):
    put_vehicle(store, "v1", rate=50.0)
    _login_customer(client)

    r = _book(client, insurance="Basic")
    assert r.status_code == 302
    assert "/confirm" in r.headers["Location"]

    body = client.get(r.headers["Location"]).get_data(as_text=True)
    assert "Booking confirmed" in body
    assert "$120" in body  # 2 days x (50 + 10)
    assert store.get("vehicles", "v1")["availability_status"] == "rented"

    (booking,) = store.list_all("bookings")
    body = client.get("/bookings").get_data(as_text=True)
    assert "Toyota Corolla" in body

    r = client.post(f"/bookings/{booking['id']}/cancel", follow_redirects=True)
    assert "cancelled successfully" in r.get_data(as_text=True)
    assert store.get("bookings", booking["id"])["status"] == "cancelled"
    assert store.get("vehicles", "v1")["availability_status"] == "available"


def test_rented_car_cannot_be_booked_again(client, store):
    put_vehicle(store, "v1", status="rented")
    _login_customer(client)
    r = _book(client)
    assert "/cars/v1" in r.headers["Location"]
    assert store.count("bookings") == 0


def test_invalid_dates_are_flashed(client, store):
    put_vehicle(store, "v1")
    _login_customer(client)
    r = client.post("/bookings", data={"vehicle_id": "v1", "start_date": END, "end_date": START,
                                       "pickup_location": "A", "dropoff_location": "A"},
                    follow_redirects=True)
    assert "End date must be after start date" in r.get_data(as_text=True)


def test_other_users_cannot_see_confirmation_or_cancel(client, store):
    put_vehicle(store, "v1")
    _login_customer(client, "first@example.com")
    r = _book(client)
    confirm_url = r.headers["Location"]
    (booking,) = store.list_all("bookings")
    client.get("/logout")

    _login_customer(client, "second@example.com")
    assert client.get(confirm_url).status_code == 404
    client.post(f"/bookings/{booking['id']}/cancel")
    assert store.get("bookings", booking["id"])["status"] == "booked"


def test_review_and_favorite_over_http(client, store):
    put_vehicle(store, "v1")
    _login_customer(client)

    r = client.post("/cars/v1/reviews", data={"rating": "5", "comment": "Great"}, follow_redirects=True)
    assert "Thanks for your review!" in r.get_data(as_text=True)
    assert store.get("vehicles", "v1")["review_count"] == 1

    client.post("/favorites/v1", data={"next": "/cars/v1"})
    body = client.get("/favorites").get_data(as_text=True)
    assert "Toyota Corolla" in body

    client.post("/favorites/v1/remove")
    assert "no favorite cars" in client.get("/favorites").get_data(as_text=True)


def test_anonymous_review_redirects_to_login(client, store):
    put_vehicle(store, "v1")
    r = client.post("/cars/v1/reviews", data={"rating": "5"})
    assert r.status_code == 302
    assert "/login" in r.headers["Location"]
