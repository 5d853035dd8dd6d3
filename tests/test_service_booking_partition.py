"""
Active/past split of a user's bookings and the read-time status label.
"""
from datetime import datetime, timedelta, timezone

from conftest import put_booking
from carrental.models.booking import Booking
from carrental.services.booking_query import BookingQueryService

NOW = datetime(2030, 6, 15, 12, 0, tzinfo=timezone.utc)
YESTERDAY = (NOW - timedelta(days=1)).date().isoformat()
TOMORROW = (NOW + timedelta(days=1)).date().isoformat()


def _b(bid, status, end, created_at="2030-06-01T00:00:00+00:00"):
    return Booking(id=bid, user_id="u1", vehicle_id="v1", start_date="2030-06-01", end_date=end,
                   pickup_location="A", dropoff_location="A", total_price=100.0,
                   status=status, created_at=created_at)


def test_partition_scenario():
    a = _b("A", "booked", YESTERDAY)
    b = _b("B", "booked", TOMORROW)
    c = _b("C", "cancelled", TOMORROW)
    d = _b("D", "approved", YESTERDAY)

    active, past = BookingQueryService.partition([a, b, c, d], now=NOW)

    assert {x.id for x in active} == {"B", "D"}
    assert {x.id for x in past} == {"A", "C"}


def test_pending_is_always_active():
    active, past = BookingQueryService.partition([_b("P", "pending", YESTERDAY)], now=NOW)
    assert [x.id for x in active] == ["P"]
    assert past == []


def test_booking_ending_today_at_midnight_is_past():
    today = NOW.date().isoformat()
    active, past = BookingQueryService.partition([_b("T", "booked", today)], now=NOW)
    assert active == []
    assert [x.id for x in past] == ["T"]


def test_each_list_is_newest_first():
    rows = [
        _b("old", "booked", TOMORROW, created_at="2030-06-01T00:00:00+00:00"),
        _b("new", "booked", TOMORROW, created_at="2030-06-10T00:00:00+00:00"),
        _b("mid", "booked", TOMORROW, created_at="2030-06-05T00:00:00+00:00"),
    ]
    active, _ = BookingQueryService.partition(rows, now=NOW)
    assert [x.id for x in active] == ["new", "mid", "old"]


def test_display_status_marks_finished_rentals_completed():
    assert BookingQueryService.display_status(_b("A", "booked", YESTERDAY), now=NOW) == "completed"
    assert BookingQueryService.display_status(_b("B", "booked", TOMORROW), now=NOW) == "booked"
    assert BookingQueryService.display_status(_b("C", "cancelled", YESTERDAY), now=NOW) == "cancelled"


def test_bookings_for_user_only_returns_own(store):
    put_booking(store, "b1", user_id="u1")
    put_booking(store, "b2", user_id="u2")
    assert [b.id for b in BookingQueryService.bookings_for_user("u1")] == ["b1"]


def test_all_bookings_status_filter(store):
    put_booking(store, "b1", status="booked")
    put_booking(store, "b2", status="cancelled")
    assert {b.id for b in BookingQueryService.all_bookings()} == {"b1", "b2"}
    assert {b.id for b in BookingQueryService.all_bookings("all")} == {"b1", "b2"}
    assert [b.id for b in BookingQueryService.all_bookings("cancelled")] == ["b2"]


def test_recent_bookings_limit(store):
    for i in range(7):
        put_booking(store, f"b{i}", created_at=f"2030-06-0{i + 1}T00:00:00+00:00")
    recent = BookingQueryService.recent_bookings(limit=5)
    assert [b.id for b in recent] == ["b6", "b5", "b4", "b3", "b2"]
