"""Start dates are checked against the UTC calendar day, the same clock partition uses."""
from datetime import datetime, timezone

import pytest

from conftest import put_vehicle, make_auth
from carrental.exceptions import ValidationError

# 00:30 UTC on Jan 2 is still Jan 1 west of Greenwich
JUST_AFTER_UTC_MIDNIGHT = datetime(2030, 1, 2, 0, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def utc_clock(monkeypatch):
    from carrental.services import booking_service
    monkeypatch.setattr(booking_service, "_now", lambda: JUST_AFTER_UTC_MIDNIGHT)


def _create(start, end):
    from carrental.services.booking_service import BookingService
    return BookingService.create_booking(
        auth=make_auth(),
        vehicle_id="v1",
        start_date=start,
        end_date=end,
        pickup_location="Auckland",
        dropoff_location="Auckland",
    )


def test_today_is_the_utc_date():
    from carrental.services.booking_service import _today
    assert _today() == JUST_AFTER_UTC_MIDNIGHT.date()


def test_start_before_the_utc_date_is_rejected(store):
    put_vehicle(store)
    with pytest.raises(ValidationError):
        _create("2030-01-01", "2030-01-03")
    assert store.get("vehicles", "v1")["availability_status"] == "available"


def test_start_on_the_utc_date_is_accepted(store):
    put_vehicle(store)
    booking = _create("2030-01-02", "2030-01-04")
    assert booking.start_date == "2030-01-02"
