"""Shared service helpers and factories."""

from datetime import datetime, date, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from carrental.models.booking import Booking
from carrental.models.store import DocumentStore
from carrental.models.user import User
from carrental.models.vehicle import Vehicle
from carrental.utils.constants import DATE_FMT, VEHICLES, BOOKINGS, USERS


def _store() -> DocumentStore:
    """Get the singleton store instance."""
    return DocumentStore.instance()


# -------- date & math helpers --------
def parse_date(value) -> date:
    """Coerce 'YYYY-MM-DD' (or an ISO timestamp, date, datetime) to a date; raise ValueError on bad input."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.split("T", 1)[0].strip(), DATE_FMT).date()
    raise ValueError(f"Unsupported date: {value!r}")


def as_utc_datetime(value) -> datetime:
    """
    Coerce a date-like to an aware UTC datetime. A bare calendar date means
    midnight UTC of that day.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        s = value.strip()
        if len(s) == 10:
            return as_utc_datetime(parse_date(s))
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        return as_utc_datetime(datetime.fromisoformat(s))
    raise ValueError(f"Unsupported date: {value!r}")


def _now() -> datetime:
    """Wrapper for easier testing/mocking."""
    return datetime.now(timezone.utc)


def round1(x: float) -> float:
    """Round half-up to one decimal (4.25 -> 4.3), the way ratings are displayed."""
    return float(Decimal(str(x)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def to_float_safe(value) -> Optional[float]:
    """Safely convert to float; return None if invalid."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()


def clean(value) -> str:
    """Strip a form value; None becomes ''."""
    return (value or "").strip()


# -------- store -> model loaders --------
def load_vehicle(vehicle_id) -> Optional[Vehicle]:
    d = _store().get(VEHICLES, vehicle_id) if vehicle_id else None
    return Vehicle.from_dict(d) if d else None


def load_booking(booking_id) -> Optional[Booking]:
    d = _store().get(BOOKINGS, booking_id) if booking_id else None
    return Booking.from_dict(d) if d else None


def load_user(user_id) -> Optional[User]:
    d = _store().get(USERS, user_id) if user_id else None
    return User.from_dict(d) if d else None
