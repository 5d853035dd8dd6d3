"""Read-side helpers for bookings: per-user lists, admin lists, active/past split."""

from datetime import datetime
from typing import Iterable, Optional

from carrental.models.booking import Booking
from carrental.services.common import _store, _now, as_utc_datetime
from carrental.utils.constants import BOOKINGS, BookingStatus, RECENT_BOOKINGS_LIMIT

CLOSED_STATUSES = {BookingStatus.CANCELLED, BookingStatus.COMPLETED}
ALWAYS_ACTIVE_STATUSES = {BookingStatus.PENDING, BookingStatus.APPROVED}


def _newest_first(bookings: Iterable[Booking]) -> list[Booking]:
    # Bookings written without a timestamp sort last
    return sorted(bookings, key=lambda b: b.created_at or "", reverse=True)


def _ends_after(b: Booking, now: datetime) -> bool:
    try:
        return as_utc_datetime(b.end_date) > now
    except ValueError:
        return False


class BookingQueryService:
    """Queries and the read-time classification of bookings. Nothing here writes."""

    @staticmethod
    def is_active(b: Booking, now: datetime) -> bool:
        if b.status in ALWAYS_ACTIVE_STATUSES:
            return True
        return _ends_after(b, now) and b.status not in CLOSED_STATUSES

    @staticmethod
    def is_past(b: Booking, now: datetime) -> bool:
        return (not _ends_after(b, now)) or b.status in CLOSED_STATUSES

    @staticmethod
    def partition(bookings: Iterable[Booking], now: Optional[datetime] = None):
        """
        Split bookings into (active, past), each newest first.

        active: pending/approved, or ends after `now` and is neither cancelled nor completed.
        past:   ends at or before `now`, or is cancelled/completed.
        The two rules overlap for a pending/approved booking that has already
        ended; it is listed as active, status taking precedence.
        """
        now = as_utc_datetime(now) if now is not None else _now()
        bookings = list(bookings)
        active = [b for b in bookings if BookingQueryService.is_active(b, now)]
        active_ids = {id(b) for b in active}
        past = [b for b in bookings if id(b) not in active_ids and BookingQueryService.is_past(b, now)]
        return _newest_first(active), _newest_first(past)

    @staticmethod
    def display_status(b: Booking, now: Optional[datetime] = None) -> str:
        """Status label for the UI: a finished booked/approved rental reads as `completed`."""
        now = as_utc_datetime(now) if now is not None else _now()
        if b.status in (BookingStatus.BOOKED, BookingStatus.APPROVED) and not _ends_after(b, now):
            return BookingStatus.COMPLETED
        return b.status

    @staticmethod
    def bookings_for_user(user_id: str) -> list[Booking]:
        rows = _store().query(BOOKINGS, where={"user_id": user_id})
        return _newest_first(Booking.from_dict(r) for r in rows)

    @staticmethod
    def all_bookings(status: Optional[str] = None) -> list[Booking]:
        """Admin list, optionally restricted to one status ('all' or None for every booking)."""
        where = {"status": status} if status and status != "all" else None
        rows = _store().query(BOOKINGS, where=where)
        return _newest_first(Booking.from_dict(r) for r in rows)

    @staticmethod
    def recent_bookings(limit: int = RECENT_BOOKINGS_LIMIT) -> list[Booking]:
        rows = _store().query(BOOKINGS, order_by="created_at", descending=True, limit=limit)
        return [Booking.from_dict(r) for r in rows]
