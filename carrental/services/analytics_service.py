from __future__ import annotations

from collections import Counter

from carrental.services.booking_query import BookingQueryService
from carrental.services.common import _store
from carrental.utils.constants import VEHICLES, BOOKINGS, USERS, VehicleStatus, BookingStatus


class AnalyticsService:
    """Aggregations for the admin dashboard."""

    @staticmethod
    def dashboard():
        st = _store()
        status_cnt = Counter(v.get("availability_status") for v in st.list_all(VEHICLES))
        revenue = round(sum(float(b.get("total_price") or 0) for b in st.list_all(BOOKINGS)
                            if b.get("status") != BookingStatus.CANCELLED), 2)
        return {
            "recent_bookings": BookingQueryService.recent_bookings(),
            "total_bookings": st.count(BOOKINGS),
            "vehicles": {
                "total": sum(status_cnt.values()),
                "available": status_cnt.get(VehicleStatus.AVAILABLE, 0),
                "rented": status_cnt.get(VehicleStatus.RENTED, 0),
                "maintenance": status_cnt.get(VehicleStatus.MAINTENANCE, 0),
            },
            "user_count": st.count(USERS),
            "revenue": revenue,
        }
