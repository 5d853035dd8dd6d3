from dataclasses import dataclass, asdict
from typing import Optional

from carrental.models.vehicle import InsuranceOption
from carrental.utils.constants import BookingStatus


@dataclass
class Booking:
    """
    A reservation of one vehicle by one user. `total_price` is fixed when the
    booking is created and is never recomputed from the vehicle's current rate.
    Dates are stored as 'YYYY-MM-DD'; `created_at` is the store's timestamp.
    """
    id: str
    user_id: str
    vehicle_id: str
    start_date: str
    end_date: str
    pickup_location: str
    dropoff_location: str
    total_price: float
    status: str = BookingStatus.BOOKED
    insurance: Optional[InsuranceOption] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Booking":
        ins = d.get("insurance")
        return cls(
            id=str(d.get("id") or ""),
            user_id=d.get("user_id", ""),
            vehicle_id=d.get("vehicle_id", ""),
            start_date=d.get("start_date", ""),
            end_date=d.get("end_date", ""),
            pickup_location=d.get("pickup_location", ""),
            dropoff_location=d.get("dropoff_location", ""),
            total_price=float(d.get("total_price") or 0),
            status=d.get("status") or BookingStatus.BOOKED,
            insurance=InsuranceOption.from_dict(ins) if ins else None,
            created_at=d.get("created_at"),
        )
