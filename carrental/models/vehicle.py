from dataclasses import dataclass, field, asdict
from typing import Optional

from carrental.utils.constants import VehicleStatus, PLACEHOLDER


@dataclass
class InsuranceOption:
    """An add-on billed per rental day on top of the vehicle's daily rate."""
    name: str
    daily_rate: float

    @classmethod
    def from_dict(cls, d: dict) -> "InsuranceOption":
        return cls(name=str(d.get("name") or ""), daily_rate=float(d.get("daily_rate") or 0))


@dataclass
class Vehicle:
    """
    A rentable vehicle. The store keeps raw dicts; services wrap them into
    Vehicle objects to work with typed fields.
    `availability_status` is a snapshot written by the booking flow and by
    admins; nothing ties `rented` to a live booking.
    """
    id: str
    make: str
    model: str
    year: int
    type: str  # "SUV" | "Sedan" | "Coupe" | "Truck" | "Van" | "Convertible"
    rate_per_day: float
    images: list[str] = field(default_factory=lambda: [PLACEHOLDER])
    availability_status: str = VehicleStatus.AVAILABLE
    location: str = ""
    description: Optional[str] = None
    seats: Optional[int] = None
    transmission: Optional[str] = None  # "automatic" | "manual"
    fuel_type: Optional[str] = None
    features: list[str] = field(default_factory=list)
    rating: float = 0.0
    review_count: int = 0
    insurance_options: list[InsuranceOption] = field(default_factory=list)
    specifications: dict = field(default_factory=dict)

    @property
    def title(self) -> str:
        return f"{self.make} {self.model} ({self.year})"

    @property
    def is_available(self) -> bool:
        return self.availability_status == VehicleStatus.AVAILABLE

    def insurance_option(self, name: str) -> Optional[InsuranceOption]:
        for opt in self.insurance_options:
            if opt.name == name:
                return opt
        return None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Vehicle":
        seats = d.get("seats")
        return cls(
            id=str(d.get("id") or ""),
            make=d.get("make", ""),
            model=d.get("model", ""),
            year=int(d.get("year") or 0),
            type=d.get("type", ""),
            rate_per_day=float(d.get("rate_per_day") or 0),
            images=list(d.get("images") or [PLACEHOLDER]),
            availability_status=d.get("availability_status") or VehicleStatus.AVAILABLE,
            location=d.get("location", ""),
            description=d.get("description"),
            seats=int(seats) if seats is not None else None,
            transmission=d.get("transmission"),
            fuel_type=d.get("fuel_type"),
            features=list(d.get("features") or []),
            rating=float(d.get("rating") or 0),
            review_count=int(d.get("review_count") or 0),
            insurance_options=[InsuranceOption.from_dict(o) for o in d.get("insurance_options") or []],
            specifications=dict(d.get("specifications") or {}),
        )


@dataclass
class Review:
    """A star rating left on a vehicle; `user_name` is a snapshot taken at submission."""
    id: str
    user_id: str
    user_name: str
    rating: int
    comment: str
    date: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Review":
        return cls(
            id=str(d.get("id") or ""),
            user_id=d.get("user_id", ""),
            user_name=d.get("user_name", ""),
            rating=int(d.get("rating") or 0),
            comment=d.get("comment", ""),
            date=d.get("date", ""),
        )
