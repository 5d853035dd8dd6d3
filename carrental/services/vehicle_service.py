from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

from carrental.exceptions import VehicleNotFoundError
from carrental.models.vehicle import Vehicle
from carrental.services.common import _store, to_float_safe, _lc, clean, load_vehicle
from carrental.utils.constants import (
    VEHICLES, BOOKINGS, BODY_TYPES, TRANSMISSIONS, PLACEHOLDER, VehicleStatus, BookingStatus, SortOption,
)

logger = logging.getLogger(__name__)

OPEN_BOOKING_STATES = {BookingStatus.BOOKED, BookingStatus.PENDING, BookingStatus.APPROVED}


def valid_image_path(s: Optional[str]) -> bool:
    """Accept /static/... or absolute http(s) URL."""
    if not s:
        return False
    s = s.strip()
    if s.startswith("/static/"):
        return True
    u = urlparse(s)
    return u.scheme in ("http", "https") and bool(u.netloc)


def _split(value, sep=",") -> list[str]:
    if isinstance(value, (list, tuple)):
        return [clean(v) for v in value if clean(v)]
    return [p.strip() for p in (value or "").replace("\r", "").replace("\n", sep).split(sep) if p.strip()]


def _parse_insurance(value) -> list[dict]:
    """'Basic:12, Full cover:25' -> [{'name': 'Basic', 'daily_rate': 12.0}, ...]; bad entries are skipped."""
    if isinstance(value, list):
        return [o for o in value if isinstance(o, dict) and o.get("name")]
    out = []
    for part in _split(value):
        name, _, rate = part.rpartition(":")
        r = to_float_safe(rate)
        if name.strip() and r is not None and r >= 0:
            out.append({"name": name.strip(), "daily_rate": r})
    return out


def _vehicle_fields(payload: dict) -> tuple[Optional[dict], str]:
    """Validate an admin payload and normalize it into stored vehicle fields."""
    make = clean(payload.get("make"))
    model = clean(payload.get("model"))
    vtype = clean(payload.get("type"))
    rate = to_float_safe(payload.get("rate_per_day"))
    try:
        year = int(payload.get("year") or 0)
    except (TypeError, ValueError):
        year = 0

    if not make or not model:
        return None, "Make and model are required"
    if vtype not in BODY_TYPES:
        return None, "Invalid vehicle type"
    if rate is None or rate < 0:
        return None, "Daily rate must be a non-negative number"
    if year <= 0:
        return None, "Invalid year"

    images = [i for i in _split(payload.get("images")) if valid_image_path(i)] or [PLACEHOLDER]
    seats = payload.get("seats")
    transmission = _lc(clean(payload.get("transmission"))) or None
    if transmission and transmission not in TRANSMISSIONS:
        return None, "Transmission must be automatic or manual"

    return {
        "make": make,
        "model": model,
        "year": year,
        "type": vtype,
        "rate_per_day": rate,
        "images": images,
        "location": clean(payload.get("location")),
        "description": clean(payload.get("description")) or None,
        "seats": int(seats) if str(seats or "").strip().isdigit() else None,
        "transmission": transmission,
        "fuel_type": clean(payload.get("fuel_type")) or None,
        "features": _split(payload.get("features")),
        "insurance_options": _parse_insurance(payload.get("insurance_options")),
        "specifications": dict(payload.get("specifications") or {}),
    }, ""


class VehicleService:
    """Vehicle catalogue: list, filter, sort and admin CRUD."""

    @staticmethod
    def list_vehicles() -> list[Vehicle]:
        """Every vehicle, ordered by make."""
        return [Vehicle.from_dict(d) for d in _store().query(VEHICLES, order_by="make")]

    @staticmethod
    def filter_vehicles(vtype=None, location=None, min_price=None, max_price=None,
                        search=None, sort=None, *, vehicles=None) -> list[Vehicle]:
        """
        Filter vehicles by body type, location, price range and a free-text
        search over make/model, then sort.
        - Empty filters are ignored; invalid min/max values are ignored too.
        - `sort`: 'price-low' | 'price-high' | 'rating'; anything else keeps make order.
        """
        # 1. Resolve data source
        res = list(vehicles) if vehicles is not None else VehicleService.list_vehicles()

        # 2. Type / location filters (exact match)
        if vtype:
            res = [v for v in res if v.type == vtype]
        if location:
            res = [v for v in res if v.location == location]

        # 3. Price range filter (invalid min/max ignored)
        min_val = to_float_safe(min_price)
        max_val = to_float_safe(max_price)
        if (min_val is not None) and (max_val is not None) and (min_val > max_val):
            min_val, max_val = max_val, min_val
        if min_val is not None:
            res = [v for v in res if v.rate_per_day >= min_val]
        if max_val is not None:
            res = [v for v in res if v.rate_per_day <= max_val]

        # 4. Search (case-insensitive, partial match on make or model)
        kw = _lc(search).strip()
        if kw:
            res = [v for v in res if kw in _lc(v.make) or kw in _lc(v.model)]

        # 5. Sort
        if sort == SortOption.PRICE_LOW:
            res.sort(key=lambda v: v.rate_per_day)
        elif sort == SortOption.PRICE_HIGH:
            res.sort(key=lambda v: v.rate_per_day, reverse=True)
        elif sort == SortOption.RATING:
            res.sort(key=lambda v: v.rating, reverse=True)
        return res

    @staticmethod
    def filter_options(vehicles=None) -> tuple[list[str], list[str]]:
        """Distinct locations and body types present in the catalogue, for the filter dropdowns."""
        vs = list(vehicles) if vehicles is not None else VehicleService.list_vehicles()
        locations = sorted({v.location for v in vs if v.location})
        types = sorted({v.type for v in vs if v.type})
        return locations, types

    @staticmethod
    def get_vehicle(vid: str) -> Vehicle:
        """Return a vehicle by ID or raise VehicleNotFoundError."""
        v = load_vehicle(vid)
        if v is None:
            raise VehicleNotFoundError(f"Error: vehicle with ID '{vid}' not found")
        return v

    # ---------- admin ----------
    @staticmethod
    def admin_create_vehicle(payload: dict):
        """Returns (ok, message, vehicle_id)."""
        fields, err = _vehicle_fields(payload)
        if fields is None:
            return False, err, None
        fields.update({
            "availability_status": VehicleStatus.AVAILABLE,
            "rating": 0.0,
            "review_count": 0,
        })
        vid = _store().add(VEHICLES, fields)
        logger.info("Vehicle %s created (%s %s)", vid, fields["make"], fields["model"])
        return True, "Vehicle created", vid

    @staticmethod
    def admin_update_vehicle(vehicle_id: str, payload: dict):
        """Edit catalogue fields; availability, rating and reviews are left untouched."""
        if load_vehicle(vehicle_id) is None:
            return False, "Vehicle not found"
        fields, err = _vehicle_fields(payload)
        if fields is None:
            return False, err
        if "specifications" not in payload:
            # the admin form does not edit specifications
            fields.pop("specifications")
        _store().update(VEHICLES, vehicle_id, fields)
        return True, "Vehicle updated"

    @staticmethod
    def set_status(vehicle_id: str, status: str):
        """Admin override of availability (the only way in and out of maintenance)."""
        if status not in VehicleStatus.ALL:
            return False, "Invalid status"
        if load_vehicle(vehicle_id) is None:
            return False, "Vehicle not found"
        _store().update(VEHICLES, vehicle_id, {"availability_status": status})
        logger.info("Vehicle %s status set to %s by admin", vehicle_id, status)
        return True, "Vehicle status updated successfully"

    @staticmethod
    def delete_vehicle(vehicle_id: str):
        """
        Delete a vehicle if and only if:
        - the vehicle exists,
        - it is not currently rented,
        - no open booking (booked/pending/approved) references it.
        """
        st = _store()
        veh = load_vehicle(vehicle_id)
        if veh is None:
            return False, "Vehicle not found"

        if veh.availability_status == VehicleStatus.RENTED:
            return False, "Cannot delete while rented"

        open_bookings = st.query(
            BOOKINGS, where={"vehicle_id": vehicle_id},
            predicate=lambda b: b.get("status") in OPEN_BOOKING_STATES,
        )
        if open_bookings:
            return False, "Cannot delete: open bookings exist"

        st.delete(VEHICLES, vehicle_id)
        return True, "Vehicle deleted"
