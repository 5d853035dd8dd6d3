"""
Booking status and vehicle availability rules.

Booking statuses: `booked`/`pending` (initial, treated alike) -> `approved` or
`cancelled`. `completed` is only ever a read-time label and is never a stored
target. Vehicle statuses: `available` <-> `rented` via bookings; `maintenance`
is set and cleared by admins only, so booking transitions never touch a
vehicle that is not in the state they expect.
"""

from dataclasses import dataclass
from typing import Optional

from carrental.exceptions import InvalidTransitionError
from carrental.utils.constants import BookingStatus, VehicleStatus

OPEN_STATUSES = frozenset({BookingStatus.BOOKED, BookingStatus.PENDING})


@dataclass(frozen=True)
class Transition:
    trigger: str
    booking_from: frozenset
    booking_to: str
    vehicle_from: Optional[str] = None
    vehicle_to: Optional[str] = None


CREATE = Transition("create", frozenset({None}), BookingStatus.BOOKED,
                    VehicleStatus.AVAILABLE, VehicleStatus.RENTED)
CANCEL = Transition("cancel", OPEN_STATUSES | {BookingStatus.APPROVED}, BookingStatus.CANCELLED,
                    VehicleStatus.RENTED, VehicleStatus.AVAILABLE)
APPROVE = Transition("approve", OPEN_STATUSES, BookingStatus.APPROVED)
REJECT = Transition("reject", OPEN_STATUSES, BookingStatus.CANCELLED,
                    VehicleStatus.RENTED, VehicleStatus.AVAILABLE)

TRANSITIONS = {t.trigger: t for t in (CREATE, CANCEL, APPROVE, REJECT)}


def can_book(vehicle_status: str) -> bool:
    """Guard for booking creation: only an `available` vehicle can be booked."""
    return vehicle_status == VehicleStatus.AVAILABLE


def check(trigger: str, booking_status: Optional[str]) -> Transition:
    """Return the transition for `trigger`, or raise if the booking is in the wrong state."""
    t = TRANSITIONS.get(trigger)
    if t is None:
        raise InvalidTransitionError(f"Error: unknown action '{trigger}'")
    if booking_status not in t.booking_from:
        raise InvalidTransitionError(f"Error: cannot {trigger} a booking that is {booking_status}")
    return t


def vehicle_status_after(t: Transition, vehicle_status: Optional[str]) -> Optional[str]:
    """
    New vehicle status the transition calls for, or None when the vehicle
    must be left alone (no side effect, or it is not in the expected state,
    e.g. an admin put it into maintenance meanwhile).
    """
    if t.vehicle_to is None:
        return None
    if t.vehicle_from is not None and vehicle_status != t.vehicle_from:
        return None
    return t.vehicle_to
