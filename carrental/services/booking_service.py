"""Booking lifecycle: create, cancel, admin approve/reject, confirmation."""

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from carrental.exceptions import (
    Unauthenticated,
    ValidationError,
    VehicleNotFoundError,
    VehicleUnavailableError,
    BookingNotFoundError,
    RemoteOperationFailed,
    PartialBookingError,
)
from carrental.models.booking import Booking
from carrental.models.store import SERVER_TIMESTAMP
from carrental.models.vehicle import Vehicle
from carrental.services import availability
from carrental.services.auth_service import AuthSession
from carrental.services.common import _store, _now, parse_date, clean, load_vehicle, load_booking
from carrental.services.pricing import price, Quote
from carrental.utils.constants import BOOKINGS, VEHICLES, BookingStatus

logger = logging.getLogger(__name__)


def _today() -> date:
    """Today in UTC, the clock booking dates are compared on. Wrapper for easier testing/mocking."""
    return _now().date()


class BookingService:
    """
    Orchestrates the two independent writes behind each booking action
    (booking document, then vehicle availability). There is no transaction:
    if the second write fails the first one stays.
    """

    @staticmethod
    def quote(vehicle: Vehicle, start, end, insurance: Optional[str] = None) -> Optional[Quote]:
        """Price preview for the booking form; None until both dates parse."""
        try:
            d1, d2 = parse_date(start), parse_date(end)
        except (TypeError, ValueError):
            return None
        opt = vehicle.insurance_option(insurance) if insurance else None
        return price(d1, d2, vehicle.rate_per_day, opt.daily_rate if opt else 0)

    @staticmethod
    def create_booking(
            auth: Optional[AuthSession],
            vehicle_id: str,
            start_date,
            end_date,
            pickup_location: str,
            dropoff_location: str,
            insurance: Optional[str] = None,
    ) -> Booking:
        """
        Validate, price and persist a booking, then mark the vehicle rented.

        Raises:
            Unauthenticated: no signed-in user.
            ValidationError: missing fields, unparsable or reversed dates, unknown insurance.
            VehicleNotFoundError / VehicleUnavailableError: guard on the vehicle.
            PartialBookingError: booking saved but the vehicle update failed.
        """
        if auth is None:
            raise Unauthenticated("Please login to book a car")

        pickup = clean(pickup_location)
        dropoff = clean(dropoff_location)
        if not start_date or not end_date or not pickup or not dropoff:
            raise ValidationError("Please fill in all fields")

        try:
            d1 = parse_date(start_date)
            d2 = parse_date(end_date)
        except (TypeError, ValueError):
            raise ValidationError("Invalid dates (YYYY-MM-DD)")
        if d1 < _today():
            raise ValidationError("Start date cannot be in the past")
        if d2 <= d1:
            raise ValidationError("End date must be after start date")

        vehicle = load_vehicle(vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError(f"Error: vehicle with ID '{vehicle_id}' not found")
        if not availability.can_book(vehicle.availability_status):
            raise VehicleUnavailableError("This car is not available for booking")

        option = None
        if insurance:
            option = vehicle.insurance_option(insurance)
            if option is None:
                raise ValidationError("Unknown insurance option")

        q = price(d1, d2, vehicle.rate_per_day, option.daily_rate if option else 0)
        t = availability.check("create", None)

        st = _store()
        booking_id = st.add(BOOKINGS, {
            "user_id": auth.user_id,
            "vehicle_id": vehicle.id,
            "start_date": d1.isoformat(),
            "end_date": d2.isoformat(),
            "pickup_location": pickup,
            "dropoff_location": dropoff,
            "total_price": q.total,
            "status": t.booking_to,
            "insurance": {"name": option.name, "daily_rate": option.daily_rate} if option else None,
            "created_at": SERVER_TIMESTAMP,
        })
        logger.info("Booking %s created for vehicle %s by %s (%d days, %s)",
                    booking_id, vehicle.id, auth.user_id, q.days, q.total)

        try:
            st.update(VEHICLES, vehicle.id,
                      {"availability_status": availability.vehicle_status_after(t, vehicle.availability_status)})
        except RemoteOperationFailed as e:
            logger.error("Booking %s saved but vehicle %s was not marked rented: %s", booking_id, vehicle.id, e)
            raise PartialBookingError(booking_id) from e

        return load_booking(booking_id)

    @staticmethod
    def cancel_booking(booking_id: str, bookings: Iterable[Booking]) -> Booking:
        """
        Cancel a booking picked from an already-fetched working set (the
        user's own list) and release its vehicle.
        Cancelling an already-cancelled booking is a no-op.
        """
        booking = next((b for b in bookings if b.id == booking_id), None)
        if booking is None:
            raise BookingNotFoundError()
        if booking.status == BookingStatus.CANCELLED:
            return booking
        return BookingService._apply("cancel", booking)

    @staticmethod
    def approve_booking(booking_id: str) -> Booking:
        return BookingService._apply("approve", BookingService.get_booking(booking_id))

    @staticmethod
    def reject_booking(booking_id: str) -> Booking:
        """Admin reject: the booking is cancelled and its vehicle released like a user cancel."""
        return BookingService._apply("reject", BookingService.get_booking(booking_id))

    @staticmethod
    def _apply(trigger: str, booking: Booking) -> Booking:
        t = availability.check(trigger, booking.status)
        st = _store()
        st.update(BOOKINGS, booking.id, {"status": t.booking_to})
        logger.info("Booking %s: %s -> %s", booking.id, booking.status, t.booking_to)

        vehicle = load_vehicle(booking.vehicle_id)
        new_status = availability.vehicle_status_after(t, vehicle.availability_status if vehicle else None)
        if new_status is not None:
            try:
                st.update(VEHICLES, vehicle.id, {"availability_status": new_status})
            except RemoteOperationFailed as e:
                logger.error("Booking %s is %s but vehicle %s was not released: %s",
                             booking.id, t.booking_to, vehicle.id, e)
                raise
        return replace(booking, status=t.booking_to)

    @staticmethod
    def get_booking(booking_id: str) -> Booking:
        b = load_booking(booking_id)
        if b is None:
            raise BookingNotFoundError(f"Error: booking with ID '{booking_id}' not found")
        return b

    @staticmethod
    def get_confirmation(booking_id: str, auth: Optional[AuthSession] = None):
        """
        Booking plus its vehicle for the confirmation page.
        Other users' bookings are reported as not found unless `auth` is an admin.
        """
        b = BookingService.get_booking(booking_id)
        if auth is not None and not auth.is_admin and b.user_id != auth.user_id:
            raise BookingNotFoundError()
        v = load_vehicle(b.vehicle_id)
        if v is None:
            raise VehicleNotFoundError("Booking information not found")
        return b, v
