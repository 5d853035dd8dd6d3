from flask import Blueprint, render_template, request, redirect, url_for, flash

from ..exceptions import (
    Unauthenticated,
    ValidationError,
    NotFoundError,
    InvalidTransitionError,
    PartialBookingError,
    RemoteOperationFailed,
)
from ..services.booking_query import BookingQueryService
from ..services.booking_service import BookingService
from ..services.common import load_vehicle
from ..utils.decorators import current_auth, login_required, login_redirect

bp = Blueprint("bookings", __name__, url_prefix="/bookings")


@bp.post("")
def create_booking():
    """Create a booking from the car detail form, then show its confirmation."""
    form = request.form
    vid = form.get("vehicle_id", "")
    back = url_for("cars.car_detail", vid=vid, start=form.get("start_date") or None,
                   end=form.get("end_date") or None, insurance=form.get("insurance") or None)
    try:
        booking = BookingService.create_booking(
            auth=current_auth(),
            vehicle_id=vid,
            start_date=form.get("start_date"),
            end_date=form.get("end_date"),
            pickup_location=form.get("pickup_location"),
            dropoff_location=form.get("dropoff_location"),
            insurance=form.get("insurance") or None,
        )
    except Unauthenticated:
        flash("You'll need to login to complete your booking", "warning")
        return login_redirect(url_for("cars.car_detail", vid=vid))
    except ValidationError as e:
        flash(e.message, "danger")
        return redirect(back)
    except NotFoundError as e:
        flash(e.message, "danger")
        return redirect(url_for("cars.list_cars"))
    except PartialBookingError as e:
        flash(e.message, "warning")
        return redirect(url_for("bookings.confirm", bid=e.booking_id))
    except RemoteOperationFailed:
        flash("An error occurred while creating your booking. Please try again.", "danger")
        return redirect(back)

    return redirect(url_for("bookings.confirm", bid=booking.id))


@bp.get("/<bid>/confirm")
@login_required
def confirm(bid):
    booking, vehicle = BookingService.get_confirmation(bid, current_auth())
    return render_template("bookings/confirm.html", booking=booking, vehicle=vehicle,
                           days=(BookingService.quote(vehicle, booking.start_date, booking.end_date).days))


@bp.get("")
@login_required
def my_bookings():
    """The user's bookings split into active and past."""
    auth = current_auth()
    active, past = BookingQueryService.partition(BookingQueryService.bookings_for_user(auth.user_id))
    vehicles = {b.vehicle_id: load_vehicle(b.vehicle_id) for b in active + past}
    return render_template("bookings/mine.html", active=active, past=past, vehicles=vehicles,
                           label=BookingQueryService.display_status)


@bp.post("/<bid>/cancel")
@login_required
def cancel(bid):
    """Cancel one of the current user's bookings and release its car."""
    auth = current_auth()
    try:
        BookingService.cancel_booking(bid, BookingQueryService.bookings_for_user(auth.user_id))
    except NotFoundError as e:
        flash(e.message, "danger")
    except InvalidTransitionError as e:
        flash(e.message, "warning")
    except RemoteOperationFailed:
        flash("Failed to cancel booking. Please try again.", "danger")
    else:
        flash("Booking cancelled successfully", "success")
    return redirect(url_for("bookings.my_bookings"))
