from flask import Blueprint, render_template, request, redirect, url_for, flash

from ..exceptions import ValidationError, RemoteOperationFailed
from ..services.booking_query import BookingQueryService
from ..services.user_service import UserService
from ..utils.decorators import current_auth, login_required

bp = Blueprint("profile", __name__, url_prefix="/profile")


@bp.get("")
@login_required
def show():
    auth = current_auth()
    user = UserService.get_user(auth.user_id)
    bookings = BookingQueryService.bookings_for_user(auth.user_id)
    return render_template("profile.html", user=user, bookings=bookings)


@bp.post("")
@login_required
def update():
    auth = current_auth()
    try:
        UserService.update_profile(auth.user_id, request.form.get("name", ""),
                                   request.form.get("phone"), request.form.get("address"))
    except ValidationError as e:
        flash(e.message, "danger")
    except RemoteOperationFailed:
        flash("Failed to update profile", "danger")
    else:
        flash("Profile updated", "success")
    return redirect(url_for("profile.show"))
