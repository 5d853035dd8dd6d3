from __future__ import annotations

from flask import Blueprint, request, render_template, redirect, url_for, flash

from ..exceptions import NotFoundError, InvalidTransitionError, RemoteOperationFailed
from ..services.analytics_service import AnalyticsService
from ..services.booking_query import BookingQueryService
from ..services.booking_service import BookingService
from ..services.common import load_vehicle, load_user
from ..services.user_service import UserService
from ..services.vehicle_service import VehicleService
from ..utils.constants import BookingStatus, VehicleStatus, Role, BODY_TYPES, TRANSMISSIONS
from ..utils.decorators import role_required

bp = Blueprint("admin", __name__, url_prefix="/admin")

BOOKING_FILTERS = ("all", BookingStatus.BOOKED, BookingStatus.PENDING, BookingStatus.APPROVED, BookingStatus.CANCELLED)
ROLE_FILTERS = ("all",) + Role.ALL


def _vehicle_form() -> dict:
    f = request.form
    return {k: f.get(k) for k in (
        "make", "model", "year", "type", "rate_per_day", "images", "location", "description",
        "seats", "transmission", "fuel_type", "features", "insurance_options",
    )}


@bp.get("")
@role_required(Role.ADMIN)
def dashboard():
    data = AnalyticsService.dashboard()
    vehicles = {b.vehicle_id: load_vehicle(b.vehicle_id) for b in data["recent_bookings"]}
    return render_template("admin/dashboard.html", data=data, vehicles=vehicles)


# ---------- bookings ----------
@bp.get("/bookings")
@role_required(Role.ADMIN)
def bookings():
    status = request.args.get("status", "all")
    if status not in BOOKING_FILTERS:
        status = "all"
    rows = BookingQueryService.all_bookings(status)
    vehicles = {b.vehicle_id: load_vehicle(b.vehicle_id) for b in rows}
    users = {b.user_id: load_user(b.user_id) for b in rows}
    return render_template("admin/bookings.html", bookings=rows, status=status, filters=BOOKING_FILTERS,
                           vehicles=vehicles, users=users)


def _booking_action(bid, action):
    try:
        action(bid)
    except NotFoundError as e:
        flash(e.message, "danger")
    except InvalidTransitionError as e:
        flash(e.message, "warning")
    except RemoteOperationFailed:
        flash("Failed to update booking status", "danger")
    else:
        flash("Booking status updated", "success")
    return redirect(url_for("admin.bookings", status=request.form.get("status") or None))


@bp.post("/bookings/<bid>/approve")
@role_required(Role.ADMIN)
def approve_booking(bid):
    return _booking_action(bid, BookingService.approve_booking)


@bp.post("/bookings/<bid>/reject")
@role_required(Role.ADMIN)
def reject_booking(bid):
    return _booking_action(bid, BookingService.reject_booking)


# ---------- vehicles ----------
@bp.get("/vehicles")
@role_required(Role.ADMIN)
def vehicles():
    return render_template("admin/vehicles.html", vehicles=VehicleService.list_vehicles(),
                           statuses=VehicleStatus.ALL, body_types=BODY_TYPES, transmissions=TRANSMISSIONS)


@bp.get("/vehicles/<vid>/edit")
@role_required(Role.ADMIN)
def edit_vehicle_form(vid):
    return render_template("admin/vehicle_form.html", v=VehicleService.get_vehicle(vid),
                           body_types=BODY_TYPES, transmissions=TRANSMISSIONS)


@bp.post("/vehicles/add")
@role_required(Role.ADMIN)
def add_vehicle():
    ok, msg, _vid = VehicleService.admin_create_vehicle(_vehicle_form())
    flash(msg, "success" if ok else "danger")
    return redirect(url_for("admin.vehicles"))


@bp.post("/vehicles/<vid>/edit")
@role_required(Role.ADMIN)
def edit_vehicle(vid):
    ok, msg = VehicleService.admin_update_vehicle(vid, _vehicle_form())
    flash(msg, "success" if ok else "danger")
    if not ok:
        return redirect(url_for("admin.edit_vehicle_form", vid=vid))
    return redirect(url_for("admin.vehicles"))


@bp.post("/vehicles/<vid>/status")
@role_required(Role.ADMIN)
def vehicle_status(vid):
    ok, msg = VehicleService.set_status(vid, request.form.get("status", ""))
    flash(msg, "success" if ok else "danger")
    return redirect(url_for("admin.vehicles"))


@bp.post("/vehicles/<vid>/delete")
@role_required(Role.ADMIN)
def delete_vehicle(vid):
    ok, msg = VehicleService.delete_vehicle(vid)
    flash(msg, "success" if ok else "danger")
    return redirect(url_for("admin.vehicles"))


# ---------- users ----------
@bp.get("/users")
@role_required(Role.ADMIN)
def users():
    role = request.args.get("role", "all")
    if role not in ROLE_FILTERS:
        role = "all"
    return render_template("admin/users.html", users=UserService.list_users(role), role=role, filters=ROLE_FILTERS)


@bp.post("/users/<uid>/role")
@role_required(Role.ADMIN)
def set_role(uid):
    ok, msg = UserService.admin_set_role(uid, request.form.get("role", ""))
    flash(msg, "success" if ok else "danger")
    return redirect(url_for("admin.users"))
