from flask import Blueprint, render_template, request, redirect, url_for, flash

from ..exceptions import Unauthenticated, ValidationError, RemoteOperationFailed
from ..services.booking_service import BookingService
from ..services.favorites_service import FavoritesService
from ..services.review_service import ReviewService
from ..services.vehicle_service import VehicleService
from ..utils.constants import SortOption
from ..utils.decorators import current_auth, login_redirect

bp = Blueprint("cars", __name__, url_prefix="/cars")


@bp.get("")
def list_cars():
    """Cars list with filters. Strip empty query params and redirect to a clean URL."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    nonempty = {k: v for k, v in q.items() if v}

    # If URL has only empty params, redirect to /cars without ?type=&location=...
    if request.args and not nonempty:
        return redirect(url_for("cars.list_cars"))

    all_cars = VehicleService.list_vehicles()
    cars = VehicleService.filter_vehicles(
        vtype=nonempty.get("type"),
        location=nonempty.get("location"),
        min_price=nonempty.get("min"),
        max_price=nonempty.get("max"),
        search=nonempty.get("search"),
        sort=nonempty.get("sort"),
        vehicles=all_cars,
    )
    locations, types = VehicleService.filter_options(all_cars)
    auth = current_auth()
    return render_template(
        "cars/list.html",
        cars=cars,
        locations=locations,
        types=types,
        sort_options=SortOption.ALL,
        filters=nonempty,
        favorite_ids=FavoritesService.favorite_ids(auth),
    )


@bp.get("/<vid>")
def car_detail(vid):
    """
    Car detail page with reviews and the booking form.
    A price summary is shown once both dates are picked (?start=&end=).
    """
    v = VehicleService.get_vehicle(vid)
    start = request.args.get("start", "")
    end = request.args.get("end", "")
    insurance = request.args.get("insurance", "")
    quote = BookingService.quote(v, start, end, insurance or None) if start and end else None
    auth = current_auth()
    return render_template(
        "cars/detail.html",
        v=v,
        reviews=ReviewService.reviews_for(vid),
        quote=quote if quote and quote.days > 0 else None,
        form={"start": start, "end": end, "insurance": insurance,
              "pickup": request.args.get("pickup") or v.location,
              "dropoff": request.args.get("dropoff") or v.location},
        is_favorite=FavoritesService.is_favorite(auth, vid),
    )


@bp.post("/<vid>/reviews")
def submit_review(vid):
    try:
        ReviewService.submit_review(vid, current_auth(), request.form.get("rating"), request.form.get("comment", ""))
    except Unauthenticated as e:
        flash(e.message, "warning")
        return login_redirect(url_for("cars.car_detail", vid=vid))
    except ValidationError as e:
        flash(e.message, "danger")
    except RemoteOperationFailed:
        flash("Failed to submit review. Please try again.", "danger")
    else:
        flash("Thanks for your review!", "success")
    return redirect(url_for("cars.car_detail", vid=vid))
