from flask import Blueprint, render_template

from ..services.vehicle_service import VehicleService

bp = Blueprint("views", __name__)

FEATURED_COUNT = 3


@bp.get("/")
def home():
    """Landing page with a few top-rated available cars."""
    available = [v for v in VehicleService.list_vehicles() if v.is_available]
    featured = sorted(available, key=lambda v: v.rating, reverse=True)[:FEATURED_COUNT]
    return render_template("home.html", featured=featured)


@bp.get("/about")
def about():
    return render_template("about.html")
