from flask import Blueprint, render_template, request, redirect, url_for, flash

from ..exceptions import NotFoundError, RemoteOperationFailed
from ..services.favorites_service import FavoritesService
from ..utils.decorators import current_auth, login_required

bp = Blueprint("favorites", __name__, url_prefix="/favorites")


def _back(default):
    nxt = request.form.get("next", "")
    return redirect(nxt if nxt.startswith("/") and not nxt.startswith("//") else default)


@bp.get("")
@login_required
def list_favorites():
    return render_template("favorites.html", cars=FavoritesService.list_favorites(current_auth()))


@bp.post("/<vid>")
@login_required
def add(vid):
    try:
        FavoritesService.add(current_auth(), vid)
    except NotFoundError as e:
        flash(e.message, "danger")
    except RemoteOperationFailed:
        flash("Failed to add to favorites", "danger")
    else:
        flash("Added to favorites", "success")
    return _back(url_for("favorites.list_favorites"))


@bp.post("/<vid>/remove")
@login_required
def remove(vid):
    try:
        FavoritesService.remove(current_auth(), vid)
    except RemoteOperationFailed:
        flash("Failed to remove from favorites", "danger")
    else:
        flash("Removed from favorites", "success")
    return _back(url_for("favorites.list_favorites"))
