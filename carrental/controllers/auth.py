from flask import Blueprint, render_template, request, redirect, url_for, session, flash

from ..exceptions import AuthError, ValidationError
from ..services.auth_service import identity, SESSION_KEY

bp = Blueprint("auth", __name__, url_prefix="/")


def _safe_next(target: str | None) -> str | None:
    """Only follow local return paths."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return None


def _start_session(auth):
    session.clear()
    session[SESSION_KEY] = auth.user_id
    session["role"] = auth.role


def _landing(auth):
    nxt = _safe_next(request.form.get("next") or request.args.get("next"))
    if nxt:
        return redirect(nxt)
    if auth.is_admin:
        return redirect(url_for("admin.dashboard"))
    return redirect(url_for("views.home"))


@bp.get("register")
def register_form():
    return render_template("auth/register.html", next=request.args.get("next", ""))


@bp.post("register")
def register_submit():
    name = request.form.get("name", "")
    email = request.form.get("email", "")
    password = request.form.get("password", "")
    confirm = request.form.get("confirm_password")

    if confirm is not None and confirm != password:
        flash("Passwords do not match.", "danger")
        return redirect(url_for("auth.register_form"))

    try:
        auth = identity.sign_up(email, password, name)
    except ValidationError as e:
        flash(e.message, "danger")
        return redirect(url_for("auth.register_form"))
    except AuthError as e:
        flash(e.message, "warning")
        return redirect(url_for("auth.register_form"))

    _start_session(auth)
    flash("Registration successful. Welcome!", "success")
    return _landing(auth)


@bp.get("login")
def login_form():
    return render_template("auth/login.html", next=request.args.get("next", ""))


@bp.post("login")
def login_submit():
    try:
        auth = identity.sign_in(request.form.get("email", ""), request.form.get("password", ""))
    except AuthError as e:
        flash(e.message, "danger")
        return redirect(url_for("auth.login_form", next=request.form.get("next") or None))

    _start_session(auth)
    return _landing(auth)


@bp.get("logout")
def logout():
    session.clear()
    identity.sign_out()
    flash("Logged out", "info")
    return redirect(url_for("auth.login_form"))
