from functools import wraps

from flask import g, request, redirect, url_for, flash

from carrental.services.auth_service import identity


def current_auth():
    """Session object for this request (loaded once, cached on `g`)."""
    if "auth" not in g:
        g.auth = identity.current_session()
    return g.auth


def login_redirect(next_url=None):
    """Send the user to the login page, remembering where they were going."""
    if next_url is None and request.method == "GET":
        next_url = request.full_path.rstrip("?")
    return redirect(url_for("auth.login_form", next=next_url))


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_auth() is None:
            flash("Please login first", "warning")
            return login_redirect()
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = current_auth()
            if auth is None:
                flash("Please login first", "warning")
                return login_redirect()
            if auth.role not in roles:
                flash("Insufficient permission", "danger")
                return redirect(url_for("views.home"))
            return fn(*args, **kwargs)

        return wrapper

    return deco
