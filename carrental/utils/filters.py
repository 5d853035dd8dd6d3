"""Jinja filters and date formatting helpers."""
from datetime import datetime, timezone

import pytz
from flask import current_app

DEFAULT_TZ = "Pacific/Auckland"


def _display_tz():
    try:
        name = current_app.config.get("DISPLAY_TIMEZONE") or DEFAULT_TZ
    except RuntimeError:
        # outside an app context
        name = DEFAULT_TZ
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.timezone(DEFAULT_TZ)


def fmt_iso_local(value, use_12h: bool = False) -> str:
    """
    Format a stored date/timestamp string into the configured local time.
    Supports:
      - 'YYYY-MM-DD'
      - 'YYYY-MM-DDTHH:MM:SS' with or without 'Z' / '+00:00'
    On parse error, returns the original value (so the UI never goes blank).
    """
    if value is None:
        return ""

    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if not s:
            return ""
        if len(s) == 10:
            # Date-only: no time to convert
            try:
                return datetime.strptime(s, "%Y-%m-%d").strftime("%d/%m/%Y")
            except ValueError:
                return s
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return s

    # Naive timestamps are stored in UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    local = dt.astimezone(_display_tz())

    if use_12h:
        # Avoid %-I (not portable on Windows). Strip any leading zero manually.
        hh = local.strftime("%I").lstrip("0") or "0"
        return f"{local.strftime('%d %b %Y')}, {hh}:{local.strftime('%M %p')}"
    return local.strftime("%d/%m/%Y %H:%M")


def money(value) -> str:
    """Render a price without trailing '.00' noise: 200 -> '$200', 62.5 -> '$62.50'."""
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        return str(value)
    if amount.is_integer():
        return f"${int(amount)}"
    return f"${amount:.2f}"
