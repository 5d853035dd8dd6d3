"""
Jinja filters: local time formatting and money rendering.
"""
from carrental.utils.filters import fmt_iso_local, money


def test_date_only_is_not_shifted():
    assert fmt_iso_local("2030-01-05") == "05/01/2030"


def test_utc_timestamp_is_shown_in_display_timezone(app):
    with app.app_context():
        app.config["DISPLAY_TIMEZONE"] = "Pacific/Auckland"
        # NZDT is UTC+13 in January
        assert fmt_iso_local("2030-01-05T10:00:00Z") == "05/01/2030 23:00"
        assert fmt_iso_local("2030-01-05T10:00:00+00:00", use_12h=True) == "05 Jan 2030, 11:00 PM"


def test_unparseable_value_is_returned_as_is():
    assert fmt_iso_local("soon") == "soon"
    assert fmt_iso_local(None) == ""


def test_money():
    assert money(200) == "$200"
    assert money(62.5) == "$62.50"
    assert money(None) == "$0"
