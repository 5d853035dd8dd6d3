"""Rental price quotes."""

import math
from dataclasses import dataclass

from carrental.services.common import as_utc_datetime

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class Quote:
    days: int
    total: float


def rental_days(start, end) -> int:
    """
    Billable days between start and end. Any part of a day counts as a full
    day (ceil), and an empty or reversed range gives 0 or a negative count.
    Dates, ISO strings and naive datetimes are read as UTC, so any mix of
    them with aware datetimes compares on one clock.
    """
    delta = as_utc_datetime(end) - as_utc_datetime(start)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def price(start, end, daily_rate: float, addon_daily_rate: float = 0) -> Quote:
    """
    Quote a rental: days x daily rate plus days x add-on (insurance) rate.

    Never raises on a bad range; callers check `days > 0` before charging.
    The total is not rounded beyond the precision of the rates.
    """
    days = rental_days(start, end)
    total = days * daily_rate + days * addon_daily_rate
    return Quote(days=days, total=total)
