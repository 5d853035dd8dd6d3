"""Vehicle reviews and the rating aggregate stored on the vehicle."""

import logging
from typing import Optional

from carrental.exceptions import Unauthenticated, ValidationError, VehicleNotFoundError
from carrental.models.store import subcollection
from carrental.models.vehicle import Review
from carrental.services.auth_service import AuthSession
from carrental.services.common import _store, _now, round1, clean, load_vehicle
from carrental.utils.constants import VEHICLES

logger = logging.getLogger(__name__)


def reviews_path(vehicle_id: str) -> str:
    return subcollection(VEHICLES, vehicle_id, "reviews")


def _stars(value):
    """Whole-star rating as an int, or None (4.9, True and "4.5" are not star counts)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        stars = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(value, str) and stars != value:
        # int() truncated a fractional number
        return None
    return stars


class ReviewService:

    @staticmethod
    def reviews_for(vehicle_id: str) -> list[Review]:
        """Reviews of a vehicle, newest first."""
        rows = _store().list_all(reviews_path(vehicle_id))
        return sorted((Review.from_dict(r) for r in rows), key=lambda r: r.date, reverse=True)

    @staticmethod
    def submit_review(vehicle_id: str, auth: Optional[AuthSession], rating, comment: str = "") -> Review:
        """
        Add a review, then recompute the vehicle's rating and review count
        from the full review set. Two concurrent submissions race: the last
        aggregate written wins.
        """
        if auth is None:
            raise Unauthenticated("You must be logged in to submit a review")
        stars = _stars(rating)
        if stars is None or not 1 <= stars <= 5:
            raise ValidationError("Please select a rating")
        if load_vehicle(vehicle_id) is None:
            raise VehicleNotFoundError(f"Error: vehicle with ID '{vehicle_id}' not found")

        st = _store()
        rid = st.add(reviews_path(vehicle_id), {
            "user_id": auth.user_id,
            "user_name": auth.display_name,
            "rating": stars,
            "comment": clean(comment),
            "date": _now().isoformat(),
        })
        ReviewService.refresh_rating(vehicle_id)
        return Review.from_dict(st.get(reviews_path(vehicle_id), rid))

    @staticmethod
    def refresh_rating(vehicle_id: str) -> tuple[float, int]:
        """Re-read every review of the vehicle and write `rating` (one decimal) and `review_count`."""
        st = _store()
        ratings = [int(r.get("rating") or 0) for r in st.list_all(reviews_path(vehicle_id))]
        count = len(ratings)
        average = round1(sum(ratings) / count) if count else 0.0
        st.update(VEHICLES, vehicle_id, {"rating": average, "review_count": count})
        logger.info("Vehicle %s rating %.1f over %d reviews", vehicle_id, average, count)
        return average, count
