from .analytics_service import AnalyticsService
from .auth_service import identity, AuthSession
from .booking_query import BookingQueryService
from .booking_service import BookingService
from .favorites_service import FavoritesService
from .review_service import ReviewService
from .user_service import UserService
from .vehicle_service import VehicleService

__all__ = [
    "AnalyticsService",
    "AuthSession",
    "BookingQueryService",
    "BookingService",
    "FavoritesService",
    "ReviewService",
    "UserService",
    "VehicleService",
    "identity",
]
