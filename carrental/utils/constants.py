# carrental/utils/constants.py

"""
Global constants for roles, statuses, and allowed vehicle attributes.
These constants are imported by both models and services.
"""

# Date format (used for booking start/end)
DATE_FMT = "%Y-%m-%d"


class Role:
    CUSTOMER = "customer"
    ADMIN = "admin"

    ALL = (CUSTOMER, ADMIN)


class BookingStatus:
    BOOKED = "booked"
    PENDING = "pending"
    APPROVED = "approved"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = (BOOKED, PENDING, APPROVED, CANCELLED, COMPLETED)


class VehicleStatus:
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"

    ALL = (AVAILABLE, RENTED, MAINTENANCE)


class SortOption:
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"

    ALL = (PRICE_LOW, PRICE_HIGH, RATING)


# --- Collections ---
VEHICLES = "vehicles"
BOOKINGS = "bookings"
USERS = "users"
ACCOUNTS = "accounts"
META = "meta"

# --- Misc ---
BODY_TYPES = ("SUV", "Sedan", "Coupe", "Truck", "Van", "Convertible")
TRANSMISSIONS = ("automatic", "manual")
PLACEHOLDER = "/static/images/placeholder.png"
RECENT_BOOKINGS_LIMIT = 5
