"""
Custom exception classes for the car rental storefront.

Services raise these; controllers catch them at the blueprint boundary and
turn them into flashed messages or a page-level error instead of a generic 500.
"""


class RentalError(Exception):
    """Base class for every error raised by the service layer."""

    default_message = "Error: something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class Unauthenticated(RentalError):
    """Raised when a booking, review or favorite is attempted without a session."""

    default_message = "Please login first"


class ValidationError(RentalError):
    """Raised for missing or invalid form input (dates, locations, rating...)."""

    default_message = "Error: invalid input"


class VehicleUnavailableError(ValidationError):
    """Raised when the vehicle is not in the `available` state at booking time."""

    default_message = "Error: vehicle is not available"


class InvalidTransitionError(RentalError):
    """Raised when a status change is not allowed by the availability rules."""

    default_message = "Error: status change not allowed"


class NotFoundError(RentalError):
    """Raised when a referenced document is missing at action time."""

    default_message = "Error: not found"


class VehicleNotFoundError(NotFoundError):
    default_message = "Error: vehicle not found"


class BookingNotFoundError(NotFoundError):
    default_message = "Error: booking not found"


class UserNotFoundError(NotFoundError):
    default_message = "Error: user not found"


class RemoteOperationFailed(RentalError):
    """Raised when the document store or the identity provider rejects a call."""

    default_message = "Error: the operation could not be completed"


class StoreError(RemoteOperationFailed):
    default_message = "Error: data store operation failed"


class AuthError(RemoteOperationFailed):
    """Raised by the identity provider (bad credentials, duplicate email)."""

    default_message = "Error: authentication failed"


class PartialBookingError(RemoteOperationFailed):
    """
    The booking document was written but the vehicle status update failed.

    The booking is kept (no compensating delete); `booking_id` lets the caller
    still point the user at it.
    """

    default_message = "Your booking was saved but the vehicle could not be marked as rented"

    def __init__(self, booking_id: str, message: str | None = None) -> None:
        self.booking_id = booking_id
        super().__init__(message)
