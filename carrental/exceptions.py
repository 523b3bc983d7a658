"""
Custom exception classes for the car rental API.

Services raise these; the app factory turns them into JSON error responses
with the status code each class carries.
"""


class RentalAppError(Exception):
    """Base class for every error the API reports to the client."""

    status_code = 400
    default_message = "Error: request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class ValidationError(RentalAppError):
    """Raised when a payload is missing fields or holds invalid values."""

    default_message = "Error: invalid input"


class DuplicateRecordError(RentalAppError):
    """Raised when a unique key (email, mobile, registration number) is taken."""

    status_code = 409
    default_message = "Error: record already exists"


class CarNotFoundError(RentalAppError):
    """Raised when a car ID cannot be found in the system."""

    status_code = 404
    default_message = "Error: car not found"


class CustomerNotFoundError(RentalAppError):
    """Raised when a customer ID, email or name cannot be resolved."""

    status_code = 404
    default_message = "Error: customer not found"


class BookingNotFoundError(RentalAppError):
    """Raised when a booking record cannot be found in the system."""

    status_code = 404
    default_message = "Error: booking not found"


class UserNotFoundError(RentalAppError):
    """Raised when a user account cannot be found in the system."""

    status_code = 404
    default_message = "Error: user not found"


class InvalidDateRangeError(RentalAppError):
    """Raised when start date is after end date or an invalid date is provided."""

    default_message = "Error: invalid date range"


class CarUnavailableError(RentalAppError):
    """Raised when a car is already booked for some of the requested dates."""

    status_code = 409
    default_message = "Error: car is not available"


class AuthenticationError(RentalAppError):
    """Raised for bad credentials or a missing, invalid or expired token."""

    status_code = 401
    default_message = "Error: authentication required"


class PermissionDeniedError(RentalAppError):
    """Raised when the caller is logged in but not allowed to do this."""

    status_code = 403
    default_message = "Error: access denied"


class DeleteGuardError(RentalAppError):
    """Raised when a record cannot be deleted while bookings still depend on it."""

    status_code = 409
    default_message = "Error: record is still in use"
