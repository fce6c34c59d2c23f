"""
Custom exceptions and error handling for TripTribe.

Defines application-specific exceptions with error codes so callers can
render a consistent message without leaking backend details.

Usage:
    from triptribe.errors import NotFoundError, ErrorCode

    raise NotFoundError("Trip abc not found", code=ErrorCode.TRIP_NOT_FOUND)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Authentication errors
    AUTH_FAILED = "AUTH_FAILED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EMAIL_IN_USE = "EMAIL_IN_USE"

    # Lookup errors
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    TRIP_NOT_FOUND = "TRIP_NOT_FOUND"
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    ACTIVITY_NOT_FOUND = "ACTIVITY_NOT_FOUND"

    # Invitation lifecycle
    INVITATION_CLOSED = "INVITATION_CLOSED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    ACTIVITY_OUT_OF_RANGE = "ACTIVITY_OUT_OF_RANGE"
    DURATION_TOO_SHORT = "DURATION_TOO_SHORT"
    INVALID_URL = "INVALID_URL"
    INVALID_EMAIL = "INVALID_EMAIL"

    # Backend errors
    BACKEND_ERROR = "BACKEND_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AUTH_FAILED: "Authentication failed. Please sign in again.",
    ErrorCode.UNAUTHENTICATED: "You need to be signed in to do that.",
    ErrorCode.INVALID_TOKEN: "Your session has expired. Please sign in again.",
    ErrorCode.INVALID_CREDENTIALS: "Your email or password is incorrect.",
    ErrorCode.USER_NOT_FOUND: "No account found with this email.",
    ErrorCode.EMAIL_IN_USE: "This email is already registered.",
    ErrorCode.RECORD_NOT_FOUND: "The requested item could not be found.",
    ErrorCode.TRIP_NOT_FOUND: "Trip not found.",
    ErrorCode.INVITATION_NOT_FOUND: "Invitation not found.",
    ErrorCode.ACTIVITY_NOT_FOUND: "Activity not found.",
    ErrorCode.INVITATION_CLOSED: "This invitation has already been answered.",
    ErrorCode.VALIDATION_ERROR: "Some of the information entered is invalid. Please check and try again.",
    ErrorCode.MISSING_FIELD: "Please fill in all required fields.",
    ErrorCode.INVALID_DATE_RANGE: "End date must be after start date.",
    ErrorCode.ACTIVITY_OUT_OF_RANGE: "Activity must fit within the trip dates.",
    ErrorCode.DURATION_TOO_SHORT: "Duration must be at least 15 minutes.",
    ErrorCode.INVALID_URL: "Please enter a valid URL.",
    ErrorCode.INVALID_EMAIL: "Please enter a valid email address.",
    ErrorCode.BACKEND_ERROR: "We couldn't reach the server. Please try again.",
    ErrorCode.STORAGE_ERROR: "The file could not be saved. Please try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}


class TripTribeError(Exception):
    """Base exception for all TripTribe errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class NotFoundError(TripTribeError):
    """A trip, invitation, activity or record does not exist."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.RECORD_NOT_FOUND):
        super().__init__(message, code=code)


class AuthenticationError(TripTribeError):
    """No signed-in user, or the identity provider rejected the credentials."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.AUTH_FAILED):
        super().__init__(message, code=code)


class ValidationError(TripTribeError):
    """Caller-side input validation failed."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_ERROR):
        super().__init__(message, code=code)


class BackendError(TripTribeError):
    """The record store, blob store or identity backend returned a failure."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.BACKEND_ERROR):
        super().__init__(message, code=code)
