"""
Domain errors raised by services and translated to JSON responses in main.py.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors that map to a `{"error": message}` response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class UploadError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Only image files are allowed"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StorageUnavailable(AppError):
    default_message = "Database is not configured"


class StorageError(AppError):
    """Driver-level failure. The original error is kept on `__cause__` and never sent to clients."""

    default_message = "Internal server error"


class DispatchError(AppError):
    default_message = "Failed to send message. Please try again later."
