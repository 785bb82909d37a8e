"""
Application error types.

Services raise :class:`AppError` with a ``type`` discriminator rather
than HTTP exceptions, so they stay usable outside of a request.  The
HTTP layer translates the type into a status code with
:func:`error_type_to_status_code`.
"""

from fastapi import status


CONFLICT = "conflict"
NOT_FOUND = "not_found"

_STATUS_CODES = {
    CONFLICT: status.HTTP_409_CONFLICT,
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


class AppError(Exception):
    """Business rule violation raised by the service layer."""

    def __init__(self, type: str, message: str = "") -> None:
        super().__init__(message or type)
        self.type = type
        self.message = message or type


def conflict_error(message: str = "") -> AppError:
    return AppError(CONFLICT, message)


def not_found_error(message: str = "") -> AppError:
    return AppError(NOT_FOUND, message)


def error_type_to_status_code(type: str) -> int:
    """Map an error type to an HTTP status code, defaulting to 500."""
    return _STATUS_CODES.get(type, status.HTTP_500_INTERNAL_SERVER_ERROR)
