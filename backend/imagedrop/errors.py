"""Exception hierarchy for Imagedrop.

Every error a client can observe derives from ImagedropError and carries the
HTTP status it maps to. The messages are the exact plain-text bodies returned
to clients, so they must never contain internal details.
"""
from __future__ import annotations

from fastapi import status


class ImagedropError(Exception):
    """Base exception for all Imagedrop-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(ImagedropError):
    """Raised when the Authorization header is missing or wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized, missing Bearer API_KEY or incorrect value"


class PayloadTooLarge(ImagedropError):
    """Raised when the upload exceeds the configured size limit."""

    status_code = 413
    default_message = "File too large, max file size is 20MB"


class UnsupportedType(ImagedropError):
    """Raised when the image field is missing or has a disallowed MIME type."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Unsupported file type, must be png, jpg, jpeg, or gif"


class NotFound(ImagedropError):
    """Raised when a requested upload does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = ""


class InternalError(ImagedropError):
    """Raised for any unexpected failure while handling an upload."""


class SweepEntryError(Exception):
    """A single directory entry could not be examined or removed during a sweep.

    Never reaches a client: the sweeper logs it and moves on.
    """

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"{name}: {cause}")
