"""Error taxonomy raised by the album and asset stores.

The request layer maps each class to an HTTP status; nothing below the API
ever raises ``HTTPException`` directly.
"""


class PhotoShelfError(Exception):
    """Base class for every error the stores raise."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(PhotoShelfError):
    """Entity is absent or the caller may not see it."""

    status_code = 404


class ConflictError(PhotoShelfError):
    """A uniqueness constraint would be violated."""

    status_code = 409


class ForbiddenError(PhotoShelfError):
    """Shared user attempted an owner-only mutation."""

    status_code = 403


class InvalidInputError(PhotoShelfError):
    """Malformed identifier or missing field, detected before storage access."""

    status_code = 400


class StorageError(PhotoShelfError):
    """Persistence failure unrelated to business rules."""

    status_code = 500
