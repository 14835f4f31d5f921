"""Failures a request can end in, each mapped to an HTTP status.

Handlers in ``listings.main`` turn these into ``{"message": ...}`` bodies.
"""


class ListingError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PropertyNotFound(ListingError):
    status_code = 404
    default_message = "Property not found"


class InvalidInput(ListingError):
    """Bad field values, or the store rejected the write."""

    status_code = 400
    default_message = "Invalid input"


class StorageFailure(ListingError):
    """Database unreachable or the upload could not be written to disk."""

    status_code = 500
    default_message = "Storage failure"
