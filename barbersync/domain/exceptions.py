"""
Domain-specific exception hierarchy for the availability application.
"""


class BarbersyncError(Exception):
    """Base class for all application-level errors."""


class InvalidDateError(BarbersyncError, ValueError):
    """Raised when a requested calendar day is missing or malformed."""


class BookingAPIError(BarbersyncError):
    """Raised when booking data cannot be fetched or parsed."""
