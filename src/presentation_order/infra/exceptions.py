"""
Custom exceptions for presentation-order operations.

Callers branch on the category (not found, invalid input, contention, internal
fault); the ordering layer subclasses these with the specific error types.
"""


class PresentationOrderError(Exception):
    """Base exception for all presentation-order errors."""

    pass


class NotFoundError(PresentationOrderError):
    """Raised when a referenced record does not exist."""

    pass


class ValidationError(PresentationOrderError):
    """Raised when caller input is rejected."""

    pass


class ConcurrencyError(PresentationOrderError):
    """Raised when an operation could not obtain exclusive access in time."""

    pass
