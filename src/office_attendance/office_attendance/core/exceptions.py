from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the targeted record does not exist."""


class InvalidCoordinateError(ValidationError):
    """Raised for latitude/longitude values that are not usable coordinates."""


class InvalidRadiusError(ValidationError):
    """Raised when an office radius falls outside the accepted range."""


class AlreadyCheckedInError(ValidationError):
    """Raised when the worker already has an open session."""


class AlreadyCheckedOutError(ValidationError):
    """Raised when the session was already closed."""


class OutOfRangeError(ValidationError):
    """Raised when a non-remote check-in is outside the office radius."""

    def __init__(self, message: str, *, distance_m: float, allowed_radius_m: float):
        super().__init__(message)
        self.distance_m = distance_m
        self.allowed_radius_m = allowed_radius_m


class AlreadyResolvedError(DomainError):
    """Raised when an approval decision was already recorded."""
