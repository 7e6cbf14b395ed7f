class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when the caller's unit scope does not cover the request."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or group does not exist."""
