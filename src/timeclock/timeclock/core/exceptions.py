class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the admin password is wrong."""

    status_code = 401


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ConfigurationError(DomainError):
    """Raised when a required setting is missing."""

    status_code = 500
