class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a PIN, code or passkey does not check out."""


class AuthorizationError(DomainError):
    """Raised when a worker lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""
