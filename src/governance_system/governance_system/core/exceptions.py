class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced event, record, organization or user does not exist."""


class DuplicateRequestError(DomainError):
    """Raised when a clearance is requested for a pair already pending or approved."""


class InvalidTransitionError(DomainError):
    """Raised when a record is not in a state that permits the requested transition."""


class TransientError(DomainError):
    """Raised when the backend timed out or was unreachable. Safe to retry."""
