class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or a required field is missing."""


class NotFound(DomainError):
    """Raised when a referenced session, student or user does not exist."""


class InvalidState(DomainError):
    """Raised when an operation needs a session status it does not have."""


class CollaboratorUnavailable(DomainError):
    """Raised when the persistence store (or another collaborator) call failed."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""
