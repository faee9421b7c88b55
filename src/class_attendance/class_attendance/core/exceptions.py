class DomainError(Exception):
    """Base exception for business rule violations."""

    retryable = False


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a credential cannot be verified."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a session, record or owned-session lookup misses."""


class ConflictError(DomainError):
    """Raised when an operation would break a uniqueness rule."""


class StoreUnavailableError(DomainError):
    """Raised when the persistence layer cannot be reached.

    This is the only retryable failure; callers should try again later
    instead of treating it as a rejection.
    """

    retryable = True


class DuplicateKeyError(Exception):
    """Raised by repositories when a unique key rejects a write."""


class MissingReferenceError(Exception):
    """Raised by repositories when a foreign key rejects a write."""
