"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class AuthenticationError(DomainError):
    """Credentials did not match. Never says which part was wrong."""


class InvalidTokenError(DomainError):
    """Reset or verification token is unknown, expired, or already used."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class StorageError(DomainError):
    """The user store failed to complete an operation."""
