from datetime import datetime
from typing import Protocol

from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, email: str, password_hash: str) -> User:
        """Create a new unverified user.

        Raises DuplicateError if the email is taken, StorageError on store failure.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def mark_verified(self, email: str) -> User | None:
        """Set is_verified on the user with this email. Return the updated User or None."""
        ...

    def set_reset_token(self, user_id: str, token: str, expiry: datetime) -> bool:
        """Store a pending reset token and its expiry together. Return True if a user was updated."""
        ...

    def find_by_reset_token(self, token: str, now: datetime) -> User | None:
        """Find the user whose reset token matches and expires after now."""
        ...

    def consume_reset_token(self, token: str, now: datetime, password_hash: str) -> User | None:
        """Atomically swap in password_hash and clear the reset fields.

        Matches only a token that expires after now. Return the updated User,
        or None when nothing matched (unknown, expired, or already consumed).
        """
        ...
