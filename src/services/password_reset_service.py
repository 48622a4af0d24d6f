"""Password reset flow.

A user is either without a pending reset or holds exactly one
(reset_token, reset_token_expiry) pair. Requesting a reset replaces any
earlier pair; completing one clears it. Expired pairs are never cleaned up,
they simply stop matching.
"""

import logging
from datetime import datetime, timedelta, timezone

from domain.model.errors import InvalidTokenError, NotFoundError, StorageError
from domain.model.user import User
from port.user_repository import UserRepository
from services.credentials import BCRYPT_ROUNDS, hash_password, validate_password
from services.token_service import issue_reset_token

logger = logging.getLogger(__name__)

RESET_TOKEN_TTL = timedelta(hours=1)
_INVALID = "Invalid or expired token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def request_password_reset(
    repo: UserRepository,
    email: str,
    ttl: timedelta = RESET_TOKEN_TTL,
    now: datetime | None = None,
) -> str:
    """Store a fresh reset token for email and return it.

    Raises:
        NotFoundError: no account with this email
        StorageError: token could not be stored
    """
    user = repo.get_by_email(email)
    if not user:
        raise NotFoundError("User not found")

    now = now or _utcnow()
    token = issue_reset_token()
    if not repo.set_reset_token(user.id, token, now + ttl):
        raise StorageError("Failed to store reset token")

    logger.info("Password reset requested", extra={"userId": user.id})
    return token


def validate_reset_token(repo: UserRepository, token: str, now: datetime | None = None) -> User:
    """Return the user holding token if it has not expired.

    Raises:
        InvalidTokenError: unknown or expired token (deliberately not distinguished)
    """
    now = now or _utcnow()
    user = repo.find_by_reset_token(token, now)
    if not user:
        raise InvalidTokenError(_INVALID)
    return user


def complete_password_reset(
    repo: UserRepository,
    token: str,
    new_password: str,
    rounds: int = BCRYPT_ROUNDS,
    now: datetime | None = None,
) -> User:
    """Replace the password of the token holder and clear the token.

    The final write is one conditional update on (token, expiry), so of
    several concurrent completions with the same token only one succeeds.
    Unless now is given, the clock is read again after hashing, so a token
    that expires while bcrypt runs is rejected.

    Raises:
        InvalidTokenError: unknown, expired, or already consumed token
        ValidationError: new_password breaks the password rules
    """
    validate_reset_token(repo, token, now or _utcnow())
    validate_password(new_password)

    password_hash = hash_password(new_password, rounds)
    user = repo.consume_reset_token(token, now or _utcnow(), password_hash)
    if not user:
        raise InvalidTokenError(_INVALID)

    logger.info("Password updated via reset", extra={"userId": user.id})
    return user
