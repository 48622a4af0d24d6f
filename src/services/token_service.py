"""Session, reset and verification tokens.

Session and verification tokens are HS256 JWTs signed with the server
secret. Reset tokens are opaque random strings stored on the user record.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
SESSION_TOKEN_TTL = timedelta(hours=1)
VERIFICATION_TOKEN_TTL = timedelta(hours=24)
RESET_TOKEN_BYTES = 32

_VERIFY_PURPOSE = "verify"


def issue_session_token(
    user_id: str,
    secret: str,
    ttl: timedelta = SESSION_TOKEN_TTL,
    now: datetime | None = None,
) -> str:
    """Create a bearer token carrying userId, valid for ttl from now."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_session_token(token: str, secret: str) -> Optional[str]:
    """Return the userId of a valid session token, or None."""
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None
    return payload.get("userId")


def issue_reset_token() -> str:
    """32 random bytes, hex encoded (64 characters)."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def issue_verification_token(
    email: str,
    secret: str,
    ttl: timedelta = VERIFICATION_TOKEN_TTL,
    now: datetime | None = None,
) -> str:
    """Sign a verification link token for email.

    Nothing is stored, so the token stays usable until it expires; a second
    use repeats an idempotent verification.
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "email": email,
        "purpose": _VERIFY_PURPOSE,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def read_verification_token(token: str, secret: str) -> str:
    """Return the email a verification token was issued for.

    Raises:
        InvalidTokenError: bad signature, expired, or not a verification token
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Verification token rejected: {e}")
        raise InvalidTokenError("Invalid or expired verification link") from e

    email = payload.get("email")
    if payload.get("purpose") != _VERIFY_PURPOSE or not email:
        raise InvalidTokenError("Invalid or expired verification link")
    return email
