"""Password hashing with bcrypt."""

import bcrypt

from domain.model.errors import ValidationError

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def validate_password(password: str) -> None:
    if not password:
        raise ValidationError("Password is required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash password with a fresh salt. The salt and cost are embedded in the result."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check plain against a bcrypt hash.

    Returns False on mismatch. Raises ValueError only if hashed is not a
    bcrypt hash.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
