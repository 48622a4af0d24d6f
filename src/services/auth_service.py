"""Auth service: registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

from domain.model.errors import AuthenticationError, DuplicateError
from domain.model.user import User
from port.user_repository import UserRepository
from services.credentials import BCRYPT_ROUNDS, hash_password, validate_password, verify_password


def register(repo: UserRepository, email: str, password: str, rounds: int = BCRYPT_ROUNDS) -> User:
    """Register a new, unverified user.

    Returns the created User domain object.

    Raises:
        DuplicateError: email already registered
        ValidationError: password is empty or too long
    """
    if repo.get_by_email(email):
        raise DuplicateError("Email already exists")

    validate_password(password)
    password_hash = hash_password(password, rounds)

    # A concurrent signup can still win between the check and the insert;
    # the store's unique index turns that into DuplicateError too.
    return repo.create(email=email, password_hash=password_hash)


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password produce the same error.

    Raises:
        AuthenticationError: invalid credentials
    """
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user
