"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str) -> User:
        with self._lock:
            if any(u.email == email for u in self.store.values()):
                raise DuplicateError("Email already exists")

            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)

            user = User(
                id=user_id,
                email=email,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            self.store[user_id] = user
            return replace(user)

    def mark_verified(self, email: str) -> User | None:
        with self._lock:
            user = self._find_email(email)
            if not user:
                return None
            user.is_verified = True
            user.updated_at = datetime.now(timezone.utc)
            return replace(user)

    def set_reset_token(self, user_id: str, token: str, expiry: datetime) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return False
            user.reset_token = token
            user.reset_token_expiry = expiry
            user.updated_at = datetime.now(timezone.utc)
            return True

    def consume_reset_token(self, token: str, now: datetime, password_hash: str) -> User | None:
        with self._lock:
            user = self._find_reset(token, now)
            if not user:
                return None
            user.password_hash = password_hash
            user.reset_token = None
            user.reset_token_expiry = None
            user.updated_at = now
            return replace(user)

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        with self._lock:
            user = self._find_email(email)
            return replace(user) if user else None

    def get_by_id(self, user_id: str) -> User | None:
        with self._lock:
            user = self.store.get(user_id)
            return replace(user) if user else None

    def find_by_reset_token(self, token: str, now: datetime) -> User | None:
        with self._lock:
            user = self._find_reset(token, now)
            return replace(user) if user else None

    # callers hold self._lock

    def _find_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def _find_reset(self, token: str, now: datetime) -> User | None:
        for user in self.store.values():
            if (
                user.reset_token == token
                and user.reset_token_expiry is not None
                and user.reset_token_expiry > now
            ):
                return user
        return None
