from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a registered account."""
    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    is_verified: bool = False
    reset_token: str | None = None
    reset_token_expiry: datetime | None = None

    @property
    def has_pending_reset(self) -> bool:
        return self.reset_token is not None and self.reset_token_expiry is not None
