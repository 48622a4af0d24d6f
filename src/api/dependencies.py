import threading
from functools import lru_cache

from fastapi import HTTPException

from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.smtp.mailer import SmtpMailer
from port.mailer import MailerPort
from port.user_repository import UserRepository
from utils.settings import Settings

_mailer: SmtpMailer | None = None
_mailer_lock = threading.Lock()


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    settings = get_settings()
    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[settings.database_name]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_mailer() -> MailerPort:
    """Process-wide SMTP mailer, created on first use."""
    global _mailer
    with _mailer_lock:
        if _mailer is None:
            _mailer = SmtpMailer.from_settings(get_settings())
        return _mailer


def close_mailer() -> None:
    global _mailer
    with _mailer_lock:
        if _mailer is not None:
            _mailer.close()
            _mailer = None
