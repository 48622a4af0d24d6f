"""Application settings.

Built once from environment variables (after .env is loaded) and passed
explicitly into the flows that need them.
"""

import os
from dataclasses import dataclass
from datetime import timedelta


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    mongo_url: str | None = None
    database_name: str = 'mailauth'

    # SMTP
    mail_host: str = 'smtp.gmail.com'
    mail_port: int = 587
    mail_username: str = ''
    mail_password: str = ''
    mail_from: str = ''
    mail_use_tls: bool = True
    mail_timeout: float = 10.0

    # Links in outgoing mail point here
    public_base_url: str = 'http://localhost:3000'

    port: int = 3000
    log_level: str = 'INFO'

    bcrypt_rounds: int = 10
    session_token_ttl: timedelta = timedelta(hours=1)
    reset_token_ttl: timedelta = timedelta(hours=1)
    verification_token_ttl: timedelta = timedelta(hours=24)

    @property
    def mail_configured(self) -> bool:
        return bool(self.mail_username and self.mail_password)

    @classmethod
    def from_env(cls) -> 'Settings':
        """Read settings from the process environment.

        Raises:
            ValueError: JWT_SECRET is not set
        """
        jwt_secret = os.getenv('JWT_SECRET')
        if not jwt_secret:
            raise ValueError(
                "JWT_SECRET environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )

        mail_username = os.getenv('EMAIL_USERNAME', '')
        return cls(
            jwt_secret=jwt_secret,
            mongo_url=os.getenv('MONGO_URL') or None,
            database_name=os.getenv('MONGODB_DATABASE', 'mailauth'),
            mail_host=os.getenv('EMAIL_HOST', 'smtp.gmail.com'),
            mail_port=int(os.getenv('EMAIL_PORT', '587')),
            mail_username=mail_username,
            mail_password=os.getenv('EMAIL_PASS', ''),
            mail_from=os.getenv('EMAIL_FROM', mail_username),
            mail_use_tls=_env_bool('EMAIL_USE_TLS', True),
            mail_timeout=float(os.getenv('MAIL_TIMEOUT', '10')),
            public_base_url=os.getenv('PUBLIC_BASE_URL', 'http://localhost:3000').rstrip('/'),
            port=int(os.getenv('PORT', '3000')),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            bcrypt_rounds=int(os.getenv('BCRYPT_ROUNDS', '10')),
        )
