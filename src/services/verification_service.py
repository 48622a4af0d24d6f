"""Email verification flow.

An account moves Unverified -> Verified exactly once. Confirming an
already verified account is a no-op success.
"""

import logging

from domain.model.errors import NotFoundError
from domain.model.user import User
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services.notifications import send_verification_link
from services.token_service import issue_verification_token
from utils.settings import Settings

logger = logging.getLogger(__name__)


def request_verification(mailer: MailerPort, settings: Settings, email: str) -> bool:
    """Mail a signed verification link for email. No state change."""
    token = issue_verification_token(email, settings.jwt_secret, ttl=settings.verification_token_ttl)
    return send_verification_link(mailer, settings.public_base_url, email, token)


def confirm_verification(repo: UserRepository, email: str) -> User:
    """Mark the account for email as verified and return it.

    Raises:
        NotFoundError: no account with this email
    """
    user = repo.mark_verified(email)
    if not user:
        raise NotFoundError("User not found")

    logger.info("User verified", extra={"userId": user.id})
    return user
