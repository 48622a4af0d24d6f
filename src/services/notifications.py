"""Outgoing link mails.

Both mails are single fixed-format links. They are dispatched after the
HTTP response has been sent, so nothing here may raise: failures are logged
and reported as False.
"""

import logging

from port.mailer import MailerPort

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Account Verification"
RESET_SUBJECT = "Reset Password"


def verification_link(base_url: str, token: str) -> str:
    return f"{base_url}/api/auth/verify/{token}"


def reset_link(base_url: str, token: str) -> str:
    return f"{base_url}/api/auth/reset-password/{token}"


def _dispatch(mailer: MailerPort, to: str, subject: str, html: str) -> bool:
    try:
        sent = mailer.send(to, subject, html)
    except Exception:
        logger.exception("Mail dispatch crashed", extra={"to": to, "subject": subject})
        return False
    if not sent:
        logger.warning("Mail not delivered", extra={"to": to, "subject": subject})
    return sent


def send_verification_link(mailer: MailerPort, base_url: str, email: str, token: str) -> bool:
    html = (
        f'<p>Click <a href="{verification_link(base_url, token)}">here</a> '
        f'to verify your account.</p>'
    )
    return _dispatch(mailer, email, VERIFICATION_SUBJECT, html)


def send_reset_link(mailer: MailerPort, base_url: str, email: str, token: str) -> bool:
    html = (
        f'<p>Click <a href="{reset_link(base_url, token)}">here</a> '
        f'to reset your password.</p>'
    )
    return _dispatch(mailer, email, RESET_SUBJECT, html)
