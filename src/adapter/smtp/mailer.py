"""SMTP implementation of MailerPort.

One SmtpMailer lives for the whole process. The SMTP session is opened on
the first send and reused afterwards; a session the server has dropped is
reopened once before giving up on that message.
"""

import logging
import smtplib
import threading
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from utils.settings import Settings

logger = logging.getLogger(__name__)


class SmtpMailer:
    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str = '',
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.use_tls = use_tls
        self.timeout = timeout
        self._client: smtplib.SMTP | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> 'SmtpMailer':
        return cls(
            host=settings.mail_host,
            port=settings.mail_port,
            username=settings.mail_username,
            password=settings.mail_password,
            sender=settings.mail_from,
            use_tls=settings.mail_use_tls,
            timeout=settings.mail_timeout,
        )

    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    def _connect(self) -> smtplib.SMTP:
        client = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        if self.use_tls:
            client.starttls()
        client.login(self.username, self.password)
        logger.info("SMTP session opened", extra={"host": self.host, "port": self.port})
        return client

    def _build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.attach(MIMEText(html, "html"))
        return msg

    def send(self, to: str, subject: str, html: str) -> bool:
        """Send one HTML message. Failures are logged and reported as False."""
        if not self.is_configured():
            logger.warning("Email not configured - skipping send", extra={"to": to, "subject": subject})
            return False

        msg = self._build_message(to, subject, html)
        with self._lock:
            try:
                if self._client is None:
                    self._client = self._connect()
                try:
                    self._client.sendmail(self.sender, [to], msg.as_string())
                except smtplib.SMTPServerDisconnected:
                    # Idle sessions get closed server-side; open a fresh one
                    self._client = self._connect()
                    self._client.sendmail(self.sender, [to], msg.as_string())
            except (smtplib.SMTPException, OSError) as e:
                logger.error("Failed to send email", extra={"to": to, "subject": subject, "error": str(e)})
                self._discard()
                return False

        logger.info("Email sent", extra={"to": to, "subject": subject})
        return True

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                try:
                    self._client.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.debug("SMTP quit failed", extra={"error": str(e)})
                self._client = None

    def _discard(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
