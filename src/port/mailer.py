from typing import Protocol


class MailerPort(Protocol):
    """Outbound mail capability."""
    def send(self, to: str, subject: str, html: str) -> bool:
        """Send one HTML message. Return True if the transport accepted it."""
        ...
