"""In-memory implementation of MailerPort for testing."""

from dataclasses import dataclass


@dataclass
class SentMail:
    to: str
    subject: str
    html: str


class FakeMailer:
    def __init__(self, fail: bool = False):
        self.sent: list[SentMail] = []
        self.fail = fail

    def send(self, to: str, subject: str, html: str) -> bool:
        if self.fail:
            return False
        self.sent.append(SentMail(to=to, subject=subject, html=html))
        return True
