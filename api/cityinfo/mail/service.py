"""
Mail notification senders.

Neither sender talks to an SMTP server: both log the outgoing message so it
shows up in the console and in `logs/cityinfo.txt`. MAIL_SERVICE selects
which one is used ("local" by default, "cloud" otherwise).
"""

from __future__ import annotations

import logging
from typing import Protocol

from cityinfo.core.settings import get_settings

logger = logging.getLogger(__name__)


class MailService(Protocol):
    def send(self, subject: str, message: str) -> None: ...


class LocalMailService:
    def __init__(self, mail_to: str, mail_from: str) -> None:
        self.mail_to = mail_to
        self.mail_from = mail_from

    def send(self, subject: str, message: str) -> None:
        logger.info(
            "Mail from %s to %s, with %s. Subject: %s. Message: %s",
            self.mail_from,
            self.mail_to,
            type(self).__name__,
            subject,
            message,
        )


class CloudMailService(LocalMailService):
    pass


def get_mail_service() -> MailService:
    settings = get_settings()
    if settings.mail_service == "cloud":
        return CloudMailService(settings.mail_to, settings.mail_from)
    return LocalMailService(settings.mail_to, settings.mail_from)
