"""SMTP delivery over implicit TLS."""

import logging
import smtplib
import socket
from abc import ABC, abstractmethod

from klirr.common.errors import EmailSendFailed

from .compose import Credentials, Email

logger = logging.getLogger(__name__)


class EmailTransport(ABC):
    @abstractmethod
    def send(self, email: Email, credentials: Credentials) -> None:
        pass


class SmtpTransport(EmailTransport):
    def __init__(self, smtp_server: str, port: int = 465, timeout: float = 30):
        self.smtp_server = smtp_server
        self.port = port
        self.timeout = timeout

    def send(self, email: Email, credentials: Credentials) -> None:
        message = email.to_message()
        try:
            server = smtplib.SMTP_SSL(self.smtp_server, self.port, timeout=self.timeout)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailSendFailed(f"could not connect to {self.smtp_server}:{self.port}: {e}") from e

        try:
            server.login(credentials.username, credentials.password.get_secret_value())
            refused = server.send_message(message, to_addrs=email.all_recipients)
        except (smtplib.SMTPException, socket.error) as e:
            server.close()
            raise EmailSendFailed(str(e)) from e

        if refused:
            logger.warning(f"SMTP server refused some recipients: {refused}")

        try:
            server.quit()
        except (smtplib.SMTPException, OSError) as e:
            # Message already accepted
            logger.warning(f"SMTP server responded negatively on QUIT: {e}")

        logger.info(f"📧 Sent '{email.subject}' to {len(email.all_recipients)} recipient(s)")
