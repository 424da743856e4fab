"""Compose the outbound invoice email and the SMTP credentials to send it with."""

from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import List, Optional, Tuple

from pydantic import SecretStr

from klirr.common.models import NamedPdf

from .settings import DecryptedEmailSettings, EmailAccount


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    maintype: str = "application"
    subtype: str = "pdf"


@dataclass(frozen=True)
class Email:
    sender: EmailAccount
    recipients: List[str]
    subject: str
    body: str
    cc_recipients: List[str] = field(default_factory=list)
    bcc_recipients: List[str] = field(default_factory=list)
    reply_to: Optional[EmailAccount] = None
    attachments: List[Attachment] = field(default_factory=list)

    @property
    def all_recipients(self) -> List[str]:
        return self.recipients + self.cc_recipients + self.bcc_recipients

    def to_message(self) -> EmailMessage:
        """MIME message; Bcc is left out of the headers."""
        msg = EmailMessage()
        msg["From"] = self.sender.formatted()
        msg["To"] = ", ".join(self.recipients)
        if self.cc_recipients:
            msg["Cc"] = ", ".join(self.cc_recipients)
        if self.reply_to is not None:
            msg["Reply-To"] = self.reply_to.formatted()
        msg["Subject"] = self.subject
        msg.set_content(self.body)
        for attachment in self.attachments:
            msg.add_attachment(
                attachment.content,
                maintype=attachment.maintype,
                subtype=attachment.subtype,
                filename=attachment.filename,
            )
        return msg


@dataclass(frozen=True)
class Credentials:
    username: str
    password: SecretStr


def compose(named_pdf: NamedPdf, settings: DecryptedEmailSettings) -> Tuple[Email, Credentials]:
    subject, body = settings.template.materialize(named_pdf.prepared)
    email = Email(
        sender=settings.sender,
        recipients=list(settings.recipients),
        cc_recipients=list(settings.cc_recipients),
        bcc_recipients=list(settings.bcc_recipients),
        reply_to=settings.reply_to,
        subject=subject,
        body=body,
        attachments=[Attachment(filename=named_pdf.name, content=named_pdf.pdf)],
    )
    credentials = Credentials(username=settings.sender.email, password=settings.smtp_app_password)
    return email, credentials
