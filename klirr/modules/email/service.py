#!/usr/bin/env python3
"""
EMAIL SERVICE
=============
Sets up, edits and checks the encrypted email settings, and sends
rendered invoices over SMTP.

Usage:
  from klirr.modules.email import EmailService

  svc = EmailService(store)
  svc.init()
  svc.send_invoice(named_pdf)
"""

import getpass
import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import SecretStr, ValidationError

from klirr.common.config import EmailConfig
from klirr.common.editor import edit_yaml_value
from klirr.common.errors import InvalidData
from klirr.common.models import NamedPdf
from klirr.common.storage import StorageBackend
from klirr.common.storage.backend import EMAIL_SETTINGS

from .compose import compose
from .crypto import Salt, get_encryption_password, validate_encryption_password
from .settings import (
    DEFAULT_SMTP_SERVER,
    DecryptedEmailSettings,
    EmailAccount,
    EncryptedEmailSettings,
    load_email_settings,
    save_email_settings,
)
from .transport import EmailTransport, SmtpTransport

logger = logging.getLogger(__name__)


class EmailEditSelector(str, Enum):
    ALL = "all"
    APP_PASSWORD = "app_password"
    ENCRYPTION_PASSWORD = "encryption_password"
    TEMPLATE = "template"
    SMTP_SERVER = "smtp_server"
    REPLY_TO = "reply_to"
    SENDER = "sender"
    RECIPIENTS = "recipients"
    CC_RECIPIENTS = "cc_recipients"
    BCC_RECIPIENTS = "bcc_recipients"

    def __str__(self) -> str:
        return self.value


def _split_addresses(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


class EmailService:
    """Encrypted email settings and invoice delivery."""

    def __init__(
        self,
        store: StorageBackend,
        config: Optional[EmailConfig] = None,
        transport: Optional[EmailTransport] = None,
        prompt: Callable[[str], str] = input,
        secret_prompt: Callable[[str], str] = getpass.getpass,
    ):
        self.store = store
        self.config = config or EmailConfig()
        self.transport = transport
        self.prompt = prompt
        self.secret_prompt = secret_prompt

    # -- settings ----------------------------------------------------------

    def _ask(self, label: str, default: str = "") -> str:
        suffix = f" [{default}]" if default else ""
        answer = self.prompt(f"{label}{suffix}: ").strip()
        return answer or default

    def _ask_app_password(self) -> SecretStr:
        return SecretStr(self.secret_prompt("SMTP app password: "))

    def _passphrase(self) -> SecretStr:
        return get_encryption_password(self.secret_prompt)

    def _save_decrypted(self, settings: DecryptedEmailSettings, passphrase: SecretStr) -> EncryptedEmailSettings:
        encrypted = settings.encrypt(passphrase)
        save_email_settings(self.store, encrypted)
        return encrypted

    def init(self) -> EncryptedEmailSettings:
        """Prompt for accounts and passwords, then store them encrypted."""
        try:
            settings = DecryptedEmailSettings(
                salt=Salt.generate().hex(),
                sender=EmailAccount(
                    name=self._ask("Sender name"),
                    email=self._ask("Sender email"),
                ),
                recipients=_split_addresses(self._ask("Recipients (comma separated)")),
                cc_recipients=_split_addresses(self._ask("CC recipients (comma separated)")),
                bcc_recipients=_split_addresses(self._ask("BCC recipients (comma separated)")),
                smtp_server=self._ask("SMTP server", DEFAULT_SMTP_SERVER),
                smtp_app_password=self._ask_app_password(),
            )
        except ValidationError as e:
            raise InvalidData(EMAIL_SETTINGS, str(e)) from e

        encrypted = self._save_decrypted(settings, self._passphrase())
        logger.info(f"✅ Email settings saved for {encrypted.sender.email}")
        return encrypted

    def load(self) -> EncryptedEmailSettings:
        return load_email_settings(self.store)

    def decrypted(self) -> DecryptedEmailSettings:
        return self.load().decrypt(self._passphrase())

    def validate(self) -> DecryptedEmailSettings:
        settings = self.decrypted()
        length = len(settings.smtp_app_password.get_secret_value())
        logger.info(
            f"✅ Email settings valid: sender {settings.sender.formatted()}, "
            f"app password of {length} characters"
        )
        return settings

    def edit(self, selector: EmailEditSelector) -> EncryptedEmailSettings:
        selector = EmailEditSelector(selector)
        if selector is EmailEditSelector.APP_PASSWORD:
            passphrase = self._passphrase()
            current = self.load().decrypt(passphrase)
            updated = current.model_copy(update={"smtp_app_password": self._ask_app_password()})
            return self._revalidate_and_save(updated, passphrase)

        if selector is EmailEditSelector.ENCRYPTION_PASSWORD:
            current = self.decrypted()
            new_passphrase = validate_encryption_password(
                SecretStr(self.secret_prompt("New email encryption password: "))
            )
            updated = current.model_copy(update={"salt": Salt.generate().hex()})
            return self._revalidate_and_save(updated, new_passphrase)

        current = self.load()
        stored = current.model_dump(mode="json")
        if selector is EmailEditSelector.ALL:
            edited = edit_yaml_value(stored, EMAIL_SETTINGS)
        else:
            field = selector.value
            edited = {**stored, field: edit_yaml_value(stored[field], field)}
        try:
            updated = EncryptedEmailSettings.model_validate(edited)
        except ValidationError as e:
            raise InvalidData(EMAIL_SETTINGS, str(e)) from e
        save_email_settings(self.store, updated)
        logger.info(f"✅ Updated email {selector}")
        return updated

    def _revalidate_and_save(self, settings: DecryptedEmailSettings, passphrase: SecretStr) -> EncryptedEmailSettings:
        try:
            settings = DecryptedEmailSettings.model_validate(settings.model_dump())
        except ValidationError as e:
            raise InvalidData(EMAIL_SETTINGS, str(e)) from e
        encrypted = self._save_decrypted(settings, passphrase)
        logger.info("✅ Re-encrypted email settings")
        return encrypted

    # -- sending -----------------------------------------------------------

    def _transport_for(self, settings: DecryptedEmailSettings) -> EmailTransport:
        if self.transport is not None:
            return self.transport
        return SmtpTransport(settings.smtp_server, self.config.smtp_port, self.config.timeout_s)

    def send_invoice(self, named_pdf: NamedPdf):
        settings = self.decrypted()
        email, credentials = compose(named_pdf, settings)
        logger.info(f"📧 Sending {named_pdf.name} via {settings.smtp_server}")
        self._transport_for(settings).send(email, credentials)

    def send_test(self, sample: NamedPdf):
        """Send a rendered sample invoice to the configured recipients."""
        self.send_invoice(sample)
