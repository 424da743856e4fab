"""Email settings, stored with the SMTP app password encrypted."""

import logging
import re
from typing import Optional

from pydantic import BaseModel, SecretStr, ValidationError, field_validator

from klirr.common.errors import InvalidData, InvalidEmailAddress
from klirr.common.storage import StorageBackend
from klirr.common.storage.backend import EMAIL_SETTINGS

from .crypto import EncryptedAppPassword, EncryptionKey, Salt

logger = logging.getLogger(__name__)

DEFAULT_SMTP_SERVER = "smtp.gmail.com"

NUMBER_PLACEHOLDER = "<INV_NO>"
VENDOR_PLACEHOLDER = "<FROM_CO>"
CLIENT_PLACEHOLDER = "<TO_CO>"
INVOICE_DATE_PLACEHOLDER = "<INV_DATE>"
DEFAULT_TEMPLATE_PART = f"Invoice {NUMBER_PLACEHOLDER} from {VENDOR_PLACEHOLDER}"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_email_address(value: str) -> str:
    value = value.strip()
    if not _EMAIL_RE.match(value):
        raise InvalidEmailAddress(value, "expected name@domain.tld")
    return value


def _unique_addresses(values: list[str]) -> list[str]:
    seen = []
    for value in values:
        address = validate_email_address(value)
        if address not in seen:
            seen.append(address)
    return seen


class EmailAccount(BaseModel):
    name: str
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email_address(v)

    def formatted(self) -> str:
        return f"{self.name} <{self.email}>"


class Template(BaseModel):
    """Subject and body with <INV_NO>, <FROM_CO>, <TO_CO>, <INV_DATE> placeholders."""

    subject_format: str = DEFAULT_TEMPLATE_PART
    body_format: str = DEFAULT_TEMPLATE_PART

    @staticmethod
    def materialize_part(part: str, number, vendor_name: str, client_name: str, invoice_date) -> str:
        return (
            part.replace(NUMBER_PLACEHOLDER, str(number))
            .replace(VENDOR_PLACEHOLDER, vendor_name)
            .replace(CLIENT_PLACEHOLDER, client_name)
            .replace(INVOICE_DATE_PLACEHOLDER, str(invoice_date))
        )

    def materialize(self, invoice) -> tuple[str, str]:
        """(subject, body) for a PreparedInvoice."""
        args = (
            invoice.information.number,
            invoice.vendor.company_name,
            invoice.client.company_name,
            invoice.information.invoice_date.isoformat(),
        )
        return self.materialize_part(self.subject_format, *args), self.materialize_part(self.body_format, *args)


class _EmailSettingsBase(BaseModel):
    salt: str
    template: Template = Template()
    smtp_server: str = DEFAULT_SMTP_SERVER
    reply_to: Optional[EmailAccount] = None
    sender: EmailAccount
    recipients: list[str]
    cc_recipients: list[str] = []
    bcc_recipients: list[str] = []

    @field_validator("salt")
    @classmethod
    def check_salt(cls, v: str) -> str:
        Salt.from_hex(v)
        return v

    @field_validator("recipients", "cc_recipients", "bcc_recipients")
    @classmethod
    def dedupe(cls, v: list[str]) -> list[str]:
        return _unique_addresses(v)

    @field_validator("recipients")
    @classmethod
    def at_least_one(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("at least one recipient is required")
        return v

    @property
    def salt_value(self) -> Salt:
        return Salt.from_hex(self.salt)

    def _shared(self) -> dict:
        return self.model_dump(exclude={"smtp_app_password"})


class DecryptedEmailSettings(_EmailSettingsBase):
    smtp_app_password: SecretStr

    def encrypt(self, passphrase: SecretStr) -> "EncryptedEmailSettings":
        with EncryptionKey.derive(passphrase, self.salt_value) as key:
            sealed = EncryptedAppPassword.encrypt(self.smtp_app_password, key)
        return EncryptedEmailSettings(smtp_app_password=sealed.hex(), **self._shared())


class EncryptedEmailSettings(_EmailSettingsBase):
    smtp_app_password: str

    @field_validator("smtp_app_password")
    @classmethod
    def check_sealed(cls, v: str) -> str:
        EncryptedAppPassword.from_hex(v)
        return v

    def decrypt(self, passphrase: SecretStr) -> DecryptedEmailSettings:
        sealed = EncryptedAppPassword.from_hex(self.smtp_app_password)
        with EncryptionKey.derive(passphrase, self.salt_value) as key:
            app_password = sealed.decrypt(key)
        return DecryptedEmailSettings(smtp_app_password=app_password, **self._shared())


def sample_email_settings(app_password: SecretStr, passphrase: SecretStr) -> EncryptedEmailSettings:
    """Placeholder accounts for ``email init`` to start from."""
    return DecryptedEmailSettings(
        smtp_app_password=app_password,
        salt=Salt.generate().hex(),
        sender=EmailAccount(name="Alice Smith", email="alice@example.com"),
        recipients=["alice@example.com", "bob@example.com"],
        cc_recipients=["carol@example.com"],
        bcc_recipients=["dave@example.com", "erin@example.com"],
    ).encrypt(passphrase)


def load_email_settings(store: StorageBackend) -> EncryptedEmailSettings:
    raw = store.load(EMAIL_SETTINGS)
    try:
        return EncryptedEmailSettings.model_validate(raw)
    except ValidationError as e:
        raise InvalidData(EMAIL_SETTINGS, str(e)) from e


def save_email_settings(store: StorageBackend, settings: EncryptedEmailSettings):
    store.save(EMAIL_SETTINGS, settings.model_dump(mode="json"))
    logger.debug(f"Saved email settings for {settings.sender.email}")


def email_settings_exist(store: StorageBackend) -> bool:
    return store.exists(EMAIL_SETTINGS)
