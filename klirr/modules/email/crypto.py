"""
Credential Crypto
=================
Protects the SMTP app password at rest.

    key    = HKDF-SHA256(ikm=passphrase, salt=salt, info="klirr email encryption")
    sealed = nonce(12) || AES-256-GCM(key, nonce, app_password) || tag(16)

Sealed boxes and salts are stored hex encoded.
"""

import getpass
import logging
import os
from typing import Callable, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from pydantic import SecretStr

from klirr.common.errors import (
    AESDecryptionFailed,
    EmailEncryptionPasswordTooShort,
    InvalidAESBytesTooShort,
    InvalidHexString,
    InvalidUtf8,
)

logger = logging.getLogger(__name__)

SALT_LENGTH = 16
KEY_LENGTH = 32
NONCE_LENGTH = 12
TAG_LENGTH = 16
MIN_SEALED_LENGTH = NONCE_LENGTH + TAG_LENGTH + 1
HKDF_INFO = b"klirr email encryption"

MIN_PASSWORD_LENGTH = 4
ENCRYPTION_PASSWORD_ENV = "APP_EMAIL_ENCRYPTION_PASSWORD"


def _from_hex(value: str, expected_length: Optional[int] = None) -> bytes:
    try:
        raw = bytes.fromhex(value)
    except (ValueError, TypeError) as e:
        raise InvalidHexString(str(e)) from None
    if expected_length is not None and len(raw) != expected_length:
        raise InvalidHexString(f"expected {expected_length} bytes, found {len(raw)}")
    return raw


class Salt:
    """16 random bytes mixed into key derivation."""

    def __init__(self, raw: bytes):
        if len(raw) != SALT_LENGTH:
            raise InvalidHexString(f"salt must be {SALT_LENGTH} bytes, found {len(raw)}")
        self.raw = bytes(raw)

    @classmethod
    def generate(cls) -> "Salt":
        return cls(os.urandom(SALT_LENGTH))

    @classmethod
    def from_hex(cls, value: str) -> "Salt":
        return cls(_from_hex(value, SALT_LENGTH))

    def hex(self) -> str:
        return self.raw.hex()

    def __eq__(self, other) -> bool:
        return isinstance(other, Salt) and other.raw == self.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __repr__(self) -> str:
        return f"Salt({self.hex()})"


class EncryptionKey:
    """A 32-byte AES key held in a buffer that is wiped on ``zeroize``."""

    def __init__(self, raw: bytes):
        if len(raw) != KEY_LENGTH:
            raise ValueError(f"key must be {KEY_LENGTH} bytes")
        self._buffer = bytearray(raw)

    @classmethod
    def derive(cls, passphrase: SecretStr, salt: Salt) -> "EncryptionKey":
        ikm = bytearray(passphrase.get_secret_value().encode("utf-8"))
        try:
            hkdf = HKDF(algorithm=hashes.SHA256(), length=KEY_LENGTH, salt=salt.raw, info=HKDF_INFO)
            return cls(hkdf.derive(bytes(ikm)))
        finally:
            ikm[:] = bytes(len(ikm))

    def material(self) -> bytes:
        return bytes(self._buffer)

    def zeroize(self):
        self._buffer[:] = bytes(len(self._buffer))

    def __enter__(self) -> "EncryptionKey":
        return self

    def __exit__(self, *exc):
        self.zeroize()

    def __repr__(self) -> str:
        return "EncryptionKey(<redacted>)"


def seal(key: EncryptionKey, plaintext: bytes) -> bytes:
    nonce = os.urandom(NONCE_LENGTH)
    return nonce + AESGCM(key.material()).encrypt(nonce, plaintext, None)


def open_sealed(key: EncryptionKey, sealed: bytes) -> bytes:
    if len(sealed) < MIN_SEALED_LENGTH:
        raise InvalidAESBytesTooShort(MIN_SEALED_LENGTH, len(sealed))
    nonce, ciphertext = sealed[:NONCE_LENGTH], sealed[NONCE_LENGTH:]
    try:
        return AESGCM(key.material()).decrypt(nonce, ciphertext, None)
    except InvalidTag:
        raise AESDecryptionFailed() from None


class EncryptedAppPassword:
    """SMTP app password sealed with AES-256-GCM."""

    def __init__(self, sealed: bytes):
        if len(sealed) < MIN_SEALED_LENGTH:
            raise InvalidAESBytesTooShort(MIN_SEALED_LENGTH, len(sealed))
        self.sealed = bytes(sealed)

    @classmethod
    def from_hex(cls, value: str) -> "EncryptedAppPassword":
        return cls(_from_hex(value))

    def hex(self) -> str:
        return self.sealed.hex()

    @classmethod
    def encrypt(cls, app_password: SecretStr, key: EncryptionKey) -> "EncryptedAppPassword":
        return cls(seal(key, app_password.get_secret_value().encode("utf-8")))

    def decrypt(self, key: EncryptionKey) -> SecretStr:
        plaintext = open_sealed(key, self.sealed)
        try:
            return SecretStr(plaintext.decode("utf-8"))
        except UnicodeDecodeError:
            raise InvalidUtf8() from None

    def __eq__(self, other) -> bool:
        return isinstance(other, EncryptedAppPassword) and other.sealed == self.sealed

    def __hash__(self) -> int:
        return hash(self.sealed)

    def __repr__(self) -> str:
        return f"EncryptedAppPassword({len(self.sealed)} bytes)"


def validate_encryption_password(password: SecretStr) -> SecretStr:
    length = len(password.get_secret_value())
    if length < MIN_PASSWORD_LENGTH:
        raise EmailEncryptionPasswordTooShort(MIN_PASSWORD_LENGTH, length)
    return password


def get_encryption_password(prompt: Callable[[str], str] = getpass.getpass) -> SecretStr:
    """Passphrase from the environment when long enough, otherwise prompted."""
    from_env = os.environ.get(ENCRYPTION_PASSWORD_ENV, "")
    if len(from_env) >= MIN_PASSWORD_LENGTH:
        logger.debug(f"Using encryption password from {ENCRYPTION_PASSWORD_ENV}")
        return SecretStr(from_env)
    return validate_encryption_password(SecretStr(prompt("Email encryption password: ")))
