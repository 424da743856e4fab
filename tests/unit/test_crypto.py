#!/usr/bin/env python3
"""
Unit Tests for Credential Crypto

Tests key derivation, sealed boxes and passphrase resolution.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import SecretStr

from klirr.common.errors import (
    AESDecryptionFailed,
    EmailEncryptionPasswordTooShort,
    InvalidAESBytesTooShort,
    InvalidHexString,
    InvalidUtf8,
)
from klirr.modules.email.crypto import (
    ENCRYPTION_PASSWORD_ENV,
    EncryptedAppPassword,
    EncryptionKey,
    Salt,
    get_encryption_password,
    open_sealed,
    seal,
)

SALT = Salt(bytes(range(16)))


@pytest.fixture
def key():
    with EncryptionKey.derive(SecretStr("open sesame"), SALT) as k:
        yield k


class TestKeyDerivation:
    """Tests for HKDF key derivation."""

    def test_deterministic(self):
        a = EncryptionKey.derive(SecretStr("open sesame"), SALT)
        b = EncryptionKey.derive(SecretStr("open sesame"), SALT)
        assert a.material() == b.material()
        assert len(a.material()) == 32

    def test_distinct_salts_give_distinct_keys(self):
        a = EncryptionKey.derive(SecretStr("open sesame"), Salt.generate())
        b = EncryptionKey.derive(SecretStr("open sesame"), Salt.generate())
        assert a.material() != b.material()

    def test_zeroize(self):
        key = EncryptionKey.derive(SecretStr("open sesame"), SALT)
        key.zeroize()
        assert key.material() == bytes(32)

    def test_context_manager_zeroizes(self):
        with EncryptionKey.derive(SecretStr("open sesame"), SALT) as key:
            pass
        assert key.material() == bytes(32)

    def test_repr_hides_material(self, key):
        assert "redacted" in repr(key)


class TestSealedBox:
    """Tests for AES-256-GCM sealing."""

    @pytest.mark.parametrize("plaintext", ["x", "app-password-123", "lösenord ✓"])
    def test_round_trip(self, key, plaintext):
        sealed = seal(key, plaintext.encode("utf-8"))
        assert open_sealed(key, sealed).decode("utf-8") == plaintext

    def test_layout(self, key):
        """Test nonce(12) || ciphertext || tag(16)."""
        assert len(seal(key, b"abcd")) == 12 + 4 + 16

    def test_random_nonce(self, key):
        assert seal(key, b"same") != seal(key, b"same")

    def test_tampered_box_fails(self, key):
        sealed = bytearray(seal(key, b"secret"))
        sealed[-1] ^= 0x01
        with pytest.raises(AESDecryptionFailed):
            open_sealed(key, bytes(sealed))

    def test_wrong_key_fails(self, key):
        sealed = seal(key, b"secret")
        other = EncryptionKey.derive(SecretStr("wrong"), SALT)
        with pytest.raises(AESDecryptionFailed):
            open_sealed(other, sealed)

    def test_too_short(self, key):
        with pytest.raises(InvalidAESBytesTooShort) as exc_info:
            open_sealed(key, bytes(28))
        assert exc_info.value.expected_at_least == 29
        assert exc_info.value.found == 28

    def test_non_utf8_plaintext(self, key):
        box = EncryptedAppPassword(seal(key, b"\xff\xfe"))
        with pytest.raises(InvalidUtf8):
            box.decrypt(key)


class TestEncryptedAppPassword:
    """Tests for the stored app password."""

    def test_hex_round_trip(self, key):
        box = EncryptedAppPassword.encrypt(SecretStr("hunter22"), key)
        restored = EncryptedAppPassword.from_hex(box.hex())
        assert restored == box
        assert restored.decrypt(key).get_secret_value() == "hunter22"

    def test_invalid_hex(self):
        with pytest.raises(InvalidHexString):
            EncryptedAppPassword.from_hex("zz")

    def test_salt_hex_length_checked(self):
        with pytest.raises(InvalidHexString):
            Salt.from_hex("abcd")

    def test_salt_hex_round_trip(self):
        assert Salt.from_hex(SALT.hex()) == SALT


class TestEncryptionPassword:
    """Tests for passphrase resolution."""

    def test_from_env(self):
        with patch.dict(os.environ, {ENCRYPTION_PASSWORD_ENV: "from-env"}):
            password = get_encryption_password(prompt=lambda _: pytest.fail("should not prompt"))
        assert password.get_secret_value() == "from-env"

    def test_short_env_falls_back_to_prompt(self):
        with patch.dict(os.environ, {ENCRYPTION_PASSWORD_ENV: "ab"}):
            password = get_encryption_password(prompt=lambda _: "prompted")
        assert password.get_secret_value() == "prompted"

    def test_prompted_too_short(self):
        with pytest.raises(EmailEncryptionPasswordTooShort) as exc_info:
            get_encryption_password(prompt=lambda _: "abc")
        assert exc_info.value.min_length == 4
        assert exc_info.value.found == 3
