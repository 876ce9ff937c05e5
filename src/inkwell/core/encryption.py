"""Encryption of section stories at rest.

AES-256-CBC with PKCS7 padding, hex-encoded ciphertext. The key and IV are
fixed process-wide configuration: they are not derived per message, not
rotated, and not stored next to the ciphertext. Identical plaintext therefore
always yields identical ciphertext. Callers only depend on ``encrypt`` and
``decrypt``, so a per-record IV scheme can replace this class without touching
them.
"""

from __future__ import annotations

from functools import lru_cache

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher as _AESCipher
from cryptography.hazmat.primitives.ciphers import algorithms, modes

from .config import get_settings

KEY_SIZE = 32
IV_SIZE = 16
BLOCK_SIZE_BITS = 128


class ConfigurationError(Exception):
    """Key material is missing or malformed."""


class DecryptionError(Exception):
    """Input is not valid ciphertext for the configured key and IV."""


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


class Cipher:
    """Symmetric text cipher with a static key and IV."""

    def __init__(self, key: str | bytes | None, iv: str | bytes | None):
        """Validate key material.

        Args:
            key: 256-bit key, 32 bytes (or 32 ASCII characters)
            iv: 128-bit initialization vector, 16 bytes (or 16 ASCII characters)

        Raises:
            ConfigurationError: If the key or IV has the wrong length
        """
        key_bytes = _as_bytes(key or b"")
        iv_bytes = _as_bytes(iv or b"")
        if len(key_bytes) != KEY_SIZE:
            raise ConfigurationError(
                f"AES secret key must be exactly {KEY_SIZE} characters long"
            )
        if len(iv_bytes) != IV_SIZE:
            raise ConfigurationError(f"AES IV must be exactly {IV_SIZE} characters long")
        self._key = key_bytes
        self._iv = iv_bytes

    def _cipher(self) -> _AESCipher:
        return _AESCipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt UTF-8 text and return hex ciphertext."""
        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encryptor = self._cipher().encryptor()
        return (encryptor.update(padded) + encryptor.finalize()).hex()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt hex ciphertext back to text.

        Raises:
            DecryptionError: On empty input, malformed hex, bad block length,
                bad padding, or bytes that are not UTF-8
        """
        if not ciphertext:
            raise DecryptionError("Ciphertext is empty")
        try:
            raw = bytes.fromhex(ciphertext)
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(raw) + decryptor.finalize()
            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except ValueError as e:
            # UnicodeDecodeError is a ValueError subclass
            raise DecryptionError(f"Decryption failed: {e}") from e


@lru_cache
def get_cipher() -> Cipher:
    """Get the process-wide cipher built from settings."""
    settings = get_settings()
    return Cipher(settings.aes_secret_key, settings.aes_iv)
