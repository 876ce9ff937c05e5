"""Tests for the story cipher."""

import pytest

from inkwell.core.encryption import Cipher, ConfigurationError, DecryptionError

KEY = "12345678901234567890123456789012"
IV = "1234567890123456"


class TestConfiguration:
    """Key material is validated when the cipher is built."""

    @pytest.mark.parametrize("key", ["", "short", KEY[:31], KEY + "x", KEY * 2])
    def test_rejects_wrong_key_length(self, key: str) -> None:
        with pytest.raises(ConfigurationError, match="32"):
            Cipher(key, IV)

    @pytest.mark.parametrize("iv", ["", "short", IV[:15], IV + "x"])
    def test_rejects_wrong_iv_length(self, iv: str) -> None:
        with pytest.raises(ConfigurationError, match="16"):
            Cipher(KEY, iv)

    def test_rejects_missing_key_material(self) -> None:
        with pytest.raises(ConfigurationError):
            Cipher(None, IV)
        with pytest.raises(ConfigurationError):
            Cipher(KEY, None)

    def test_accepts_bytes(self) -> None:
        cipher = Cipher(KEY.encode(), IV.encode())
        assert cipher.decrypt(cipher.encrypt("hello")) == "hello"


class TestRoundTrip:
    """decrypt(encrypt(x)) == x."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "This is a secret message",
            "Hello! @#$%^&*()_+-=[]{}|;:,.<>?",
            "Ünïcödé テキスト 🦊",
            "line one\nline two\ttabbed\r\n\x00\x1f",
            "x" * 10_000,
        ],
    )
    def test_round_trip(self, cipher: Cipher, text: str) -> None:
        assert cipher.decrypt(cipher.encrypt(text)) == text

    def test_ciphertext_is_hex_and_differs_from_plaintext(self, cipher: Cipher) -> None:
        encrypted = cipher.encrypt("This is a secret message")
        assert encrypted != "This is a secret message"
        assert len(encrypted) % 32 == 0
        int(encrypted, 16)

    def test_empty_string_encrypts_to_one_padding_block(self, cipher: Cipher) -> None:
        assert len(cipher.encrypt("")) == 32

    def test_identical_plaintext_gives_identical_ciphertext(self, cipher: Cipher) -> None:
        # Static key and IV: equality of plaintexts is visible in the ciphertext
        assert cipher.encrypt("same story") == cipher.encrypt("same story")
        assert cipher.encrypt("same story") != cipher.encrypt("other story")


class TestDecryptFailures:
    """Invalid ciphertext raises DecryptionError."""

    @pytest.mark.parametrize(
        "ciphertext",
        [
            "",
            "not-hex-at-all",
            "abc",  # odd number of hex digits
            "00",  # not a whole block
            "00" * 17,
        ],
    )
    def test_invalid_ciphertext(self, cipher: Cipher, ciphertext: str) -> None:
        with pytest.raises(DecryptionError):
            cipher.decrypt(ciphertext)

    def test_truncated_ciphertext(self, cipher: Cipher) -> None:
        encrypted = cipher.encrypt("This is a secret message")
        with pytest.raises(DecryptionError):
            cipher.decrypt(encrypted[:-2])
