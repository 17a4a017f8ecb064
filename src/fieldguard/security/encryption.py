"""AES-256-GCM field encryption for values stored at rest.

Stored format (standard base64 of)::

    nonce (12 bytes) || auth tag (16 bytes) || ciphertext (len(utf8(plaintext)))

Every call to :meth:`FieldEncryptor.encrypt` draws a fresh random nonce, so
encrypting the same value twice gives two different stored strings.

Decryption is lenient by default: a value that cannot be decoded or
authenticated is logged and handed back unchanged, so rows written before
encryption was enabled stay readable. The cost is that legacy plaintext and
corrupted ciphertext look the same to the caller. Pass ``strict=True`` to get
a :class:`DecryptionError` instead.
"""

from __future__ import annotations

import base64
import os
import string
from collections.abc import Iterable
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from fieldguard.constants import KEY_SIZE, MIN_PAYLOAD_SIZE, NONCE_SIZE, TAG_SIZE
from fieldguard.logging import get_logger
from fieldguard.security.errors import ConfigurationError, DecryptionError, EncryptionError

log = get_logger("fieldguard.security.encryption")

__all__ = [
    "KEY_SIZE",
    "MIN_PAYLOAD_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "FieldEncryptor",
]


_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")
_BASE64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")


def _b64decode(value: str) -> bytes:
    """Decode base64 as forgivingly as the stored values may have been written.

    Accepts the URL-safe alphabet, missing padding and line wrapping. Any other
    character outside the alphabet is skipped and decoding stops at the first
    ``=``. A single leftover character holds less than a byte and is dropped.
    """
    head = value.split("=", 1)[0].translate(_URLSAFE_TO_STANDARD)
    chars = "".join(ch for ch in head if ch in _BASE64_ALPHABET)
    if len(chars) % 4 == 1:
        chars = chars[:-1]
    return base64.b64decode(chars + "=" * (-len(chars) % 4))


class FieldEncryptor:
    """Encrypts and decrypts individual string fields."""

    def __init__(
        self,
        key: bytes,
        sensitive_fields: Iterable[str] | None = None,
        strict: bool = False,
    ) -> None:
        """Initialize the encryptor.

        Args:
            key: 32 bytes of key material, usually ``KeyManager.key``.
            sensitive_fields: Payload keys handled by ``encrypt_payload`` and
                ``decrypt_payload``. None are handled unless declared.
            strict: Raise ``DecryptionError`` on decrypt failure instead of
                returning the stored value.

        Raises:
            ConfigurationError: If ``key`` is not exactly 32 bytes.
        """
        if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE:
            raise ConfigurationError(f"Encryption key must be exactly {KEY_SIZE} bytes")

        self._key = bytes(key)
        self._strict = strict
        self._sensitive_fields = frozenset(sensitive_fields or ())

    @property
    def strict(self) -> bool:
        """Whether decrypt failures raise instead of passing through."""
        return self._strict

    @property
    def sensitive_fields(self) -> frozenset[str]:
        """Payload keys that are encrypted at rest."""
        return self._sensitive_fields

    def __repr__(self) -> str:
        fields = sorted(self._sensitive_fields)
        return f"FieldEncryptor(sensitive_fields={fields!r}, strict={self._strict!r})"

    # ------------------------------------------------------------------
    # Single values
    # ------------------------------------------------------------------

    def encrypt(self, plaintext: str | None) -> str | None:
        """Encrypt a string value.

        Args:
            plaintext: The value to protect. ``None`` and ``""`` have nothing
                to protect and yield ``None``.

        Returns:
            Base64 of ``nonce || tag || ciphertext``, or ``None``.

        Raises:
            EncryptionError: If the cipher fails for any reason.
        """
        if plaintext is None or plaintext == "":
            return None

        try:
            nonce = os.urandom(NONCE_SIZE)
            # AESGCM appends the tag to the ciphertext
            sealed = AESGCM(self._key).encrypt(nonce, plaintext.encode("utf-8"), None)
            ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
            combined = nonce + tag + ciphertext
        except Exception as exc:
            raise EncryptionError("Encryption failed") from exc

        return base64.b64encode(combined).decode("ascii")

    def decrypt(self, stored: str | None) -> str | None:
        """Decrypt a value produced by :meth:`encrypt`.

        Args:
            stored: The stored base64 string. ``None`` and ``""`` yield ``None``.

        Returns:
            The recovered plaintext. In non-strict mode, a value that cannot
            be decrypted is returned unchanged.

        Raises:
            DecryptionError: Only in strict mode, when the value is malformed
                or fails authentication.
        """
        if stored is None or stored == "":
            return None

        try:
            return self._open(stored)
        except DecryptionError as exc:
            if self._strict:
                raise
            log.warning(
                "decryption_failed_returning_stored_value",
                reason=str(exc),
                hint="value may be unencrypted legacy data",
            )
            return stored

    def _open(self, stored: str) -> str:
        combined = _b64decode(stored)
        if len(combined) < MIN_PAYLOAD_SIZE:
            raise DecryptionError(
                f"Decryption failed: payload shorter than {MIN_PAYLOAD_SIZE} bytes"
            )

        nonce = combined[:NONCE_SIZE]
        tag = combined[NONCE_SIZE:MIN_PAYLOAD_SIZE]
        ciphertext = combined[MIN_PAYLOAD_SIZE:]

        try:
            plaintext = AESGCM(self._key).decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as exc:
            raise DecryptionError("Decryption failed: authentication tag mismatch") from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Decryption failed: plaintext is not valid UTF-8") from exc

    def is_encrypted(self, value: str | None) -> bool:
        """Guess whether ``value`` looks like output of :meth:`encrypt`.

        This only checks that the value decodes as base64 to at least 28
        bytes. Decoding is forgiving, so any unrelated base64 blob or long
        enough run of letters and digits is reported as encrypted too. Use it
        for migration and inspection tooling only, never to decide whether
        data is safe.
        """
        if not value:
            return False
        return len(_b64decode(value)) >= MIN_PAYLOAD_SIZE

    # ------------------------------------------------------------------
    # Record payloads
    # ------------------------------------------------------------------

    def encrypt_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``payload`` with its sensitive string fields encrypted."""
        result = dict(payload)
        for field in self._sensitive_fields:
            value = result.get(field)
            if isinstance(value, str):
                result[field] = self.encrypt(value)
        return result

    def decrypt_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``payload`` with its sensitive string fields decrypted.

        Raises:
            DecryptionError: In strict mode, if any sensitive field fails.
        """
        result = dict(payload)
        for field in self._sensitive_fields:
            value = result.get(field)
            if isinstance(value, str):
                result[field] = self.decrypt(value)
        return result
