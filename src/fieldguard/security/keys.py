"""Key material loading for field encryption.

A single configured secret becomes exactly 32 bytes of AES-256 key material:

* a 64 character hexadecimal secret is decoded and used verbatim,
* anything else is treated as a passphrase and hashed with SHA-256.

The passphrase path is a convenience; its entropy is whatever the operator
put in the secret. Neither the secret nor the derived key is ever logged.
"""

from __future__ import annotations

import hashlib
import string

from pydantic import SecretStr

from fieldguard.constants import HEX_KEY_LENGTH, KEY_SIZE
from fieldguard.logging import get_logger
from fieldguard.security.errors import ConfigurationError

log = get_logger("fieldguard.security.keys")

_HEX_DIGITS = frozenset(string.hexdigits)


def is_hex_key(secret: str) -> bool:
    """Return True if ``secret`` is exactly 64 hexadecimal characters."""
    return len(secret) == HEX_KEY_LENGTH and all(ch in _HEX_DIGITS for ch in secret)


def load_key(secret: str | SecretStr | None) -> bytes:
    """Turn the configured secret into 32 bytes of key material.

    Args:
        secret: The raw secret, or a ``SecretStr`` straight from settings.

    Returns:
        Exactly ``KEY_SIZE`` bytes.

    Raises:
        ConfigurationError: If the secret is missing or the result is not
            ``KEY_SIZE`` bytes long.
    """
    if isinstance(secret, SecretStr):
        secret = secret.get_secret_value()

    if not secret:
        raise ConfigurationError("ENCRYPTION_KEY is required for data encryption")

    if is_hex_key(secret):
        key = bytes.fromhex(secret)
    else:
        key = hashlib.sha256(secret.encode("utf-8")).digest()

    if len(key) != KEY_SIZE:
        raise ConfigurationError(
            f"ENCRYPTION_KEY must yield {KEY_SIZE} bytes "
            f"({HEX_KEY_LENGTH} hex characters or a passphrase)"
        )

    return key


class KeyManager:
    """Holds the process-wide key material derived from one secret."""

    def __init__(self, secret: str | SecretStr | None) -> None:
        """Load key material from ``secret``.

        Args:
            secret: 64 hex characters, or any non-empty passphrase.

        Raises:
            ConfigurationError: If the secret is missing or unusable.
        """
        raw = secret.get_secret_value() if isinstance(secret, SecretStr) else secret
        self._key = load_key(raw)
        self._source = "hex" if is_hex_key(raw or "") else "sha256"
        log.info("encryption_key_loaded", source=self._source)

    @property
    def key(self) -> bytes:
        """The 32-byte AES-256 key."""
        return self._key

    @property
    def source(self) -> str:
        """How the key was produced: ``"hex"`` or ``"sha256"``."""
        return self._source

    def __repr__(self) -> str:
        return f"KeyManager(source={self._source!r})"
