"""Security module for FieldGuard.

Provides application-layer encryption for sensitive fields before they are
persisted.
"""

from functools import lru_cache

from fieldguard.config import get_settings
from fieldguard.logging import get_logger
from fieldguard.security.encryption import FieldEncryptor
from fieldguard.security.errors import (
    ConfigurationError,
    DecryptionError,
    EncryptionError,
    FieldGuardError,
)
from fieldguard.security.keys import KeyManager, load_key

__all__ = [
    "ConfigurationError",
    "DecryptionError",
    "EncryptionError",
    "FieldEncryptor",
    "FieldGuardError",
    "KeyManager",
    "get_encryptor",
    "load_key",
]


@lru_cache
def get_encryptor() -> FieldEncryptor:
    """Build the process-wide encryptor from settings, once."""
    settings = get_settings()
    key_manager = KeyManager(secret=settings.encryption_key)
    encryptor = FieldEncryptor(key=key_manager.key, strict=settings.encryption_strict)
    get_logger("fieldguard.security").info(
        "encryption_initialized", strict=settings.encryption_strict
    )
    return encryptor
