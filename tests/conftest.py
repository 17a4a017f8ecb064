"""Shared fixtures for the FieldGuard test suite."""

import os

import pytest

from fieldguard.config import get_settings
from fieldguard.security import get_encryptor

# Settings() requires a key; give every test a harmless default
os.environ.setdefault("ENCRYPTION_KEY", "test-passphrase-for-the-suite")


@pytest.fixture(autouse=True)
def _clear_cached_singletons():
    """Drop cached settings and encryptor around each test."""
    get_settings.cache_clear()
    get_encryptor.cache_clear()
    yield
    get_settings.cache_clear()
    get_encryptor.cache_clear()
