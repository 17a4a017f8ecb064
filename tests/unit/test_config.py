"""Unit tests for the configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from fieldguard.config import Settings, get_settings


def _make_settings(**overrides) -> Settings:
    """Create a Settings instance with minimal required fields plus overrides.

    We disable .env file loading (_env_file=None) so that tests are isolated
    from the real environment.
    """
    defaults = {
        "encryption_key": "test-passphrase-minimum-16-chars",
        "_env_file": None,
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestEncryptionKeyRequired:
    """Tests for encryption_key being required."""

    def test_missing_encryption_key_raises_validation_error(self):
        """Test that omitting ENCRYPTION_KEY raises ValidationError."""
        env_overrides = {k: v for k, v in os.environ.items() if k.upper() != "ENCRYPTION_KEY"}
        with patch.dict(os.environ, env_overrides, clear=True):
            with pytest.raises(ValidationError, match="encryption_key"):
                Settings(_env_file=None)

    def test_encryption_key_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("ENCRYPTION_KEY", "a" * 64)
        settings = Settings(_env_file=None)
        assert settings.encryption_key.get_secret_value() == "a" * 64

    def test_encryption_key_is_masked_in_repr(self):
        settings = _make_settings(encryption_key="do-not-print-me")
        assert "do-not-print-me" not in repr(settings)
        assert "do-not-print-me" not in str(settings.encryption_key)


class TestEncryptionStrict:
    """Tests for the encryption_strict field."""

    def test_encryption_strict_default_is_false(self, monkeypatch):
        monkeypatch.delenv("ENCRYPTION_STRICT", raising=False)
        assert _make_settings().encryption_strict is False

    def test_encryption_strict_can_be_set_true(self):
        assert _make_settings(encryption_strict=True).encryption_strict is True

    def test_encryption_strict_from_environment(self, monkeypatch):
        monkeypatch.setenv("ENCRYPTION_STRICT", "true")
        assert _make_settings().encryption_strict is True


class TestApplicationSettings:
    """Tests for environment and logging fields."""

    def test_defaults(self, monkeypatch):
        for name in ("ENVIRONMENT", "LOG_LEVEL", "LOG_TO_FILE", "LOG_DIRECTORY"):
            monkeypatch.delenv(name, raising=False)
        settings = _make_settings()

        assert settings.environment == "production"
        assert settings.log_level == "INFO"
        assert settings.log_to_file is False
        assert settings.log_directory == "logs"
        assert settings.log_file_max_bytes == 10 * 1024 * 1024
        assert settings.log_file_backup_count == 5
        assert settings.log_error_file_enabled is True

    def test_is_development(self):
        assert _make_settings(environment="Development").is_development is True
        assert _make_settings(environment="production").is_development is False

    def test_log_file_paths(self):
        settings = _make_settings(log_directory="/var/log/fieldguard")
        assert settings.log_file_path == os.path.join("/var/log/fieldguard", "fieldguard.log")
        assert settings.error_log_file_path == os.path.join(
            "/var/log/fieldguard", "fieldguard_error.log"
        )

    def test_extra_environment_is_ignored(self):
        settings = _make_settings(unrelated_option="x")
        assert not hasattr(settings, "unrelated_option")


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_returns_cached_instance(self):
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        get_settings.cache_clear()
        assert get_settings().log_level == "DEBUG"
