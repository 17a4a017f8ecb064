"""Unit tests for the legacy-data migration helpers."""

import base64
import os

import pytest

from fieldguard.constants import KEY_SIZE
from fieldguard.security.encryption import FieldEncryptor
from fieldguard.security.migration import MigrationReport, encrypt_legacy_payload, inspect_values


@pytest.fixture()
def encryptor() -> FieldEncryptor:
    return FieldEncryptor(key=os.urandom(KEY_SIZE), sensitive_fields={"tax_id", "notes"})


class TestInspectValues:
    """Tests for inspect_values."""

    def test_counts_each_state(self, encryptor):
        values = [
            encryptor.encrypt("one"),
            encryptor.encrypt("two"),
            "legacy plaintext",
            None,
            "",
        ]

        report = inspect_values(encryptor, values)

        assert report == MigrationReport(encrypted=2, plaintext=1, empty=2)
        assert report.total == 5
        assert report.needs_migration is True

    def test_fully_migrated_column(self, encryptor):
        report = inspect_values(encryptor, [encryptor.encrypt("a"), None])
        assert report.needs_migration is False

    def test_empty_iterable(self, encryptor):
        assert inspect_values(encryptor, []).total == 0

    def test_accepts_generator(self, encryptor):
        report = inspect_values(encryptor, (v for v in ["x", "y"]))
        assert report.plaintext == 2


class TestEncryptLegacyPayload:
    """Tests for encrypt_legacy_payload."""

    def test_encrypts_plaintext_fields(self, encryptor):
        row = {"id": 7, "tax_id": "TAX123", "notes": "call back monday"}

        migrated = encrypt_legacy_payload(encryptor, row)

        assert migrated["id"] == 7
        assert encryptor.is_encrypted(migrated["tax_id"])
        assert encryptor.is_encrypted(migrated["notes"])
        assert encryptor.decrypt_payload(migrated) == row

    def test_is_idempotent(self, encryptor):
        once = encrypt_legacy_payload(encryptor, {"tax_id": "TAX123"})
        twice = encrypt_legacy_payload(encryptor, once)
        assert twice == once

    def test_leaves_empty_and_missing_fields(self, encryptor):
        row = {"tax_id": "", "other": "visible"}
        assert encrypt_legacy_payload(encryptor, row) == row

    def test_does_not_mutate_input(self, encryptor):
        row = {"tax_id": "TAX123"}
        encrypt_legacy_payload(encryptor, row)
        assert row == {"tax_id": "TAX123"}

    def test_skips_base64_lookalike(self, encryptor):
        """A legacy value that looks encrypted is not touched; is_encrypted is a heuristic."""
        lookalike = base64.b64encode(b"x" * 40).decode("ascii")
        assert encrypt_legacy_payload(encryptor, {"tax_id": lookalike}) == {"tax_id": lookalike}
