"""Helpers for backfilling encryption over rows written before it was enabled.

These rely on :meth:`FieldEncryptor.is_encrypted`, which is a heuristic. A
legacy plaintext value that happens to be long valid base64 is skipped as
"already encrypted", so review :func:`inspect_values` output before and after
a backfill.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from fieldguard.logging import get_logger
from fieldguard.security.encryption import FieldEncryptor

log = get_logger("fieldguard.security.migration")


@dataclass
class MigrationReport:
    """Counts of stored values by apparent state."""

    encrypted: int = 0
    plaintext: int = 0
    empty: int = 0

    @property
    def total(self) -> int:
        return self.encrypted + self.plaintext + self.empty

    @property
    def needs_migration(self) -> bool:
        return self.plaintext > 0


def inspect_values(encryptor: FieldEncryptor, values: Iterable[str | None]) -> MigrationReport:
    """Classify stored column values as encrypted, legacy plaintext, or empty."""
    report = MigrationReport()
    for value in values:
        if not value:
            report.empty += 1
        elif encryptor.is_encrypted(value):
            report.encrypted += 1
        else:
            report.plaintext += 1

    log.info(
        "values_inspected",
        total=report.total,
        encrypted=report.encrypted,
        plaintext=report.plaintext,
        empty=report.empty,
    )
    return report


def encrypt_legacy_payload(encryptor: FieldEncryptor, payload: dict[str, Any]) -> dict[str, Any]:
    """Encrypt sensitive fields of ``payload`` that still hold plaintext.

    Fields that already look encrypted are left as they are, so running the
    backfill twice over the same rows does not double-encrypt them.
    """
    result = dict(payload)
    migrated = []
    for field in sorted(encryptor.sensitive_fields):
        value = result.get(field)
        if isinstance(value, str) and value and not encryptor.is_encrypted(value):
            result[field] = encryptor.encrypt(value)
            migrated.append(field)

    if migrated:
        log.debug("legacy_fields_encrypted", fields=migrated)
    return result
