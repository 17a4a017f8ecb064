"""FieldGuard: field-level encryption for sensitive data at rest."""

__version__ = "0.1.0"
