"""Exception types raised by the encryption service."""


class FieldGuardError(Exception):
    """Base class for all FieldGuard errors."""


class ConfigurationError(FieldGuardError, ValueError):
    """Key material is missing or malformed. Fatal at startup."""


class EncryptionError(FieldGuardError, RuntimeError):
    """Encrypting a value failed. Always propagated to the caller."""


class DecryptionError(FieldGuardError, ValueError):
    """A stored value could not be authenticated or decoded.

    Only raised when the encryptor runs in strict mode; otherwise the failure
    is logged and the stored value is returned unchanged.
    """
