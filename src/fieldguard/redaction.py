"""Redaction of secrets before anything reaches a log sink."""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping
from typing import Any

SENSITIVE_KEYS = (
    "password",
    "secret",
    "token",
    "key",
    "authorization",
    "apikey",
    "api_key",
    "access_token",
    "refresh_token",
    "jwt_secret",
    "encryption_key",
    "private_key",
    "client_secret",
    "database_url",
)

REDACTED = "[REDACTED]"
MAX_DEPTH = 10

# structlog bookkeeping keys never carry user data
_STRUCTURAL_KEYS = frozenset({"event", "level", "logger", "timestamp", "exc_info", "stack_info"})

_JWT_RE = re.compile(r"^[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*$")
_HEX_SECRET_RE = re.compile(r"^[0-9a-fA-F]{32,}$")
_BEARER_RE = re.compile(r"Bearer\s+[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*")
_HEX_RUN_RE = re.compile(r"[0-9a-fA-F]{32,}")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")
_ASSIGNMENT_RES = [
    re.compile(rf"(?<![A-Za-z0-9])({re.escape(name)}\s*[:=]\s*)([^\s,}}]+)", re.IGNORECASE)
    for name in SENSITIVE_KEYS
]


def is_sensitive_key(name: str) -> bool:
    """Return True if a mapping key names something that must not be logged.

    Names are split into words on separators and camelCase boundaries, so
    ``refreshToken`` and ``ENCRYPTION_KEY`` match but ``monkey`` does not.
    """
    words = _SEPARATOR_RE.sub("_", _CAMEL_BOUNDARY_RE.sub("_", name).lower()).strip("_")
    padded = f"_{words}_"
    return any(f"_{sensitive}_" in padded for sensitive in SENSITIVE_KEYS)


def sanitize_for_logging(obj: Any, depth: int = 0) -> Any:
    """Recursively redact secrets from a value destined for a log record.

    Mapping entries whose key looks sensitive are replaced wholesale. Bare
    strings are masked when they look like a JWT or a long hex secret.
    """
    if depth > MAX_DEPTH:
        return "[Max depth reached]"

    if obj is None:
        return None

    if isinstance(obj, str):
        if _JWT_RE.match(obj):
            return "[REDACTED: JWT Token]"
        if _HEX_SECRET_RE.match(obj):
            return "[REDACTED: Secret Key]"
        return obj

    if isinstance(obj, (bytes, bytearray)):
        return f"[REDACTED: {len(obj)} bytes]"

    if isinstance(obj, (list, tuple)):
        return [sanitize_for_logging(item, depth + 1) for item in obj]

    if isinstance(obj, Mapping):
        sanitized: dict[Any, Any] = {}
        for key, value in obj.items():
            if isinstance(key, str) and is_sensitive_key(key):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_for_logging(value, depth + 1)
        return sanitized

    return obj


def sanitize_string(text: str) -> str:
    """Mask bearer tokens, long hex runs and ``name=value`` secrets in free text."""
    if not text:
        return text

    text = _BEARER_RE.sub("Bearer [REDACTED]", text)
    for pattern in _ASSIGNMENT_RES:
        text = pattern.sub(rf"\1{REDACTED}", text)
    text = _HEX_RUN_RE.sub("[REDACTED: Secret]", text)
    return text


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor that scrubs every event before rendering."""
    for key in list(event_dict.keys()):
        value = event_dict[key]
        if key == "event" and isinstance(value, str):
            event_dict[key] = sanitize_string(value)
        elif key in _STRUCTURAL_KEYS:
            continue
        elif is_sensitive_key(key):
            event_dict[key] = REDACTED
        else:
            event_dict[key] = sanitize_for_logging(value)
    return event_dict
