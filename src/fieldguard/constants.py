"""Centralized constants for FieldGuard."""

# AES-256-GCM
KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16

# Smallest decoded payload: nonce + tag + empty ciphertext
MIN_PAYLOAD_SIZE = NONCE_SIZE + TAG_SIZE

# A 64-char hex secret is used as the raw key
HEX_KEY_LENGTH = KEY_SIZE * 2
