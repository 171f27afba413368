"""Lockbox cryptographic modules."""

from lockbox.crypto.engine import CryptoEngine, PasswordGenerator
from lockbox.crypto.formats import (
    KEY_SIZE,
    NONCE_SIZE,
    SALT_SIZE,
    VaultEnvelope,
)

__all__ = [
    "CryptoEngine",
    "PasswordGenerator",
    "KEY_SIZE",
    "NONCE_SIZE",
    "SALT_SIZE",
    "VaultEnvelope",
]
