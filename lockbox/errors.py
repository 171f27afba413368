"""Typed failures surfaced to the presentation layer."""

from __future__ import annotations


class LockboxError(Exception):
    """Base class for every failure raised by the vault core."""


class VaultNotFound(LockboxError, FileNotFoundError):
    """No vault file at the expected location; caller should offer creation."""


class WrongPasswordOrCorrupt(LockboxError, ValueError):
    """Authentication failed.

    Raised for a bad master password and for a corrupted or tampered file
    alike. The two causes are never distinguished.
    """

    def __init__(self, message: str = "Wrong password or corrupted vault"):
        super().__init__(message)


class AuthenticationFailed(LockboxError, ValueError):
    """AEAD tag check failed (codec level)."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class MalformedData(LockboxError, ValueError):
    """Decrypted payload does not parse as a record set."""


class VaultIOError(LockboxError, OSError):
    """Underlying storage access failed."""


class SessionLocked(LockboxError, RuntimeError):
    """Operation requires an unlocked session."""

    def __init__(self, message: str = "Vault session is locked"):
        super().__init__(message)


class RecordNotFound(LockboxError, LookupError):
    """No record matches the given position or id."""


class PurgeNotConfirmed(LockboxError, ValueError):
    """Purge requested without explicit confirmation."""

    def __init__(self, message: str = "Purging the trash must be explicitly confirmed"):
        super().__init__(message)
