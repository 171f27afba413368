"""VaultSession: key and salt held for the lifetime of one unlock."""

from __future__ import annotations

import enum
import logging
import secrets
from typing import Optional

from lockbox.crypto.engine import CryptoEngine
from lockbox.crypto.formats import SALT_SIZE, VaultEnvelope
from lockbox.errors import (
    AuthenticationFailed,
    SessionLocked,
    WrongPasswordOrCorrupt,
)
from lockbox.storage.backend import StorageBackend
from lockbox.util.memory import KeyObfuscator, SecureMemory, TimedExposure, wipe
from lockbox.vault.store import RecordStore

logger = logging.getLogger("lockbox.vault")


class SessionState(enum.Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class VaultSession:
    """Two-state session: LOCKED holds nothing, UNLOCKED holds key and salt.

    The salt is fixed when the session unlocks (generated by ``create``, read
    from the envelope by ``open``) and every ``save`` writes that same salt
    next to ciphertext produced with the key derived from it.
    """

    def __init__(self, storage: StorageBackend, crypto: CryptoEngine):
        self.storage = storage
        self.crypto = crypto
        self._key_ko: Optional[KeyObfuscator] = None
        self._salt: Optional[bytes] = None

    # ------------------------------------------------------------------
    #  State
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        if self._key_ko is None:
            return SessionState.LOCKED
        return SessionState.UNLOCKED

    @property
    def is_unlocked(self) -> bool:
        return self.state is SessionState.UNLOCKED

    @property
    def salt(self) -> bytes:
        if self._salt is None:
            raise SessionLocked()
        return self._salt

    # ------------------------------------------------------------------
    #  Transitions
    # ------------------------------------------------------------------
    def create(self, password: SecureMemory) -> RecordStore:
        """Start a new vault: fresh salt, derived key, empty store saved once."""
        salt = secrets.token_bytes(SALT_SIZE)
        self._unlock(password, salt)
        store = RecordStore()
        try:
            self.save(store)
        except Exception:
            self.lock()
            raise
        logger.info("New vault created")
        return store

    def open(self, password: SecureMemory, envelope_bytes: bytes) -> RecordStore:
        """Unlock with *password* and return the decrypted record set."""
        try:
            envelope = VaultEnvelope.from_bytes(envelope_bytes)
        except ValueError:
            raise WrongPasswordOrCorrupt() from None

        key = self.crypto.derive_key(password, envelope.salt)
        ko = KeyObfuscator(key)
        try:
            with TimedExposure(ko) as ek:
                plaintext = self.crypto.decrypt_data(
                    ek.get_bytes(), envelope.nonce, envelope.ciphertext
                )
        except AuthenticationFailed:
            ko.clear()
            raise WrongPasswordOrCorrupt() from None
        finally:
            wipe(bytearray(key))

        buf = bytearray(plaintext)
        try:
            store = RecordStore.deserialize(bytes(buf))
        except Exception:
            ko.clear()
            raise
        finally:
            wipe(buf)

        self.lock()
        self._key_ko = ko
        self._salt = envelope.salt
        logger.info("Vault unlocked: %d records", len(store))
        return store

    def save(self, store: RecordStore) -> None:
        if self._key_ko is None or self._salt is None:
            raise SessionLocked()

        plaintext = bytearray(store.serialize())
        try:
            with TimedExposure(self._key_ko) as ek:
                nonce, ciphertext = self.crypto.encrypt_data(
                    ek.get_bytes(), bytes(plaintext)
                )
        finally:
            wipe(plaintext)

        envelope = VaultEnvelope(salt=self._salt, nonce=nonce, ciphertext=ciphertext)
        self.storage.write_atomic(envelope.to_bytes())

    def lock(self) -> None:
        if self._key_ko is not None:
            self._key_ko.clear()
            logger.info("Vault locked")
        self._key_ko = None
        self._salt = None

    # ------------------------------------------------------------------
    def _unlock(self, password: SecureMemory, salt: bytes) -> None:
        key = self.crypto.derive_key(password, salt)
        try:
            ko = KeyObfuscator(key)
        finally:
            wipe(bytearray(key))
        self.lock()
        self._key_ko = ko
        self._salt = salt
