"""VaultManager: the API the presentation layer drives (open/create, CRUD, trash)."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Union

from lockbox.config import Config, Settings
from lockbox.crypto.engine import CryptoEngine, PasswordGenerator
from lockbox.errors import PurgeNotConfirmed, RecordNotFound, SessionLocked
from lockbox.storage.backend import StorageBackend
from lockbox.util.memory import SecureMemory
from lockbox.vault.models import Record
from lockbox.vault.session import VaultSession
from lockbox.vault.store import RecordStore

logger = logging.getLogger("lockbox.vault")

# A record reference: position in the view the caller is showing, or record id.
RecordRef = Union[int, str]

_EDITABLE_FIELDS = ("service", "login", "password", "group")


class VaultManager:
    """High-level vault operations. Every mutation is saved before it is kept."""

    def __init__(
        self,
        storage: StorageBackend,
        crypto: CryptoEngine,
        settings: Optional[Settings] = None,
    ):
        self.storage = storage
        self.crypto = crypto
        if settings is None:
            self.secret_length = Config.DEFAULT_SECRET_LENGTH
            self.secret_symbols = Config.DEFAULT_SECRET_SYMBOLS
        else:
            self.secret_length = settings.secret_length
            self.secret_symbols = settings.secret_symbols
        self.session = VaultSession(storage, crypto)
        self.store = RecordStore()

    @property
    def is_unlocked(self) -> bool:
        return self.session.is_unlocked

    # ------------------------------------------------------------------
    #  Create / open
    # ------------------------------------------------------------------
    def create_new(self, password: SecureMemory) -> None:
        if self.storage.exists():
            raise FileExistsError(f"A vault already exists at {self.storage.vault_path}")
        self.store = self.session.create(password)

    def open(self, password: SecureMemory) -> None:
        data = self.storage.read()
        self.store = self.session.open(password, data)
        logger.info(
            "Vault opened: %d active, %d in trash",
            len(self.store.active()),
            len(self.store.trash()),
        )

    # ------------------------------------------------------------------
    #  Views
    # ------------------------------------------------------------------
    def list_active(self) -> List[Record]:
        self._require_unlocked()
        return [r.copy() for r in self.store.active()]

    def list_trash(self) -> List[Record]:
        self._require_unlocked()
        return [r.copy() for r in self.store.trash()]

    def get_record(self, record_id: str) -> Record:
        self._require_unlocked()
        return self.store[self.store.index_of(record_id)].copy()

    # ------------------------------------------------------------------
    #  CRUD
    # ------------------------------------------------------------------
    def add_record(self, record: Record) -> Record:
        self._require_unlocked()
        added = record.copy()
        self._commit(lambda store: store.add(added))
        logger.info("Record added")
        return added.copy()

    def update_record(self, ref: RecordRef, **fields) -> None:
        unknown = set(fields) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        for name, value in fields.items():
            if not isinstance(value, str):
                raise TypeError(f"Field '{name}' must be a string")

        index = self._resolve(ref, self.store.active_indices)

        def _apply(store: RecordStore) -> None:
            for name, value in fields.items():
                setattr(store[index], name, value)

        self._commit(_apply)
        logger.info("Record updated")

    def soft_delete_record(self, ref: RecordRef) -> None:
        index = self._resolve(ref, self.store.active_indices)
        self._commit(lambda store: store.soft_delete(index))
        logger.info("Record moved to trash")

    def restore_record(self, ref: RecordRef) -> None:
        index = self._resolve(ref, self.store.trash_indices)
        self._commit(lambda store: store.restore(index))
        logger.info("Record restored from trash")

    def purge_trash(self, confirmed: bool = False) -> int:
        if not confirmed:
            raise PurgeNotConfirmed()
        self._require_unlocked()
        removed = len(self.store.trash())
        self._commit(lambda store: store.purge())
        logger.info("Trash purged: %d records removed", removed)
        return removed

    # ------------------------------------------------------------------
    #  Secret generation
    # ------------------------------------------------------------------
    def generate_secret(
        self, length: Optional[int] = None, include_symbols: Optional[bool] = None
    ) -> str:
        """Uniform random secret; unset arguments come from the [generator] settings."""
        if length is None:
            length = self.secret_length
        if include_symbols is None:
            include_symbols = self.secret_symbols
        return PasswordGenerator.generate_secret(length, include_symbols)

    def secret_entropy(self, secret: str, include_symbols: Optional[bool] = None) -> float:
        """Bits of entropy of *secret* if drawn uniformly from the generator charset."""
        if include_symbols is None:
            include_symbols = self.secret_symbols
        return PasswordGenerator.calculate_entropy(
            secret, PasswordGenerator.charset_for(include_symbols)
        )

    # ------------------------------------------------------------------
    #  Close / cleanup
    # ------------------------------------------------------------------
    def lock(self) -> None:
        self.session.lock()
        self.store = RecordStore()

    def close(self) -> None:
        try:
            self.lock()
        except Exception as exc:
            logger.error("Error closing vault: %s", exc)

    # ------------------------------------------------------------------
    #  Internals
    # ------------------------------------------------------------------
    def _require_unlocked(self) -> None:
        if not self.session.is_unlocked:
            raise SessionLocked()

    def _resolve(self, ref: RecordRef, view: Callable[[], List[int]]) -> int:
        """Map a view position or record id to an index in the full store."""
        self._require_unlocked()
        if isinstance(ref, bool):
            raise TypeError("Record reference must be an int position or a str id")
        if isinstance(ref, str):
            index = self.store.index_of(ref)
            if index not in view():
                raise RecordNotFound(f"Record {ref!r} is not in this view")
            return index
        if isinstance(ref, int):
            indices = view()
            if not 0 <= ref < len(indices):
                raise RecordNotFound(f"No record at position {ref}")
            return indices[ref]
        raise TypeError("Record reference must be an int position or a str id")

    def _commit(self, mutate: Callable[[RecordStore], Optional[object]]) -> None:
        """Apply *mutate* to a copy, save it, and only then adopt it."""
        self._require_unlocked()
        candidate = self.store.copy()
        mutate(candidate)
        self.session.save(candidate)
        self.store = candidate
