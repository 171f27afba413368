"""Lockbox vault modules."""

from lockbox.vault.manager import VaultManager
from lockbox.vault.models import Record
from lockbox.vault.session import SessionState, VaultSession
from lockbox.vault.store import RecordStore

__all__ = ["VaultManager", "Record", "RecordStore", "SessionState", "VaultSession"]
