"""Shared test fixtures."""

from __future__ import annotations

import logging

import pytest

from lockbox.crypto.engine import CryptoEngine
from lockbox.storage.backend import StorageBackend
from lockbox.util.memory import SecureMemory
from lockbox.vault.manager import VaultManager
from lockbox.vault.models import Record

# Cheap Argon2id profile so the suite stays fast
FAST_KDF = {"time_cost": 1, "memory_cost": 8_192, "parallelism": 1}
GOOD_PASSWORD = "correct-horse"


@pytest.fixture
def sample_password():
    return GOOD_PASSWORD


@pytest.fixture
def engine():
    return CryptoEngine(FAST_KDF)


@pytest.fixture
def vault_path(tmp_path):
    return tmp_path / "vdata" / "vault.bin"


@pytest.fixture
def storage(vault_path):
    return StorageBackend(vault_path)


@pytest.fixture
def manager(storage, engine):
    """An unlocked VaultManager on a freshly created vault."""
    vm = VaultManager(storage, engine)
    vm.create_new(SecureMemory(GOOD_PASSWORD))
    yield vm
    vm.close()


@pytest.fixture
def sample_records():
    return [
        Record(service="github", login="a", password="x", group="work"),
        Record(service="bank", login="me", password="p1", group="personal"),
        Record(service="aws", login="ops", password="p2", group="work"),
        Record(service="mail", login="me", password="p3"),
    ]


@pytest.fixture(autouse=True)
def _restore_lockbox_logger():
    """setup_secure_logging detaches the lockbox logger; put it back."""
    lg = logging.getLogger("lockbox")
    handlers, level, propagate = list(lg.handlers), lg.level, lg.propagate
    yield
    for h in lg.handlers:
        if h not in handlers:
            lg.removeHandler(h)
            h.close()
    lg.setLevel(level)
    lg.propagate = propagate
