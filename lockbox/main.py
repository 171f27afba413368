"""Wiring for the presentation layer: data dir, config, logging, vault manager."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger("lockbox")


def build_manager(data_dir: Optional[Path] = None, kdf_params: Optional[dict] = None):
    """Return a locked VaultManager for the configured vault file.

    The caller decides between ``create_new`` and ``open`` by checking
    ``manager.storage.exists()``.
    """
    # 1. Check dependencies
    from lockbox import check_dependencies

    check_dependencies()

    # 2. Resolve data directory
    from lockbox.paths import ensure_data_dir, get_data_dir

    if data_dir is None:
        data_dir = get_data_dir()
    ensure_data_dir(data_dir)

    # 3. Settings (written with defaults on first run)
    from lockbox.config import Config

    if not Config.config_exists(data_dir):
        Config.write_defaults(data_dir)
    settings = Config.load_settings(data_dir)

    # 4. Logging
    from lockbox.logging_setup import setup_secure_logging

    setup_secure_logging(data_dir, settings.log_level)

    # 5. Backend
    from lockbox.crypto.engine import CryptoEngine
    from lockbox.storage.backend import StorageBackend
    from lockbox.vault.manager import VaultManager

    storage = StorageBackend(settings.vault_path)
    crypto = CryptoEngine(kdf_params)
    logger.info("Vault file: %s (exists=%s)", settings.vault_path.name, storage.exists())
    return VaultManager(storage, crypto, settings)
