"""Platform directory resolution."""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path

import platformdirs

from lockbox.config import Config

logger = logging.getLogger("lockbox.paths")

_APP_NAME = "Lockbox"
_APP_AUTHOR = "Lockbox"


def get_data_dir() -> Path:
    """Return the platform-appropriate data directory (XDG on Linux)."""
    return Path(platformdirs.user_data_dir(_APP_NAME, _APP_AUTHOR))


def ensure_data_dir(data_dir: Path) -> Path:
    """Create *data_dir* if needed and restrict it to the owning user."""
    data_dir.mkdir(parents=True, exist_ok=True)
    if platform.system() != "Windows":
        try:
            os.chmod(data_dir, 0o700)
        except OSError as exc:
            logger.warning("Could not restrict %s: %s", data_dir, exc)
    return data_dir


# -- path helpers -----------------------------------------------------------
def get_vault_path(data_dir: Path) -> Path:
    return data_dir / Config.VAULT_FILENAME


def get_log_path(data_dir: Path) -> Path:
    return data_dir / Config.LOG_FILENAME


def get_config_path(data_dir: Path) -> Path:
    return data_dir / Config.CONFIG_FILENAME
