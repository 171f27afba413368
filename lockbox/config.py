"""Centralised configuration, KDF constants, and config.ini I/O."""

from __future__ import annotations

import configparser
import logging
import os
import string
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger("lockbox.config")


# ============================================================================
#  Character-set constants (secret generation)
# ============================================================================
ALPHANUMERIC = string.ascii_lowercase + string.ascii_uppercase + string.digits
SYMBOLS = "!@#$%^&*()-_=+[]{}|;:,.<>?"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================================
#  Settings (values read from config.ini)
# ============================================================================
@dataclass
class Settings:
    vault_path: Path
    secret_length: int
    secret_symbols: bool
    log_level: str


# ============================================================================
#  Config class
# ============================================================================
class Config:
    """Centralised settings."""

    # Argon2id work factor. Not recorded in the envelope, so these must stay
    # fixed for the lifetime of every vault written with them.
    KDF_PARAMS = {
        "time_cost": 3,
        "memory_cost": 65_536,  # 64 MiB
        "parallelism": 4,
    }

    # Storage
    VAULT_FILENAME = "vault.bin"
    CONFIG_FILENAME = "config.ini"
    LOG_FILENAME = "lockbox.log"
    MAX_VAULT_SIZE = 10 * 1024 * 1024  # 10 MB

    # Secret generation
    DEFAULT_SECRET_LENGTH = 16
    MIN_SECRET_LENGTH = 8
    MAX_SECRET_LENGTH = 64
    DEFAULT_SECRET_SYMBOLS = True

    DEFAULT_LOG_LEVEL = "INFO"

    # ------------------------------------------------------------------
    #  KDF helpers
    # ------------------------------------------------------------------
    @staticmethod
    def get_kdf_params() -> dict:
        return dict(Config.KDF_PARAMS)

    # ------------------------------------------------------------------
    #  config.ini
    # ------------------------------------------------------------------
    @staticmethod
    def config_exists(data_dir: Path) -> bool:
        return (data_dir / Config.CONFIG_FILENAME).exists()

    @staticmethod
    def default_settings(data_dir: Path) -> Settings:
        return Settings(
            vault_path=data_dir / Config.VAULT_FILENAME,
            secret_length=Config.DEFAULT_SECRET_LENGTH,
            secret_symbols=Config.DEFAULT_SECRET_SYMBOLS,
            log_level=Config.DEFAULT_LOG_LEVEL,
        )

    @staticmethod
    def load_settings(data_dir: Path) -> Settings:
        """Read config.ini, falling back to defaults for anything missing or invalid."""
        settings = Config.default_settings(data_dir)
        config_path = data_dir / Config.CONFIG_FILENAME
        if not config_path.exists():
            return settings

        cfg = configparser.ConfigParser()
        try:
            cfg.read(config_path, encoding="utf-8")
        except configparser.Error as exc:
            logger.warning("Unreadable %s, using defaults: %s", config_path.name, exc)
            return settings

        raw_path = cfg.get("vault", "path", fallback="").strip()
        if raw_path:
            path = Path(raw_path).expanduser()
            settings.vault_path = path if path.is_absolute() else data_dir / path

        try:
            length = cfg.getint("generator", "length", fallback=settings.secret_length)
            settings.secret_length = min(
                max(length, Config.MIN_SECRET_LENGTH), Config.MAX_SECRET_LENGTH
            )
        except ValueError:
            logger.warning("Invalid generator.length in config, using default")

        try:
            settings.secret_symbols = cfg.getboolean(
                "generator", "symbols", fallback=settings.secret_symbols
            )
        except ValueError:
            logger.warning("Invalid generator.symbols in config, using default")

        level = cfg.get("logging", "level", fallback=settings.log_level).strip().upper()
        if level in _LOG_LEVELS:
            settings.log_level = level
        else:
            logger.warning("Invalid logging.level %r in config, using default", level)

        return settings

    @staticmethod
    def write_defaults(data_dir: Path, settings: Optional[Settings] = None) -> None:
        if settings is None:
            settings = Config.default_settings(data_dir)
        _write_config(data_dir, settings)
        logger.info("Default configuration written")


# ============================================================================
#  Atomic config writer
# ============================================================================
def _write_config(data_dir: Path, settings: Settings) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    if os.name != "nt":
        try:
            os.chmod(data_dir, 0o700)
        except OSError:
            pass

    config_path = data_dir / Config.CONFIG_FILENAME
    cfg = configparser.ConfigParser()
    cfg["vault"] = {"path": str(settings.vault_path)}
    cfg["generator"] = {
        "length": str(settings.secret_length),
        "symbols": "yes" if settings.secret_symbols else "no",
    }
    cfg["logging"] = {"level": settings.log_level}

    fd = tempfile.NamedTemporaryFile(
        mode="w", dir=data_dir, prefix="cfg_tmp_", suffix=".ini", delete=False
    )
    try:
        cfg.write(fd)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        tmp = Path(fd.name)
        if os.name != "nt":
            os.chmod(tmp, 0o600)
        tmp.replace(config_path)
    except BaseException:
        fd.close()
        try:
            Path(fd.name).unlink(missing_ok=True)
        except OSError:
            pass
        raise
