"""Secure logging setup: no secrets in logs, rotation, OS-appropriate dir."""

from __future__ import annotations

import logging
import logging.handlers
import os
import platform
from pathlib import Path

from lockbox.config import Config
from lockbox.util.memory import KeyObfuscator, SecureMemory
from lockbox.vault.models import Record


def _mask(arg):
    if isinstance(arg, Record):
        return f"<record {arg.record_id}>"
    if isinstance(arg, (SecureMemory, KeyObfuscator)):
        return "<secret>"
    if isinstance(arg, (bytes, bytearray, memoryview)):
        return f"<{len(arg)} bytes>"
    if isinstance(arg, str) and len(arg) > 50:
        return f"<{len(arg)} chars>"
    return arg


class SecureFormatter(logging.Formatter):
    """Replaces record, key and payload arguments before they are rendered."""

    def format(self, record):
        if isinstance(record.args, tuple):
            record.args = tuple(_mask(arg) for arg in record.args)
        elif isinstance(record.args, dict):
            record.args = {k: _mask(v) for k, v in record.args.items()}
        return super().format(record)


def setup_secure_logging(log_dir: Path, level: str = Config.DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Configure the *lockbox* logger with rotation and safe formatting."""
    log_dir.mkdir(parents=True, exist_ok=True)
    if platform.system() != "Windows":
        try:
            os.chmod(log_dir, 0o700)
        except OSError:
            pass

    log_file = log_dir / Config.LOG_FILENAME

    formatter = SecureFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    root_logger = logging.getLogger("lockbox")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # avoid duplicate handlers on repeated calls
    if not root_logger.handlers:
        handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.propagate = False

    try:
        if platform.system() != "Windows" and log_file.exists():
            os.chmod(log_file, 0o600)
    except OSError:
        pass

    return root_logger
