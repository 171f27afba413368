"""StorageBackend: atomic writes and owner-only permissions for the vault file."""

from __future__ import annotations

import logging
import os
import platform
import tempfile
import time
from pathlib import Path

from lockbox.config import Config
from lockbox.errors import VaultIOError, VaultNotFound

logger = logging.getLogger("lockbox.storage")

_TMP_PREFIX = "lb_tmp_"
_STALE_TMP_AGE = 3600  # seconds


class StorageBackend:
    """Vault file I/O with atomic replace."""

    def __init__(self, vault_path: Path):
        self.vault_path = Path(vault_path)

        self.vault_path.parent.mkdir(parents=True, exist_ok=True)
        if platform.system() != "Windows":
            try:
                os.chmod(self.vault_path.parent, 0o700)
            except OSError:
                pass

    # -- read / write -------------------------------------------------------
    def read(self) -> bytes:
        try:
            st = self.vault_path.stat()
        except FileNotFoundError:
            raise VaultNotFound(f"Vault not found: {self.vault_path}") from None
        except OSError as exc:
            raise VaultIOError(f"Cannot access vault: {exc}") from exc

        if st.st_size > Config.MAX_VAULT_SIZE:
            raise VaultIOError(
                f"Vault too large: {st.st_size} bytes (max {Config.MAX_VAULT_SIZE})"
            )

        # Fix open permissions
        if platform.system() != "Windows" and st.st_mode & 0o077:
            logger.warning("Vault permissions too open, fixing...")
            self._secure_permissions(self.vault_path)

        try:
            return self.vault_path.read_bytes()
        except FileNotFoundError:
            raise VaultNotFound(f"Vault not found: {self.vault_path}") from None
        except OSError as exc:
            raise VaultIOError(f"Cannot read vault: {exc}") from exc

    def write_atomic(self, data: bytes) -> None:
        temp_path = None
        old_umask = None
        try:
            # 1. Write to temp file with restricted permissions via umask
            if os.name != "nt":
                old_umask = os.umask(0o077)
            try:
                with tempfile.NamedTemporaryFile(
                    mode="wb",
                    dir=self.vault_path.parent,
                    prefix=_TMP_PREFIX,
                    suffix=".dat",
                    delete=False,
                ) as tmp:
                    temp_path = Path(tmp.name)
                    tmp.write(data)
                    tmp.flush()
                    os.fsync(tmp.fileno())
            finally:
                if old_umask is not None:
                    os.umask(old_umask)

            # 2. Secure permissions on temp file
            self._secure_permissions(temp_path)

            # 3. Atomic rename
            os.replace(temp_path, self.vault_path)
            temp_path = None
            self._fsync_directory()
        except OSError as exc:
            raise VaultIOError(f"Cannot write vault: {exc}") from exc
        finally:
            if temp_path is not None:
                try:
                    temp_path.unlink(missing_ok=True)
                except OSError:
                    pass

        # 4. Cleanup orphaned temps
        self._cleanup_temp_files()
        logger.info("Vault saved (%d bytes)", len(data))

    def exists(self) -> bool:
        return self.vault_path.exists()

    # -- helpers ------------------------------------------------------------
    def _secure_permissions(self, path: Path) -> None:
        if platform.system() == "Windows":
            return
        try:
            os.chmod(path, 0o600)
        except OSError as exc:
            logger.warning("Error setting permissions on %s: %s", path, exc)

    def _fsync_directory(self) -> None:
        if os.name == "nt":
            return
        try:
            fd = os.open(self.vault_path.parent, os.O_RDONLY)
        except OSError:
            return
        try:
            os.fsync(fd)
        except OSError as exc:
            logger.debug("Directory fsync unsupported: %s", exc)
        finally:
            os.close(fd)

    def _cleanup_temp_files(self) -> None:
        now = time.time()
        for tmp in self.vault_path.parent.glob(f"{_TMP_PREFIX}*"):
            try:
                if now - tmp.stat().st_mtime > _STALE_TMP_AGE:
                    tmp.unlink()
                    logger.debug("Removed stale temp file %s", tmp.name)
            except OSError:
                pass
