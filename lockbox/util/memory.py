"""Key material in memory: SecureMemory, KeyObfuscator, TimedExposure, wipe."""

from __future__ import annotations

import ctypes
import logging
import platform
import secrets
from typing import Optional, Union

logger = logging.getLogger("lockbox.memory")


def wipe(buf: bytearray) -> None:
    """Overwrite a mutable buffer in place with zeros."""
    for i in range(len(buf)):
        buf[i] = 0


# ---------------------------------------------------------------------------
#  SecureMemory
# ---------------------------------------------------------------------------
class SecureMemory:
    """A bytearray pinned in RAM where the OS allows it, zeroed on clear."""

    def __init__(self, data: Union[bytes, bytearray, str]):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytearray(data)
        self._locked = False
        self._lock_pages()

    def _address(self) -> ctypes.c_void_p:
        return ctypes.c_void_p(ctypes.addressof(ctypes.c_char.from_buffer(self._data)))

    def _lock_pages(self) -> None:
        if not self._data:
            return
        try:
            size = ctypes.c_size_t(len(self._data))
            if platform.system() == "Windows":
                kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
                self._locked = bool(kernel32.VirtualLock(self._address(), size))
            else:
                libc = ctypes.CDLL(None)
                self._locked = libc.mlock(self._address(), size) == 0
        except Exception as exc:
            logger.debug("Memory locking unavailable: %s", exc)

    def _unlock_pages(self) -> None:
        try:
            size = ctypes.c_size_t(len(self._data))
            if platform.system() == "Windows":
                kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
                kernel32.VirtualUnlock(self._address(), size)
            else:
                libc = ctypes.CDLL(None)
                libc.munlock(self._address(), size)
        except Exception as exc:
            logger.debug("Memory unlocking failed: %s", exc)

    # -- public API ---------------------------------------------------------
    def get_bytes(self) -> bytes:
        if not self._data:
            raise ValueError("Memory already cleared")
        return bytes(self._data)

    def clear(self) -> None:
        if not self._data:
            return
        try:
            self._data[:] = secrets.token_bytes(len(self._data))
            wipe(self._data)
            if self._locked:
                self._unlock_pages()
        finally:
            self._data = bytearray()
            self._locked = False

    @property
    def is_protected(self) -> bool:
        return self._locked

    def __len__(self) -> int:
        return len(self._data)

    def __del__(self):
        self.clear()


# ---------------------------------------------------------------------------
#  KeyObfuscator
# ---------------------------------------------------------------------------
class KeyObfuscator:
    """Holds a key XOR-masked with a random pad while it is not in use."""

    def __init__(self, key: Union[bytes, bytearray]):
        if not key:
            raise ValueError("Empty key")
        pad = secrets.token_bytes(len(key))
        self._pad: Optional[SecureMemory] = SecureMemory(pad)
        self._masked: Optional[SecureMemory] = SecureMemory(
            bytes(a ^ b for a, b in zip(key, pad))
        )

    @property
    def cleared(self) -> bool:
        return self._masked is None

    def reveal(self) -> SecureMemory:
        """Return a fresh SecureMemory holding the plain key; caller clears it."""
        if self._masked is None or self._pad is None:
            raise ValueError("Key already cleared")
        masked = self._masked.get_bytes()
        pad = self._pad.get_bytes()
        return SecureMemory(bytes(a ^ b for a, b in zip(masked, pad)))

    def clear(self) -> None:
        if self._masked is not None:
            self._masked.clear()
            self._masked = None
        if self._pad is not None:
            self._pad.clear()
            self._pad = None


# ---------------------------------------------------------------------------
#  TimedExposure
# ---------------------------------------------------------------------------
class TimedExposure:
    """Context manager that unmasks a key for the duration of one block."""

    def __init__(self, ko: KeyObfuscator):
        self.ko = ko
        self._plain: Optional[SecureMemory] = None

    def __enter__(self) -> SecureMemory:
        self._plain = self.ko.reveal()
        return self._plain

    def __exit__(self, exc_type, exc, tb):
        if self._plain is not None:
            self._plain.clear()
            self._plain = None
