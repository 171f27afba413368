"""CryptoEngine (Argon2id KDF, AES-256-GCM AEAD) and PasswordGenerator."""

from __future__ import annotations

import logging
import math
import secrets
from typing import Tuple

import argon2
import argon2.low_level
import psutil
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from lockbox.config import ALPHANUMERIC, SYMBOLS, Config
from lockbox.crypto.formats import KEY_SIZE, NONCE_SIZE, SALT_SIZE
from lockbox.errors import AuthenticationFailed
from lockbox.util.memory import SecureMemory, wipe

logger = logging.getLogger("lockbox.crypto")


# ============================================================================
#  CryptoEngine
# ============================================================================
class CryptoEngine:
    """Argon2id KDF + AES-256-GCM AEAD."""

    def __init__(self, kdf_params: dict | None = None):
        if kdf_params is None:
            kdf_params = Config.get_kdf_params()

        self.time_cost = kdf_params["time_cost"]
        self.memory_cost = kdf_params["memory_cost"]
        self.parallelism = kdf_params["parallelism"]

        logger.info(
            "CryptoEngine: Argon2id(t=%d, m=%d KiB, p=%d)",
            self.time_cost,
            self.memory_cost,
            self.parallelism,
        )

    # ------------------------------------------------------------------
    def check_resources(self) -> None:
        """Fail early when free RAM cannot hold the KDF memory cost."""
        required = self.memory_cost * 1024
        available = psutil.virtual_memory().available
        if available < required:
            raise RuntimeError(
                f"Not enough RAM for KDF ({self.memory_cost // 1024} MiB required, "
                f"{available // (1024 * 1024)} MiB available)"
            )

    def derive_key(self, password: SecureMemory, salt: bytes) -> bytes:
        if len(password) == 0:
            raise ValueError("Empty password")
        if len(salt) != SALT_SIZE:
            raise ValueError(f"Salt must be {SALT_SIZE} bytes")

        self.check_resources()
        secret = bytearray(password.get_bytes())
        try:
            return argon2.low_level.hash_secret_raw(
                bytes(secret),
                salt,
                time_cost=self.time_cost,
                memory_cost=self.memory_cost,
                parallelism=self.parallelism,
                hash_len=KEY_SIZE,
                type=argon2.Type.ID,
            )
        except MemoryError:
            raise RuntimeError(
                f"Not enough RAM for KDF ({self.memory_cost // 1024} MiB required)"
            )
        finally:
            wipe(secret)

    # ------------------------------------------------------------------
    def encrypt_data(
        self, key: bytes, plaintext: bytes, associated_data: bytes | None = None
    ) -> Tuple[bytes, bytes]:
        cipher = AESGCM(key)
        nonce = secrets.token_bytes(NONCE_SIZE)
        ciphertext = cipher.encrypt(nonce, plaintext, associated_data)
        return nonce, ciphertext

    def decrypt_data(
        self,
        key: bytes,
        nonce: bytes,
        ciphertext: bytes,
        associated_data: bytes | None = None,
    ) -> bytes:
        # Key, nonce and tag failures all surface as AuthenticationFailed.
        try:
            cipher = AESGCM(key)
            return cipher.decrypt(nonce, ciphertext, associated_data)
        except (InvalidTag, ValueError, TypeError, OverflowError):
            raise AuthenticationFailed() from None


# ============================================================================
#  PasswordGenerator
# ============================================================================
class PasswordGenerator:
    """Uniform random secrets from the OS CSPRNG."""

    @staticmethod
    def charset_for(include_symbols: bool) -> str:
        return ALPHANUMERIC + SYMBOLS if include_symbols else ALPHANUMERIC

    @staticmethod
    def generate(length: int, charset: str) -> str:
        if length < 1:
            raise ValueError("Length must be at least 1")
        if not charset:
            raise ValueError("Empty charset")

        charset = "".join(sorted(set(charset)))
        return "".join(secrets.choice(charset) for _ in range(length))

    @staticmethod
    def generate_secret(length: int, include_symbols: bool) -> str:
        return PasswordGenerator.generate(
            length, PasswordGenerator.charset_for(include_symbols)
        )

    @staticmethod
    def calculate_entropy(password: str, charset: str) -> float:
        if not password or not charset:
            return 0.0
        return len(password) * math.log2(len(set(charset)))
