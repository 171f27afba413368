"""Vault envelope format and protocol constants."""

from __future__ import annotations

from dataclasses import dataclass

# ============================================================================
#  Protocol constants
# ============================================================================
SALT_SIZE = 16  # 128 bits
NONCE_SIZE = 12  # 96 bits (AES-GCM)
KEY_SIZE = 32  # 256 bits
TAG_SIZE = 16  # 128 bits

# -- envelope layout --------------------------------------------------------
#  salt(16) + nonce(12) + ciphertext(n) + tag(16)
HEADER_SIZE = SALT_SIZE + NONCE_SIZE  # 28
MIN_ENVELOPE_SIZE = HEADER_SIZE + TAG_SIZE  # 44


# ============================================================================
#  VaultEnvelope
# ============================================================================
@dataclass(frozen=True)
class VaultEnvelope:
    salt: bytes
    nonce: bytes
    ciphertext: bytes  # includes the trailing tag

    def __post_init__(self):
        if len(self.salt) != SALT_SIZE:
            raise ValueError(f"Salt must be {SALT_SIZE} bytes")
        if len(self.nonce) != NONCE_SIZE:
            raise ValueError(f"Nonce must be {NONCE_SIZE} bytes")
        if len(self.ciphertext) < TAG_SIZE:
            raise ValueError("Ciphertext shorter than the authentication tag")

    def to_bytes(self) -> bytes:
        return self.salt + self.nonce + self.ciphertext

    @classmethod
    def from_bytes(cls, data: bytes) -> VaultEnvelope:
        if len(data) < MIN_ENVELOPE_SIZE:
            raise ValueError("Data too short to be a vault")
        return cls(
            salt=bytes(data[:SALT_SIZE]),
            nonce=bytes(data[SALT_SIZE:HEADER_SIZE]),
            ciphertext=bytes(data[HEADER_SIZE:]),
        )

