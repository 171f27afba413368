"""Tests for the vault envelope layout."""

from __future__ import annotations

import secrets

import pytest

from lockbox.crypto.formats import (
    HEADER_SIZE,
    MIN_ENVELOPE_SIZE,
    NONCE_SIZE,
    SALT_SIZE,
    TAG_SIZE,
    VaultEnvelope,
)


def _make(ct_len: int = 40) -> VaultEnvelope:
    return VaultEnvelope(
        salt=secrets.token_bytes(SALT_SIZE),
        nonce=secrets.token_bytes(NONCE_SIZE),
        ciphertext=secrets.token_bytes(ct_len),
    )


class TestVaultEnvelope:
    def test_layout(self):
        env = _make()
        raw = env.to_bytes()
        assert raw[:SALT_SIZE] == env.salt
        assert raw[SALT_SIZE:HEADER_SIZE] == env.nonce
        assert raw[HEADER_SIZE:] == env.ciphertext
        assert len(raw) == SALT_SIZE + NONCE_SIZE + 40

    def test_parse(self):
        env = _make()
        assert VaultEnvelope.from_bytes(env.to_bytes()) == env

    def test_minimum_size_accepted(self):
        raw = b"\x01" * MIN_ENVELOPE_SIZE
        env = VaultEnvelope.from_bytes(raw)
        assert len(env.ciphertext) == TAG_SIZE

    @pytest.mark.parametrize("size", [0, 15, SALT_SIZE, HEADER_SIZE, MIN_ENVELOPE_SIZE - 1])
    def test_too_short_raises(self, size):
        with pytest.raises(ValueError, match="too short"):
            VaultEnvelope.from_bytes(b"\x00" * size)

    def test_bad_salt_length_rejected(self):
        with pytest.raises(ValueError, match="Salt"):
            VaultEnvelope(salt=b"\x00" * 8, nonce=b"\x00" * NONCE_SIZE, ciphertext=b"\x00" * 16)

    def test_bad_nonce_length_rejected(self):
        with pytest.raises(ValueError, match="Nonce"):
            VaultEnvelope(salt=b"\x00" * SALT_SIZE, nonce=b"\x00" * 8, ciphertext=b"\x00" * 16)
