"""Tests for PasswordGenerator."""

from __future__ import annotations

import string
from collections import Counter

import pytest

from lockbox.config import ALPHANUMERIC, SYMBOLS
from lockbox.crypto.engine import PasswordGenerator


class TestGenerateSecret:
    def test_correct_length(self):
        assert len(PasswordGenerator.generate_secret(20, True)) == 20

    def test_alphanumeric_only(self):
        pw = PasswordGenerator.generate_secret(200, include_symbols=False)
        assert all(c in ALPHANUMERIC for c in pw)

    def test_symbols_drawn_when_enabled(self):
        pw = PasswordGenerator.generate_secret(2000, include_symbols=True)
        assert all(c in ALPHANUMERIC + SYMBOLS for c in pw)
        assert any(c in SYMBOLS for c in pw)

    def test_zero_length_raises(self):
        with pytest.raises(ValueError, match="at least 1"):
            PasswordGenerator.generate_secret(0, True)

    def test_uses_secrets_module(self, monkeypatch):
        calls = []

        def _choice(seq):
            calls.append(seq)
            return seq[0]

        monkeypatch.setattr("lockbox.crypto.engine.secrets.choice", _choice)
        PasswordGenerator.generate_secret(5, False)
        assert len(calls) == 5

    def test_roughly_uniform(self):
        pw = PasswordGenerator.generate_secret(62 * 200, include_symbols=False)
        counts = Counter(pw)
        assert set(counts) == set(ALPHANUMERIC)
        # Expected 200 per symbol; a generous band keeps this non-flaky.
        assert min(counts.values()) > 100
        assert max(counts.values()) < 320

    def test_successive_secrets_differ(self):
        assert PasswordGenerator.generate_secret(32, True) != PasswordGenerator.generate_secret(
            32, True
        )


class TestGenerate:
    def test_only_charset_chars(self):
        pw = PasswordGenerator.generate(50, string.digits)
        assert all(c in string.digits for c in pw)

    def test_empty_charset_raises(self):
        with pytest.raises(ValueError, match="Empty charset"):
            PasswordGenerator.generate(10, "")

    def test_repeated_chars_in_charset_do_not_bias(self):
        pw = PasswordGenerator.generate(100, "aaaaab")
        assert set(pw) <= {"a", "b"}


class TestEntropy:
    def test_positive_entropy(self):
        assert PasswordGenerator.calculate_entropy("abc", string.ascii_lowercase) > 0

    def test_longer_is_more_entropy(self):
        e1 = PasswordGenerator.calculate_entropy("abc", string.ascii_lowercase)
        e2 = PasswordGenerator.calculate_entropy("abcdef", string.ascii_lowercase)
        assert e2 > e1

    def test_empty_returns_zero(self):
        assert PasswordGenerator.calculate_entropy("", string.ascii_letters) == 0.0
