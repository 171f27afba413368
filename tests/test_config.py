"""Tests for Config, config.ini handling, and path helpers."""

from __future__ import annotations

import os
import platform

import pytest

from lockbox.config import Config, Settings
from lockbox.paths import ensure_data_dir, get_config_path, get_log_path, get_vault_path


class TestDefaults:
    def test_missing_file_gives_defaults(self, tmp_path):
        s = Config.load_settings(tmp_path)
        assert s.vault_path == tmp_path / "vault.bin"
        assert s.secret_length == Config.DEFAULT_SECRET_LENGTH
        assert s.secret_symbols is True
        assert s.log_level == "INFO"

    def test_kdf_params_are_a_copy(self):
        params = Config.get_kdf_params()
        params["time_cost"] = 1
        assert Config.KDF_PARAMS["time_cost"] == 3


class TestConfigFile:
    def test_write_then_load(self, tmp_path):
        custom = Settings(
            vault_path=tmp_path / "elsewhere.bin",
            secret_length=32,
            secret_symbols=False,
            log_level="DEBUG",
        )
        Config.write_defaults(tmp_path, custom)
        assert Config.config_exists(tmp_path)
        assert Config.load_settings(tmp_path) == custom

    @pytest.mark.skipif(platform.system() == "Windows", reason="Unix-only test")
    def test_written_file_is_private(self, tmp_path):
        Config.write_defaults(tmp_path)
        assert get_config_path(tmp_path).stat().st_mode & 0o777 == 0o600

    def test_relative_vault_path(self, tmp_path):
        get_config_path(tmp_path).write_text("[vault]\npath = sub/my.bin\n")
        assert Config.load_settings(tmp_path).vault_path == tmp_path / "sub" / "my.bin"

    def test_length_is_clamped(self, tmp_path):
        get_config_path(tmp_path).write_text("[generator]\nlength = 1000\n")
        assert Config.load_settings(tmp_path).secret_length == Config.MAX_SECRET_LENGTH
        get_config_path(tmp_path).write_text("[generator]\nlength = 2\n")
        assert Config.load_settings(tmp_path).secret_length == Config.MIN_SECRET_LENGTH

    def test_invalid_values_fall_back(self, tmp_path):
        get_config_path(tmp_path).write_text(
            "[generator]\nlength = lots\nsymbols = maybe\n[logging]\nlevel = LOUD\n"
        )
        s = Config.load_settings(tmp_path)
        assert s.secret_length == Config.DEFAULT_SECRET_LENGTH
        assert s.secret_symbols is Config.DEFAULT_SECRET_SYMBOLS
        assert s.log_level == Config.DEFAULT_LOG_LEVEL

    def test_unparseable_file_falls_back(self, tmp_path):
        get_config_path(tmp_path).write_text("no section header here\n")
        assert Config.load_settings(tmp_path) == Config.default_settings(tmp_path)


class TestPaths:
    def test_helpers(self, tmp_path):
        assert get_vault_path(tmp_path).name == "vault.bin"
        assert get_log_path(tmp_path).name == "lockbox.log"
        assert get_config_path(tmp_path).name == "config.ini"

    @pytest.mark.skipif(platform.system() == "Windows", reason="Unix-only test")
    def test_ensure_data_dir(self, tmp_path):
        d = ensure_data_dir(tmp_path / "a" / "b")
        assert d.is_dir()
        assert os.stat(d).st_mode & 0o777 == 0o700
