"""Tests for bencore configuration loading."""

from __future__ import annotations

import json

import pytest
import toml

from bencore import Integer, decode
from bencore.config.config import (
    ConfigManager,
    get_config,
    init_config,
    reset_config,
    set_config,
)
from bencore.models import Config, DecoderConfig, DuplicateKeyPolicy, LogLevel
from bencore.utils.exceptions import ConfigurationError, DuplicateKeyError, TrailingDataError

pytestmark = [pytest.mark.unit, pytest.mark.config]


class TestDefaults:
    """Test default configuration values."""

    def test_decoder_defaults(self):
        config = DecoderConfig()

        assert config.strict is False
        assert config.max_depth == 128
        assert config.duplicate_keys is DuplicateKeyPolicy.LAST_WINS

    def test_observability_defaults(self):
        config = Config()

        assert config.observability.log_level is LogLevel.WARNING
        assert config.observability.log_file is None
        assert config.observability.structured_logging is False

    def test_no_file_found(self):
        manager = ConfigManager()

        assert manager.config_file is None
        assert manager.config == Config()

    def test_max_depth_bounds(self):
        with pytest.raises(ValueError):
            DecoderConfig(max_depth=0)
        with pytest.raises(ValueError):
            DecoderConfig(max_depth=257)


class TestFileLoading:
    """Test TOML loading."""

    def test_explicit_file(self, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            '[decoder]\nstrict = true\nduplicate_keys = "reject"\n'
            '[observability]\nlog_level = "debug"\n'
        )

        manager = ConfigManager(config_file)

        assert manager.config.decoder.strict is True
        assert manager.config.decoder.duplicate_keys is DuplicateKeyPolicy.REJECT
        assert manager.config.observability.log_level is LogLevel.DEBUG

    def test_discovered_in_cwd(self, tmp_path):
        (tmp_path / "bencore.toml").write_text("[decoder]\nmax_depth = 16\n")

        manager = ConfigManager()

        assert manager.config_file == tmp_path / "bencore.toml"
        assert manager.config.decoder.max_depth == 16

    def test_broken_toml_is_skipped(self, tmp_path):
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[decoder\nstrict = ")

        manager = ConfigManager(config_file)

        assert manager.config == Config()

    def test_invalid_values_raise(self, tmp_path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text('[decoder]\nduplicate_keys = "sometimes"\n')

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ConfigManager(config_file)


class TestEnvironment:
    """Test environment overrides."""

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "bencore.toml"
        config_file.write_text("[decoder]\nmax_depth = 16\nstrict = false\n")
        monkeypatch.setenv("BENCORE_MAX_DEPTH", "32")
        monkeypatch.setenv("BENCORE_STRICT", "yes")

        manager = ConfigManager(config_file)

        assert manager.config.decoder.max_depth == 32
        assert manager.config.decoder.strict is True

    def test_env_strings(self, monkeypatch):
        monkeypatch.setenv("BENCORE_DUPLICATE_KEYS", "reject")
        monkeypatch.setenv("BENCORE_LOG_LEVEL", "error")
        monkeypatch.setenv("BENCORE_LOG_FILE", "logs/1")

        config = ConfigManager().config

        assert config.decoder.duplicate_keys is DuplicateKeyPolicy.REJECT
        assert config.observability.log_level is LogLevel.ERROR
        assert config.observability.log_file == "logs/1"

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("BENCORE_MAX_DEPTH", "deep")

        with pytest.raises(ConfigurationError):
            ConfigManager()


class TestGlobalConfig:
    """Test the module-level configuration helpers."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_init_config_replaces_global(self, tmp_path):
        config_file = tmp_path / "c.toml"
        config_file.write_text("[decoder]\nstrict = true\n")

        init_config(config_file)

        assert get_config().decoder.strict is True

    def test_set_config_drives_decoder_defaults(self):
        set_config(
            Config(decoder=DecoderConfig(strict=True, duplicate_keys="reject"))
        )

        with pytest.raises(TrailingDataError):
            decode("i1ei2e")
        with pytest.raises(DuplicateKeyError):
            decode("d1:ai1e1:ai2ee")
        # Explicit arguments win over configuration
        assert decode("i1ei2e", strict=False) == Integer(1)

    def test_reset_config(self):
        set_config(Config(decoder=DecoderConfig(strict=True)))
        reset_config()

        assert get_config().decoder.strict is False


class TestExport:
    """Test configuration export."""

    def test_toml(self):
        exported = toml.loads(ConfigManager().export("toml"))

        assert exported["decoder"]["duplicate_keys"] == "last_wins"
        assert "log_file" not in exported["observability"]

    def test_json(self):
        exported = json.loads(ConfigManager().export("json"))

        assert exported["observability"]["log_level"] == "WARNING"

    def test_unknown_format(self):
        with pytest.raises(ConfigurationError):
            ConfigManager().export("yaml")
