"""Tests for the Configuration Loader module.

Tests configuration loading from YAML files and environment variables.
"""

import os
from unittest.mock import patch

import pytest

from src.core.config import P2P_WS_URL, WOLFX_WS_URL, Config
from src.shell.config_loader import (
    ConfigError,
    _resolve_value,
    check_config,
    load_config,
    load_config_from_dict,
    load_config_from_env,
)


class TestResolveValue:
    """Tests for _resolve_value function."""

    def test_returns_non_string_unchanged(self):
        """Non-string values are returned unchanged."""
        assert _resolve_value(123) == 123
        assert _resolve_value(None) is None
        assert _resolve_value(True) is True

    def test_returns_plain_string_unchanged(self):
        assert _resolve_value("wss://example.com") == "wss://example.com"

    def test_resolves_env_var_placeholder(self):
        """Resolves ${VAR} placeholders from environment."""
        with patch.dict(os.environ, {"TEST_FEED": "wss://feed.example"}):
            assert _resolve_value("${TEST_FEED}") == "wss://feed.example"

    def test_returns_placeholder_if_env_var_not_set(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _resolve_value("${UNDEFINED_VAR}") == "${UNDEFINED_VAR}"


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict()."""

    def test_empty_dict_gives_defaults(self):
        assert load_config_from_dict({}) == Config()

    def test_sections(self):
        config = load_config_from_dict({
            "feeds": {"eew_url": "ws://localhost:9000", "bootstrap_history": False},
            "timing": {"inactivity_window_seconds": 30, "final_hold_seconds": 90},
            "auto_zoom": False,
            "viewport": {"width": 800, "padding": 0.2},
            "waves": {"s_velocity_km_s": 4.0},
        })

        assert config.eew_feed_url == "ws://localhost:9000"
        assert config.report_feed_url == P2P_WS_URL
        assert not config.bootstrap_history
        assert config.inactivity_window_seconds == 30
        assert config.final_hold_seconds == 90
        assert not config.auto_zoom
        assert config.viewport.width == 800
        assert config.viewport.padding == 0.2
        assert config.viewport.height == 800
        assert config.waves.s_velocity_km_s == 4.0
        assert config.waves.p_velocity_km_s == 6.5

    def test_placeholders_resolved(self):
        with patch.dict(os.environ, {"EEW_URL": "wss://mirror.example/eew"}):
            config = load_config_from_dict({"feeds": {"eew_url": "${EEW_URL}"}})

        assert config.eew_feed_url == "wss://mirror.example/eew"


class TestLoadConfig:
    """Tests for load_config() file handling."""

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "feeds:\n"
            "  report_url: ws://localhost:8001\n"
            "timing:\n"
            "  reconnect_delay_seconds: 2\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.report_feed_url == "ws://localhost:8001"
        assert config.reconnect_delay_seconds == 2

    def test_missing_file_uses_defaults(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(tmp_path / "missing.yaml")
        assert config == Config()

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            assert load_config(path) == Config()

    def test_uses_config_path_env(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("auto_zoom: false\n", encoding="utf-8")

        with patch.dict(os.environ, {"CONFIG_PATH": str(path)}):
            assert not load_config().auto_zoom

    def test_invalid_config_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("timing:\n  inactivity_window_seconds: -1\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="inactivity_window_seconds"):
            load_config(path)

    def test_unresolved_placeholder_raises(self, tmp_path):
        path = tmp_path / "env.yaml"
        path.write_text("feeds:\n  eew_url: ${NOT_SET_ANYWHERE}\n", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigError, match="eew_feed_url"):
                load_config(path)

    def test_bundled_config_is_valid(self):
        config = load_config("config/config.yaml")

        assert config.eew_feed_url == WOLFX_WS_URL
        assert config.viewport.padding == 0.35


class TestCheckConfig:
    def test_warnings_do_not_raise(self, caplog):
        config = Config(staleness_check_interval_seconds=30)

        assert check_config(config) is config
        assert "staleness_check_interval_seconds" in caplog.text


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env()."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert load_config_from_env() == Config()

    def test_overrides(self):
        env = {
            "P2P_WS_URL": "ws://localhost:1",
            "WOLFX_WS_URL": "ws://localhost:2",
            "INACTIVITY_WINDOW_SECONDS": "45",
            "RECONNECT_DELAY_SECONDS": "1.5",
            "BOOTSTRAP_HISTORY": "false",
            "AUTO_ZOOM": "0",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()

        assert config.report_feed_url == "ws://localhost:1"
        assert config.eew_feed_url == "ws://localhost:2"
        assert config.inactivity_window_seconds == 45
        assert config.reconnect_delay_seconds == 1.5
        assert not config.bootstrap_history
        assert not config.auto_zoom
