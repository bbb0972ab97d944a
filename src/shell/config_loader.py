"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, ViewportConfig, WaveConfig) are defined in
src/core/config.py to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import Config, ViewportConfig, WaveConfig, validate_config


logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when configuration has critical validation errors."""


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} placeholder from the environment.

    Non-string values and plain strings are returned unchanged. An unset
    variable leaves the placeholder in place (validation reports it).
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_viewport(data: dict[str, Any]) -> ViewportConfig:
    """Parse viewport settings from config data."""
    defaults = ViewportConfig()
    return ViewportConfig(
        width=float(data.get("width", defaults.width)),
        height=float(data.get("height", defaults.height)),
        padding=float(data.get("padding", defaults.padding)),
        min_zoom=float(data.get("min_zoom", defaults.min_zoom)),
        max_zoom=float(data.get("max_zoom", defaults.max_zoom)),
        single_point_zoom=float(data.get("single_point_zoom", defaults.single_point_zoom)),
        far_away_zoom=float(data.get("far_away_zoom", defaults.far_away_zoom)),
        transition_seconds=float(data.get("transition_seconds", defaults.transition_seconds)),
    )


def _parse_waves(data: dict[str, Any]) -> WaveConfig:
    """Parse wave constants from config data."""
    defaults = WaveConfig()
    return WaveConfig(
        p_velocity_km_s=float(data.get("p_velocity_km_s", defaults.p_velocity_km_s)),
        s_velocity_km_s=float(data.get("s_velocity_km_s", defaults.s_velocity_km_s)),
        km_per_degree=float(data.get("km_per_degree", defaults.km_per_degree)),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    feeds = data.get("feeds", {})
    timing = data.get("timing", {})

    return Config(
        report_feed_url=_resolve_value(feeds.get("report_url", defaults.report_feed_url)),
        eew_feed_url=_resolve_value(feeds.get("eew_url", defaults.eew_feed_url)),
        history_url=_resolve_value(feeds.get("history_url", defaults.history_url)),
        bootstrap_history=bool(feeds.get("bootstrap_history", defaults.bootstrap_history)),
        reconnect_delay_seconds=float(
            timing.get("reconnect_delay_seconds", defaults.reconnect_delay_seconds)
        ),
        inactivity_window_seconds=float(
            timing.get("inactivity_window_seconds", defaults.inactivity_window_seconds)
        ),
        final_hold_seconds=float(
            timing.get("final_hold_seconds", defaults.final_hold_seconds)
        ),
        staleness_check_interval_seconds=float(
            timing.get(
                "staleness_check_interval_seconds",
                defaults.staleness_check_interval_seconds,
            )
        ),
        frame_interval_seconds=float(
            timing.get("frame_interval_seconds", defaults.frame_interval_seconds)
        ),
        auto_zoom=bool(data.get("auto_zoom", defaults.auto_zoom)),
        viewport=_parse_viewport(data.get("viewport", {})),
        waves=_parse_waves(data.get("waves", {})),
    )


def check_config(config: Config) -> Config:
    """Validate configuration, logging warnings and raising on errors.

    Raises:
        ConfigError: If any critical errors are found
    """
    result = validate_config(config)

    for warning in result.warnings:
        logger.warning("Config warning in %s: %s", warning.field, warning.message)

    if not result.valid:
        details = "; ".join(f"{e.field}: {e.message}" for e in result.critical_errors)
        raise ConfigError(f"Invalid configuration: {details}")

    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        ConfigError: If the configuration is invalid
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return check_config(load_config_from_env())

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return check_config(load_config_from_env())

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: report feed %s, EEW feed %s, inactivity window %.0fs",
        config.report_feed_url,
        config.eew_feed_url,
        config.inactivity_window_seconds,
    )

    return check_config(config)


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        P2P_WS_URL: Finalized-report feed URL
        WOLFX_WS_URL: Early-warning feed URL
        P2P_HISTORY_URL: History API URL
        BOOTSTRAP_HISTORY: "0"/"false" to skip the startup history fetch
        RECONNECT_DELAY_SECONDS: Feed reconnect delay
        INACTIVITY_WINDOW_SECONDS: Early-warning inactivity window
        AUTO_ZOOM: "0"/"false" to disable automatic viewport fitting

    Returns:
        Config object from environment
    """
    defaults = Config()

    def _flag(name: str, default: bool) -> bool:
        value = os.environ.get(name)
        if value is None:
            return default
        return value.strip().lower() not in ("0", "false", "no", "off")

    return Config(
        report_feed_url=os.environ.get("P2P_WS_URL", defaults.report_feed_url),
        eew_feed_url=os.environ.get("WOLFX_WS_URL", defaults.eew_feed_url),
        history_url=os.environ.get("P2P_HISTORY_URL", defaults.history_url),
        bootstrap_history=_flag("BOOTSTRAP_HISTORY", defaults.bootstrap_history),
        reconnect_delay_seconds=float(
            os.environ.get("RECONNECT_DELAY_SECONDS", defaults.reconnect_delay_seconds)
        ),
        inactivity_window_seconds=float(
            os.environ.get("INACTIVITY_WINDOW_SECONDS", defaults.inactivity_window_seconds)
        ),
        auto_zoom=_flag("AUTO_ZOOM", defaults.auto_zoom),
    )
