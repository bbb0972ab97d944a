"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- WebSocket feed clients (report and early-warning feeds)
- P2P Quake history client (HTTP)
- Rendering surfaces and cue sinks
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.config_loader import ConfigError, load_config, load_config_from_env
from src.shell.feed_client import FeedClient
from src.shell.history_client import P2PHistoryClient
from src.shell.surfaces import FrameBroadcaster, LogCueSink, LogSurface

__all__ = [
    "ConfigError",
    "FeedClient",
    "FrameBroadcaster",
    "LogCueSink",
    "LogSurface",
    "P2PHistoryClient",
    "load_config",
    "load_config_from_env",
]
