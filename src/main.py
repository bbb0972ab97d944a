"""Headless Entry Point.

Runs the monitor without a drawing client: frames go to the log surface
and cues to the log. It's a thin wrapper that loads configuration and
runs the orchestrator until interrupted.
"""

import argparse
import asyncio
import logging
import os
import sys

from src.core.config import Config
from src.orchestrator import Orchestrator
from src.shell.config_loader import ConfigError, load_config
from src.shell.surfaces import LogCueSink, LogSurface


logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from an explicit level or LOG_LEVEL."""
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run(config: Config, simulate: bool = False) -> None:
    """Run the monitor until cancelled.

    Args:
        config: Application configuration
        simulate: Play the demo earthquake right after startup
    """
    orchestrator = Orchestrator(
        config,
        surface=LogSurface(),
        cue_sink=LogCueSink(),
    )

    await orchestrator.start()
    if simulate:
        orchestrator.start_simulation()

    try:
        await asyncio.Event().wait()
    finally:
        await orchestrator.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monitor live Japanese earthquake reports and early warnings",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config (default: $CONFIG_PATH or config/config.yaml)",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Skip fetching the latest report at startup",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Play the demo earthquake after startup",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: $LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("%s", e)
        return 2

    if args.no_history:
        config.bootstrap_history = False

    logger.info("Starting quake monitor")

    try:
        asyncio.run(run(config, simulate=args.simulate))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")

    return 0


if __name__ == "__main__":
    sys.exit(main())
