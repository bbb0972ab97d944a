"""Quake Monitor Entry Point - Root Module.

This is the root-level entry point for running the headless monitor.
It imports from the src package.
"""

import sys

from src.main import main, run

__all__ = [
    "main",
    "run",
]


if __name__ == "__main__":
    sys.exit(main())
