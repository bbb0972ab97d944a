#!/usr/bin/env python3
"""Replay captured feed frames through the decoder and state machine.

Reads a JSON-lines capture where each line is one received frame:

    {"t": 0.0, "feed": "eew", "data": {"Type": "jma_eew", ...}}
    {"t": 6.2, "feed": "eew", "data": {...}}
    {"t": 30.0, "feed": "report", "data": {"code": 551, ...}}

"t" is seconds since the start of the capture. Frames are applied on a
virtual clock, with staleness checked every second in between, so a
capture replays instantly and deterministically.

Usage:
    python scripts/replay_frames.py capture.jsonl
    python scripts/replay_frames.py capture.jsonl --window 20 --final-hold 60
"""

import argparse
import json
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.eew import (
    DEFAULT_FINAL_HOLD_SECONDS,
    DEFAULT_INACTIVITY_WINDOW_SECONDS,
    IDLE_STATE,
    EEWAlert,
    EEWState,
    apply_alert,
    check_staleness,
)
from src.core.formatter import format_eew_summary, format_report_summary
from src.core.frames import FeedKind, decode_payload
from src.core.report import SeismicReport

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def _advance(
    state: EEWState,
    start: float,
    end: float,
    window: float,
    final_hold: float,
) -> tuple[EEWState, float]:
    """Run once-a-second staleness checks from start up to end."""
    tick = start
    while state.is_active and tick + 1 <= end:
        tick += 1
        expired = check_staleness(state, tick, window, final_hold)
        if expired is not state:
            print(f"[{tick:7.1f}s] expired   {state.event_id}")
            state = expired
    return state, tick


def replay(path: str, window: float, final_hold: float) -> int:
    """Replay a capture file.

    Returns:
        Number of frames that decoded to a record
    """
    state = IDLE_STATE
    clock = 0.0
    decoded = 0

    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue

            try:
                entry = json.loads(line)
                kind = FeedKind(entry["feed"])
                t = float(entry["t"])
                payload = entry["data"]
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Line %d: skipped (%s)", line_number, e)
                continue

            if not isinstance(payload, dict):
                logger.warning("Line %d: data is not a JSON object", line_number)
                continue

            state, clock = _advance(state, clock, t, window, final_hold)
            clock = max(clock, t)

            record = decode_payload(kind, payload)
            if record is None:
                print(f"[{t:7.1f}s] dropped   {kind.value} frame")
                continue
            decoded += 1

            if isinstance(record, SeismicReport):
                print(f"[{t:7.1f}s] report    {format_report_summary(record)}")
            elif isinstance(record, EEWAlert):
                previous = state
                state = apply_alert(state, record, t)
                marker = "->" if state.phase != previous.phase else "  "
                print(
                    f"[{t:7.1f}s] eew {previous.phase.value:>11} {marker} "
                    f"{state.phase.value:<11} {format_eew_summary(state)}"
                )

    # Let any remaining alert run out
    _advance(state, clock, clock + max(window, final_hold) + 1, window, final_hold)
    return decoded


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay captured feed frames")
    parser.add_argument("capture", help="JSON-lines capture file")
    parser.add_argument(
        "--window",
        type=float,
        default=DEFAULT_INACTIVITY_WINDOW_SECONDS,
        help="Inactivity window in seconds",
    )
    parser.add_argument(
        "--final-hold",
        type=float,
        default=DEFAULT_FINAL_HOLD_SECONDS,
        help="How long a final alert is kept, in seconds",
    )
    args = parser.parse_args()

    try:
        decoded = replay(args.capture, args.window, args.final_hold)
    except OSError as e:
        logger.error("Cannot read capture: %s", e)
        return 1

    print(f"\n{decoded} frames decoded")
    return 0


if __name__ == "__main__":
    sys.exit(main())
