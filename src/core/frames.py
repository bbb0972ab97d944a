"""Inbound frame decoding - Pure functions.

Each feed delivers loosely-typed JSON. Decoding happens once, here, into a
tagged variant: a SeismicReport from the report feed, an EEWAlert from the
early-warning feed, or None for anything unrecognized. Unknown tags fail
closed (dropped), they are never passed downstream.
"""

import json
from enum import Enum
from typing import Any

from src.core.eew import EEWAlert, parse_eew_alert
from src.core.report import SeismicReport, parse_report


class FeedKind(str, Enum):
    """The two independent push feeds."""
    REPORT = "report"
    EEW = "eew"


class FrameDecodeError(ValueError):
    """Raised when a frame is not a JSON object at all.

    The feed client treats this like a transport failure and reconnects,
    so a broken stream cannot spin on the same bad frame.
    """


Frame = SeismicReport | EEWAlert


def load_payload(raw: str | bytes) -> dict[str, Any]:
    """Decode raw socket text into a JSON object.

    Raises:
        FrameDecodeError: If the text is not valid JSON or not an object
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise FrameDecodeError(f"Invalid JSON frame: {e}") from e

    if not isinstance(payload, dict):
        raise FrameDecodeError(
            f"Expected JSON object, got {type(payload).__name__}"
        )
    return payload


def decode_payload(kind: FeedKind, payload: dict[str, Any]) -> Frame | None:
    """Decode an already-parsed payload for the given feed.

    Pure function.

    Returns:
        The normalized record, or None if the payload is not one this feed
        should forward (wrong code/type, heartbeat, training, invalid)
    """
    if kind is FeedKind.REPORT:
        return parse_report(payload)

    alert = parse_eew_alert(payload)
    if alert is None or alert.is_training:
        return None
    return alert


def decode_frame(kind: FeedKind, raw: str | bytes) -> Frame | None:
    """Decode one raw socket message for the given feed.

    Raises:
        FrameDecodeError: If the message cannot be parsed as a JSON object
    """
    return decode_payload(kind, load_payload(raw))
