"""JMA seismic intensity scale - Pure functions.

The feeds encode intensity as integer codes (10 = "1" ... 70 = "7") for
finalized reports and as free text ("5弱", "6+") for early warnings.
"""

from enum import IntEnum


class Intensity(IntEnum):
    """JMA seismic intensity, ordered by severity."""
    UNKNOWN = -1
    SCALE_1 = 10
    SCALE_2 = 20
    SCALE_3 = 30
    SCALE_4 = 40
    SCALE_5_LOWER = 45
    SCALE_5_UPPER = 50
    SCALE_6_LOWER = 55
    SCALE_6_UPPER = 60
    SCALE_7 = 70


_LABELS: dict[Intensity, str] = {
    Intensity.SCALE_1: "1",
    Intensity.SCALE_2: "2",
    Intensity.SCALE_3: "3",
    Intensity.SCALE_4: "4",
    Intensity.SCALE_5_LOWER: "5-",
    Intensity.SCALE_5_UPPER: "5+",
    Intensity.SCALE_6_LOWER: "6-",
    Intensity.SCALE_6_UPPER: "6+",
    Intensity.SCALE_7: "7",
}

_JA_LABELS: dict[Intensity, str] = {
    Intensity.SCALE_1: "1",
    Intensity.SCALE_2: "2",
    Intensity.SCALE_3: "3",
    Intensity.SCALE_4: "4",
    Intensity.SCALE_5_LOWER: "5弱",
    Intensity.SCALE_5_UPPER: "5強",
    Intensity.SCALE_6_LOWER: "6弱",
    Intensity.SCALE_6_UPPER: "6強",
    Intensity.SCALE_7: "7",
}


def intensity_from_code(value: object) -> Intensity:
    """Convert a raw feed code to an Intensity.

    Pure function. Anything unrecognized maps to UNKNOWN.
    """
    try:
        return Intensity(int(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return Intensity.UNKNOWN


def intensity_label(code: Intensity | int) -> str:
    """Get the short label for an intensity ("5-", "7"), "?" if unknown."""
    return _LABELS.get(intensity_from_code(code), "?")


def format_intensity_ja(code: Intensity | int) -> str:
    """Get the Japanese display label for an intensity ("5弱"), "不明" if unknown."""
    return _JA_LABELS.get(intensity_from_code(code), "不明")


def normalize_intensity_text(text: str | None) -> str | None:
    """Normalize early-warning intensity text to label form.

    Pure function.

    Examples:
        "5弱" -> "5-", "6強" -> "6+", "4" -> "4", "" -> None
    """
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    return text.replace("弱", "-").replace("強", "+")
