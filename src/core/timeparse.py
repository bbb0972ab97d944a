"""Feed timestamp parsing - Pure functions.

Both feeds send Japan Standard Time wall-clock strings without an offset
("2024/01/01 16:10:09" or "2024/01/01 16:10:09.123"). Hand-built fixtures
sometimes use ISO 8601 with an explicit offset instead.
"""

from datetime import datetime, timedelta, timezone


JST = timezone(timedelta(hours=9), name="JST")

_FORMATS = (
    "%Y/%m/%d %H:%M:%S.%f",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
)


def parse_feed_time(value: object) -> datetime | None:
    """Parse a feed timestamp into an aware datetime.

    Pure function. Naive timestamps are interpreted as JST.

    Args:
        value: Raw timestamp from a feed payload

    Returns:
        Timezone-aware datetime, or None if the value can't be parsed
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()

    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=JST)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=JST)
    return parsed
