"""Conversion of the meter's compact date-time encoding."""

from datetime import datetime, timedelta, timezone

COMPACT_LENGTH = 12


def _field(compact: str, offset: int) -> int:
    chunk = compact[offset : offset + 2]
    if len(chunk) != 2 or not (chunk.isascii() and chunk.isdigit()):
        return 0
    return int(chunk)


def strip_season_marker(value: str) -> str:
    """Remove a trailing season marker ('W' winter, 'S' summer) if present."""
    if value and not value[-1].isdigit():
        return value[:-1]
    return value


def normalize(compact: str) -> int:
    """Convert a YYMMDDhhmmss string to Unix seconds.

    The two-digit year is read as 2000 + YY and the result is in UTC with no
    daylight saving or meter timezone adjustment. Missing or non-numeric
    fields count as zero, and out of range values roll over into the
    neighbouring unit (month 0 is December of the previous year, day 0 is
    the last day of the previous month), so a best-effort instant is always
    returned.

    Args:
        compact: Timestamp with the season marker already stripped.

    Returns:
        Unix timestamp in seconds.
    """
    year, month, day, hour, minute, second = (
        _field(compact, offset) for offset in range(0, COMPACT_LENGTH, 2)
    )
    year = 2000 + year + (month - 1) // 12
    month = (month - 1) % 12 + 1
    instant = datetime(year, month, 1, tzinfo=timezone.utc) + timedelta(
        days=day - 1, hours=hour, minutes=minute, seconds=second
    )
    return int(instant.timestamp())
