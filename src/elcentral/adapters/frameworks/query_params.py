"""Query string handling for the /logs endpoint."""

import math
from typing import NamedTuple
from urllib.parse import parse_qs

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class LogsQuery(NamedTuple):
    """Filters accepted by /logs. Invalid input falls back to no filtering."""

    since: float = 0.0
    level: str | None = None


def parse_logs_query(query_string: bytes) -> LogsQuery:
    """Parse ``since`` and ``level`` from a raw ASGI query string.

    Undecodable bytes are replaced rather than rejected. ``since`` must be a
    finite, non-negative number; ``level`` is matched case-insensitively
    against the standard logging level names.
    """
    params = parse_qs(query_string.decode(errors="replace"))
    return LogsQuery(
        since=_since(params.get("since", [])),
        level=_level(params.get("level", [])),
    )


def _since(values: list[str]) -> float:
    if not values:
        return 0.0
    try:
        since = float(values[0])
    except ValueError:
        return 0.0
    return since if math.isfinite(since) and since >= 0 else 0.0


def _level(values: list[str]) -> str | None:
    level = values[0].upper() if values else None
    return level if level in LOG_LEVELS else None
