"""NDJSON encoder for captured log entries served on /logs."""

import json
from collections.abc import Iterable

from elcentral.core.models import LogEntry

CONTENT_TYPE = "application/x-ndjson"


def encode_logs(entries: Iterable[LogEntry]) -> str:
    """Encode log entries as one JSON object per line.

    Attribute values that JSON cannot represent are written as their
    ``str()`` so a single odd entry cannot fail the whole response.

    Returns:
        The NDJSON body, newline-terminated, or an empty string.
    """
    return "".join(_encode_entry(entry) + "\n" for entry in entries)


def _encode_entry(entry: LogEntry) -> str:
    return json.dumps(
        {
            "timestamp": entry.timestamp,
            "level": entry.level,
            "message": entry.message,
            "attributes": entry.attributes,
        },
        default=str,
    )
