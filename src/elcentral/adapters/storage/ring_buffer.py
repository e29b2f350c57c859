"""Ring buffer storage for captured log entries.

Provides bounded in-memory storage that automatically evicts oldest
entries when the buffer is full, so a long-running exporter keeps a
predictable memory footprint.
"""

import threading
from collections import deque
from collections.abc import Iterable

from elcentral.core.models import LogEntry


class RingBufferLogStorage:
    """Ring buffer implementation of LogStoragePort.

    Stores log entries in a fixed-size circular buffer. When the buffer
    is full, the oldest entry is automatically evicted to make room for
    new entries. Writes come from the reader thread and reads from the
    scrape server, so both are serialized by a lock.

    Args:
        max_size: Maximum number of entries to store.
    """

    def __init__(self, max_size: int) -> None:
        self._lock = threading.Lock()
        self._buffer: deque[LogEntry] = deque(maxlen=max_size)

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        with self._lock:
            self._buffer.append(entry)

    def read(self, since: float = 0, level: str | None = None) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Returns entries with timestamp > since, ordered by timestamp ascending,
        optionally restricted to one level.
        """
        with self._lock:
            entries = list(self._buffer)
        filtered = [
            e
            for e in entries
            if e.timestamp > since and (level is None or e.level == level)
        ]
        return sorted(filtered, key=lambda e: e.timestamp)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
