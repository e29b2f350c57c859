"""Port interfaces for the pipeline's collaborators.

These protocols define the contracts that adapters must implement.
The core depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from elcentral.core.models import LogEntry, MetricSample


@runtime_checkable
class MetricsRegistryPort(Protocol):
    """Port for the current-state gauge store.

    Implementations must accept writes from the reader thread while
    snapshots are taken from the scrape server.
    Examples: InMemoryMetricsRegistry.
    """

    def set(self, name: str, labels: Mapping[str, str], value: float) -> None:
        """Overwrite the value of one series, creating it on first write."""
        ...

    def get(self, name: str, labels: Mapping[str, str]) -> float | None:
        """Return the current value of a series, or None if never written."""
        ...

    def snapshot(self) -> list[MetricSample]:
        """Return the current value of every series.

        Returns:
            MetricSample objects ordered by name, then labels.
        """
        ...


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for log storage operations.

    Adapters implementing this protocol can store and retrieve log entries.
    Examples: RingBufferLogStorage.
    """

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        ...

    def read(self, since: float = 0, level: str | None = None) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Args:
            since: Unix timestamp. Returns entries with timestamp > since.
                   Default 0 returns all entries.
            level: Only return entries with this level, if given.

        Returns:
            Iterable of LogEntry objects, ordered by timestamp ascending.
        """
        ...


@runtime_checkable
class LineSource(Protocol):
    """Port for the line-delimited byte source (a serial port or a file)."""

    def readline(self) -> bytes | str:
        """Block until a full line is available and return it.

        An empty result means the stream has ended.
        """
        ...
