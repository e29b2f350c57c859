"""In-memory metrics registry holding the current value of every series."""

import dataclasses
import threading
import time
from collections.abc import Mapping

from elcentral.core.models import MetricSample

LabelKey = tuple[tuple[str, str], ...]


def label_key(labels: Mapping[str, str]) -> LabelKey:
    """Canonical, order-independent key for a label set."""
    return tuple(sorted(labels.items()))


class InMemoryMetricsRegistry:
    """In-memory implementation of MetricsRegistryPort.

    Keeps one value per (name, labels) series; a write overwrites the
    previous value instead of accumulating. A single lock guards the series
    map, so snapshots taken from the scrape server never see a series in
    the middle of an update made by the reader thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._series: dict[tuple[str, LabelKey], MetricSample] = {}

    def set(self, name: str, labels: Mapping[str, str], value: float) -> None:
        """Overwrite the value of one series, creating it on first write."""
        sample = MetricSample(
            name=name,
            value=float(value),
            labels=dict(labels),
            timestamp=time.time(),
        )
        with self._lock:
            self._series[(name, label_key(labels))] = sample

    def get(self, name: str, labels: Mapping[str, str]) -> float | None:
        """Return the current value of a series, or None if never written."""
        with self._lock:
            sample = self._series.get((name, label_key(labels)))
        return None if sample is None else sample.value

    def snapshot(self) -> list[MetricSample]:
        """Return the current value of every series, ordered by name and labels.

        Each sample carries its own copy of the labels.
        """
        with self._lock:
            items = list(self._series.items())
        return [
            dataclasses.replace(sample, labels=dict(sample.labels))
            for _, sample in sorted(items, key=lambda item: item[0])
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._series)
