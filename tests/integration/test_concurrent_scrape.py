"""Concurrency tests: the reader thread writes while scrapes read."""

import threading

import pytest

from elcentral.adapters.storage.in_memory import InMemoryMetricsRegistry
from elcentral.core.dispatcher import TelegramDispatcher
from elcentral.core.encoding.prometheus import encode_metrics

pytestmark = [pytest.mark.storage, pytest.mark.integration]

ITERATIONS = 2000


def test_snapshots_never_see_partial_updates(
    registry: InMemoryMetricsRegistry,
) -> None:
    """Every value seen by a scrape is one that was actually written."""
    dispatcher = TelegramDispatcher(registry)
    written = {float(i) for i in range(ITERATIONS)}
    seen: set[float] = set()
    done = threading.Event()

    def writer() -> None:
        for i in range(ITERATIONS):
            dispatcher.dispatch(f"1-0:32.7.0({i}*V)")
            dispatcher.dispatch(f"1-0:52.7.0({i}*V)")
        done.set()

    thread = threading.Thread(target=writer)
    thread.start()
    while not done.is_set():
        for sample in registry.snapshot():
            seen.add(sample.value)
        encode_metrics(registry.snapshot(), prefix="elcentral_")
    thread.join()

    assert seen <= written
    assert registry.get("voltage_v", {"phase": "L1"}) == float(ITERATIONS - 1)
    assert registry.get("voltage_v", {"phase": "L2"}) == float(ITERATIONS - 1)


def test_parallel_writers_keep_one_series_per_label_set(
    registry: InMemoryMetricsRegistry,
) -> None:
    """Concurrent writes to the same series never duplicate it."""

    def writer(offset: int) -> None:
        for i in range(500):
            registry.set("current_a", {"phase": "L1"}, float(offset + i))
            registry.set("current_a", {"phase": "L2"}, float(offset + i))

    threads = [threading.Thread(target=writer, args=(n * 1000,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 2
    assert [s.labels for s in registry.snapshot()] == [
        {"phase": "L1"},
        {"phase": "L2"},
    ]
