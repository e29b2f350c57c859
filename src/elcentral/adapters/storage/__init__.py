"""Storage adapters implementing core ports."""

from elcentral.adapters.storage.in_memory import InMemoryMetricsRegistry
from elcentral.adapters.storage.ring_buffer import RingBufferLogStorage

__all__ = [
    "InMemoryMetricsRegistry",
    "RingBufferLogStorage",
]
