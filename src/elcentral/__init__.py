"""elcentral - Prometheus exporter for energy meter telegrams.

Reads the P1 telegram stream of a utility meter from a serial port, decodes
the OBIS-coded data lines and serves the readings as gauges on /metrics.
"""

from elcentral.adapters.storage import InMemoryMetricsRegistry, RingBufferLogStorage
from elcentral.core.dispatcher import LineOutcome, TelegramDispatcher
from elcentral.core.errors import ElcentralError, MalformedRecordError, StreamFault
from elcentral.core.extract import extract_numeric, extract_text, parse_record
from elcentral.core.models import DataRecord, Measurement, MeasurementKind, MetricSample
from elcentral.core.obis import DEFAULT_TABLE, ObisEntry, ObisTable
from elcentral.core.timestamps import normalize

__version__ = "0.0.1"

__all__ = [
    "DEFAULT_TABLE",
    "DataRecord",
    "ElcentralError",
    "InMemoryMetricsRegistry",
    "LineOutcome",
    "MalformedRecordError",
    "Measurement",
    "MeasurementKind",
    "MetricSample",
    "ObisEntry",
    "ObisTable",
    "RingBufferLogStorage",
    "StreamFault",
    "TelegramDispatcher",
    "extract_numeric",
    "extract_text",
    "normalize",
    "parse_record",
]
