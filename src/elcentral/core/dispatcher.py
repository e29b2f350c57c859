"""Telegram dispatcher: applies decoded data lines to the metrics registry.

Each line is handled independently. Structural lines ('/' telegram start,
'!' telegram end) and data lines with an unknown code are logged and
counted but never touch the registry, and no line can raise out of
dispatch().
"""

import logging
from collections import Counter
from enum import Enum

from elcentral.core.errors import MalformedRecordError
from elcentral.core.extract import extract_numeric, parse_record
from elcentral.core.models import DataRecord, Measurement, MeasurementKind
from elcentral.core.obis import DEFAULT_TABLE, ObisEntry, ObisTable
from elcentral.core.ports import MetricsRegistryPort
from elcentral.core.timestamps import normalize, strip_season_marker

logger = logging.getLogger(__name__)

TELEGRAM_START = "/"
TELEGRAM_END = "!"

_UINT64_MASK = (1 << 64) - 1


class LineOutcome(Enum):
    """What dispatch() did with a line."""

    EMPTY = "empty"
    STRUCTURAL = "structural"
    MEASURED = "measured"
    UNRECOGNIZED = "unrecognized"
    MALFORMED = "malformed"


def meter_id_hash(value: str) -> int:
    """Map a meter identifier to a stable integer surrogate.

    Computes hash * 31 + codepoint over the string, wrapped to a signed
    64-bit integer, so the identifier can live in a numeric gauge.
    """
    result = 0
    for char in value:
        result = (result * 31 + ord(char)) & _UINT64_MASK
    if result >= 1 << 63:
        result -= 1 << 64
    return result


def gauge_value(measurement: Measurement) -> float:
    """Value written to the gauge; identities are stored as their hash."""
    if measurement.text_value is not None:
        return float(meter_id_hash(measurement.text_value))
    assert measurement.numeric_value is not None
    return measurement.numeric_value


class TelegramDispatcher:
    """Decodes telegram lines and writes the results to a registry.

    Args:
        registry: Gauge store that receives every measurement.
        table: OBIS code table used to resolve data lines.
        strict: Skip lines with malformed numeric payloads instead of
                writing 0.0 for them.
    """

    def __init__(
        self,
        registry: MetricsRegistryPort,
        table: ObisTable = DEFAULT_TABLE,
        strict: bool = False,
    ) -> None:
        self._registry = registry
        self._table = table
        self._strict = strict
        # Diagnostics only, never exported through the registry
        self.stats: Counter[LineOutcome] = Counter()

    def dispatch(self, line: str) -> LineOutcome:
        """Process a single telegram line.

        Args:
            line: Raw line, with or without trailing CR/LF.

        Returns:
            The outcome for this line.
        """
        outcome = self._dispatch(line.strip())
        self.stats[outcome] += 1
        return outcome

    def feed(self, text: str) -> list[LineOutcome]:
        """Dispatch every line of a multi-line chunk in order."""
        return [self.dispatch(line) for line in text.splitlines()]

    def _dispatch(self, line: str) -> LineOutcome:
        if not line:
            return LineOutcome.EMPTY

        if line.startswith(TELEGRAM_START):
            logger.debug("Telegram start: %s", line)
            return LineOutcome.STRUCTURAL
        if line.startswith(TELEGRAM_END):
            logger.debug("Telegram end: %s", line)
            return LineOutcome.STRUCTURAL

        entry = self._table.lookup(line)
        if entry is None:
            logger.warning("Unhandled OBIS code in line: %s", line)
            return LineOutcome.UNRECOGNIZED

        record = parse_record(line)
        if record is None:
            logger.warning("Malformed data line for %s: %s", entry.metric_name, line)
            return LineOutcome.MALFORMED

        try:
            measurement = self.decode(entry, record)
        except MalformedRecordError:
            logger.warning("Malformed payload for %s: %s", entry.metric_name, line)
            return LineOutcome.MALFORMED

        value = gauge_value(measurement)
        logger.debug(
            "Setting %s%s: %s %s",
            measurement.metric_name,
            measurement.labels,
            value,
            record.raw_unit or "",
        )
        self._registry.set(measurement.metric_name, measurement.labels, value)
        return LineOutcome.MEASURED

    def decode(self, entry: ObisEntry, record: DataRecord) -> Measurement:
        """Apply the entry's extraction rule to the payload of a record.

        Raises:
            MalformedRecordError: In strict mode, for a non-numeric payload.
        """
        labels = dict(entry.labels)
        if entry.kind is MeasurementKind.IDENTITY:
            return Measurement(
                metric_name=entry.metric_name,
                labels=labels,
                kind=entry.kind,
                text_value=record.raw_payload,
            )
        if entry.kind is MeasurementKind.TIMESTAMP:
            value = float(normalize(strip_season_marker(record.raw_payload)))
        else:
            value = extract_numeric(record.raw_payload, strict=self._strict)
        return Measurement(
            metric_name=entry.metric_name,
            labels=labels,
            kind=entry.kind,
            numeric_value=value,
        )
