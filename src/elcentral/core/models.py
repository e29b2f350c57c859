"""Core domain models for meter telegrams and exported metrics."""

from dataclasses import dataclass, field
from enum import Enum


class MeasurementKind(Enum):
    """How the payload of a data record is interpreted."""

    NUMERIC = "numeric"
    IDENTITY = "identity"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class DataRecord:
    """One OBIS-coded data line of a telegram.

    Attributes:
        code: OBIS identifier (e.g., 1-0:1.8.0).
        raw_payload: Text inside the first parenthesized group, without unit.
        raw_unit: Unit suffix after the '*' separator, if any.
    """

    code: str
    raw_payload: str
    raw_unit: str | None = None


@dataclass(frozen=True)
class Measurement:
    """A decoded data record ready to be applied to the registry.

    Exactly one of numeric_value and text_value is set: text_value for
    IDENTITY measurements, numeric_value for the other kinds.

    Attributes:
        metric_name: Unprefixed metric name (e.g., active_energy_kwh).
        labels: Key-value pairs for metric dimensions.
        kind: Which extraction rule produced this measurement.
        numeric_value: Decoded number (NUMERIC and TIMESTAMP).
        text_value: Decoded text (IDENTITY).

    Raises:
        ValueError: If the populated field does not match the kind.
    """

    metric_name: str
    labels: dict[str, str]
    kind: MeasurementKind
    numeric_value: float | None = None
    text_value: str | None = None

    def __post_init__(self) -> None:
        wants_text = self.kind is MeasurementKind.IDENTITY
        if wants_text != (self.text_value is not None) or wants_text == (
            self.numeric_value is not None
        ):
            field_name = "text_value" if wants_text else "numeric_value"
            raise ValueError(
                f"{self.kind.name} measurement must set only {field_name}"
            )


@dataclass(frozen=True)
class MetricSample:
    """Current value of one metric series.

    Attributes:
        name: Metric name (e.g., voltage_v).
        value: The last value written to the series.
        labels: Key-value pairs for metric dimensions.
        timestamp: Unix timestamp of the last write, in seconds.
    """

    name: str
    value: float
    labels: dict[str, str] = field(default_factory=dict)
    timestamp: float = 0.0


@dataclass(frozen=True)
class LogEntry:
    """A structured log entry.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Log level (e.g., INFO, ERROR, DEBUG).
        message: The log message.
        attributes: Additional structured fields.
    """

    timestamp: float
    level: str
    message: str
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)
