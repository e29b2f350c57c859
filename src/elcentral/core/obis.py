"""Static mapping from OBIS code prefixes to exported metrics."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from elcentral.core.models import MeasurementKind


@dataclass(frozen=True)
class ObisEntry:
    """One row of the OBIS code table.

    Attributes:
        code_prefix: Prefix a data line must start with, including '('.
        metric_name: Unprefixed metric name.
        labels: Fixed label values for this code, stored read-only.
        kind: Extraction rule for the payload.
    """

    code_prefix: str
    metric_name: str
    labels: Mapping[str, str] = field(default_factory=dict, hash=False)
    kind: MeasurementKind = MeasurementKind.NUMERIC

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))


class ObisTable:
    """Read-only lookup of data lines by exact code prefix.

    Prefixes must be mutually disjoint (no prefix starts with another), so a
    line resolves to at most one entry whatever the entry order.

    Args:
        entries: Table rows.

    Raises:
        ValueError: If two prefixes overlap.
    """

    def __init__(self, entries: Iterable[ObisEntry]) -> None:
        self._entries: tuple[ObisEntry, ...] = tuple(entries)
        for entry in self._entries:
            for other in self._entries:
                if other is not entry and other.code_prefix.startswith(
                    entry.code_prefix
                ):
                    raise ValueError(
                        f"OBIS prefix {entry.code_prefix!r} overlaps "
                        f"{other.code_prefix!r}"
                    )

    def lookup(self, line: str) -> ObisEntry | None:
        """Return the entry whose prefix the line starts with, if any."""
        for entry in self._entries:
            if line.startswith(entry.code_prefix):
                return entry
        return None

    def metric_names(self) -> list[str]:
        """Distinct metric names in table order."""
        return list(dict.fromkeys(entry.metric_name for entry in self._entries))

    def __iter__(self) -> Iterator[ObisEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


METER_LABELS = MappingProxyType({"device": "meter"})

METRIC_HELP = {
    "active_energy_kwh": "Cumulative active energy in kWh",
    "reactive_energy_kvarh": "Cumulative reactive energy in kvarh",
    "active_power_kw": "Current active power in kW",
    "reactive_power_kvar": "Current reactive power in kvar",
    "instantaneous_active_power_kw": "Instantaneous active power in kW",
    "instantaneous_reactive_power_kvar": "Instantaneous reactive power in kvar",
    "voltage_v": "Phase voltage in volts",
    "current_a": "Phase current in amperes",
    "meter_id": "Meter identification string (numeric representation)",
    "timestamp": "Meter timestamp as Unix epoch",
}


def _numeric(prefix: str, metric: str, **labels: str) -> ObisEntry:
    return ObisEntry(prefix, metric, labels, MeasurementKind.NUMERIC)


DEFAULT_TABLE = ObisTable(
    [
        # Metadata
        ObisEntry("0-0:96.1.0(", "meter_id", METER_LABELS, MeasurementKind.IDENTITY),
        ObisEntry("0-0:1.0.0(", "timestamp", METER_LABELS, MeasurementKind.TIMESTAMP),
        # Energy registers
        _numeric("1-0:1.8.0(", "active_energy_kwh", direction="import", tariff="T1"),
        _numeric("1-0:2.8.0(", "active_energy_kwh", direction="export", tariff="T1"),
        _numeric(
            "1-0:3.8.0(", "reactive_energy_kvarh", direction="import", tariff="T1"
        ),
        _numeric(
            "1-0:4.8.0(", "reactive_energy_kvarh", direction="export", tariff="T1"
        ),
        # Total power
        _numeric("1-0:1.7.0(", "active_power_kw", direction="import"),
        _numeric("1-0:2.7.0(", "active_power_kw", direction="export"),
        _numeric("1-0:3.7.0(", "reactive_power_kvar", direction="import"),
        _numeric("1-0:4.7.0(", "reactive_power_kvar", direction="export"),
        # Power per phase
        _numeric("1-0:21.7.0(", "instantaneous_active_power_kw", phase="L1"),
        _numeric("1-0:22.7.0(", "instantaneous_active_power_kw", phase="L1_export"),
        _numeric("1-0:41.7.0(", "instantaneous_active_power_kw", phase="L2"),
        _numeric("1-0:42.7.0(", "instantaneous_active_power_kw", phase="L2_export"),
        _numeric("1-0:61.7.0(", "instantaneous_active_power_kw", phase="L3"),
        _numeric("1-0:62.7.0(", "instantaneous_active_power_kw", phase="L3_export"),
        _numeric("1-0:23.7.0(", "instantaneous_reactive_power_kvar", phase="L1"),
        _numeric(
            "1-0:24.7.0(", "instantaneous_reactive_power_kvar", phase="L1_export"
        ),
        _numeric("1-0:43.7.0(", "instantaneous_reactive_power_kvar", phase="L2"),
        _numeric(
            "1-0:44.7.0(", "instantaneous_reactive_power_kvar", phase="L2_export"
        ),
        _numeric("1-0:63.7.0(", "instantaneous_reactive_power_kvar", phase="L3"),
        _numeric(
            "1-0:64.7.0(", "instantaneous_reactive_power_kvar", phase="L3_export"
        ),
        # Voltage and current per phase
        _numeric("1-0:32.7.0(", "voltage_v", phase="L1"),
        _numeric("1-0:52.7.0(", "voltage_v", phase="L2"),
        _numeric("1-0:72.7.0(", "voltage_v", phase="L3"),
        _numeric("1-0:31.7.0(", "current_a", phase="L1"),
        _numeric("1-0:51.7.0(", "current_a", phase="L2"),
        # Third current reading is exported under phase L3 as the meter labels it
        _numeric("1-0:71.7.0(", "current_a", phase="L3"),
    ]
)
