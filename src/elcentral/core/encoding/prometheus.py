"""Prometheus text exposition encoder for registry snapshots."""

import math
from collections.abc import Iterable, Mapping

from elcentral.core.models import MetricSample

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(float(value))


def _format_labels(labels: Mapping[str, str]) -> str:
    if not labels:
        return ""
    pairs = ",".join(
        f'{key}="{_escape_label_value(value)}"' for key, value in labels.items()
    )
    return "{" + pairs + "}"


def encode_metrics(
    samples: Iterable[MetricSample],
    prefix: str = "",
    help_texts: Mapping[str, str] | None = None,
) -> str:
    """Encode metric samples to the Prometheus text format.

    Every sample is exported as a gauge. Samples of the same metric are
    grouped under a single HELP/TYPE header, in order of first appearance.

    Args:
        samples: An iterable of MetricSample objects.
        prefix: Namespace prepended to every metric name (e.g., "elcentral_").
        help_texts: HELP line text per unprefixed metric name.

    Returns:
        Prometheus exposition text ending with a newline.
        Empty string if no samples.
    """
    help_texts = help_texts or {}
    families: dict[str, list[MetricSample]] = {}
    for sample in samples:
        families.setdefault(sample.name, []).append(sample)

    lines: list[str] = []
    for name, family in families.items():
        exported = f"{prefix}{name}"
        if name in help_texts:
            lines.append(f"# HELP {exported} {_escape_help(help_texts[name])}")
        lines.append(f"# TYPE {exported} gauge")
        for sample in family:
            lines.append(
                f"{exported}{_format_labels(sample.labels)} "
                f"{_format_value(sample.value)}"
            )

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
