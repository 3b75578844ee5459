"""Prometheus text exposition (format version 0.0.4) rendering."""

from __future__ import annotations

import math
from typing import Iterable

from observability_stack.metrics.registry import LabelSet, MetricSample, MetricsRegistry

CONTENT_TYPE = "text/plain; version=0.0.4"


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_value(value: int | float) -> str:
    """Integers render bare, floats via ``repr`` with Prometheus spellings for specials."""

    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(float(value))


def format_labels(labels: LabelSet) -> str:
    if not labels:
        return ""
    pairs = ",".join(f'{key}="{_escape_label_value(value)}"' for key, value in labels)
    return "{" + pairs + "}"


def render_samples(samples: Iterable[MetricSample]) -> str:
    lines: list[str] = []
    for sample in samples:
        lines.append(f"# HELP {sample.name} {_escape_help(sample.help)}")
        lines.append(f"# TYPE {sample.name} {sample.kind}")
        lines.append(f"{sample.name}{format_labels(sample.labels)} {format_value(sample.value)}")
    return "\n".join(lines) + ("\n" if lines else "")


def render(registry: MetricsRegistry) -> str:
    """Serialize every instrument in ``registry``; an empty registry yields ``""``."""

    return render_samples(registry.collect())
