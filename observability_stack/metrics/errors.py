"""Exceptions raised by the metrics registry."""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for metric registration failures."""


class InvalidMetricName(MetricsError, ValueError):
    """Raised when a metric name does not match the exposition name grammar."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid metric name '{name}'")
        self.name = name


class InvalidLabelName(MetricsError, ValueError):
    """Raised when a label name is malformed or reserved."""

    def __init__(self, metric: str, label: str) -> None:
        super().__init__(f"Invalid label name '{label}' for metric '{metric}'")
        self.metric = metric
        self.label = label


class DuplicateMetric(MetricsError, KeyError):
    """Raised when a metric name is registered a second time."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Metric '{name}' is already registered")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])
