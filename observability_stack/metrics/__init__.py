"""Metrics package: registry, text exposition, and scrape route."""

from observability_stack.metrics.errors import DuplicateMetric, InvalidLabelName, InvalidMetricName, MetricsError
from observability_stack.metrics.exposition import CONTENT_TYPE, render
from observability_stack.metrics.registry import Counter, Gauge, MetricSample, MetricsRegistry
from observability_stack.metrics.routes import build_router

__all__ = [
    "CONTENT_TYPE",
    "Counter",
    "DuplicateMetric",
    "Gauge",
    "InvalidLabelName",
    "InvalidMetricName",
    "MetricSample",
    "MetricsError",
    "MetricsRegistry",
    "build_router",
    "render",
]
