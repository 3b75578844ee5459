"""Thread-safe in-memory registry of named counters and gauges."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Mapping

from observability_stack.lib.logger import get_logger
from observability_stack.metrics.errors import DuplicateMetric, InvalidLabelName, InvalidMetricName

_METRIC_NAME_RE = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_:]*")
_LABEL_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

MetricKind = Literal["counter", "gauge"]
LabelSet = tuple[tuple[str, str], ...]

logger = get_logger(__name__)


@dataclass(frozen=True)
class MetricSample:
    """Point-in-time reading of a single registered instrument."""

    name: str
    help: str
    kind: MetricKind
    labels: LabelSet
    value: int | float


def validate_metric_name(name: str) -> str:
    if not isinstance(name, str) or not _METRIC_NAME_RE.fullmatch(name):
        raise InvalidMetricName(str(name))
    return name


def _normalize_labels(metric: str, labels: Mapping[str, object] | None) -> LabelSet:
    if not labels:
        return ()
    normalized: list[tuple[str, str]] = []
    for key, value in labels.items():
        if not isinstance(key, str) or not _LABEL_NAME_RE.fullmatch(key) or key.startswith("__"):
            raise InvalidLabelName(metric, str(key))
        normalized.append((key, str(value)))
    return tuple(normalized)


class _Instrument:
    kind: MetricKind

    def __init__(self, name: str, help: str | None, labels: LabelSet) -> None:
        self.name = name
        self.help = "" if help is None else str(help)
        self.labels = labels
        self._lock = threading.Lock()

    @property
    def value(self) -> int | float:
        raise NotImplementedError

    def sample(self) -> MetricSample:
        return MetricSample(self.name, self.help, self.kind, self.labels, self.value)

    def _reset(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={self.value!r})"


class Counter(_Instrument):
    """Monotonically increasing counter.

    Application counters hold an integer updated through ``increment``. A counter
    built with ``function`` instead reports whatever the callback returns (for
    totals owned by the runtime, such as consumed CPU time) and refuses increments.
    """

    kind: MetricKind = "counter"

    def __init__(
        self,
        name: str,
        help: str | None = "",
        labels: LabelSet = (),
        *,
        function: Callable[[], float] | None = None,
    ) -> None:
        super().__init__(name, help, labels)
        self._value = 0
        self._function = function

    def increment(self, delta: int = 1) -> None:
        """Atomically add ``delta`` (a non-negative integer) to the counter."""

        if isinstance(delta, bool) or not isinstance(delta, int):
            raise ValueError(f"Counter '{self.name}' only accepts integer increments")
        if delta < 0:
            raise ValueError(f"Counter '{self.name}' cannot be decremented")
        if self._function is not None:
            raise RuntimeError(f"Counter '{self.name}' is computed by a callback and cannot be incremented")
        with self._lock:
            self._value += delta

    @property
    def value(self) -> int | float:
        if self._function is not None:
            return self._function()
        with self._lock:
            return self._value

    def _reset(self) -> None:
        with self._lock:
            self._value = 0


class Gauge(_Instrument):
    """Value that can move in both directions, optionally computed on read."""

    kind: MetricKind = "gauge"

    def __init__(
        self,
        name: str,
        help: str | None = "",
        labels: LabelSet = (),
        *,
        function: Callable[[], float] | None = None,
    ) -> None:
        super().__init__(name, help, labels)
        self._value = 0.0
        self._function = function

    def set(self, value: float) -> None:
        self._ensure_writable()
        with self._lock:
            self._value = float(value)

    def increment(self, delta: float = 1.0) -> None:
        self._ensure_writable()
        with self._lock:
            self._value += float(delta)

    def decrement(self, delta: float = 1.0) -> None:
        self.increment(-float(delta))

    @property
    def value(self) -> float:
        if self._function is not None:
            return float(self._function())
        with self._lock:
            return self._value

    def _ensure_writable(self) -> None:
        if self._function is not None:
            raise RuntimeError(f"Gauge '{self.name}' is computed by a callback and cannot be set")

    def _reset(self) -> None:
        with self._lock:
            self._value = 0.0


class MetricsRegistry:
    """Ordered catalog of instruments keyed by unique metric name.

    Registering a name twice raises :class:`DuplicateMetric`. ``collect`` copies
    the instrument list under the registry lock and then reads each instrument
    under its own lock, so scrapes never block increments for long.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._metrics: dict[str, Counter | Gauge] = {}

    def register(
        self,
        name: str,
        help: str | None = "",
        labels: Mapping[str, object] | None = None,
        *,
        function: Callable[[], float] | None = None,
    ) -> Counter:
        """Register a counter and return its handle.

        ``function`` makes a read-only counter whose value is computed at collect time.
        """

        validate_metric_name(name)
        counter = Counter(name, help, _normalize_labels(name, labels), function=function)
        self._add(counter)
        return counter

    def register_gauge(
        self,
        name: str,
        help: str | None = "",
        labels: Mapping[str, object] | None = None,
        *,
        function: Callable[[], float] | None = None,
    ) -> Gauge:
        """Register a gauge, optionally backed by ``function`` evaluated at collect time."""

        validate_metric_name(name)
        gauge = Gauge(name, help, _normalize_labels(name, labels), function=function)
        self._add(gauge)
        return gauge

    def unregister(self, name: str) -> None:
        with self._lock:
            del self._metrics[name]
        logger.debug("metrics.unregister", extra={"metric": name})

    def get(self, name: str) -> Counter | Gauge | None:
        with self._lock:
            return self._metrics.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._metrics)

    def collect(self) -> list[MetricSample]:
        """Return a sample per instrument in registration order."""

        with self._lock:
            instruments: Iterable[Counter | Gauge] = list(self._metrics.values())
        return [instrument.sample() for instrument in instruments]

    def reset(self) -> None:
        """Zero every stored value while keeping registrations (testing utility)."""

        with self._lock:
            instruments = list(self._metrics.values())
        for instrument in instruments:
            instrument._reset()

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._metrics

    def _add(self, instrument: Counter | Gauge) -> None:
        with self._lock:
            if instrument.name in self._metrics:
                raise DuplicateMetric(instrument.name)
            self._metrics[instrument.name] = instrument
        logger.debug(
            "metrics.register",
            extra={"metric": instrument.name, "kind": instrument.kind, "labels": dict(instrument.labels)},
        )
