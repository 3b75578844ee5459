"""Registry, counter, and gauge behaviour."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from observability_stack.metrics import (
    Counter,
    DuplicateMetric,
    Gauge,
    InvalidLabelName,
    InvalidMetricName,
    MetricsError,
    MetricsRegistry,
    render,
)


def test_register_valid_name(registry: MetricsRegistry) -> None:
    counter = registry.register("valid_name", "A valid counter")

    assert isinstance(counter, Counter)
    assert counter.value == 0
    assert "valid_name" in registry


@pytest.mark.parametrize("name", ["1bad", "", "has-dash", "white space", "bad.dot", "é", "valid_name\n"])
def test_register_rejects_malformed_names(registry: MetricsRegistry, name: str) -> None:
    with pytest.raises(InvalidMetricName):
        registry.register(name)

    assert len(registry) == 0


@pytest.mark.parametrize("name", ["_private", "ns:subsystem_total", ":colon", "A1"])
def test_register_accepts_name_grammar(registry: MetricsRegistry, name: str) -> None:
    registry.register(name)
    assert registry.names() == [name]


def test_duplicate_registration_always_fails(registry: MetricsRegistry) -> None:
    first = registry.register("get_hello_calls", "Total number of getHello calls")

    for _ in range(3):
        with pytest.raises(DuplicateMetric):
            registry.register("get_hello_calls", "Total number of getHello calls")

    assert registry.get("get_hello_calls") is first
    assert len(registry) == 1


def test_duplicate_detection_spans_instrument_kinds(registry: MetricsRegistry) -> None:
    registry.register("shared_name")

    with pytest.raises(DuplicateMetric):
        registry.register_gauge("shared_name")


def test_registration_errors_share_base_class(registry: MetricsRegistry) -> None:
    registry.register("taken")

    with pytest.raises(MetricsError):
        registry.register("taken")
    with pytest.raises(MetricsError):
        registry.register("0taken")


@pytest.mark.parametrize("label", ["1st", "__reserved", "with-dash", "has:colon", "a\n"])
def test_register_rejects_malformed_label_names(registry: MetricsRegistry, label: str) -> None:
    with pytest.raises(InvalidLabelName):
        registry.register("labelled_total", labels={label: "x"})

    assert "labelled_total" not in registry


def test_labels_keep_order_and_stringify(registry: MetricsRegistry) -> None:
    counter = registry.register("requests_total", labels={"route": "/", "code": 200})

    assert counter.labels == (("route", "/"), ("code", "200"))


@pytest.mark.parametrize("n", [0, 1, 10_000])
def test_concurrent_increments_are_not_lost(registry: MetricsRegistry, n: int) -> None:
    counter = registry.register("concurrent_total")

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda _: counter.increment(), range(n)))

    assert counter.value == n
    assert registry.collect()[0].value == n


def test_increment_by_delta(registry: MetricsRegistry) -> None:
    counter = registry.register("bytes_total")
    counter.increment(5)
    counter.increment(0)
    counter.increment()

    assert counter.value == 6


@pytest.mark.parametrize("delta", [-1, 1.5, True])
def test_increment_rejects_invalid_delta(registry: MetricsRegistry, delta: object) -> None:
    counter = registry.register("strict_total")

    with pytest.raises(ValueError):
        counter.increment(delta)  # type: ignore[arg-type]

    assert counter.value == 0


def test_collect_preserves_registration_order(registry: MetricsRegistry) -> None:
    registry.register("zeta_total", "last alphabetically")
    registry.register_gauge("alpha", "first alphabetically")
    registry.register("middle_total")

    samples = registry.collect()

    assert [sample.name for sample in samples] == ["zeta_total", "alpha", "middle_total"]
    assert [sample.kind for sample in samples] == ["counter", "gauge", "counter"]
    assert samples[0].help == "last alphabetically"


def test_collect_on_empty_registry(registry: MetricsRegistry) -> None:
    assert registry.collect() == []


def test_reset_zeroes_values_but_keeps_registrations(registry: MetricsRegistry) -> None:
    counter = registry.register("resettable_total")
    gauge = registry.register_gauge("resettable_gauge")
    counter.increment(4)
    gauge.set(2.5)

    registry.reset()

    assert registry.names() == ["resettable_total", "resettable_gauge"]
    assert counter.value == 0
    assert gauge.value == 0.0


def test_unregister_frees_name(registry: MetricsRegistry) -> None:
    registry.register("temporary_total")
    registry.unregister("temporary_total")

    assert "temporary_total" not in registry
    registry.register("temporary_total")

    with pytest.raises(KeyError):
        registry.unregister("never_registered")


def test_gauge_moves_both_directions(registry: MetricsRegistry) -> None:
    gauge = registry.register_gauge("in_flight")
    gauge.increment()
    gauge.increment(2)
    gauge.decrement(0.5)

    assert isinstance(gauge, Gauge)
    assert gauge.value == 2.5

    gauge.set(-1)
    assert gauge.value == -1.0


def test_callback_gauge_reads_function_and_refuses_writes(registry: MetricsRegistry) -> None:
    readings = iter([1.0, 2.0])
    gauge = registry.register_gauge("computed", function=lambda: next(readings))

    assert gauge.value == 1.0
    assert registry.collect()[0].value == 2.0
    with pytest.raises(RuntimeError):
        gauge.set(3)


def test_collect_while_incrementing_sees_monotonic_values(registry: MetricsRegistry) -> None:
    counter = registry.register("scraped_total", "Incremented during scrapes")
    n = 20_000
    done = threading.Event()
    observed: list[int] = []

    def scrape() -> None:
        while not done.is_set():
            observed.append(registry.collect()[0].value)
            line = render(registry).splitlines()[-1]
            observed.append(int(line.split()[-1]))

    scraper = threading.Thread(target=scrape)
    scraper.start()
    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: counter.increment(), range(n)))
    finally:
        done.set()
        scraper.join()

    assert observed == sorted(observed)
    assert all(0 <= value <= n for value in observed)
    assert counter.value == n
    assert render(registry).splitlines()[-1] == f"scraped_total {n}"


def test_missing_help_is_stored_as_empty_text(registry: MetricsRegistry) -> None:
    counter = registry.register("no_help_total", None)
    gauge = registry.register_gauge("no_help_gauge", None)

    assert counter.help == ""
    assert gauge.help == ""


def test_callback_counter_reads_function_and_refuses_increments(registry: MetricsRegistry) -> None:
    counter = registry.register("runtime_seconds_total", function=lambda: 1.25)

    assert counter.value == 1.25
    assert registry.collect()[0].kind == "counter"
    with pytest.raises(RuntimeError):
        counter.increment()


def test_get_returns_registered_handle(registry: MetricsRegistry) -> None:
    counter = registry.register("lookup_total")
    gauge = registry.register_gauge("lookup_gauge")

    assert registry.get("lookup_total") is counter
    assert registry.get("lookup_gauge") is gauge
    assert registry.get("missing") is None
