"""Greeting service instrumented with a call counter."""

from __future__ import annotations

from observability_stack.metrics.registry import Counter

GREETING = "Hello World!"
CALLS_METRIC = "get_hello_calls"
CALLS_HELP = "Total number of getHello calls"


class HelloService:
    """Produce the greeting and count each call on the injected counter."""

    def __init__(self, calls: Counter) -> None:
        self._calls = calls

    def get_hello(self) -> str:
        self._calls.increment()
        return GREETING
