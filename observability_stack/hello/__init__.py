"""Greeting endpoint and its instrumented service."""

from observability_stack.hello.routes import router
from observability_stack.hello.service import CALLS_HELP, CALLS_METRIC, HelloService

__all__ = ["CALLS_HELP", "CALLS_METRIC", "HelloService", "router"]
