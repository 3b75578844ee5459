"""Greeting service exposing Prometheus counters over HTTP."""

__version__ = "0.1.0"
