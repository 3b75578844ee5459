"""Process instruments registered next to application counters."""

from __future__ import annotations

import os
import resource
import time
from pathlib import Path

from observability_stack.metrics.registry import Counter, Gauge, MetricsRegistry

_STATM_PATH = Path("/proc/self/statm")


def cpu_seconds() -> float:
    """Total user and system CPU time consumed by this process."""

    usage = resource.getrusage(resource.RUSAGE_SELF)
    return usage.ru_utime + usage.ru_stime


def resident_memory_bytes() -> float:
    """Current resident set size, or the peak RSS where ``/proc`` is unavailable."""

    try:
        resident_pages = int(_STATM_PATH.read_text(encoding="ascii").split()[1])
    except (OSError, IndexError, ValueError):
        # ru_maxrss is kilobytes on Linux, bytes on macOS
        peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        return float(peak if os.uname().sysname == "Darwin" else peak * 1024)
    return float(resident_pages * os.sysconf("SC_PAGE_SIZE"))


def register_process_metrics(
    registry: MetricsRegistry,
    *,
    started_at: float | None = None,
) -> list[Counter | Gauge]:
    """Register CPU, memory, start-time and uptime instruments anchored at ``started_at``."""

    start = time.time() if started_at is None else started_at
    return [
        registry.register(
            "process_cpu_seconds_total",
            "Total user and system CPU time spent in seconds.",
            function=cpu_seconds,
        ),
        registry.register_gauge(
            "process_resident_memory_bytes",
            "Resident memory size in bytes.",
            function=resident_memory_bytes,
        ),
        registry.register_gauge(
            "process_start_time_seconds",
            "Start time of the process since unix epoch in seconds.",
            function=lambda: start,
        ),
        registry.register_gauge(
            "process_uptime_seconds",
            "Seconds elapsed since the process started.",
            function=lambda: max(time.time() - start, 0.0),
        ),
    ]
