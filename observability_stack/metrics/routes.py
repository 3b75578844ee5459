"""Scrape endpoint serving the registry in text exposition format."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from observability_stack.metrics.exposition import CONTENT_TYPE, render
from observability_stack.metrics.registry import MetricsRegistry


def get_metrics_registry(request: Request) -> MetricsRegistry:
    registry: MetricsRegistry | None = getattr(request.app.state, "metrics_registry", None)
    if registry is None:
        raise RuntimeError("Metrics registry not configured on application state")
    return registry


def build_router(metrics_path: str = "/metrics") -> APIRouter:
    """Return a router exposing the scrape endpoint at ``metrics_path`` (GET only)."""

    router = APIRouter()

    @router.get(metrics_path, tags=["system"], summary="Prometheus scrape endpoint")
    async def metrics_endpoint(registry: MetricsRegistry = Depends(get_metrics_registry)) -> Response:
        return Response(content=render(registry), media_type=CONTENT_TYPE)

    return router
