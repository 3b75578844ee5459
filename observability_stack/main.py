"""FastAPI application entrypoint for the instrumented greeting service."""

from __future__ import annotations

import time

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from observability_stack import __version__
from observability_stack.config import Settings, get_settings
from observability_stack.hello import CALLS_HELP, CALLS_METRIC, HelloService, router as hello_router
from observability_stack.lib.logger import configure_logging, get_logger
from observability_stack.metrics import MetricsRegistry, build_router as build_metrics_router
from observability_stack.metrics.process import register_process_metrics

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application together with its metrics registry and instruments.

    Registration errors (malformed or duplicate metric names) propagate so a
    misconfigured process fails at startup instead of serving broken metrics.
    """

    settings = settings or get_settings()
    configure_logging(settings.log_level)
    started_at = time.time()

    registry = MetricsRegistry()
    hello_calls = registry.register(CALLS_METRIC, CALLS_HELP)
    if settings.process_metrics:
        register_process_metrics(registry, started_at=started_at)

    app = FastAPI(title="Observability Stack", version=__version__)
    app.state.settings = settings
    app.state.metrics_registry = registry
    app.state.hello_service = HelloService(hello_calls)

    app.include_router(hello_router, tags=["hello"])
    app.include_router(build_metrics_router(settings.metrics_path))

    @app.get("/health", tags=["system"], summary="Health check")
    async def health_check() -> JSONResponse:
        """Return liveness response for uptime monitoring."""
        payload = {"ok": True, "data": {"status": "healthy"}}
        return JSONResponse(content=payload)

    logger.info(
        "app.startup",
        extra={
            "app_env": settings.app_env,
            "metrics_path": settings.metrics_path,
            "metrics": registry.names(),
        },
    )
    return app


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=settings.app_env == "dev",
    )


if __name__ == "__main__":  # pragma: no cover - manual entrypoint
    run()
