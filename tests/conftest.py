"""Pytest fixtures for the observability stack tests."""

from collections.abc import AsyncIterator, Iterator
import os

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from observability_stack.config import Settings, get_settings
from observability_stack.main import create_app
from observability_stack.metrics import MetricsRegistry


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Drop cached settings so environment overrides apply per test."""

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    """Return a freshly built application with its own registry."""
    return create_app(settings)


@pytest.fixture()
def registry() -> MetricsRegistry:
    return MetricsRegistry()


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an `httpx.AsyncClient` bound to the ASGI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
