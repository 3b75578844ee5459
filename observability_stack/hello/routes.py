"""Instrumented greeting route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from observability_stack.hello.service import HelloService

router = APIRouter()


def get_hello_service(request: Request) -> HelloService:
    service: HelloService | None = getattr(request.app.state, "hello_service", None)
    if service is None:
        raise RuntimeError("Hello service not configured on application state")
    return service


@router.get("/", response_class=PlainTextResponse, summary="Greeting")
async def get_hello(service: HelloService = Depends(get_hello_service)) -> PlainTextResponse:
    """Return the greeting; each call bumps ``get_hello_calls`` once."""

    return PlainTextResponse(service.get_hello())
