"""HTTP API for the RouterOS gateway.

Routes:
- POST /connect  dial a router and report reachability
- POST /command  run one command and return its data rows
- GET  /health   service health
- GET  /metrics  Prometheus metrics

Error mapping:
- body is not JSON of the expected shape  -> 400 "invalid json"
- body not received in time               -> 408 "request timeout"
- dial failed                             -> 502 "connection failed: <cause>"
- command failed                          -> 500 "command failed"

Command failures are detailed in the server log only.
"""

import asyncio
import logging
from typing import Any, TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from routeros_gateway import __version__
from routeros_gateway.config import Settings
from routeros_gateway.domain.gateway import GatewayService
from routeros_gateway.domain.models import CommandRequest, ConnectionRequest, ReplyRow
from routeros_gateway.infra.observability import get_metrics_text, record_http_request
from routeros_gateway.infra.observability.logging import bind_correlation_id
from routeros_gateway.infra.routeros.exceptions import RouterOSConnectionError, RouterOSError
from routeros_gateway.infra.routeros.session import Dialer, LibRouterOSDialer

logger = logging.getLogger(__name__)

RequestModel = TypeVar("RequestModel", bound=BaseModel)

# Metrics label for requests that matched no route
UNMATCHED_ROUTE = "unmatched"


async def decode_body(
    request: Request, model: type[RequestModel], settings: Settings
) -> RequestModel:
    """Read the request body within the read timeout and decode it.

    Raises:
        HTTPException: 408 if the body is not received in time, 400 if it
            does not decode into model
    """
    try:
        body = await asyncio.wait_for(
            request.body(), timeout=settings.http_read_timeout_seconds
        )
    except TimeoutError:
        raise HTTPException(
            status_code=status.HTTP_408_REQUEST_TIMEOUT,
            detail="request timeout",
        ) from None

    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        logger.info(
            "Rejected request body",
            extra={"route": request.url.path, "error": f"{e.error_count()} validation errors"},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid json",
        ) from None


def route_label(request: Request) -> str:
    """Metrics label for a request: the matched route path, or "unmatched"."""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


def create_http_app(settings: Settings, dialer: Dialer | None = None) -> FastAPI:
    """Create FastAPI application for the gateway.

    Args:
        settings: Application settings
        dialer: Router session factory (defaults to librouteros)

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="RouterOS Gateway",
        description="JSON over HTTP front for the MikroTik RouterOS API",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    service = GatewayService(dialer or LibRouterOSDialer(settings), settings)
    app.state.gateway = service

    # Middleware for correlation ID and response metrics
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Any) -> Any:
        """Add correlation ID to request context."""
        correlation_id = bind_correlation_id(request.headers.get("X-Correlation-ID"))

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        record_http_request(route_label(request), response.status_code)
        return response

    @app.post("/connect")
    async def connect(request: Request) -> dict[str, str]:
        """Dial the router, close the session, report success."""
        conn = await decode_body(request, ConnectionRequest, settings)

        try:
            await run_in_threadpool(service.connect, conn)
        except RouterOSConnectionError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"connection failed: {e}",
            ) from None

        return {"status": "connected"}

    @app.post("/command")
    async def command(request: Request) -> list[ReplyRow]:
        """Run one command and return the router's data rows."""
        cmd = await decode_body(request, CommandRequest, settings)

        try:
            return await run_in_threadpool(service.run_command, cmd)
        except RouterOSConnectionError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"connection failed: {e}",
            ) from None
        except RouterOSError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="command failed",
            ) from None

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.environment,
            "version": __version__,
        }

    @app.get("/metrics")
    async def metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(get_metrics_text())

    return app


__all__ = [
    "decode_body",
    "route_label",
    "create_http_app",
]
