"""API middleware: correlation ID, request audit line."""

import logging
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.core.context import correlation_id_ctx
from app.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def _route_label(request: Request) -> str:
    """Matched route template, so ids in the path do not create new series."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class RequestAuditMiddleware(BaseHTTPMiddleware):
    """After response: log one structured line per request and record its latency."""

    def __init__(self, app: ASGIApp, metrics: Optional[MetricsCollector] = None) -> None:
        super().__init__(app)
        self._metrics = metrics

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "request_audit",
            extra={
                "correlation_id": getattr(request.state, "correlation_id", None),
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 3),
            },
        )
        if self._metrics is not None:
            self._metrics.observe_latency("http_request_latency_ms", duration_ms, route=_route_label(request))
        return response
