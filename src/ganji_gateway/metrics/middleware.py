"""HTTP request metrics for the FastAPI app.

- ``ganji_http_requests_total`` counter (method, route, status)
- ``ganji_http_request_duration_seconds`` histogram (method, route)

``route`` is the matched route template, so addresses and txids in the
path share one series.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry
    from starlette.requests import Request
    from starlette.responses import Response


def route_label(request: Request) -> str:
    """Route template for *request*, or the raw path when nothing matched."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Count and time every request into *registry*."""

    def __init__(self, app: object, *, registry: CollectorRegistry) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._requests = Counter(
            "ganji_http_requests_total",
            "HTTP requests handled",
            ("method", "route", "status"),
            registry=registry,
        )
        self._latency = Histogram(
            "ganji_http_request_duration_seconds",
            "HTTP request latency",
            ("method", "route"),
            registry=registry,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        start = time.monotonic()
        status = 500
        try:
            response: Response = await call_next(request)
            status = response.status_code
            return response
        finally:
            route = route_label(request)
            self._requests.labels(request.method, route, str(status)).inc()
            self._latency.labels(request.method, route).observe(time.monotonic() - start)
