from __future__ import annotations

import time
from typing import Any, Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()
REQUESTS = Counter(
    "holeplan_requests_total",
    "HTTP requests",
    ["path", "method", "status"],
    registry=REGISTRY,
)
LATENCY = Histogram(
    "holeplan_request_latency_seconds",
    "Request latency (seconds)",
    ["path", "method"],
    registry=REGISTRY,
)
PLAN_OUTCOMES = Counter(
    "holeplan_plan_outcomes_total",
    "Hole plan invocations by outcome",
    ["outcome", "backend"],
    registry=REGISTRY,
)
BACKEND_LATENCY = Histogram(
    "holeplan_backend_latency_seconds",
    "Latency of the generation backend call (seconds)",
    ["backend"],
    registry=REGISTRY,
)


def record_outcome(outcome: str, backend: str) -> None:
    PLAN_OUTCOMES.labels(outcome=outcome, backend=backend).inc()


async def metrics_app(_req: Request | None = None) -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


class MetricsMiddleware:
    def __init__(self, app: Callable[..., Awaitable[Any]]):
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Awaitable[Any]],
        send: Callable[..., Awaitable[Any]],
    ) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "")
        start = time.perf_counter()
        status_code = 500

        async def _send(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, _send)
        finally:
            duration = time.perf_counter() - start
            LATENCY.labels(path=path, method=method).observe(duration)
            REQUESTS.labels(path=path, method=method, status=str(status_code)).inc()


__all__ = [
    "BACKEND_LATENCY",
    "LATENCY",
    "MetricsMiddleware",
    "PLAN_OUTCOMES",
    "REGISTRY",
    "REQUESTS",
    "metrics_app",
    "record_outcome",
]
