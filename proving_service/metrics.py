from __future__ import annotations

"""
Prometheus metrics for the proving service.

HTTP:
    http_requests_total{method,path,status}
    http_request_duration_seconds{method,path,status}
Transpiler:
    transpile_total{outcome}           outcome = "ok" or a TranspileError code
    transcript_words                   histogram of emitted bytes32[N] sizes
Prover backend:
    prover_calls_total{operation,outcome}
    prover_call_duration_seconds{operation}

Every app owns its registry, so several apps in one process (the test
suite) never clash on metric names. ``GET /metrics`` serves it.
"""

import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI
from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Histogram, generate_latest)
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

# Key generation and proving take minutes at degree 17.
PROVER_BUCKETS = (0.1, 0.5, 1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0)
HTTP_BUCKETS = (0.005, 0.025, 0.1, 0.5, 1.0, 5.0, 30.0, 120.0, 300.0)
WORD_BUCKETS = (8, 16, 32, 64, 128, 256, 512, 1024, 2048)


class Metrics:
    """Registry plus the service's collectors; lives on ``app.state.metrics``."""

    def __init__(self) -> None:
        self.registry = CollectorRegistry()

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
            registry=self.registry,
        )
        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "path", "status"],
            buckets=HTTP_BUCKETS,
            registry=self.registry,
        )
        self.transpile_total = Counter(
            "transpile_total",
            "Assembly to Solidity transpiles by outcome",
            ["outcome"],
            registry=self.registry,
        )
        self.transcript_words = Histogram(
            "transcript_words",
            "Size of the transcript buffer in emitted contracts",
            buckets=WORD_BUCKETS,
            registry=self.registry,
        )
        self.prover_calls_total = Counter(
            "prover_calls_total",
            "Calls into the proving backend",
            ["operation", "outcome"],
            registry=self.registry,
        )
        self.prover_call_duration_seconds = Histogram(
            "prover_call_duration_seconds",
            "Wall time of proving backend calls",
            ["operation"],
            buckets=PROVER_BUCKETS,
            registry=self.registry,
        )

    def record_transpile(self, outcome: str, words: Optional[int] = None) -> None:
        self.transpile_total.labels(outcome).inc()
        if words is not None:
            self.transcript_words.observe(words)

    def record_prover_call(self, operation: str, outcome: str, seconds: float) -> None:
        self.prover_calls_total.labels(operation, outcome).inc()
        self.prover_call_duration_seconds.labels(operation).observe(seconds)

    def render_latest(self) -> bytes:
        return generate_latest(self.registry)


def _route_path(scope: Scope) -> str:
    # Route templates keep label cardinality bounded; unmatched paths fall back to the raw path.
    route = scope.get("route")
    template = getattr(route, "path_format", None) or getattr(route, "path", None)
    if isinstance(template, str) and template:
        return template
    return scope.get("path") or ""


class PrometheusMiddleware:
    """ASGI middleware counting requests and timing them per route template."""

    def __init__(self, app: ASGIApp, metrics: Metrics):
        self.app = app
        self.metrics = metrics

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status: Dict[str, Any] = {"code": 500}

        async def capture_status(message: Message) -> None:
            if message["type"] == "http.response.start":
                status["code"] = int(message.get("status", 500))
            await send(message)

        try:
            await self.app(scope, receive, capture_status)
        finally:
            labels = (scope.get("method", "GET"), _route_path(scope), str(status["code"]))
            self.metrics.http_requests_total.labels(*labels).inc()
            self.metrics.http_request_duration_seconds.labels(*labels).observe(
                time.perf_counter() - started
            )


def create_metrics_router(metrics: Metrics, path: str = "/metrics") -> APIRouter:
    router = APIRouter()

    @router.get(path, include_in_schema=False)
    def metrics_endpoint() -> Response:
        return Response(content=metrics.render_latest(), media_type=CONTENT_TYPE_LATEST)

    return router


def setup_metrics(app: FastAPI, *, path: str = "/metrics") -> Metrics:
    """Install the middleware and exporter route; returns the app's Metrics."""
    metrics = Metrics()
    app.add_middleware(PrometheusMiddleware, metrics=metrics)
    app.include_router(create_metrics_router(metrics, path))
    app.state.metrics = metrics
    return metrics


__all__ = ["Metrics", "PrometheusMiddleware", "create_metrics_router", "setup_metrics"]
