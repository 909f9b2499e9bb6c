"""Prometheus metrics for the resource API.

Key Responsibilities:
    - Define request, search and batch metrics on the default registry
    - Expose the registry on the configured scrape path

Collaborators:
    - Upstream: request lifecycle middleware, search and batch handlers
    - Downstream: Prometheus scrapers

Thread Safety:
    - Thread-safe: Prometheus client metric operations are atomic
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

from typing import Any

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ==============================================================================
# METRIC DEFINITIONS
# ==============================================================================

REQUEST_COUNTER = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

SEARCH_DISPATCHES = Counter(
    "search_dispatches_total",
    "Search requests by query type",
    ["querytype"],
)

BATCH_ITEMS = Counter(
    "batch_items_total",
    "Batch items processed by operation and outcome",
    ["operation", "outcome"],
)


# ==============================================================================
# RECORDING HELPERS
# ==============================================================================


def record_search(querytype: str) -> None:
    SEARCH_DISPATCHES.labels(querytype).inc()


def record_batch_item(operation: str, *, ok: bool) -> None:
    BATCH_ITEMS.labels(operation, "ok" if ok else "error").inc()


def register_metrics(app: Any, settings: Any) -> None:
    """Mount the Prometheus exposition endpoint when metrics are enabled."""
    cfg = settings.observability.metrics
    if not cfg.enabled:
        return

    @app.get(cfg.path, include_in_schema=False)
    async def metrics_endpoint() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = [
    "BATCH_ITEMS",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "SEARCH_DISPATCHES",
    "record_batch_item",
    "record_search",
    "register_metrics",
]
