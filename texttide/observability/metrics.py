# texttide/observability/metrics.py
# minimal prometheus instrumentation

from __future__ import annotations

import time

import tornado.web
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.responses import Response

# Default global registry; metrics are created once per process at import.
CLIPBOARD_OPERATIONS = Counter(
    "texttide_clipboard_operations_total",
    "Clipboard store operations",
    labelnames=("operation",),
)
CLIPBOARD_EXPIRED = Counter(
    "texttide_clipboard_expired_total",
    "Clipboard items dropped by the retention window",
)
REQUEST_COUNT = Counter(
    "texttide_request_count",
    "Total request count",
    labelnames=("method", "path", "status"),
)
REQUEST_LATENCY = Histogram(
    "texttide_request_latency_seconds",
    "Request latency in seconds",
)


def record_operation(operation: str) -> None:
    CLIPBOARD_OPERATIONS.labels(operation).inc()


def record_expired(count: int) -> None:
    if count > 0:
        CLIPBOARD_EXPIRED.inc(count)


def metrics_response() -> Response:
    """Prometheus exposition for the ASGI app."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMetricsHandler(tornado.web.RequestHandler):
    """// expose /metrics"""

    def get(self):
        self.set_header("Content-Type", CONTENT_TYPE_LATEST)
        self.write(generate_latest())


class InstrumentedHandlerMixin:
    """Times Tornado requests and counts them by status."""

    def prepare(self):
        self._prom_start_time = time.perf_counter()
        return super().prepare()

    def on_finish(self):
        start = getattr(self, "_prom_start_time", None)
        if start is not None:
            REQUEST_LATENCY.observe(time.perf_counter() - start)
        REQUEST_COUNT.labels(self.request.method, self.request.path, str(self.get_status())).inc()
        return super().on_finish()
