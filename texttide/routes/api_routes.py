# texttide/routes/api_routes.py

from typing import Optional

import tornado.web

from texttide import config
from texttide.handlers.clipboard_handler import (
    ClipboardHandler,
    ClipboardItemHandler,
    ClipboardTopHandler,
    LivenessHandler,
)
from texttide.observability.metrics import PrometheusMetricsHandler
from texttide.services.clipboard_service import ClipboardService
from texttide.services.identity import HeaderIdentityResolver, IdentityResolver


def make_app(
    service: ClipboardService,
    identity_resolver: Optional[IdentityResolver] = None,
) -> tornado.web.Application:
    """
    Creates and configures the Tornado application instance.
    """
    handler_kwargs = {
        "service": service,
        "identity_resolver": identity_resolver or HeaderIdentityResolver(),
    }

    settings = {
        "debug": config.DEBUG,
        # Enable automatic gzip compression for eligible responses
        "compress_response": True,
    }

    return tornado.web.Application([
        (r"/api/clipboard", ClipboardHandler, handler_kwargs),
        (r"/api/clipboard/top", ClipboardTopHandler, handler_kwargs),
        (r"/api/clipboard/([^/]+)", ClipboardItemHandler, handler_kwargs),
        (r"/health/live", LivenessHandler),
        # expose /metrics for Prometheus
        (r"/metrics", PrometheusMetricsHandler),
    ], **settings)
