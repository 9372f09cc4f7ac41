# texttide/observability/logger.py

# structured JSON logger
import logging
import os
import sys

from opentelemetry import trace
from pythonjsonlogger.json import JsonFormatter


class TraceIdFilter(logging.Filter):
    """Inject trace_id into the record when a span is active."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            ctx = trace.get_current_span().get_span_context()
            record.trace_id = f"{ctx.trace_id:032x}" if ctx.trace_id else None
        return True


def build_formatter() -> logging.Formatter:
    return JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(pathname)s %(lineno)d %(trace_id)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def configure_logging(config_module) -> None:
    """Configure root logging and align the access/error loggers to JSON.

    - Reuses the access/error file handlers from texttide.utils.logger.
    - Adds a JSON console handler (stdout).
    - Injects trace_id when tracing is enabled.
    """
    root = logging.getLogger()
    root.setLevel(getattr(config_module, "LOG_LEVEL", "INFO"))

    formatter = build_formatter()
    trace_filter = TraceIdFilter()

    os.makedirs(getattr(config_module, "LOGS_PATH", "logs"), exist_ok=True)

    for logger_name in ("access", "error"):
        lg = logging.getLogger(logger_name)
        lg.setLevel(logging.INFO if logger_name == "access" else logging.ERROR)
        lg.propagate = False  # keep file routing stable
        for h in lg.handlers:
            h.setFormatter(formatter)
            h.addFilter(trace_filter)

    # Single JSON console handler on root
    have_console = any(type(h) is logging.StreamHandler for h in root.handlers)
    if not have_console:
        console = logging.StreamHandler(stream=sys.stdout)
        console.setFormatter(formatter)
        console.addFilter(trace_filter)
        root.addHandler(console)

    logging.getLogger("startup").info("logging configured")
