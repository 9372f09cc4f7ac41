"""
Minimal OpenTelemetry tracing bootstrap for both HTTP surfaces.
- Initializes a TracerProvider with a Console exporter.
- Instruments the FastAPI app when one is passed, Tornado otherwise.
- Idempotent: safe to call multiple times.
"""
from __future__ import annotations

from typing import Any, Optional

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.tornado import TornadoInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

_OTEL_INITIALIZED = False


def init_tracing(config_module: Any, app: Optional[Any] = None) -> None:
    """// initialize otel tracer (idempotent)

    Does nothing unless TRACING_ENABLED is set. Pass the FastAPI app to
    instrument it; without an app the Tornado instrumentor is installed.
    """
    global _OTEL_INITIALIZED

    if _OTEL_INITIALIZED or not getattr(config_module, "TRACING_ENABLED", False):
        return

    service_name = getattr(config_module, "SERVICE_NAME", None) or "texttide"
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)

    if app is not None:
        FastAPIInstrumentor.instrument_app(app)
    else:
        TornadoInstrumentor().instrument()

    _OTEL_INITIALIZED = True


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)
