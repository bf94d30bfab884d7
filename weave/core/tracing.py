"""
OpenTelemetry tracing for the Weave service.

Tracing is opt-in: nothing is exported unless OTEL_ENABLED=true. When it is
disabled, get_tracer() still returns a usable no-op tracer so the memory
engine can open spans unconditionally.

Environment Variables:
    OTEL_ENABLED: "true" to enable tracing (default: false)
    OTEL_SERVICE_NAME: Override service name (default: weave-intelligence-service)
    OTEL_EXPORTER_OTLP_ENDPOINT: OTLP gRPC endpoint; console export otherwise
"""

import logging
import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Tracer

logger = logging.getLogger("Weave.Tracing")

DEFAULT_SERVICE_NAME = "weave-intelligence-service"

_tracer_provider: Optional[TracerProvider] = None
_is_initialized = False


def is_tracing_enabled() -> bool:
    """Return True when OTEL_ENABLED is "true" (case-insensitive)."""
    return os.getenv("OTEL_ENABLED", "false").lower() == "true"


def _build_exporter():
    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not otlp_endpoint:
        logger.info("Using console exporter for trace output")
        return ConsoleSpanExporter()

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    logger.info(f"Using OTLP exporter with endpoint: {otlp_endpoint}")
    return OTLPSpanExporter(endpoint=otlp_endpoint)


def setup_tracing(service_name: Optional[str] = None) -> Optional[TracerProvider]:
    """
    Install a global TracerProvider with a batch span processor.

    Args:
        service_name: Optional override for the service name.

    Returns:
        The configured TracerProvider, or None if tracing is disabled.
    """
    global _tracer_provider, _is_initialized

    if _is_initialized:
        return _tracer_provider

    _is_initialized = True
    if not is_tracing_enabled():
        logger.info("OpenTelemetry tracing is disabled (set OTEL_ENABLED=true to enable)")
        return None

    effective_service_name = (
        service_name
        or os.getenv("OTEL_SERVICE_NAME")
        or DEFAULT_SERVICE_NAME
    )

    _tracer_provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: effective_service_name})
    )
    _tracer_provider.add_span_processor(BatchSpanProcessor(_build_exporter()))
    trace.set_tracer_provider(_tracer_provider)

    logger.info(f"OpenTelemetry tracing initialized for service: {effective_service_name}")
    return _tracer_provider


def get_tracer(name: str) -> Tracer:
    """Get a tracer for custom spans (no-op when tracing is disabled)."""
    return trace.get_tracer(name)


def instrument_app(app) -> None:
    """Instrument the FastAPI app and outbound httpx calls."""
    if not is_tracing_enabled():
        logger.debug("Tracing disabled, skipping instrumentation")
        return

    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    FastAPIInstrumentor.instrument_app(app)
    HTTPXClientInstrumentor().instrument()
    logger.info("FastAPI and httpx instrumentation enabled")


def shutdown_tracing() -> None:
    """Flush remaining spans and drop the provider."""
    global _tracer_provider, _is_initialized

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        logger.info("OpenTelemetry tracing shut down")

    _tracer_provider = None
    _is_initialized = False
