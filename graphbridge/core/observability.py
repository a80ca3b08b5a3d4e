"""OpenTelemetry and logging initialization helpers for graphbridge."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

from graphbridge.core.config import settings

logger = logging.getLogger(__name__)
_TRACING_INITIALIZED = False


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def setup_tracing() -> None:
    """Configure the global tracer provider once per process."""

    global _TRACING_INITIALIZED
    if _TRACING_INITIALIZED or not settings.ENABLE_TRACING:
        return

    resource = Resource.create(
        {
            "service.name": settings.SERVICE_NAME,
            "service.version": settings.SERVICE_VERSION,
            "environment": settings.ENVIRONMENT,
        }
    )

    provider = TracerProvider(resource=resource)
    exporter = _select_exporter()
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    _TRACING_INITIALIZED = True
    logger.info("OpenTelemetry tracing initialized with %s exporter", exporter.__class__.__name__)


def _select_exporter() -> SpanExporter:
    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        headers = _parse_headers(settings.OTEL_EXPORTER_OTLP_HEADERS)
        return OTLPSpanExporter(endpoint=str(settings.OTEL_EXPORTER_OTLP_ENDPOINT), headers=headers or None)
    return ConsoleSpanExporter()


def _parse_headers(raw_headers: Optional[str]) -> Dict[str, str]:
    if not raw_headers:
        return {}
    pairs = {}
    for item in raw_headers.split(","):
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        pairs[key.strip()] = value.strip()
    return pairs
