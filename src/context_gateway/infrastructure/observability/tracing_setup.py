"""OpenTelemetry tracing configuration for the gateway.

Provides configure_tracing(), a one-shot TracerProvider setup.
Spans are created where they are used through ``opentelemetry.trace.get_tracer``.
"""

from __future__ import annotations

import os
import sys

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

_CONFIGURED = False


def configure_tracing(service_version: str, console_export: bool = False) -> None:
    """One-shot OTel TracerProvider setup. Safe to call multiple times.

    Console export writes to stderr; stdout belongs to the stdio transport.
    """
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return
    _CONFIGURED = True

    resource = Resource.create(
        {
            "service.name": os.environ.get("SERVICE_NAME", "context-gateway"),
            "service.version": service_version,
            "deployment.environment": os.environ.get("APP_ENV", "local"),
        }
    )
    provider = TracerProvider(resource=resource)
    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    trace.set_tracer_provider(provider)
