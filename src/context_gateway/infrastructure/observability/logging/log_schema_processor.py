"""Structlog processor that nests flat gateway log fields into a stable JSON schema.

All field extraction uses dict.pop(key, default) to avoid KeyError.
"""

from __future__ import annotations

import os
from typing import Any

from context_gateway.infrastructure.observability.redaction_service import redact_value


def _build_root_fields(event_dict: dict[str, Any]) -> dict[str, Any]:
    """Extract root-level fields: timestamp, level, service, environment, IDs."""
    return {
        "timestamp": event_dict.pop("timestamp", None),
        "level": event_dict.pop("level", "info"),
        "service": os.environ.get("SERVICE_NAME", "context-gateway"),
        "environment": os.environ.get("APP_ENV", "local"),
        "correlation_id": event_dict.pop("correlation_id", None),
        "trace_id": event_dict.pop("trace_id", None),
        "span_id": event_dict.pop("span_id", None),
        "message": event_dict.pop("event", ""),
    }


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _build_processing(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    status = event_dict.pop("processing_status", None)
    if status is None:
        return None
    return {
        "status": status,
        "duration_ms": _safe_float(event_dict.pop("processing_duration_ms", None)),
    }


def _build_error(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    """Extract error block. Returns None if no error_type present."""
    error_type = event_dict.pop("error_type", None)
    if error_type is None:
        return None
    return {
        "type": error_type,
        "code": event_dict.pop("error_code", None),
        "details": event_dict.pop("error_details", None),
        "retryable": event_dict.pop("error_retryable", False),
    }


def _build_upstream(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    """Extract the docs-backend dispatch block (operation and attempt bookkeeping)."""
    operation = event_dict.pop("operation", None)
    if operation is None:
        return None
    return {
        "operation": operation,
        "attempt": event_dict.pop("attempt", None),
        "max_attempts": event_dict.pop("max_attempts", None),
    }


def _build_context(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    component = event_dict.pop("context_component", None)
    endpoint = event_dict.pop("context_endpoint", None)
    if component is None and endpoint is None:
        return None
    return {
        "component": component,
        "endpoint": endpoint,
        "method": event_dict.pop("context_method", None),
        "transport": event_dict.pop("context_transport", None),
    }


def _hex_to_uuid(hex_str: str) -> str:
    return f"{hex_str[:8]}-{hex_str[8:12]}-{hex_str[12:16]}-{hex_str[16:20]}-{hex_str[20:]}"


def _inject_otel_ids(event_dict: dict[str, Any]) -> None:
    """Overwrite trace_id and span_id from the current OTel span if recording."""
    from opentelemetry import trace

    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = _hex_to_uuid(format(ctx.trace_id, "032x"))
        event_dict["span_id"] = format(ctx.span_id, "016x")


def log_schema_processor(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Reshape a flat event_dict into the gateway log schema, redacting leftovers."""
    _inject_otel_ids(event_dict)
    result = _build_root_fields(event_dict)

    for key, block in (
        ("processing", _build_processing(event_dict)),
        ("error", _build_error(event_dict)),
        ("upstream", _build_upstream(event_dict)),
        ("context", _build_context(event_dict)),
    ):
        if block is not None:
            result[key] = block

    if event_dict:
        result["extra"] = redact_value(dict(event_dict))

    return result
