"""Prometheus metrics declarations for the gateway.

All metrics are declared statically at module level.
Labels use ONLY static enumerations, never credentials, addresses or library IDs.
"""

from prometheus_client import Counter, Histogram

# ── Upstream dispatch metrics ─────────────────────────────────────

UPSTREAM_ATTEMPTS_TOTAL = Counter(
    "context_gateway_upstream_attempts_total",
    "Outbound docs backend attempts",
    ["operation", "outcome"],
)

CREDENTIALS_MARKED_FAILED_TOTAL = Counter(
    "context_gateway_credentials_marked_failed_total",
    "API keys marked as rate-limited",
    ["operation"],
)

POOL_EXHAUSTED_TOTAL = Counter(
    "context_gateway_pool_exhausted_total",
    "Logical calls that ended with every API key rate-limited",
    ["operation"],
)

TOOL_CALL_DURATION_SECONDS = Histogram(
    "context_gateway_tool_call_duration_seconds",
    "End-to-end tool call duration in seconds",
    ["tool"],
)

# ── Inbound HTTP metrics ──────────────────────────────────────────

MCP_REQUESTS_TOTAL = Counter(
    "context_gateway_mcp_requests_total",
    "Inbound MCP HTTP requests",
    ["route", "outcome"],
)
