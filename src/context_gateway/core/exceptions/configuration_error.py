from __future__ import annotations

from context_gateway.core.exceptions.gateway_error import GatewayError


class ConfigurationError(GatewayError):
    """Raised when startup configuration is invalid or incomplete."""
