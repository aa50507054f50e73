from context_gateway.core.exceptions.configuration_error import ConfigurationError
from context_gateway.core.exceptions.credential_rate_limited_error import (
    CredentialRateLimitedError,
)
from context_gateway.core.exceptions.gateway_error import GatewayError
from context_gateway.core.exceptions.provider_error import ProviderError

__all__ = [
    "ConfigurationError",
    "CredentialRateLimitedError",
    "GatewayError",
    "ProviderError",
]
