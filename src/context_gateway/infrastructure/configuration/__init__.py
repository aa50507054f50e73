from context_gateway.infrastructure.configuration.main_settings import (
    DEFAULT_ENCRYPTION_KEY,
    GatewaySettings,
    resolve_server_version,
)

__all__ = ["DEFAULT_ENCRYPTION_KEY", "GatewaySettings", "resolve_server_version"]
