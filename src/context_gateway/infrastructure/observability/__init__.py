from context_gateway.infrastructure.observability.logger_factory_service import (
    configure_logging,
    get_logger,
)

__all__ = ["configure_logging", "get_logger"]
