from __future__ import annotations

from dataclasses import dataclass

from context_gateway.core.exceptions.gateway_error import GatewayError


@dataclass
class ProviderError(GatewayError):
    """Raised when the exchange with the upstream docs backend fails at transport level."""

    provider: str
    message: str
    retryable: bool = False
    status_code: int | None = None

    def __str__(self) -> str:
        code = f" status={self.status_code}" if self.status_code is not None else ""
        return f"{self.provider}: {self.message}{code}"
