from __future__ import annotations

from dataclasses import dataclass

from context_gateway.core.exceptions.gateway_error import GatewayError


@dataclass
class CredentialRateLimitedError(GatewayError):
    """Signals that an attempt was rate-limited and the next credential should be tried."""

    attempt: int
    max_attempts: int

    def __str__(self) -> str:
        return f"Credential rate-limited on attempt {self.attempt}/{self.max_attempts}"
