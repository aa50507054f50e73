from context_gateway.core.domain.credentials.credential_pool import (
    DEFAULT_COOLDOWN_SECONDS,
    CredentialPool,
    parse_credentials,
)

__all__ = ["DEFAULT_COOLDOWN_SECONDS", "CredentialPool", "parse_credentials"]
