from importlib.metadata import PackageNotFoundError, version

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENCRYPTION_KEY = "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
DEFAULT_DOCS_API_BASE_URL = "https://context7.com/api"
PACKAGE_NAME = "context-gateway"


def resolve_server_version() -> str:
    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0"


class GatewaySettings(BaseSettings):
    """Process-wide configuration, resolved once by the composition root."""

    app_name: str = Field(default="context-gateway", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    trace_console_export: bool = Field(default=False, alias="TRACE_CONSOLE_EXPORT")

    # ── Upstream docs backend ──
    docs_api_base_url: str = Field(default=DEFAULT_DOCS_API_BASE_URL, alias="DOCS_API_BASE_URL")
    docs_api_keys: SecretStr | None = Field(default=None, alias="DOCS_API_KEYS")
    docs_api_key: SecretStr | None = Field(default=None, alias="DOCS_API_KEY")
    upstream_timeout_seconds: float = Field(default=30.0, alias="UPSTREAM_TIMEOUT_SECONDS", gt=0)

    # ── Caller identity ──
    client_ip_encryption_key: SecretStr = Field(
        default=SecretStr(DEFAULT_ENCRYPTION_KEY), alias="CLIENT_IP_ENCRYPTION_KEY"
    )

    # ── OAuth discovery (HTTP transport) ──
    resource_url: str = Field(default="http://localhost:3000/mcp/oauth", alias="RESOURCE_URL")
    auth_server_url: str = Field(default="https://context7.com", alias="AUTH_SERVER_URL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @field_validator("docs_api_base_url", "auth_server_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def credential_source(self, cli_api_key: str | None = None) -> str | None:
        """Rotation source by precedence: CLI flag, multi-key env, single-key env."""
        if cli_api_key:
            return cli_api_key
        for secret in (self.docs_api_keys, self.docs_api_key):
            if secret is not None and secret.get_secret_value().strip():
                return secret.get_secret_value()
        return None

    @property
    def uses_default_encryption_key(self) -> bool:
        return self.client_ip_encryption_key.get_secret_value() == DEFAULT_ENCRYPTION_KEY
