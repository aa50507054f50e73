from collections.abc import Iterable

import pytest

from context_gateway.core.application.ports.docs_backend_port import DocsBackendPort
from context_gateway.core.application.ports.request_headers_port import RequestHeadersPort
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.upstream_response import UpstreamResponse
from context_gateway.infrastructure.configuration.main_settings import GatewaySettings

VALID_SECRET = "a1" * 32


class ScriptedDocsBackend(DocsBackendPort):
    """Replays a fixed sequence of responses (or raises queued exceptions)."""

    def __init__(self, script: Iterable[UpstreamResponse | Exception]) -> None:
        self._script = list(script)
        self.calls: list[dict] = []

    async def search(self, query, library_name, headers):
        return self._next("search", headers, query=query, library_name=library_name)

    async def fetch_context(self, query, library_id, headers):
        return self._next("fetch_context", headers, query=query, library_id=library_id)

    def _next(self, operation, headers, **params):
        self.calls.append({"operation": operation, "headers": dict(headers), **params})
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    @property
    def credentials_used(self) -> list[str | None]:
        return [call["headers"].get("Authorization") for call in self.calls]


class BearerOnlyHeaders(RequestHeadersPort):
    def build(self, context: RequestContext) -> dict[str, str]:
        if context.credential:
            return {"Authorization": f"Bearer {context.credential}"}
        return {}


@pytest.fixture
def make_backend():
    return ScriptedDocsBackend


@pytest.fixture
def bearer_headers():
    return BearerOnlyHeaders()


@pytest.fixture
def settings(monkeypatch):
    for name in ("DOCS_API_KEYS", "DOCS_API_KEY", "CLIENT_IP_ENCRYPTION_KEY", "DOCS_API_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    return GatewaySettings(
        _env_file=None,
        app_name="context-gateway-test",
        docs_api_base_url="https://docs.test/api",
        client_ip_encryption_key=VALID_SECRET,
        resource_url="https://gateway.test/mcp/oauth",
        auth_server_url="https://auth.test",
        upstream_timeout_seconds=5,
    )
