from __future__ import annotations

from types import TracebackType

import httpx

from context_gateway.core.application.ports.docs_backend_port import DocsBackendPort
from context_gateway.core.exceptions.provider_error import ProviderError
from context_gateway.core.value_objects.upstream_response import UpstreamResponse
from context_gateway.infrastructure.observability.logger_factory_service import get_logger

logger = get_logger(__name__)

PROVIDER = "docs-api"
SEARCH_PATH = "v2/libs/search"
CONTEXT_PATH = "v2/context"


class DocsApiClient(DocsBackendPort):
    """httpx adapter for the documentation backend.

    Proxy settings come from the standard HTTPS_PROXY/HTTP_PROXY environment
    variables through httpx's ``trust_env`` handling.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(timeout_seconds),
        )

    async def search(
        self, query: str, library_name: str, headers: dict[str, str]
    ) -> UpstreamResponse:
        return await self._get(SEARCH_PATH, {"query": query, "libraryName": library_name}, headers)

    async def fetch_context(
        self, query: str, library_id: str, headers: dict[str, str]
    ) -> UpstreamResponse:
        return await self._get(CONTEXT_PATH, {"query": query, "libraryId": library_id}, headers)

    async def _get(
        self, path: str, params: dict[str, str], headers: dict[str, str]
    ) -> UpstreamResponse:
        try:
            response = await self._client.get(path, params=params, headers=headers)
            body = response.text
        except httpx.TimeoutException as exc:
            raise ProviderError(
                provider=PROVIDER, message=f"Timed out calling {path}: {exc}", retryable=True
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(
                provider=PROVIDER, message=f"Network error calling {path}: {exc}", retryable=True
            ) from exc
        except (UnicodeError, httpx.InvalidURL) as exc:
            raise ProviderError(
                provider=PROVIDER, message=f"Could not build request for {path}: {exc}"
            ) from exc

        logger.debug("Docs backend responded", path=path, http_status=response.status_code)
        return UpstreamResponse(status_code=response.status_code, text=body)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DocsApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
