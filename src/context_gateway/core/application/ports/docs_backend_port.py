from abc import ABC, abstractmethod

from context_gateway.core.value_objects.upstream_response import UpstreamResponse


class DocsBackendPort(ABC):
    """Outbound contract with the remote documentation backend.

    Implementations raise ``ProviderError`` for transport-level failures and
    return every HTTP response (including non-2xx) as an ``UpstreamResponse``.
    """

    @abstractmethod
    async def search(
        self, query: str, library_name: str, headers: dict[str, str]
    ) -> UpstreamResponse: ...

    @abstractmethod
    async def fetch_context(
        self, query: str, library_id: str, headers: dict[str, str]
    ) -> UpstreamResponse: ...
