"""The two logical operations that share the resilient dispatch state machine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar

from context_gateway.core.application.dispatch.upstream_messages import (
    EXHAUSTED_MESSAGE,
    NOT_FINALIZED_MESSAGE,
)
from context_gateway.core.application.ports.docs_backend_port import DocsBackendPort
from context_gateway.core.exceptions.provider_error import ProviderError
from context_gateway.core.value_objects.attempt_outcome import AttemptOutcome
from context_gateway.core.value_objects.context_result import ContextResult
from context_gateway.core.value_objects.dispatch_status import DispatchStatus
from context_gateway.core.value_objects.library_summary import LibrarySummary
from context_gateway.core.value_objects.search_result import SearchResult
from context_gateway.core.value_objects.upstream_response import UpstreamResponse

R = TypeVar("R")

Attempts = tuple[AttemptOutcome, ...]


class DocsOperation(ABC, Generic[R]):
    """Upstream call plus the mapping of every terminal outcome into a result value."""

    name: ClassVar[str]

    @abstractmethod
    async def call(self, backend: DocsBackendPort, headers: dict[str, str]) -> UpstreamResponse:
        ...

    @abstractmethod
    def succeeded(self, response: UpstreamResponse, attempts: Attempts) -> R: ...

    @abstractmethod
    def rejected(self, message: str, attempts: Attempts) -> R: ...

    @abstractmethod
    def network_failed(self, error: ProviderError, attempts: Attempts) -> R: ...

    @abstractmethod
    def exhausted(self, attempts: Attempts) -> R: ...


@dataclass(frozen=True)
class SearchLibrariesOperation(DocsOperation[SearchResult]):
    query: str
    library_name: str

    name: ClassVar[str] = "search_libraries"

    async def call(self, backend: DocsBackendPort, headers: dict[str, str]) -> UpstreamResponse:
        return await backend.search(self.query, self.library_name, headers)

    def succeeded(self, response: UpstreamResponse, attempts: Attempts) -> SearchResult:
        try:
            body = response.json()
            if not isinstance(body, dict):
                raise ValueError("search response is not a JSON object")
            results = tuple(
                LibrarySummary.from_payload(item) for item in body.get("results") or []
            )
        except ValueError as exc:
            return SearchResult(
                error=f"Error searching libraries: {exc}",
                status=DispatchStatus.UPSTREAM_ERROR,
                attempts=attempts,
            )
        error = body.get("error")
        return SearchResult(
            results=results,
            error=error if isinstance(error, str) and error else None,
            attempts=attempts,
        )

    def rejected(self, message: str, attempts: Attempts) -> SearchResult:
        return SearchResult(error=message, status=DispatchStatus.UPSTREAM_ERROR, attempts=attempts)

    def network_failed(self, error: ProviderError, attempts: Attempts) -> SearchResult:
        return SearchResult(
            error=f"Error searching libraries: {error.message}",
            status=DispatchStatus.NETWORK_ERROR,
            attempts=attempts,
        )

    def exhausted(self, attempts: Attempts) -> SearchResult:
        return SearchResult(
            error=EXHAUSTED_MESSAGE, status=DispatchStatus.EXHAUSTED, attempts=attempts
        )


@dataclass(frozen=True)
class FetchContextOperation(DocsOperation[ContextResult]):
    library_id: str
    query: str

    name: ClassVar[str] = "fetch_context"

    async def call(self, backend: DocsBackendPort, headers: dict[str, str]) -> UpstreamResponse:
        return await backend.fetch_context(self.query, self.library_id, headers)

    def succeeded(self, response: UpstreamResponse, attempts: Attempts) -> ContextResult:
        if not response.text:
            return ContextResult(
                data=NOT_FINALIZED_MESSAGE, status=DispatchStatus.EMPTY, attempts=attempts
            )
        return ContextResult(data=response.text, attempts=attempts)

    def rejected(self, message: str, attempts: Attempts) -> ContextResult:
        return ContextResult(data=message, status=DispatchStatus.UPSTREAM_ERROR, attempts=attempts)

    def network_failed(self, error: ProviderError, attempts: Attempts) -> ContextResult:
        return ContextResult(
            data=f"Error fetching library context. Please try again later. {error.message}",
            status=DispatchStatus.NETWORK_ERROR,
            attempts=attempts,
        )

    def exhausted(self, attempts: Attempts) -> ContextResult:
        return ContextResult(
            data=EXHAUSTED_MESSAGE, status=DispatchStatus.EXHAUSTED, attempts=attempts
        )
