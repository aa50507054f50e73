"""Credential-rotating dispatcher for docs backend calls.

Each logical call gets ``max(pool size, 1)`` attempts. Only a rate-limit
response on a pool-managed credential rotates to the next credential; every
other failure is terminal for the call. No exception escapes: all outcomes are
returned as result values.
"""

from __future__ import annotations

from typing import TypeVar

import structlog
from opentelemetry import trace
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_none

from context_gateway.core.application.dispatch.docs_operations import (
    DocsOperation,
    FetchContextOperation,
    SearchLibrariesOperation,
)
from context_gateway.core.application.dispatch.upstream_messages import (
    DEFAULT_API_KEY_PREFIX,
    describe_upstream_error,
)
from context_gateway.core.application.ports.docs_backend_port import DocsBackendPort
from context_gateway.core.application.ports.request_headers_port import RequestHeadersPort
from context_gateway.core.domain.credentials.credential_pool import CredentialPool
from context_gateway.core.exceptions.credential_rate_limited_error import (
    CredentialRateLimitedError,
)
from context_gateway.core.exceptions.provider_error import ProviderError
from context_gateway.core.value_objects.attempt_outcome import (
    AttemptClassification,
    AttemptOutcome,
)
from context_gateway.core.value_objects.context_result import ContextResult
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.search_result import SearchResult

logger = structlog.get_logger()
tracer = trace.get_tracer("context_gateway.dispatch")

R = TypeVar("R")


class ResilientDispatcher:
    def __init__(
        self,
        backend: DocsBackendPort,
        headers: RequestHeadersPort,
        pool: CredentialPool,
        api_key_prefix: str = DEFAULT_API_KEY_PREFIX,
    ) -> None:
        self._backend = backend
        self._headers = headers
        self._pool = pool
        self._api_key_prefix = api_key_prefix

    async def search_libraries(
        self, query: str, library_name: str, context: RequestContext
    ) -> SearchResult:
        with tracer.start_as_current_span("docs.search_libraries") as span:
            span.set_attribute("docs.library_name", library_name)
            result = await self._dispatch(SearchLibrariesOperation(query, library_name), context)
            span.set_attribute("docs.status", result.status.value)
            return result

    async def fetch_context(
        self, library_id: str, query: str, context: RequestContext
    ) -> ContextResult:
        with tracer.start_as_current_span("docs.fetch_context") as span:
            span.set_attribute("docs.library_id", library_id)
            result = await self._dispatch(FetchContextOperation(library_id, query), context)
            span.set_attribute("docs.status", result.status.value)
            return result

    # ── State machine ──

    async def _dispatch(self, operation: DocsOperation[R], context: RequestContext) -> R:
        max_attempts = max(self._pool.total_count(), 1)
        attempts: list[AttemptOutcome] = []
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(CredentialRateLimitedError),
            stop=stop_after_attempt(max_attempts),
            wait=wait_none(),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._attempt(
                        operation,
                        context,
                        attempt.retry_state.attempt_number,
                        max_attempts,
                        attempts,
                    )
        except CredentialRateLimitedError:
            pass

        logger.warning(
            "All API keys are rate-limited",
            operation=operation.name,
            max_attempts=max_attempts,
            processing_status="EXHAUSTED",
        )
        return operation.exhausted(tuple(attempts))

    async def _attempt(
        self,
        operation: DocsOperation[R],
        context: RequestContext,
        number: int,
        max_attempts: int,
        attempts: list[AttemptOutcome],
    ) -> R:
        from_pool = self._pool.has_any()
        credential = self._pool.next() if from_pool else context.credential
        headers = self._headers.build(context.with_credential(credential))

        try:
            response = await operation.call(self._backend, headers)
        except ProviderError as exc:
            attempts.append(
                AttemptOutcome(
                    number, AttemptClassification.NETWORK_ERROR, credential, message=exc.message
                )
            )
            logger.error(
                "Docs backend unreachable",
                operation=operation.name,
                attempt=number,
                max_attempts=max_attempts,
                error_type=type(exc).__name__,
                error_details=exc.message,
                error_retryable=exc.retryable,
            )
            return operation.network_failed(exc, tuple(attempts))

        if response.is_rate_limited and credential and from_pool:
            self._pool.mark_failed(credential)
            attempts.append(
                AttemptOutcome(number, AttemptClassification.RATE_LIMITED, credential, 429)
            )
            logger.warning(
                "Rate limited, trying next API key",
                operation=operation.name,
                attempt=number,
                max_attempts=max_attempts,
            )
            raise CredentialRateLimitedError(attempt=number, max_attempts=max_attempts)

        if not response.ok:
            message = describe_upstream_error(response, credential, self._api_key_prefix)
            attempts.append(
                AttemptOutcome(
                    number,
                    AttemptClassification.UPSTREAM_ERROR,
                    credential,
                    response.status_code,
                    message,
                )
            )
            logger.error(
                "Docs backend rejected request",
                operation=operation.name,
                attempt=number,
                error_type="UpstreamRejection",
                error_code=response.status_code,
                error_details=message,
            )
            return operation.rejected(message, tuple(attempts))

        attempts.append(
            AttemptOutcome(number, AttemptClassification.SUCCESS, credential, response.status_code)
        )
        return operation.succeeded(response, tuple(attempts))
