from __future__ import annotations

import time
from collections.abc import Iterable

from context_gateway.core.application.dispatch.resilient_dispatcher import ResilientDispatcher
from context_gateway.core.value_objects.attempt_outcome import (
    AttemptClassification,
    AttemptOutcome,
)
from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.core.value_objects.dispatch_status import DispatchStatus
from context_gateway.infrastructure.entrypoints.mcp.request_scope import RequestScope
from context_gateway.infrastructure.entrypoints.mcp.result_formatter import (
    SEARCH_RESULTS_LEGEND,
    format_search_results,
)
from context_gateway.infrastructure.observability.logger_factory_service import get_logger
from context_gateway.infrastructure.observability.metrics_service import (
    CREDENTIALS_MARKED_FAILED_TOTAL,
    POOL_EXHAUSTED_TOTAL,
    TOOL_CALL_DURATION_SECONDS,
    UPSTREAM_ATTEMPTS_TOTAL,
)

logger = get_logger(__name__)

NO_MATCHING_LIBRARIES = "No libraries found matching the provided name."


class DocsToolHandlers:
    """Tool bodies for resolve-library-id and query-docs, independent of the MCP wiring."""

    def __init__(self, dispatcher: ResilientDispatcher, scope: RequestScope) -> None:
        self._dispatcher = dispatcher
        self._scope = scope

    async def resolve_library_id(
        self,
        query: str,
        library_name: str,
        handshake_identity: ClientIdentity | None = None,
    ) -> str:
        started = time.perf_counter()
        context = self._scope.current(handshake_identity)
        result = await self._dispatcher.search_libraries(query, library_name, context)
        _record("search_libraries", result.status, result.attempts)
        TOOL_CALL_DURATION_SECONDS.labels(tool="resolve-library-id").observe(
            time.perf_counter() - started
        )

        if not result.has_results:
            return result.error or NO_MATCHING_LIBRARIES
        return SEARCH_RESULTS_LEGEND + format_search_results(result)

    async def query_docs(
        self,
        library_id: str,
        query: str,
        handshake_identity: ClientIdentity | None = None,
    ) -> str:
        started = time.perf_counter()
        context = self._scope.current(handshake_identity)
        result = await self._dispatcher.fetch_context(library_id, query, context)
        _record("fetch_context", result.status, result.attempts)
        TOOL_CALL_DURATION_SECONDS.labels(tool="query-docs").observe(
            time.perf_counter() - started
        )
        return result.data


def _record(
    operation: str, status: DispatchStatus, attempts: Iterable[AttemptOutcome]
) -> None:
    for outcome in attempts:
        UPSTREAM_ATTEMPTS_TOTAL.labels(
            operation=operation, outcome=outcome.classification.value
        ).inc()
        if outcome.classification is AttemptClassification.RATE_LIMITED:
            CREDENTIALS_MARKED_FAILED_TOTAL.labels(operation=operation).inc()
    if status is DispatchStatus.EXHAUSTED:
        POOL_EXHAUSTED_TOTAL.labels(operation=operation).inc()
    logger.info("Tool call completed", operation=operation, processing_status=status.value)
