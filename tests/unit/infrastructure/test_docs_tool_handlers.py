from unittest.mock import AsyncMock, MagicMock

import pytest

from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.core.value_objects.context_result import ContextResult
from context_gateway.core.value_objects.dispatch_status import DispatchStatus
from context_gateway.core.value_objects.library_summary import LibrarySummary
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.search_result import SearchResult
from context_gateway.core.value_objects.transport_kind import TransportKind
from context_gateway.infrastructure.entrypoints.mcp.docs_tool_handlers import (
    NO_MATCHING_LIBRARIES,
    DocsToolHandlers,
)
from context_gateway.infrastructure.entrypoints.mcp.request_scope import RequestScope
from context_gateway.infrastructure.entrypoints.mcp.result_formatter import SEARCH_RESULTS_LEGEND

STDIO_DEFAULT = RequestContext(credential="local-key", transport=TransportKind.STDIO)


@pytest.fixture
def dispatcher():
    mock = MagicMock()
    mock.search_libraries = AsyncMock()
    mock.fetch_context = AsyncMock()
    return mock


@pytest.fixture
def handlers(dispatcher):
    return DocsToolHandlers(dispatcher, RequestScope(STDIO_DEFAULT))


@pytest.mark.asyncio
async def test_resolve_library_id_renders_legend_and_results(handlers, dispatcher):
    dispatcher.search_libraries.return_value = SearchResult(
        results=(LibrarySummary(id="/vercel/next.js", title="Next.js"),)
    )

    text = await handlers.resolve_library_id("routing", "next.js")

    assert text.startswith(SEARCH_RESULTS_LEGEND)
    assert "- Context7-compatible library ID: /vercel/next.js" in text
    dispatcher.search_libraries.assert_awaited_once_with("routing", "next.js", STDIO_DEFAULT)


@pytest.mark.asyncio
async def test_resolve_library_id_returns_dispatch_error(handlers, dispatcher):
    dispatcher.search_libraries.return_value = SearchResult(
        error="All API keys are rate-limited. Please try again later.",
        status=DispatchStatus.EXHAUSTED,
    )

    text = await handlers.resolve_library_id("routing", "next.js")

    assert text == "All API keys are rate-limited. Please try again later."


@pytest.mark.asyncio
async def test_resolve_library_id_without_matches(handlers, dispatcher):
    dispatcher.search_libraries.return_value = SearchResult()

    assert await handlers.resolve_library_id("q", "unknown-lib") == NO_MATCHING_LIBRARIES


@pytest.mark.asyncio
async def test_query_docs_returns_context_text(handlers, dispatcher):
    dispatcher.fetch_context.return_value = ContextResult(data="# Docs")

    text = await handlers.query_docs("/vercel/next.js", "routing")

    assert text == "# Docs"
    dispatcher.fetch_context.assert_awaited_once_with("/vercel/next.js", "routing", STDIO_DEFAULT)


@pytest.mark.asyncio
async def test_handshake_identity_enriches_default_context(handlers, dispatcher):
    dispatcher.fetch_context.return_value = ContextResult(data="# Docs")
    identity = ClientIdentity(name="claude-code", version="2.0.71")

    await handlers.query_docs("/lib", "q", handshake_identity=identity)

    context = dispatcher.fetch_context.await_args.args[2]
    assert context.client_identity == identity
    assert context.credential == "local-key"
