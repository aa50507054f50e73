import httpx
import pytest
import respx

from context_gateway.core.application.dispatch.resilient_dispatcher import ResilientDispatcher
from context_gateway.core.application.dispatch.upstream_messages import EXHAUSTED_MESSAGE
from context_gateway.core.domain.credentials.credential_pool import CredentialPool
from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.core.value_objects.dispatch_status import DispatchStatus
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.transport_kind import TransportKind
from context_gateway.infrastructure.http.docs_api_client import DocsApiClient
from context_gateway.infrastructure.http.request_headers_builder import RequestHeadersBuilder
from context_gateway.infrastructure.security.address_obfuscator import AddressObfuscator

BASE_URL = "https://docs.test/api"
SECRET = "0f" * 32


def make_dispatcher(client: DocsApiClient, pool: CredentialPool) -> ResilientDispatcher:
    headers = RequestHeadersBuilder("9.9.9", AddressObfuscator(SECRET))
    return ResilientDispatcher(client, headers, pool)


@pytest.mark.asyncio
@respx.mock
async def test_rotation_across_rate_limited_keys():
    route = respx.get(f"{BASE_URL}/v2/context").mock(
        side_effect=[
            httpx.Response(429),
            httpx.Response(429),
            httpx.Response(200, text="# Middleware\nUse middleware.ts"),
        ]
    )
    pool = CredentialPool.load("ctx7sk-one,ctx7sk-two,ctx7sk-three")

    async with DocsApiClient(BASE_URL) as client:
        result = await make_dispatcher(client, pool).fetch_context(
            "/vercel/next.js",
            "middleware",
            RequestContext(client_address="198.51.100.2", transport=TransportKind.STDIO),
        )

    assert result.status is DispatchStatus.SUCCEEDED
    assert result.data.startswith("# Middleware")
    assert [call.request.headers["Authorization"] for call in route.calls] == [
        "Bearer ctx7sk-one",
        "Bearer ctx7sk-two",
        "Bearer ctx7sk-three",
    ]
    assert pool.failed_count() == 2
    last = route.calls.last.request
    assert last.headers["X-Context7-Source"] == "mcp-server"
    assert last.headers["X-Context7-Server-Version"] == "9.9.9"
    assert last.headers["X-Context7-Transport"] == "stdio"
    assert last.url.params["libraryId"] == "/vercel/next.js"


@pytest.mark.asyncio
@respx.mock
async def test_rate_limited_keys_are_skipped_on_the_next_call():
    route = respx.get(f"{BASE_URL}/v2/libs/search").mock(
        side_effect=[
            httpx.Response(429),
            httpx.Response(200, json={"results": []}),
            httpx.Response(200, json={"results": []}),
        ]
    )
    pool = CredentialPool.load("ctx7sk-one,ctx7sk-two")

    async with DocsApiClient(BASE_URL) as client:
        dispatcher = make_dispatcher(client, pool)
        await dispatcher.search_libraries("q", "react", RequestContext())
        await dispatcher.search_libraries("q", "react", RequestContext())

    assert [call.request.headers["Authorization"] for call in route.calls] == [
        "Bearer ctx7sk-one",
        "Bearer ctx7sk-two",
        "Bearer ctx7sk-two",
    ]


@pytest.mark.asyncio
@respx.mock
async def test_exhaustion_when_every_key_is_rate_limited():
    route = respx.get(f"{BASE_URL}/v2/libs/search").mock(return_value=httpx.Response(429))
    pool = CredentialPool.load("ctx7sk-one,ctx7sk-two")

    async with DocsApiClient(BASE_URL) as client:
        result = await make_dispatcher(client, pool).search_libraries(
            "q", "react", RequestContext()
        )

    assert result.status is DispatchStatus.EXHAUSTED
    assert result.error == EXHAUSTED_MESSAGE
    assert route.call_count == 2


@pytest.mark.asyncio
@respx.mock
async def test_transport_failure_does_not_rotate():
    route = respx.get(f"{BASE_URL}/v2/context").mock(side_effect=httpx.ConnectError("refused"))
    pool = CredentialPool.load("ctx7sk-one,ctx7sk-two")

    async with DocsApiClient(BASE_URL) as client:
        result = await make_dispatcher(client, pool).fetch_context("/lib", "q", RequestContext())

    assert result.status is DispatchStatus.NETWORK_ERROR
    assert result.data.startswith("Error fetching library context. Please try again later.")
    assert route.call_count == 1
    assert pool.failed_count() == 0


@pytest.mark.asyncio
@respx.mock
async def test_non_ascii_client_name_still_dispatches():
    route = respx.get(f"{BASE_URL}/v2/context").mock(
        return_value=httpx.Response(200, text="# Hooks")
    )
    pool = CredentialPool.load("ctx7sk-one")
    context = RequestContext(
        client_identity=ClientIdentity(name="Clíne", version="1.0"),
        transport=TransportKind.STDIO,
    )

    async with DocsApiClient(BASE_URL) as client:
        result = await make_dispatcher(client, pool).fetch_context(
            "/facebook/react", "hooks", context
        )

    assert result.status is DispatchStatus.SUCCEEDED
    assert result.data == "# Hooks"
    assert route.calls.last.request.headers["X-Context7-Client-IDE"] == "Cl%C3%ADne"
