import asyncio

import pytest

from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.transport_kind import TransportKind
from context_gateway.infrastructure.entrypoints.mcp.request_scope import RequestScope

DEFAULT = RequestContext(transport=TransportKind.STDIO)


def test_default_context_when_nothing_is_bound():
    assert RequestScope(DEFAULT).current() is DEFAULT


def test_handshake_identity_is_applied_to_default():
    identity = ClientIdentity(name="Cursor", version="2.2.44")

    context = RequestScope(DEFAULT).current(identity)

    assert context.client_identity == identity
    assert context.transport is TransportKind.STDIO


def test_empty_handshake_identity_is_ignored():
    assert RequestScope(DEFAULT).current(ClientIdentity()) is DEFAULT


def test_bound_context_wins_and_is_released():
    scope = RequestScope(DEFAULT)
    bound = RequestContext(credential="caller", transport=TransportKind.HTTP)

    with scope.bind(bound):
        assert scope.current(ClientIdentity(name="ignored")) is bound

    assert scope.current() is DEFAULT


@pytest.mark.asyncio
async def test_bound_context_is_isolated_per_task():
    scope = RequestScope(DEFAULT)

    async def read_in_child() -> str | None:
        await asyncio.sleep(0)
        return scope.current().credential

    async def serve(credential: str) -> str | None:
        with scope.bind(RequestContext(credential=credential)):
            await asyncio.sleep(0)
            return await asyncio.create_task(read_in_child())

    assert await asyncio.gather(serve("a"), serve("b")) == ["a", "b"]
