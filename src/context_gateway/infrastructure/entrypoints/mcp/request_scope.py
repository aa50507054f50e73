from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.core.value_objects.request_context import RequestContext

_BOUND_CONTEXT: ContextVar[RequestContext | None] = ContextVar("_BOUND_CONTEXT", default=None)


class RequestScope:
    """Resolves the request context of the call currently being served.

    HTTP calls bind a fresh context once at the top of the request; it is
    visible read-only to every task spawned beneath it. The stdio transport
    has a single caller, so it falls back to the process-wide default.
    """

    def __init__(self, default: RequestContext) -> None:
        self._default = default

    @property
    def default(self) -> RequestContext:
        return self._default

    @contextmanager
    def bind(self, context: RequestContext) -> Iterator[RequestContext]:
        token = _BOUND_CONTEXT.set(context)
        try:
            yield context
        finally:
            _BOUND_CONTEXT.reset(token)

    def current(self, handshake_identity: ClientIdentity | None = None) -> RequestContext:
        """Bound context if any; else the default, enriched with the handshake client info."""
        bound = _BOUND_CONTEXT.get()
        if bound is not None:
            return bound
        if handshake_identity is not None and not handshake_identity.is_empty:
            return self._default.with_client_identity(handshake_identity)
        return self._default
