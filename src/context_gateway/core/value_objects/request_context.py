from __future__ import annotations

from dataclasses import dataclass, field, replace

from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.core.value_objects.transport_kind import TransportKind


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Per-call identity record used to build outbound headers.

    Immutable for the duration of one logical call. Attempts that need a
    different credential derive a copy through ``with_credential``.
    """

    client_address: str | None = None
    credential: str | None = field(default=None, repr=False)
    client_identity: ClientIdentity | None = None
    transport: TransportKind | None = None

    def with_credential(self, credential: str | None) -> "RequestContext":
        return replace(self, credential=credential)

    def with_client_identity(self, identity: ClientIdentity | None) -> "RequestContext":
        return replace(self, client_identity=identity)
