from context_gateway.core.value_objects.attempt_outcome import (
    AttemptClassification,
    AttemptOutcome,
)
from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.core.value_objects.context_result import ContextResult
from context_gateway.core.value_objects.dispatch_status import DispatchStatus
from context_gateway.core.value_objects.library_summary import LibrarySummary
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.search_result import SearchResult
from context_gateway.core.value_objects.transport_kind import TransportKind
from context_gateway.core.value_objects.upstream_response import UpstreamResponse

__all__ = [
    "AttemptClassification",
    "AttemptOutcome",
    "ClientIdentity",
    "ContextResult",
    "DispatchStatus",
    "LibrarySummary",
    "RequestContext",
    "SearchResult",
    "TransportKind",
    "UpstreamResponse",
]
