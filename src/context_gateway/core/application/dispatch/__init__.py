from context_gateway.core.application.dispatch.docs_operations import (
    DocsOperation,
    FetchContextOperation,
    SearchLibrariesOperation,
)
from context_gateway.core.application.dispatch.resilient_dispatcher import ResilientDispatcher
from context_gateway.core.application.dispatch.upstream_messages import (
    EXHAUSTED_MESSAGE,
    NOT_FINALIZED_MESSAGE,
    describe_upstream_error,
)

__all__ = [
    "EXHAUSTED_MESSAGE",
    "NOT_FINALIZED_MESSAGE",
    "DocsOperation",
    "FetchContextOperation",
    "ResilientDispatcher",
    "SearchLibrariesOperation",
    "describe_upstream_error",
]
