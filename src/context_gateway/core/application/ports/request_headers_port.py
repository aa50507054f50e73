from abc import ABC, abstractmethod

from context_gateway.core.value_objects.request_context import RequestContext


class RequestHeadersPort(ABC):
    """Renders a request context into outbound header key/value pairs."""

    @abstractmethod
    def build(self, context: RequestContext) -> dict[str, str]: ...
