from context_gateway.core.application.ports.docs_backend_port import DocsBackendPort
from context_gateway.core.application.ports.request_headers_port import RequestHeadersPort

__all__ = ["DocsBackendPort", "RequestHeadersPort"]
