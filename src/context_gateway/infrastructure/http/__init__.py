from context_gateway.infrastructure.http.client_identity_parser import parse_user_agent
from context_gateway.infrastructure.http.docs_api_client import DocsApiClient
from context_gateway.infrastructure.http.request_headers_builder import RequestHeadersBuilder

__all__ = ["DocsApiClient", "RequestHeadersBuilder", "parse_user_agent"]
