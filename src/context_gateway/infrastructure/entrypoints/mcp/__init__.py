from context_gateway.infrastructure.entrypoints.mcp.docs_tool_handlers import DocsToolHandlers
from context_gateway.infrastructure.entrypoints.mcp.mcp_server_factory import build_mcp_server
from context_gateway.infrastructure.entrypoints.mcp.request_scope import RequestScope

__all__ = ["DocsToolHandlers", "RequestScope", "build_mcp_server"]
