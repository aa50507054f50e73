from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from context_gateway.infrastructure.entrypoints.api.health_router import router as health_router
from context_gateway.infrastructure.entrypoints.api.mcp_endpoint import McpEndpoint
from context_gateway.infrastructure.entrypoints.api.oauth_router import build_oauth_router
from context_gateway.infrastructure.entrypoints.api.token_verifier import (
    AcceptingTokenVerifier,
    TokenVerifier,
)
from context_gateway.infrastructure.observability.logger_factory_service import get_logger
from context_gateway.infrastructure.observability.logging.correlation_middleware import (
    CorrelationMiddleware,
)
from context_gateway.infrastructure.resolution.container import GatewayContainer

logger = get_logger(__name__)

CORS_ALLOWED_METHODS = ["GET", "POST", "OPTIONS", "DELETE"]
CORS_ALLOWED_HEADERS = [
    "Content-Type",
    "MCP-Session-Id",
    "MCP-Protocol-Version",
    "Context7-API-Key",
    "X-API-Key",
    "Authorization",
]
CORS_EXPOSED_HEADERS = ["MCP-Session-Id"]

NOT_FOUND_BODY = {
    "error": "not_found",
    "message": "Endpoint not found. Use /mcp for MCP protocol communication.",
}


def create_app(
    container: GatewayContainer, token_verifier: TokenVerifier | None = None
) -> FastAPI:
    settings = container.settings
    mcp_server = container.mcp_server
    # Creates the session manager that the MCP routes delegate to
    mcp_server.streamable_http_app()
    session_manager = mcp_server.session_manager
    verifier = token_verifier or AcceptingTokenVerifier()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info("MCP session manager started", context_transport="http")
            try:
                yield
            finally:
                await container.docs_client.aclose()

    app = FastAPI(title=settings.app_name, version=container.server_version, lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
        expose_headers=CORS_EXPOSED_HEADERS,
    )
    app.add_middleware(CorrelationMiddleware)

    @app.exception_handler(status.HTTP_404_NOT_FOUND)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=NOT_FOUND_BODY)

    app.add_route(
        "/mcp",
        McpEndpoint(
            session_manager,
            container.scope,
            resource_url=settings.resource_url,
            require_auth=False,
            token_verifier=verifier,
        ),
        include_in_schema=False,
    )
    app.add_route(
        "/mcp/oauth",
        McpEndpoint(
            session_manager,
            container.scope,
            resource_url=settings.resource_url,
            require_auth=True,
            token_verifier=verifier,
        ),
        include_in_schema=False,
    )
    app.include_router(health_router)
    app.include_router(build_oauth_router(settings.resource_url, settings.auth_server_url))

    return app
