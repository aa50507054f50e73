"""OAuth discovery routes for MCP clients authenticating against ``/mcp/oauth``."""

import httpx
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from context_gateway.infrastructure.observability.logger_factory_service import get_logger

logger = get_logger(__name__)

SCOPES_SUPPORTED = ["profile", "email"]
BEARER_METHODS_SUPPORTED = ["header"]


def build_oauth_router(
    resource_url: str, auth_server_url: str, timeout_seconds: float = 10.0
) -> APIRouter:
    router = APIRouter(prefix="/.well-known", tags=["oauth"])

    @router.get("/oauth-protected-resource")
    async def protected_resource_metadata() -> dict:
        return {
            "resource": resource_url,
            "authorization_servers": [auth_server_url],
            "scopes_supported": SCOPES_SUPPORTED,
            "bearer_methods_supported": BEARER_METHODS_SUPPORTED,
        }

    @router.get("/oauth-authorization-server")
    async def authorization_server_metadata() -> JSONResponse:
        url = f"{auth_server_url}/.well-known/oauth-authorization-server"
        try:
            async with httpx.AsyncClient(timeout=timeout_seconds) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.error(
                "Error fetching OAuth metadata",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "error": "proxy_error",
                    "message": "Failed to proxy authorization server metadata",
                },
            )

        if not response.is_success:
            logger.error("OAuth metadata upstream error", error_code=response.status_code)
            return JSONResponse(
                status_code=response.status_code,
                content={
                    "error": "upstream_error",
                    "message": "Failed to fetch authorization server metadata",
                },
            )

        try:
            metadata = response.json()
        except ValueError as exc:
            logger.error("OAuth metadata is not JSON", error_details=str(exc))
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "error": "proxy_error",
                    "message": "Failed to proxy authorization server metadata",
                },
            )
        return JSONResponse(content=metadata)

    return router
