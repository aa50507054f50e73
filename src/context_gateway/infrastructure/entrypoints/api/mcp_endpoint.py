"""ASGI endpoint serving the stateless streamable-HTTP agent protocol.

Each request gets its own ``RequestContext`` (caller credential, address,
client identity) bound for the lifetime of the request, so tool calls served
by the shared session manager resolve the caller that made them.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from fastapi import Request, status
from fastapi.responses import JSONResponse
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.transport_kind import TransportKind
from context_gateway.infrastructure.entrypoints.api.client_address import resolve_client_address
from context_gateway.infrastructure.entrypoints.api.credential_extraction import (
    extract_credential,
)
from context_gateway.infrastructure.entrypoints.api.token_verifier import (
    TokenVerifier,
    looks_like_jwt,
)
from context_gateway.infrastructure.entrypoints.mcp.request_scope import RequestScope
from context_gateway.infrastructure.http.client_identity_parser import parse_user_agent
from context_gateway.infrastructure.observability.logger_factory_service import get_logger
from context_gateway.infrastructure.observability.metrics_service import MCP_REQUESTS_TOTAL
from context_gateway.infrastructure.observability.redaction_service import fingerprint

logger = get_logger(__name__)

AUTH_REQUIRED_MESSAGE = "Authentication required. Please authenticate to use this MCP server."
INVALID_TOKEN_MESSAGE = "Invalid token. Please re-authenticate."

JSONRPC_AUTH_ERROR = -32001
JSONRPC_INTERNAL_ERROR = -32603


def jsonrpc_error(
    code: int, message: str, status_code: int, headers: dict[str, str]
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": None},
        headers=headers,
    )


def resource_metadata_challenge(resource_url: str) -> str:
    """``WWW-Authenticate`` value pointing clients at the protected-resource metadata."""
    parts = urlsplit(resource_url)
    origin = f"{parts.scheme}://{parts.netloc}"
    return f'Bearer resource_metadata="{origin}/.well-known/oauth-protected-resource"'


class McpEndpoint:
    """Mounted once per route; ``require_auth`` distinguishes ``/mcp/oauth`` from ``/mcp``."""

    def __init__(
        self,
        session_manager: StreamableHTTPSessionManager,
        scope: RequestScope,
        *,
        resource_url: str,
        require_auth: bool,
        token_verifier: TokenVerifier,
    ) -> None:
        self._session_manager = session_manager
        self._scope = scope
        self._challenge = resource_metadata_challenge(resource_url)
        self._require_auth = require_auth
        self._token_verifier = token_verifier
        self._route = "mcp_oauth" if require_auth else "mcp"

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        request = Request(scope, receive)
        challenge_headers = {"WWW-Authenticate": self._challenge}
        credential = extract_credential(request.headers)

        if self._require_auth:
            rejection = await self._authenticate(credential)
            if rejection is not None:
                MCP_REQUESTS_TOTAL.labels(route=self._route, outcome="unauthorized").inc()
                logger.warning(
                    "MCP request rejected",
                    error_type="AuthenticationError",
                    error_details=rejection,
                )
                response = jsonrpc_error(
                    JSONRPC_AUTH_ERROR, rejection, status.HTTP_401_UNAUTHORIZED, challenge_headers
                )
                await response(scope, receive, send)
                return

        context = RequestContext(
            client_address=resolve_client_address(
                request.headers, request.client.host if request.client else None
            ),
            credential=credential,
            client_identity=parse_user_agent(request.headers.get("user-agent")),
            transport=TransportKind.HTTP,
        )
        logger.debug(
            "MCP request context bound",
            key_fingerprint=fingerprint(credential),
            client_name=context.client_identity.name if context.client_identity else None,
        )

        response_started = False

        async def send_with_challenge(message: dict[str, Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = list(message.get("headers", []))
                headers.append((b"www-authenticate", self._challenge.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            with self._scope.bind(context):
                await self._session_manager.handle_request(scope, receive, send_with_challenge)
        except Exception as exc:
            MCP_REQUESTS_TOTAL.labels(route=self._route, outcome="error").inc()
            logger.exception(
                "Error handling MCP request",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            if not response_started:
                response = jsonrpc_error(
                    JSONRPC_INTERNAL_ERROR,
                    "Internal server error",
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    challenge_headers,
                )
                await response(scope, receive, send)
            return

        MCP_REQUESTS_TOTAL.labels(route=self._route, outcome="handled").inc()

    async def _authenticate(self, credential: str | None) -> str | None:
        """Rejection message for the caller, or None when the request may proceed."""
        if not credential:
            return AUTH_REQUIRED_MESSAGE
        if looks_like_jwt(credential):
            verification = await self._token_verifier.verify(credential)
            if not verification.valid:
                return verification.error or INVALID_TOKEN_MESSAGE
        return None
