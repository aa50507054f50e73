"""Composition root: the only place that reads settings and wires concrete adapters."""

from __future__ import annotations

from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP

from context_gateway.core.application.dispatch.resilient_dispatcher import ResilientDispatcher
from context_gateway.core.domain.credentials.credential_pool import CredentialPool
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.core.value_objects.transport_kind import TransportKind
from context_gateway.infrastructure.configuration.main_settings import (
    GatewaySettings,
    resolve_server_version,
)
from context_gateway.infrastructure.entrypoints.mcp.docs_tool_handlers import DocsToolHandlers
from context_gateway.infrastructure.entrypoints.mcp.mcp_server_factory import build_mcp_server
from context_gateway.infrastructure.entrypoints.mcp.request_scope import RequestScope
from context_gateway.infrastructure.http.docs_api_client import DocsApiClient
from context_gateway.infrastructure.http.request_headers_builder import RequestHeadersBuilder
from context_gateway.infrastructure.observability.logger_factory_service import (
    configure_logging,
    get_logger,
)
from context_gateway.infrastructure.observability.tracing_setup import configure_tracing
from context_gateway.infrastructure.security.address_obfuscator import AddressObfuscator

logger = get_logger(__name__)


@dataclass
class GatewayContainer:
    settings: GatewaySettings
    transport: TransportKind
    server_version: str
    pool: CredentialPool
    docs_client: DocsApiClient
    dispatcher: ResilientDispatcher
    scope: RequestScope
    handlers: DocsToolHandlers
    mcp_server: FastMCP


def _default_context(
    settings: GatewaySettings, transport: TransportKind, cli_api_key: str | None
) -> RequestContext:
    if transport is TransportKind.HTTP:
        return RequestContext(transport=TransportKind.HTTP)
    credential = cli_api_key
    if not credential and settings.docs_api_key is not None:
        credential = settings.docs_api_key.get_secret_value().strip() or None
    return RequestContext(credential=credential, transport=TransportKind.STDIO)


def build_container(
    settings: GatewaySettings,
    transport: TransportKind,
    cli_api_key: str | None = None,
) -> GatewayContainer:
    configure_logging(settings.log_level)
    server_version = resolve_server_version()
    configure_tracing(server_version, console_export=settings.trace_console_export)

    if settings.uses_default_encryption_key:
        logger.warning(
            "Using the default client address encryption key. "
            "Set CLIENT_IP_ENCRYPTION_KEY to a private 64-character hex value."
        )

    pool = CredentialPool.load(settings.credential_source(cli_api_key))
    obfuscator = AddressObfuscator(settings.client_ip_encryption_key.get_secret_value())
    docs_client = DocsApiClient(
        settings.docs_api_base_url, timeout_seconds=settings.upstream_timeout_seconds
    )
    dispatcher = ResilientDispatcher(
        backend=docs_client,
        headers=RequestHeadersBuilder(server_version, obfuscator),
        pool=pool,
    )
    scope = RequestScope(_default_context(settings, transport, cli_api_key))
    handlers = DocsToolHandlers(dispatcher, scope)

    logger.info(
        "Gateway container built",
        context_transport=transport.value,
        server_version=server_version,
        key_count=pool.total_count(),
    )
    return GatewayContainer(
        settings=settings,
        transport=transport,
        server_version=server_version,
        pool=pool,
        docs_client=docs_client,
        dispatcher=dispatcher,
        scope=scope,
        handlers=handlers,
        mcp_server=build_mcp_server(handlers),
    )
