from __future__ import annotations

import asyncio
import errno
import socket
from typing import Annotated, Optional

import structlog
import typer
import uvicorn

from context_gateway.core.exceptions.configuration_error import ConfigurationError
from context_gateway.core.value_objects.transport_kind import TransportKind
from context_gateway.infrastructure.configuration.main_settings import GatewaySettings
from context_gateway.infrastructure.entrypoints.api.app_factory import create_app
from context_gateway.infrastructure.resolution.container import GatewayContainer, build_container

logger = structlog.get_logger()

DEFAULT_PORT = 3000
PORT_ATTEMPTS = 10
BIND_HOST = "0.0.0.0"

app = typer.Typer(
    name="context-gateway",
    help="Documentation MCP server with API key rotation over stdio or streamable HTTP.",
    add_completion=False,
)


def validate_cli_options(
    transport: str, port: Optional[int], api_key: Optional[str]
) -> TransportKind:
    """Reject flag combinations that do not apply to the chosen transport."""
    try:
        kind = TransportKind(transport)
    except ValueError:
        raise ConfigurationError(
            f"Invalid --transport value: '{transport}'. Must be one of: stdio, http."
        ) from None

    if kind is TransportKind.HTTP and api_key:
        raise ConfigurationError(
            "The --api-key flag is not allowed when using --transport http. "
            "Use header-based auth at the HTTP layer instead."
        )
    if kind is TransportKind.STDIO and port is not None:
        raise ConfigurationError("The --port flag is not allowed when using --transport stdio.")
    if port is not None and not 0 < port < 65536:
        raise ConfigurationError(f"Invalid --port value: '{port}'.")
    return kind


def find_available_port(start: int, attempts: int = PORT_ATTEMPTS, host: str = BIND_HOST) -> int:
    """First port in ``[start, start + attempts)`` that can be bound."""
    for port in range(start, start + attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
            try:
                probe.bind((host, port))
            except OSError as exc:
                if exc.errno != errno.EADDRINUSE:
                    raise ConfigurationError(f"Failed to start server: {exc}") from exc
                typer.echo(f"Port {port} is in use, trying port {port + 1}...", err=True)
                continue
            return port
    raise ConfigurationError(
        f"Failed to start server: no free port in range {start}-{start + attempts - 1}"
    )


def _serve_http(container: GatewayContainer, port: int) -> None:
    bound_port = find_available_port(port)
    typer.echo(
        f"Context Gateway Documentation MCP Server v{container.server_version} "
        f"running on HTTP at http://localhost:{bound_port}/mcp",
        err=True,
    )
    uvicorn.run(
        create_app(container),
        host=BIND_HOST,
        port=bound_port,
        log_config=None,
        log_level=container.settings.log_level.lower(),
    )


async def _serve_stdio(container: GatewayContainer) -> None:
    async with container.docs_client:
        typer.echo(
            f"Context Gateway Documentation MCP Server v{container.server_version} "
            "running on stdio",
            err=True,
        )
        await container.mcp_server.run_stdio_async()


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def serve(
    transport: Annotated[
        str, typer.Option("--transport", help="Transport type: stdio or http.")
    ] = TransportKind.STDIO.value,
    port: Annotated[
        Optional[int],
        typer.Option("--port", help=f"Port for HTTP transport (default {DEFAULT_PORT})."),
    ] = None,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", help="API key(s) for the docs backend, comma-separated."),
    ] = None,
) -> None:
    """Start the documentation MCP server."""
    try:
        kind = validate_cli_options(transport, port, api_key)
    except ConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from None

    settings = GatewaySettings()
    container = build_container(settings, kind, cli_api_key=api_key)

    try:
        if kind is TransportKind.HTTP:
            _serve_http(container, port or DEFAULT_PORT)
        else:
            asyncio.run(_serve_stdio(container))
    except ConfigurationError as exc:
        logger.error("Startup failed", error_type=type(exc).__name__, error_details=str(exc))
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
