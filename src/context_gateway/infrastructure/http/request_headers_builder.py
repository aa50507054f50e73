import string
from urllib.parse import quote

from context_gateway.core.application.ports.request_headers_port import RequestHeadersPort
from context_gateway.core.value_objects.request_context import RequestContext
from context_gateway.infrastructure.security.address_obfuscator import AddressObfuscator

SOURCE_HEADER = "X-Context7-Source"
SOURCE_TAG = "mcp-server"
SERVER_VERSION_HEADER = "X-Context7-Server-Version"
CLIENT_IP_HEADER = "mcp-client-ip"
CLIENT_IDE_HEADER = "X-Context7-Client-IDE"
CLIENT_VERSION_HEADER = "X-Context7-Client-Version"
TRANSPORT_HEADER = "X-Context7-Transport"

# Printable ASCII without "%" and without control whitespace.
_HEADER_SAFE = "".join(ch for ch in string.printable if ch not in "%\t\n\r\x0b\x0c")


def header_safe(value: str) -> str:
    """Percent-encode anything outside printable ASCII so httpx can send the value."""
    return quote(value, safe=_HEADER_SAFE)


class RequestHeadersBuilder(RequestHeadersPort):
    """Outbound headers for the docs backend; only present context fields produce headers."""

    def __init__(self, server_version: str, obfuscator: AddressObfuscator) -> None:
        self._server_version = server_version
        self._obfuscator = obfuscator

    def build(self, context: RequestContext) -> dict[str, str]:
        headers = {
            SOURCE_HEADER: SOURCE_TAG,
            SERVER_VERSION_HEADER: self._server_version,
        }
        if context.client_address:
            headers[CLIENT_IP_HEADER] = self._obfuscator.encode(context.client_address)
        if context.credential:
            headers["Authorization"] = f"Bearer {header_safe(context.credential)}"
        identity = context.client_identity
        if identity is not None and identity.name:
            headers[CLIENT_IDE_HEADER] = header_safe(identity.name)
        if identity is not None and identity.version:
            headers[CLIENT_VERSION_HEADER] = header_safe(identity.version)
        if context.transport:
            headers[TRANSPORT_HEADER] = context.transport.value
        return headers
