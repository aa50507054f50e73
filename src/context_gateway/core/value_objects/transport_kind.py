from enum import StrEnum


class TransportKind(StrEnum):
    """Closed set of inbound transports a call can arrive through."""

    STDIO = "stdio"
    HTTP = "http"
