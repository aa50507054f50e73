from enum import StrEnum


class DispatchStatus(StrEnum):
    """Terminal state of a logical call."""

    SUCCEEDED = "succeeded"
    EMPTY = "empty"
    UPSTREAM_ERROR = "upstream_error"
    NETWORK_ERROR = "network_error"
    EXHAUSTED = "exhausted"
