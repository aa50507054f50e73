"""Caller-facing diagnostics for upstream rejections and terminal dispatch states."""

from __future__ import annotations

from context_gateway.core.value_objects.upstream_response import UpstreamResponse

DEFAULT_API_KEY_PREFIX = "ctx7sk"

EXHAUSTED_MESSAGE = "All API keys are rate-limited. Please try again later."

NOT_FINALIZED_MESSAGE = (
    "Documentation not found or not finalized for this library. This might have happened "
    "because you used an invalid Context7-compatible library ID. To get a valid "
    "Context7-compatible library ID, use the 'resolve-library-id' with the package name "
    "you wish to retrieve documentation for."
)

_QUOTA_WITH_KEY = (
    "Rate limited or quota exceeded. Upgrade your plan at https://context7.com/plans "
    "for higher limits."
)
_QUOTA_WITHOUT_KEY = (
    "Rate limited or quota exceeded. Create a free API key at https://context7.com/dashboard "
    "for higher limits."
)
_NOT_FOUND = (
    "The library you are trying to access does not exist. "
    "Please try with a different library ID."
)


def describe_upstream_error(
    response: UpstreamResponse,
    credential: str | None,
    api_key_prefix: str = DEFAULT_API_KEY_PREFIX,
) -> str:
    """Prefer the backend's own ``message``; fall back to a status-specific text."""
    backend_message = _backend_message(response)
    if backend_message:
        return backend_message

    status = response.status_code
    if status == 429:
        return _QUOTA_WITH_KEY if credential else _QUOTA_WITHOUT_KEY
    if status == 404:
        return _NOT_FOUND
    if status == 401:
        return (
            "Invalid API key. Please check your API key. "
            f"API keys should start with '{api_key_prefix}' prefix."
        )
    return f"Request failed with status {status}. Please try again later."


def _backend_message(response: UpstreamResponse) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None
