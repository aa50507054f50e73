from collections.abc import Mapping

# Checked in order after the Authorization header
API_KEY_HEADERS = ("context7-api-key", "x-api-key", "context7_api_key", "x_api_key")

_BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    if authorization.startswith(_BEARER_PREFIX):
        return authorization[len(_BEARER_PREFIX):].strip() or None
    return authorization


def extract_credential(headers: Mapping[str, str]) -> str | None:
    """Caller-supplied API key or token, from the first header that carries one."""
    token = extract_bearer_token(headers.get("authorization"))
    if token:
        return token
    for name in API_KEY_HEADERS:
        value = headers.get(name)
        if value:
            return value
    return None
