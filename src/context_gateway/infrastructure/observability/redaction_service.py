import re
from typing import Any

# (prefix)(secret) pairs; group 2 is replaced
SECRET_PATTERNS = [
    r"(Bearer\s+)([a-zA-Z0-9\-\._~+/=]+)",
    r"(ctx7sk)([a-zA-Z0-9\-_]+)",
    r"((?:x-)?api[-_]key\s*[:=]\s*)(['\"]?[a-zA-Z0-9\-\._~+/=]+['\"]?)",
]

SENSITIVE_KEYS = {
    "authorization",
    "api_key",
    "api-key",
    "apikey",
    "credential",
    "token",
    "password",
    "secret",
}


def fingerprint(credential: str | None) -> str | None:
    """Short, non-reversible label for a credential, safe to log."""
    if not credential:
        return None
    if len(credential) <= 8:
        return "****"
    return f"{credential[:6]}…{credential[-4:]}"


def redact_text(text: str) -> str:
    """Redacts secrets from a string using regex patterns."""
    if not text:
        return text

    redacted_text = text
    for pattern in SECRET_PATTERNS:
        redacted_text = re.sub(pattern, r"\1[REDACTED]", redacted_text, flags=re.IGNORECASE)
    return redacted_text


def redact_value(value: Any) -> Any:
    """Recursive helper to redact values in dicts/lists."""
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return redact_dict(value)
    if isinstance(value, (list, tuple)):
        return [redact_value(item) for item in value]
    return value


def redact_dict(obj: dict[str, Any]) -> dict[str, Any]:
    """Redacts sensitive keys and values in a dictionary (recursive)."""
    new_obj = {}
    for k, v in obj.items():
        key_lower = str(k).lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            new_obj[k] = "[REDACTED]"
        else:
            new_obj[k] = redact_value(v)
    return new_obj
