import re

from context_gateway.core.value_objects.client_identity import ClientIdentity

# "Cursor/2.2.44 (darwin arm64)", "claude-code/2.0.71"
_LEADING_PRODUCT = re.compile(r"^([^/\s]+)/([^\s(]+)")


def parse_user_agent(user_agent: str | None) -> ClientIdentity | None:
    """Best-effort ``name/version`` extraction from a free-form client description."""
    if not user_agent:
        return None
    match = _LEADING_PRODUCT.match(user_agent)
    if match is None:
        return None
    return ClientIdentity(name=match.group(1), version=match.group(2))
