import re
from collections.abc import Mapping

_MAPPED_IPV4_PREFIX = "::ffff:"
_PRIVATE_172 = re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\.")


def _unmap(address: str) -> str:
    return address[len(_MAPPED_IPV4_PREFIX):] if address.startswith(_MAPPED_IPV4_PREFIX) else address


def _is_private(address: str) -> bool:
    return (
        address.startswith("10.")
        or address.startswith("192.168.")
        or _PRIVATE_172.match(address) is not None
    )


def resolve_client_address(headers: Mapping[str, str], peer_host: str | None) -> str | None:
    """Caller address: first public X-Forwarded-For hop, else its first hop, else the peer."""
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
        for hop in hops:
            plain = _unmap(hop)
            if not _is_private(plain):
                return plain
        if hops:
            return _unmap(hops[0])

    if peer_host:
        return _unmap(peer_host)
    return None
