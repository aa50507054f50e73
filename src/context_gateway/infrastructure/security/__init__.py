from context_gateway.infrastructure.security.address_obfuscator import (
    AddressObfuscator,
    encode_address,
    is_valid_secret,
)

__all__ = ["AddressObfuscator", "encode_address", "is_valid_secret"]
