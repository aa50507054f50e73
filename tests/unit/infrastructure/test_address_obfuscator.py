import re

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from context_gateway.infrastructure.security.address_obfuscator import (
    AddressObfuscator,
    encode_address,
    is_valid_secret,
)

SECRET = "00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff"
ENCODED_SHAPE = re.compile(r"^[0-9a-f]{32}:[0-9a-f]+$")


def decode(encoded: str, secret: str = SECRET) -> str:
    iv_hex, ciphertext_hex = encoded.split(":")
    decryptor = Cipher(
        algorithms.AES(bytes.fromhex(secret)), modes.CBC(bytes.fromhex(iv_hex))
    ).decryptor()
    padded = decryptor.update(bytes.fromhex(ciphertext_hex)) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")


def test_encoded_address_decrypts_with_the_shared_secret():
    encoded = AddressObfuscator(SECRET).encode("203.0.113.7")

    assert ENCODED_SHAPE.match(encoded)
    assert decode(encoded) == "203.0.113.7"


def test_each_encoding_uses_a_fresh_iv():
    obfuscator = AddressObfuscator(SECRET)

    first = obfuscator.encode("203.0.113.7")
    second = obfuscator.encode("203.0.113.7")

    assert first != second
    assert first.split(":")[0] != second.split(":")[0]
    assert decode(first) == decode(second) == "203.0.113.7"


def test_ipv6_address_fills_multiple_blocks():
    address = "2001:0db8:85a3:0000:0000:8a2e:0370:7334"

    encoded = encode_address(address, SECRET)

    assert len(encoded.split(":")[1]) == 96
    assert decode(encoded) == address


def test_invalid_secret_passes_address_through():
    obfuscator = AddressObfuscator("too-short")

    assert not obfuscator.enabled
    assert obfuscator.encode("203.0.113.7") == "203.0.113.7"


def test_secret_validation():
    assert is_valid_secret(SECRET)
    assert is_valid_secret(SECRET.upper())
    assert not is_valid_secret(SECRET[:-1])
    assert not is_valid_secret("zz" * 32)
    assert not is_valid_secret(None)
