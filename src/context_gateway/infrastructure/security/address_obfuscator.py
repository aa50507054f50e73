"""AES-256-CBC obfuscation of caller network addresses.

The encoded form is ``<iv hex>:<ciphertext hex>`` with a fresh IV per call.
Decoding is an offline capability and is not implemented here.
"""

from __future__ import annotations

import os
import re

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from context_gateway.infrastructure.observability.logger_factory_service import get_logger

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")
IV_BYTES = 16


def is_valid_secret(secret: str | None) -> bool:
    """Secret must be exactly 64 hex characters (32 bytes)."""
    return bool(secret) and _KEY_PATTERN.fullmatch(secret) is not None


class AddressObfuscator:
    """Encrypts addresses with a server-wide secret; passes them through if the secret is bad."""

    def __init__(self, secret: str) -> None:
        self._key: bytes | None = None
        if is_valid_secret(secret):
            self._key = bytes.fromhex(secret)
        else:
            logger.error(
                "Invalid encryption key format. Must be 64 hex characters.",
                error_type="ConfigurationError",
                error_details="client address will be sent unencrypted",
            )

    @property
    def enabled(self) -> bool:
        return self._key is not None

    def encode(self, address: str) -> str:
        if self._key is None:
            return address
        iv = os.urandom(IV_BYTES)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(address.encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return f"{iv.hex()}:{ciphertext.hex()}"


def encode_address(address: str, secret: str) -> str:
    """One-shot form of ``AddressObfuscator(secret).encode(address)``."""
    return AddressObfuscator(secret).encode(address)
