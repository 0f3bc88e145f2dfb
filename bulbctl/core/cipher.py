"""Running-key XOR stream cipher used to obfuscate bulb traffic.

This is obfuscation only: there is no authentication and no integrity check.
"""

from __future__ import annotations

DEFAULT_KEY = 0xAB


def _check_key(key: int) -> None:
    if not 0 <= key <= 0xFF:
        raise ValueError(f"Cipher key must be a single byte (0-255), got {key}")


def encrypt(data: bytes | bytearray, key: int = DEFAULT_KEY) -> bytes:
    """Encrypt ``data``; each output byte becomes the key for the next one."""
    _check_key(key)
    out = bytearray(len(data))
    for i, b in enumerate(data):
        key = b ^ key
        out[i] = key
    return bytes(out)


def decrypt(data: bytes | bytearray, key: int = DEFAULT_KEY) -> bytes:
    """Decrypt ``data``; each ciphertext byte becomes the key for the next one."""
    _check_key(key)
    out = bytearray(len(data))
    for i, c in enumerate(data):
        out[i] = c ^ key
        key = c
    return bytes(out)
