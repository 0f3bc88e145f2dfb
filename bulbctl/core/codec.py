"""Command framing: canonical JSON text wrapped in the XOR stream cipher."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from bulbctl.core.cipher import DEFAULT_KEY, decrypt, encrypt
from bulbctl.core.errors import ProtocolError


def encode_command(command: Mapping[str, Any], *, key: int = DEFAULT_KEY) -> bytes:
    text = json.dumps(command, separators=(",", ":"))
    return encrypt(text.encode("utf-8"), key)


def decode_response(datagram: bytes, *, key: int = DEFAULT_KEY) -> dict[str, Any]:
    plain = decrypt(datagram, key)
    try:
        text = plain.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"Reply is not valid UTF-8 after deciphering: {exc}") from exc

    try:
        loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Reply is not valid JSON: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ProtocolError(f"Reply must be a JSON object, got {type(loaded).__name__}")
    return loaded


def extract(response: Mapping[str, Any], namespace: str, method: str) -> Any:
    """Return ``response[namespace][method]`` or fail with a ProtocolError."""
    section = response.get(namespace)
    if not isinstance(section, Mapping) or method not in section:
        raise ProtocolError(f"Reply does not contain '{namespace}.{method}'")
    return section[method]
