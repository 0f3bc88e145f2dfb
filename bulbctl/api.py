"""Stable public API for talking to smart bulbs.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bulbctl.core import commands
from bulbctl.core.cipher import DEFAULT_KEY, decrypt, encrypt
from bulbctl.core.codec import decode_response, encode_command, extract
from bulbctl.core.errors import (
    BulbctlError,
    ConfigLoadError,
    ConfigurationError,
    ConfigValidationError,
    DeviceSelectionError,
    ExchangeTimeoutError,
    ProtocolError,
    TransportBindError,
    TransportError,
    TransportSendError,
)
from bulbctl.core.model import (
    DEFAULT_TIMEOUT_MS,
    DEVICE_PORT,
    ConfiguredDevice,
    DeviceEndpoint,
    LightState,
)
from bulbctl.transports.base import Transport
from bulbctl.transports.udp import UDPTransport

__all__ = [
    "BulbctlError",
    "ConfigLoadError",
    "ConfigurationError",
    "ConfigValidationError",
    "DeviceSelectionError",
    "ExchangeTimeoutError",
    "ProtocolError",
    "TransportError",
    "TransportBindError",
    "TransportSendError",
    "ConfiguredDevice",
    "DeviceEndpoint",
    "LightState",
    "Transport",
    "UDPTransport",
    "Bulb",
    "encrypt",
    "decrypt",
]


class Bulb:
    """Public client for a single bulb.

    Each call to `send` performs one request/response exchange on its own
    ephemeral UDP socket, so concurrent calls on one instance do not share
    state. The higher-level helpers are thin wrappers that build a command,
    send it, and pull the result out of the mirrored reply.
    """

    def __init__(
        self,
        ip: str | None = None,
        timeout: int = DEFAULT_TIMEOUT_MS,
        *,
        port: int = DEVICE_PORT,
        key: int = DEFAULT_KEY,
        transport: Transport | None = None,
    ) -> None:
        self.endpoint = DeviceEndpoint(ip=ip, timeout_ms=timeout or DEFAULT_TIMEOUT_MS, port=port, key=key)
        self._transport = transport or UDPTransport()

    @classmethod
    def from_endpoint(cls, endpoint: DeviceEndpoint, *, transport: Transport | None = None) -> Bulb:
        return cls(
            endpoint.ip,
            endpoint.timeout_ms,
            port=endpoint.port,
            key=endpoint.key,
            transport=transport,
        )

    @property
    def ip(self) -> str | None:
        return self.endpoint.ip

    @property
    def timeout(self) -> int:
        return self.endpoint.timeout_ms

    async def send(self, command: Mapping[str, Any]) -> dict[str, Any]:
        """Send a raw command dictionary and return the decoded reply."""
        if not self.endpoint.ip:
            raise ConfigurationError("IP not set.")
        payload = encode_command(command, key=self.endpoint.key)
        datagram = await self._transport.exchange(self.endpoint, payload)
        return decode_response(datagram, key=self.endpoint.key)

    async def _call(self, spec: commands.CommandSpec) -> Any:
        command, namespace, method = spec
        return extract(await self.send(command), namespace, method)

    async def info(self) -> dict[str, Any]:
        return await self._call(commands.info())

    async def set(
        self,
        power: bool = True,
        transition: int = 0,
        options: Mapping[str, Any] | LightState | None = None,
    ) -> dict[str, Any]:
        """Change power and light state, optionally fading over `transition` ms."""
        if isinstance(options, LightState):
            options = options.as_options()
        return await self._call(commands.set_light_state(power, transition, options))

    async def details(self) -> dict[str, Any]:
        return await self._call(commands.details())

    async def schedule(self) -> dict[str, Any]:
        return await self._call(commands.schedule())

    async def cloud(self) -> dict[str, Any]:
        return await self._call(commands.cloud())

    async def daystat(self, month: int | None = None, year: int | None = None) -> dict[str, Any]:
        """Usage statistics per day; defaults to the current month and year."""
        return await self._call(commands.daystat(month, year))

    def encrypt(self, data: bytes | bytearray, key: int | None = None) -> bytes:
        return encrypt(data, self.endpoint.key if key is None else key)

    def decrypt(self, data: bytes | bytearray, key: int | None = None) -> bytes:
        return decrypt(data, self.endpoint.key if key is None else key)
