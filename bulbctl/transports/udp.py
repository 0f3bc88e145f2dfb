"""UDP transport: one request/response exchange per socket."""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import Any

from bulbctl.core.errors import (
    ConfigurationError,
    ExchangeTimeoutError,
    TransportBindError,
    TransportSendError,
)
from bulbctl.core.model import DeviceEndpoint

LOGGER = logging.getLogger(__name__)


class _ExchangeProtocol(asyncio.DatagramProtocol):
    """Feeds the first datagram or transmit error into a single result future."""

    def __init__(self, result: asyncio.Future[bytes]) -> None:
        self._result = result

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        if self._result.done():
            LOGGER.debug("Dropping late datagram from %s:%s", *addr[:2])
            return
        self._result.set_result(data)

    def error_received(self, exc: Exception) -> None:
        if self._result.done():
            return
        error = TransportSendError(f"UDP send failed: {exc}")
        error.__cause__ = exc
        self._result.set_exception(error)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is None or self._result.done():
            return
        error = TransportSendError(f"UDP socket lost: {exc}")
        error.__cause__ = exc
        self._result.set_exception(error)


class _Session:
    """Ownership of one bound UDP socket for the duration of one exchange."""

    def __init__(self, transport: asyncio.DatagramTransport) -> None:
        self.transport = transport
        self.bound = True

    @property
    def local_addr(self) -> Any:
        return self.transport.get_extra_info("sockname")

    def close(self) -> None:
        if not self.bound:
            return
        self.bound = False
        self.transport.close()
        LOGGER.debug("Closed UDP session %s", self.local_addr)


class UDPTransport:
    async def exchange(self, endpoint: DeviceEndpoint, payload: bytes) -> bytes:
        if not endpoint.ip:
            raise ConfigurationError("IP not set.")

        loop = asyncio.get_running_loop()
        result: asyncio.Future[bytes] = loop.create_future()

        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _ExchangeProtocol(result),
                local_addr=("0.0.0.0", 0),
                family=socket.AF_INET,
            )
        except OSError as exc:
            raise TransportBindError(f"Could not bind UDP socket: {exc}") from exc

        session = _Session(transport)
        LOGGER.debug("Bound UDP session %s for %s:%s", session.local_addr, endpoint.ip, endpoint.port)
        try:
            try:
                transport.sendto(payload, (endpoint.ip, endpoint.port))
            except OSError as exc:
                raise TransportSendError(f"UDP send to {endpoint.ip}:{endpoint.port} failed: {exc}") from exc
            LOGGER.debug("Sent %d bytes to %s:%s", len(payload), endpoint.ip, endpoint.port)

            try:
                data = await asyncio.wait_for(result, timeout=endpoint.timeout_s)
            except asyncio.TimeoutError as exc:
                raise ExchangeTimeoutError(
                    f"Bulb at {endpoint.ip} did not reply within {endpoint.timeout_ms} ms"
                ) from exc
            LOGGER.debug("Received %d bytes from %s", len(data), endpoint.ip)
            return data
        finally:
            session.close()
