"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol

from bulbctl.core.model import DeviceEndpoint


class Transport(Protocol):
    async def exchange(self, endpoint: DeviceEndpoint, payload: bytes) -> bytes:
        """Send one datagram to the device and return its first reply."""
