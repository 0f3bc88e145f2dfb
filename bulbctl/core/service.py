"""Service layer used by the CLI and other synchronous frontends."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from bulbctl.api import Bulb
from bulbctl.core import commands
from bulbctl.core.codec import extract
from bulbctl.core.config import load_devices
from bulbctl.core.errors import DeviceSelectionError
from bulbctl.core.model import ConfiguredDevice, DeviceEndpoint
from bulbctl.transports.base import Transport
from bulbctl.transports.udp import UDPTransport

COMMANDS = {
    "info": commands.info,
    "set": commands.set_light_state,
    "details": commands.details,
    "schedule": commands.schedule,
    "cloud": commands.cloud,
    "daystat": commands.daystat,
}


class BulbService:
    def __init__(self, *, transport: Transport | None = None) -> None:
        loaded = load_devices()
        self.devices = loaded.devices
        self.load_warnings = loaded.warnings
        self.transport = transport or UDPTransport()

    def list_devices(self) -> list[ConfiguredDevice]:
        return sorted(self.devices.values(), key=lambda d: d.name)

    def resolve_endpoint(
        self,
        device_hint: str | None = None,
        ip: str | None = None,
        timeout_ms: int | None = None,
    ) -> DeviceEndpoint:
        if ip:
            endpoint = DeviceEndpoint(ip=ip)
        else:
            endpoint = self._resolve_device(device_hint).endpoint
        if timeout_ms is not None:
            endpoint = DeviceEndpoint(
                ip=endpoint.ip,
                timeout_ms=timeout_ms,
                port=endpoint.port,
                key=endpoint.key,
            )
        return endpoint

    def _resolve_device(self, device_hint: str | None) -> ConfiguredDevice:
        candidates = self.list_devices()
        if not candidates:
            raise DeviceSelectionError(
                "No devices configured. Pass --ip or add a devices.yaml registry."
            )

        if device_hint:
            hint = device_hint.lower()
            exact = [d for d in candidates if d.name.lower() == hint or (d.alias or "").lower() == hint]
            if exact:
                candidates = exact
            else:
                candidates = [
                    d
                    for d in candidates
                    if hint in d.name.lower()
                    or hint in (d.alias or "").lower()
                    or hint == (d.endpoint.ip or "")
                ]
            if not candidates:
                raise DeviceSelectionError(f"No device found matching '{device_hint}'")

        if len(candidates) > 1:
            candidate_desc = ", ".join(f"{d.name} ({d.endpoint.ip})" for d in candidates)
            raise DeviceSelectionError(
                f"Multiple candidate devices found: {candidate_desc}. Use --device to choose one."
            )

        return candidates[0]

    def run(
        self,
        command_name: str,
        *,
        device_hint: str | None = None,
        ip: str | None = None,
        timeout_ms: int | None = None,
        **params: Any,
    ) -> Any:
        """Run one of the named convenience calls and return its extracted result."""
        command, namespace, method = COMMANDS[command_name](**params)
        response = self.raw(command, device_hint=device_hint, ip=ip, timeout_ms=timeout_ms)
        return extract(response, namespace, method)

    def raw(
        self,
        command: Mapping[str, Any],
        *,
        device_hint: str | None = None,
        ip: str | None = None,
        timeout_ms: int | None = None,
    ) -> dict[str, Any]:
        endpoint = self.resolve_endpoint(device_hint=device_hint, ip=ip, timeout_ms=timeout_ms)
        bulb = Bulb.from_endpoint(endpoint, transport=self.transport)
        return asyncio.run(bulb.send(command))
