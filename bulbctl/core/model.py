"""Core data models used across the client, registry, service, and CLI."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from bulbctl.core.cipher import DEFAULT_KEY

DEVICE_PORT = 9999
DEFAULT_TIMEOUT_MS = 3500


@dataclass(frozen=True)
class DeviceEndpoint:
    ip: str | None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    port: int = DEVICE_PORT
    key: int = DEFAULT_KEY

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass(frozen=True)
class ConfiguredDevice:
    name: str
    endpoint: DeviceEndpoint
    alias: str | None = None


@dataclass(frozen=True)
class LoadedDevices:
    devices: dict[str, ConfiguredDevice]
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class LightState:
    mode: str | None = None
    hue: int | None = None
    saturation: int | None = None
    color_temp: int | None = None
    brightness: int | None = None

    def as_options(self) -> dict[str, int | str]:
        return {name: value for name, value in asdict(self).items() if value is not None}
