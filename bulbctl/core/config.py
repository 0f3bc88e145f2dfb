"""Device registry loading and validation for YAML-based bulbctl configuration."""

from __future__ import annotations

import ipaddress
import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from bulbctl.core.errors import ConfigLoadError, ConfigValidationError
from bulbctl.core.model import DEFAULT_TIMEOUT_MS, DEVICE_PORT, ConfiguredDevice, DeviceEndpoint, LoadedDevices

REGISTRY_FILENAME = "devices.yaml"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("bulbctl.schemas").joinpath("devices.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def registry_paths() -> tuple[Path, Path]:
    """Registry files in load order; later files override earlier ones."""
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_data / "bulbctl" / REGISTRY_FILENAME, xdg_config / "bulbctl" / REGISTRY_FILENAME


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read device registry {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Device registry {path} must contain a mapping at root")
    return loaded


def _normalize_ip(value: str, *, context: str) -> str:
    try:
        return str(ipaddress.IPv4Address(value.strip()))
    except ValueError as exc:
        raise ConfigValidationError(f"{context} must be an IPv4 address, got '{value}'") from exc


def _build_devices(doc: dict[str, Any], source: Path) -> dict[str, ConfiguredDevice]:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    devices: dict[str, ConfiguredDevice] = {}
    for name, spec in doc["devices"].items():
        endpoint = DeviceEndpoint(
            ip=_normalize_ip(spec["ip"], context=f"devices.{name}.ip"),
            timeout_ms=int(spec.get("timeout_ms", DEFAULT_TIMEOUT_MS)),
            port=int(spec.get("port", DEVICE_PORT)),
        )
        devices[name] = ConfiguredDevice(name=name, endpoint=endpoint, alias=spec.get("alias"))
    return devices


def load_devices() -> LoadedDevices:
    devices: dict[str, ConfiguredDevice] = {}
    warnings: list[str] = []

    for path in registry_paths():
        if not path.is_file():
            continue
        LOGGER.debug("Loading device registry %s", path)
        for name, device in _build_devices(_read_yaml(path), path).items():
            if name in devices:
                warning = f"Device '{name}' from {path} overrides earlier definition"
                LOGGER.warning(warning)
                warnings.append(warning)
            devices[name] = device

    return LoadedDevices(devices=devices, warnings=tuple(warnings))
