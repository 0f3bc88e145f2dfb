"""Typer CLI entrypoint."""

from __future__ import annotations

import json
from typing import Any

import typer

from bulbctl.core.errors import BulbctlError
from bulbctl.core.model import LightState
from bulbctl.core.service import BulbService

app = typer.Typer(help="Local UDP control for smart bulbs")

DeviceOption = typer.Option(None, "--device", help="Registered device name, alias, or IP")
IPOption = typer.Option(None, "--ip", help="Bulb IP address (overrides --device)")
TimeoutOption = typer.Option(None, "--timeout-ms", help="Reply timeout in milliseconds")


def _build_service() -> BulbService:
    service = BulbService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _echo_json(value: Any) -> None:
    typer.echo(json.dumps(value, indent=2, sort_keys=True))


def _run(command_name: str, device: str | None, ip: str | None, timeout_ms: int | None, **params: Any) -> None:
    try:
        service = _build_service()
        result = service.run(command_name, device_hint=device, ip=ip, timeout_ms=timeout_ms, **params)
        _echo_json(result)
    except BulbctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("devices")
def list_devices() -> None:
    """List devices from the registry."""
    try:
        service = _build_service()
        devices = service.list_devices()
        if not devices:
            typer.echo("No devices configured")
            return

        for device in devices:
            alias = f" ({device.alias})" if device.alias else ""
            typer.echo(
                f"{device.name}{alias}: {device.endpoint.ip}:{device.endpoint.port} "
                f"timeout={device.endpoint.timeout_ms}ms"
            )
    except BulbctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("info")
def info(
    device: str | None = DeviceOption,
    ip: str | None = IPOption,
    timeout_ms: int | None = TimeoutOption,
) -> None:
    """Print system information reported by the bulb."""
    _run("info", device, ip, timeout_ms)


@app.command("details")
def details(
    device: str | None = DeviceOption,
    ip: str | None = IPOption,
    timeout_ms: int | None = TimeoutOption,
) -> None:
    """Print lamp hardware details."""
    _run("details", device, ip, timeout_ms)


@app.command("schedule")
def schedule(
    device: str | None = DeviceOption,
    ip: str | None = IPOption,
    timeout_ms: int | None = TimeoutOption,
) -> None:
    """Print schedule rules stored on the bulb."""
    _run("schedule", device, ip, timeout_ms)


@app.command("cloud")
def cloud(
    device: str | None = DeviceOption,
    ip: str | None = IPOption,
    timeout_ms: int | None = TimeoutOption,
) -> None:
    """Print cloud binding status."""
    _run("cloud", device, ip, timeout_ms)


@app.command("daystat")
def daystat(
    month: int | None = typer.Option(None, "--month", min=1, max=12, help="Month 1-12 (default: current)"),
    year: int | None = typer.Option(None, "--year", help="Full year (default: current)"),
    device: str | None = DeviceOption,
    ip: str | None = IPOption,
    timeout_ms: int | None = TimeoutOption,
) -> None:
    """Print per-day usage statistics for a month."""
    _run("daystat", device, ip, timeout_ms, month=month, year=year)


@app.command("set")
def set_state(
    off: bool = typer.Option(False, "--off", help="Turn the bulb off instead of on"),
    transition: int = typer.Option(0, "--transition", min=0, help="Transition period in ms"),
    brightness: int | None = typer.Option(None, "--brightness", min=0, max=100),
    hue: int | None = typer.Option(None, "--hue", min=0, max=360),
    saturation: int | None = typer.Option(None, "--saturation", min=0, max=100),
    color_temp: int | None = typer.Option(None, "--color-temp", min=0, help="Kelvin; 0 selects color mode"),
    mode: str | None = typer.Option(None, "--mode", help="Light mode, e.g. normal or circadian"),
    device: str | None = DeviceOption,
    ip: str | None = IPOption,
    timeout_ms: int | None = TimeoutOption,
) -> None:
    """Change power, brightness, and color of the bulb."""
    state = LightState(
        mode=mode,
        hue=hue,
        saturation=saturation,
        color_temp=color_temp,
        brightness=brightness,
    )
    _run(
        "set",
        device,
        ip,
        timeout_ms,
        power=not off,
        transition=transition,
        options=state.as_options(),
    )


@app.command("raw")
def raw(
    command: str = typer.Argument(..., help='JSON command, e.g. \'{"system":{"get_sysinfo":{}}}\''),
    device: str | None = DeviceOption,
    ip: str | None = IPOption,
    timeout_ms: int | None = TimeoutOption,
) -> None:
    """Send an arbitrary JSON command and print the full reply."""
    try:
        parsed = json.loads(command)
    except json.JSONDecodeError as exc:
        typer.echo(f"Error: command is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=1) from None
    if not isinstance(parsed, dict):
        typer.echo("Error: command must be a JSON object", err=True)
        raise typer.Exit(code=1)

    try:
        service = _build_service()
        _echo_json(service.raw(parsed, device_hint=device, ip=ip, timeout_ms=timeout_ms))
    except BulbctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
