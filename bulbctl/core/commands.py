"""Command builders for the bulb convenience calls.

Each builder returns ``(command, namespace, method)``: the dictionary to send
and the path under which the device echoes its result.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from typing import Any

SYSTEM = "system"
LIGHTING = "smartlife.iot.smartbulb.lightingservice"
SCHEDULE = "smartlife.iot.common.schedule"
CLOUD = "smartlife.iot.common.cloud"

Command = dict[str, dict[str, dict[str, Any]]]
CommandSpec = tuple[Command, str, str]


def _call(namespace: str, method: str, params: Mapping[str, Any] | None = None) -> CommandSpec:
    return {namespace: {method: dict(params or {})}}, namespace, method


def info() -> CommandSpec:
    return _call(SYSTEM, "get_sysinfo")


def set_light_state(
    power: bool = True,
    transition: int = 0,
    options: Mapping[str, Any] | None = None,
) -> CommandSpec:
    state = {"color_temp": 0, **(options or {})}
    return _call(
        LIGHTING,
        "transition_light_state",
        {
            "ignore_default": 1,
            "on_off": 1 if power else 0,
            "transition_period": transition,
            **state,
        },
    )


def details() -> CommandSpec:
    return _call(LIGHTING, "get_light_details")


def schedule() -> CommandSpec:
    return _call(SCHEDULE, "get_rules")


def cloud() -> CommandSpec:
    return _call(CLOUD, "get_info")


def daystat(month: int | None = None, year: int | None = None, *, today: dt.date | None = None) -> CommandSpec:
    today = today or dt.date.today()
    return _call(
        SCHEDULE,
        "get_daystat",
        {"month": month or today.month, "year": year or today.year},
    )
