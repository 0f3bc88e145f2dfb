from __future__ import annotations

import asyncio
import datetime as dt
from typing import Any

import pytest

from bulbctl.api import Bulb, ConfigurationError, LightState, ProtocolError, decrypt, encrypt
from bulbctl.core.codec import decode_response, encode_command
from bulbctl.core.commands import CLOUD, LIGHTING, SCHEDULE
from bulbctl.core.model import DeviceEndpoint


class FakeTransport:
    def __init__(self, reply: dict[str, Any]) -> None:
        self.reply = reply
        self.calls: list[tuple[DeviceEndpoint, dict[str, Any]]] = []

    async def exchange(self, endpoint: DeviceEndpoint, payload: bytes) -> bytes:
        self.calls.append((endpoint, decode_response(payload, key=endpoint.key)))
        return encode_command(self.reply, key=endpoint.key)


def test_defaults() -> None:
    bulb = Bulb("10.0.0.5")
    assert bulb.ip == "10.0.0.5"
    assert bulb.timeout == 3500
    assert bulb.endpoint.port == 9999
    assert bulb.endpoint.timeout_s == 3.5


def test_info_extracts_sysinfo() -> None:
    transport = FakeTransport({"system": {"get_sysinfo": {"alias": "Desk"}}})
    bulb = Bulb("10.0.0.5", transport=transport)

    assert asyncio.run(bulb.info()) == {"alias": "Desk"}
    endpoint, command = transport.calls[0]
    assert endpoint.ip == "10.0.0.5"
    assert command == {"system": {"get_sysinfo": {}}}


def test_send_returns_full_reply() -> None:
    reply = {"system": {"set_dev_alias": {"err_code": 0}}}
    bulb = Bulb("10.0.0.5", transport=FakeTransport(reply))
    assert asyncio.run(bulb.send({"system": {"set_dev_alias": {"alias": "Desk"}}})) == reply


def test_set_builds_transition_command() -> None:
    transport = FakeTransport({LIGHTING: {"transition_light_state": {"on_off": 0, "err_code": 0}}})
    bulb = Bulb("10.0.0.5", transport=transport)

    result = asyncio.run(bulb.set(False, 500, {"brightness": 30}))
    assert result == {"on_off": 0, "err_code": 0}
    _, command = transport.calls[0]
    assert command == {
        LIGHTING: {
            "transition_light_state": {
                "ignore_default": 1,
                "on_off": 0,
                "transition_period": 500,
                "color_temp": 0,
                "brightness": 30,
            }
        }
    }


def test_set_accepts_light_state() -> None:
    transport = FakeTransport({LIGHTING: {"transition_light_state": {}}})
    bulb = Bulb("10.0.0.5", transport=transport)

    asyncio.run(bulb.set(options=LightState(hue=120, saturation=80, color_temp=2700)))
    params = transport.calls[0][1][LIGHTING]["transition_light_state"]
    assert params["on_off"] == 1
    assert params["hue"] == 120
    assert params["saturation"] == 80
    assert params["color_temp"] == 2700
    assert "brightness" not in params


def test_schedule_cloud_details() -> None:
    reply = {
        SCHEDULE: {"get_rules": {"rule_list": []}},
        CLOUD: {"get_info": {"binded": 0}},
        LIGHTING: {"get_light_details": {"lamp_beam_angle": 150}},
    }
    bulb = Bulb("10.0.0.5", transport=FakeTransport(reply))

    assert asyncio.run(bulb.schedule()) == {"rule_list": []}
    assert asyncio.run(bulb.cloud()) == {"binded": 0}
    assert asyncio.run(bulb.details()) == {"lamp_beam_angle": 150}


def test_daystat_defaults_to_current_month() -> None:
    transport = FakeTransport({SCHEDULE: {"get_daystat": {"day_list": []}}})
    bulb = Bulb("10.0.0.5", transport=transport)

    today = dt.date.today()
    asyncio.run(bulb.daystat())
    asyncio.run(bulb.daystat(2, 2017))
    assert transport.calls[0][1] == {SCHEDULE: {"get_daystat": {"month": today.month, "year": today.year}}}
    assert transport.calls[1][1] == {SCHEDULE: {"get_daystat": {"month": 2, "year": 2017}}}


def test_reply_without_expected_section_is_protocol_error() -> None:
    bulb = Bulb("10.0.0.5", transport=FakeTransport({"system": {"err_code": -1}}))
    with pytest.raises(ProtocolError):
        asyncio.run(bulb.info())


def test_missing_ip_rejected_before_transport() -> None:
    transport = FakeTransport({})
    with pytest.raises(ConfigurationError, match="IP not set"):
        asyncio.run(Bulb(transport=transport).info())
    assert transport.calls == []


def test_instance_cipher_forwards_endpoint_key() -> None:
    bulb = Bulb("10.0.0.5", key=0x42)
    assert bulb.encrypt(b"hello") == encrypt(b"hello", 0x42)
    assert bulb.decrypt(bulb.encrypt(b"hello")) == b"hello"
    assert Bulb("10.0.0.5").encrypt(b"hello") == encrypt(b"hello")
    assert decrypt(bulb.encrypt(b"hello", 0xAB)) == b"hello"


def test_custom_key_used_on_the_wire() -> None:
    transport = FakeTransport({"system": {"get_sysinfo": {"alias": "Desk"}}})
    bulb = Bulb("10.0.0.5", key=0x10, transport=transport)
    assert asyncio.run(bulb.info()) == {"alias": "Desk"}
    assert transport.calls[0][0].key == 0x10


def test_from_endpoint() -> None:
    endpoint = DeviceEndpoint(ip="10.0.0.9", timeout_ms=1200, port=10000)
    bulb = Bulb.from_endpoint(endpoint)
    assert bulb.endpoint == endpoint
