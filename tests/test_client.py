"""Tests for the standalone IoCare API client."""

from __future__ import annotations

import json
from typing import Any, cast

import aiohttp
import pytest

from custom_components.coway_iocare.coway_iocare.client import (
    CONTROL_DEVICE_PATH,
    CowayIocareClient,
    unwrap_envelope,
)
from custom_components.coway_iocare.coway_iocare.codes import FunctionId, Light, Power
from custom_components.coway_iocare.coway_iocare.composer import (
    ControlCommand,
    compose_control_request,
)
from custom_components.coway_iocare.coway_iocare.device import DeviceIdentity
from custom_components.coway_iocare.coway_iocare.exceptions import (
    CowayIocareAuthError,
    CowayIocareParseError,
    CowayIocareTransportError,
)

from .common import control_status_envelope, home_envelope


class _Resp:
    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self._text = body if isinstance(body, str) else json.dumps(body)

    async def text(self) -> str:
        return self._text

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=cast(Any, None),
                history=(),
                status=self.status,
                message="err",
                headers=None,
            )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class _Session:
    def __init__(self, *responses: _Resp | Exception) -> None:
        self._queue = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: Any, **kwargs: Any) -> _Resp:
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _client(device: DeviceIdentity, session: _Session) -> CowayIocareClient:
    return CowayIocareClient(
        device=device,
        access_token="token-abc",
        session=cast(aiohttp.ClientSession, session),
    )


async def test_fetch_snapshot_builds_home_request(device: DeviceIdentity) -> None:
    session = _Session(_Resp(200, home_envelope()))

    snapshot = await _client(device, session).async_fetch_snapshot(sequence=4)

    assert snapshot.sequence == 4
    assert snapshot.status_code("power") == "1"

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"].path == f"/api/v1/air/devices/{device.barcode}/home"
    assert call["url"].query["barcode"] == device.barcode
    assert call["url"].query["dvcBrandCd"] == "CW"
    assert call["url"].query["mqttDevice"] == "true"
    assert call["headers"]["Authorization"] == "Bearer token-abc"
    assert call["json"] is None


async def test_fetch_control_status_builds_control_request(device: DeviceIdentity) -> None:
    session = _Session(_Resp(200, control_status_envelope(light="0")))

    status = await _client(device, session).async_fetch_control_status()

    assert status.light is Light.OFF
    query = session.calls[0]["url"].query
    assert session.calls[0]["url"].path.endswith(f"/com/devices/{device.barcode}/control")
    assert query["devId"] == device.barcode
    assert query["dvcTypeCd"] == "02EUZ"
    assert query["prodName"] == "AIRMEGA"


async def test_control_device_posts_composed_body(device: DeviceIdentity) -> None:
    session = _Session(_Resp(200, {"code": "S1000", "message": "OK"}))
    request = compose_control_request(
        [ControlCommand(FunctionId.POWER, Power.ON)],
        device=device,
        current_light=Light.ON,
    )

    response = await _client(device, session).async_control_device(request)

    assert response["code"] == "S1000"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"].path.endswith(CONTROL_DEVICE_PATH)
    assert call["json"] == request.as_payload()
    assert call["headers"]["Content-Type"] == "application/json"


async def test_control_device_tolerates_unreadable_reply(device: DeviceIdentity) -> None:
    session = _Session(_Resp(200, "<html>ok</html>"))
    request = compose_control_request(
        [ControlCommand(FunctionId.LIGHT, Light.OFF)], device=device
    )

    assert await _client(device, session).async_control_device(request) == {}


@pytest.mark.parametrize("status", [401, 403])
async def test_rejected_token_raises_auth_error(device: DeviceIdentity, status: int) -> None:
    session = _Session(_Resp(status, {}))

    with pytest.raises(CowayIocareAuthError) as err:
        await _client(device, session).async_fetch_snapshot()
    assert err.value.device_id == device.barcode


async def test_http_error_raises_transport_error_with_context(device: DeviceIdentity) -> None:
    session = _Session(_Resp(502, "bad gateway"))

    with pytest.raises(CowayIocareTransportError) as err:
        await _client(device, session).async_fetch_snapshot()
    assert err.value.endpoint == f"/air/devices/{device.barcode}/home"
    assert err.value.device_id == device.barcode


async def test_network_error_raises_transport_error(device: DeviceIdentity) -> None:
    session = _Session(aiohttp.ClientConnectionError("down"))

    with pytest.raises(CowayIocareTransportError):
        await _client(device, session).async_fetch_control_status()


async def test_invalid_json_raises_parse_error(device: DeviceIdentity) -> None:
    session = _Session(_Resp(200, "{not json"))

    with pytest.raises(CowayIocareParseError):
        await _client(device, session).async_fetch_snapshot()


async def test_failure_envelope_raises_parse_error(device: DeviceIdentity) -> None:
    session = _Session(_Resp(200, home_envelope(code="E0001")))

    with pytest.raises(CowayIocareParseError):
        await _client(device, session).async_fetch_snapshot()


def test_unwrap_envelope_requires_object() -> None:
    with pytest.raises(CowayIocareParseError):
        unwrap_envelope([], endpoint="/x")
    assert unwrap_envelope({"code": "S1000", "data": {"a": 1}}, endpoint="/x") == {"a": 1}


def test_no_token_sends_no_authorization_header(device: DeviceIdentity) -> None:
    client = CowayIocareClient(
        device=device, session=cast(aiohttp.ClientSession, _Session())
    )
    assert "Authorization" not in client._headers()
