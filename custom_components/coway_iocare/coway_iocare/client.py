"""Standalone async client for the IoCare cloud API.

The client performs the three requests the integration needs (home status,
control status and control-device) and unwraps the vendor response envelope.
It does not manage authentication: an already-issued access token is sent as
a bearer token.

This module intentionally avoids Home Assistant imports.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any, cast

import aiohttp
import async_timeout
from yarl import URL

from .codes import SUCCESS_CODE
from .composer import ControlRequest
from .device import DeviceIdentity
from .exceptions import (
    CowayIocareAuthError,
    CowayIocareParseError,
    CowayIocareTransportError,
)
from .snapshot import (
    ControlStatus,
    DeviceSnapshot,
    control_status_from_data,
    snapshot_from_home_data,
)

DEFAULT_BASE_URL = "https://iocareapi.iot.coway.com/api/v1"
_DEFAULT_TIMEOUT_SECONDS = 10


def home_path(device: DeviceIdentity) -> str:
    return f"/air/devices/{device.barcode}/home"


def control_status_path(device: DeviceIdentity) -> str:
    return f"/com/devices/{device.barcode}/control"


CONTROL_DEVICE_PATH = "/com/control-device"


def home_params(device: DeviceIdentity) -> dict[str, str]:
    return {
        "barcode": device.barcode,
        "dvcBrandCd": device.brand_code,
        "mqttDevice": "true",
        "orderNo": "undefined",
        "membershipYn": "N",
    }


def control_status_params(device: DeviceIdentity) -> dict[str, str]:
    return {
        "devId": device.barcode,
        "mqttDevice": "true",
        "dvcBrandCd": device.brand_code,
        "dvcTypeCd": device.type_code,
        "prodName": device.product_name,
    }


def envelope_code(body: Mapping[str, Any]) -> str:
    return str(body.get("code") or "").strip()


def unwrap_envelope(body: Any, *, endpoint: str) -> Any:
    """Return `data` from a successful response envelope.

    Raises:
        CowayIocareParseError: If the body is not an envelope or reports failure.
    """
    if not isinstance(body, Mapping):
        raise CowayIocareParseError(f"{endpoint} response was not a JSON object")
    obj = cast(Mapping[str, Any], body)
    code = envelope_code(obj)
    if code != SUCCESS_CODE:
        raise CowayIocareParseError(
            f"{endpoint} returned code={code or '<missing>'} "
            f"message={obj.get('message')!r}"
        )
    return obj.get("data")


class CowayIocareClient:
    """Async client for one IoCare device."""

    def __init__(
        self,
        *,
        device: DeviceIdentity,
        session: aiohttp.ClientSession,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout_seconds: int | None = None,
    ) -> None:
        self.device = device
        self.access_token = str(access_token or "")
        self.base_url = str(base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout_seconds = int(timeout_seconds or _DEFAULT_TIMEOUT_SECONDS)
        self.session = session

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def async_fetch_json(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform one request and return the decoded JSON body.

        Args:
            path: Endpoint path below the API base URL.
            method: HTTP method.
            params: Query parameters.
            payload: JSON request body.

        Returns:
            Parsed JSON (any JSON type).

        Raises:
            CowayIocareAuthError: If the token is rejected.
            CowayIocareTransportError: On network errors, timeouts and HTTP errors.
            CowayIocareParseError: If the body is not valid JSON.
        """
        url = URL(f"{self.base_url}{path}")
        if params:
            url = url.with_query(dict(params))
        headers = self._headers()
        if payload is not None:
            headers["Content-Type"] = "application/json"

        try:
            async with async_timeout.timeout(self.timeout_seconds):
                async with self.session.request(
                    method,
                    url,
                    headers=headers,
                    json=dict(payload) if payload is not None else None,
                ) as resp:
                    if resp.status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
                        raise CowayIocareAuthError(
                            f"{path} rejected the access token (HTTP {resp.status})",
                            endpoint=path,
                            device_id=self.device.barcode,
                        )
                    resp.raise_for_status()
                    text = await resp.text()
        except (asyncio.TimeoutError, aiohttp.ClientError) as err:
            raise CowayIocareTransportError(
                f"Error calling {path} for {self.device.barcode}: {err!r}",
                endpoint=path,
                device_id=self.device.barcode,
            ) from err

        try:
            return json.loads(text) if text else {}
        except json.JSONDecodeError as err:
            raise CowayIocareParseError(f"{path} returned invalid JSON: {err}") from err

    async def async_fetch_snapshot(self, *, sequence: int = 0) -> DeviceSnapshot:
        """Fetch the home status and build a snapshot."""
        path = home_path(self.device)
        body = await self.async_fetch_json(path, params=home_params(self.device))
        return snapshot_from_home_data(
            unwrap_envelope(body, endpoint=path), sequence=sequence
        )

    async def async_fetch_control_status(self) -> ControlStatus:
        """Fetch the current control values (read before composing commands)."""
        path = control_status_path(self.device)
        body = await self.async_fetch_json(
            path, params=control_status_params(self.device)
        )
        return control_status_from_data(unwrap_envelope(body, endpoint=path))

    async def async_control_device(self, request: ControlRequest) -> dict[str, Any]:
        """Send a composed control request.

        Returns:
            The raw response envelope. Envelope-level failure codes are not
            raised; callers decide how to report them.
        """
        try:
            body = await self.async_fetch_json(
                CONTROL_DEVICE_PATH, method="POST", payload=request.as_payload()
            )
        except CowayIocareParseError:
            # The request was delivered; an unreadable reply is not a failure.
            return {}
        if not isinstance(body, Mapping):
            return {}
        return dict(cast(Mapping[str, Any], body))
