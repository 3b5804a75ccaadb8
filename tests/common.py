"""Payload builders shared by the Coway IoCare tests."""

from __future__ import annotations

import copy
from typing import Any, Callable
from unittest.mock import AsyncMock

from custom_components.coway_iocare.const import (
    CONF_ACCESS_TOKEN,
    CONF_BARCODE,
    CONF_BRAND_CODE,
    CONF_MODEL,
    CONF_NICKNAME,
    CONF_PRODUCT_NAME,
    CONF_TYPE_CODE,
)
from custom_components.coway_iocare.coordinator import (
    build_device_info,
    device_identity_from_config,
)
from custom_components.coway_iocare.coway_iocare.exceptions import (
    CowayIocareDeviceOfflineError,
)
from custom_components.coway_iocare.coway_iocare.snapshot import (
    DeviceSnapshot,
    snapshot_from_home_data,
)

BARCODE = "41102F9R2481600525"

ENTRY_DATA: dict[str, Any] = {
    CONF_BARCODE: BARCODE,
    CONF_BRAND_CODE: "CW",
    CONF_TYPE_CODE: "02EUZ",
    CONF_PRODUCT_NAME: "AIRMEGA",
    CONF_ACCESS_TOKEN: "token-abc",
    CONF_NICKNAME: "Living Room",
    CONF_MODEL: "AP-1512HHS",
}

_HOME_DATA: dict[str, Any] = {
    "filterList": [
        {
            "changeCycle": "3",
            "cycleInfo": "W",
            "filterCode": "3109143",
            "filterName": "Pre-filter",
            "filterPer": 80,
            "sort": 1,
            "lastChangeDate": "20250130",
        },
        {
            "changeCycle": "12",
            "cycleInfo": "M",
            "filterCode": "3109144",
            "filterName": "Max2 filter",
            "filterPer": 15,
            "sort": 2,
            "lastChangeDate": "20240601",
        },
    ],
    "IAQ": {
        "co2": "",
        "dustpm1": "",
        "dustpm10": "15",
        "dustpm25": "1",
        "humidity": "",
        "inairquality": "",
        "temperature": "",
        "vocs": "",
        "rpm": "",
    },
    "OAQ": {"address": "", "mainairgrade": ""},
    "prodStatus": {
        "airVolume": "1",
        "light": "2",
        "power": "1",
        "prodMode": "1",
    },
    "netStatus": True,
}


def home_data(
    *,
    prod_status: dict[str, Any] | None = None,
    iaq: dict[str, Any] | None = None,
    filters: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a home payload `data` section with overrides applied."""
    data = copy.deepcopy(_HOME_DATA)
    if prod_status:
        data["prodStatus"].update(prod_status)
    if iaq:
        data["IAQ"].update(iaq)
    if filters is not None:
        data["filterList"] = filters
    return data


def home_envelope(data: dict[str, Any] | None = None, *, code: str = "S1000") -> dict[str, Any]:
    return {
        "code": code,
        "message": "OK",
        "traceId": "trace",
        "data": home_data() if data is None else data,
    }


def control_status_envelope(light: str = "1") -> dict[str, Any]:
    return {
        "code": "S1000",
        "message": "OK",
        "traceId": "trace",
        "data": {
            "controlStatus": {
                "0001": "1",
                "0002": "1",
                "0003": "1",
                "0007": light,
                "offTimer": "0",
            },
            "netStatus": True,
        },
    }


def make_snapshot(sequence: int = 0, **overrides: Any) -> DeviceSnapshot:
    return snapshot_from_home_data(home_data(**overrides), sequence=sequence)


class CoordinatorStub:
    """Minimal coordinator stub used by platform tests.

    `current` holds the cached snapshot; `None` means no poll has succeeded.
    Setters are `AsyncMock`s so tests can assert on the intent sent.
    """

    def __init__(self, current: DeviceSnapshot | None = None) -> None:
        self.device = device_identity_from_config(ENTRY_DATA)
        self.device_info = build_device_info(self.device)
        self.current = current
        self.async_set_power = AsyncMock()
        self.async_set_target_mode = AsyncMock()
        self.async_set_fan_percentage = AsyncMock()
        self.async_set_light = AsyncMock()
        self._listeners: list[Callable[[], None]] = []

    @property
    def snapshot(self) -> DeviceSnapshot:
        if self.current is None:
            raise CowayIocareDeviceOfflineError(self.device.barcode)
        return self.current

    def async_add_listener(
        self, update_callback: Callable[[], None]
    ) -> Callable[[], None]:
        self._listeners.append(update_callback)

        def _unsub() -> None:
            self._listeners.remove(update_callback)

        return _unsub

    def fire_update(self) -> None:
        for cb in list(self._listeners):
            cb()
