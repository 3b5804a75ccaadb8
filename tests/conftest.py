"""Shared fixtures for Coway IoCare tests."""

from __future__ import annotations

import pytest

from custom_components.coway_iocare.coway_iocare.device import DeviceIdentity

from .common import BARCODE


@pytest.fixture
def device() -> DeviceIdentity:
    return DeviceIdentity(
        barcode=BARCODE,
        brand_code="CW",
        type_code="02EUZ",
        product_name="AIRMEGA",
        nickname="Living Room",
        model="AP-1512HHS",
    )
