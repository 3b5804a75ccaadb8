"""Constants for the Coway IoCare integration.

This module centralizes configuration keys, defaults, and platform registration.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Final

from homeassistant.const import Platform

DOMAIN: Final = "coway_iocare"

# Use a stable logger name so users can configure logging via
# `logger: default: ... logs: { custom_components.coway_iocare: debug }`.
LOGGER_NAME: Final = f"custom_components.{DOMAIN}"

CONF_BARCODE: Final = "barcode"
CONF_BRAND_CODE: Final = "brand_code"
CONF_TYPE_CODE: Final = "type_code"
CONF_PRODUCT_NAME: Final = "product_name"
CONF_NICKNAME: Final = "nickname"
CONF_MODEL: Final = "model"
CONF_ACCESS_TOKEN: Final = "access_token"

DEFAULT_SCAN_INTERVAL: Final = timedelta(seconds=10)
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

MANUFACTURER: Final = "Coway"

PLATFORMS: Final[list[Platform]] = [
    Platform.FAN,
    Platform.SENSOR,
    Platform.BINARY_SENSOR,
    Platform.SELECT,
]

# Filter list indices as reported by the purifier.
FILTER_NAMES: Final[dict[int, str]] = {
    0: "Pre Filter",
    1: "Main Filter",
}
