"""Vendor status and control codes.

The IoCare cloud encodes every status and control value as a short numeric
string. Keep these enums closed: decoding an unknown value is an error, not a
default.
"""

from __future__ import annotations

from enum import StrEnum

# Envelope `code` returned by every successful IoCare API call.
SUCCESS_CODE = "S1000"


class FunctionId(StrEnum):
    """Control function identifiers (`funcId`)."""

    POWER = "0001"
    MODE = "0002"
    FAN = "0003"
    LIGHT = "0007"


class Power(StrEnum):
    ON = "1"
    OFF = "0"


class Light(StrEnum):
    ON = "2"
    AQI_OFF = "1"
    OFF = "0"


class Fan(StrEnum):
    LOW = "1"
    MEDIUM = "2"
    HIGH = "3"
    OFF = "0"
    UNKNOWN = "99"


class Mode(StrEnum):
    MANUAL = "0"
    SMART = "1"
    SLEEP = "2"
    OFF = "4"
    RAPID = "5"
    SMART_ECO = "6"


class AirQuality(StrEnum):
    """Categorical indoor air quality (`IAQ.inairquality`)."""

    EXCELLENT = "1"
    GOOD = "2"
    FAIR = "3"
    INFERIOR = "4"


# Value enum accepted by each control function.
FUNCTION_VALUE_TYPES: dict[FunctionId, type[StrEnum]] = {
    FunctionId.POWER: Power,
    FunctionId.MODE: Mode,
    FunctionId.FAN: Fan,
    FunctionId.LIGHT: Light,
}
