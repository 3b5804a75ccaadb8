"""Status decoder: raw vendor codes to semantic values.

Every function here is pure. Unknown vendor codes raise
`CowayIocareUnmodeledCodeError`; legitimately empty readings raise
`CowayIocareDataUnavailableError`. The reverse helpers at the bottom map user
intent back to vendor control codes.

This module intentionally avoids Home Assistant imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from .codes import AirQuality, Fan, Light, Mode, Power
from .exceptions import (
    CowayIocareDataUnavailableError,
    CowayIocareParseError,
    CowayIocareUnmodeledCodeError,
)
from .snapshot import DeviceSnapshot, FilterEntry

# Filters at or above this percentage are reported as OK.
FILTER_CHANGE_THRESHOLD = 20

# Particulate keys in fallback priority order.
PM25 = "dustpm25"
PM10 = "dustpm10"
PM1 = "dustpm1"
PARTICULATE_PRIORITY: tuple[str, ...] = (PM25, PM10, PM1)


class PowerState(StrEnum):
    ON = "on"
    OFF = "off"


class RunState(StrEnum):
    INACTIVE = "inactive"
    IDLE = "idle"
    PURIFYING = "purifying"


class TargetMode(StrEnum):
    AUTO = "auto"
    MANUAL = "manual"


class LightState(StrEnum):
    ON = "on"
    AQI_OFF = "aqi_off"
    OFF = "off"


class AirQualityBucket(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    INFERIOR = "inferior"
    POOR = "poor"
    UNKNOWN = "unknown"


# (minimum density, bucket), evaluated top-down.
_PARTICULATE_THRESHOLDS: tuple[tuple[int, AirQualityBucket], ...] = (
    (151, AirQualityBucket.POOR),
    (56, AirQualityBucket.INFERIOR),
    (36, AirQualityBucket.FAIR),
    (12, AirQualityBucket.GOOD),
    (0, AirQualityBucket.EXCELLENT),
)

_CATEGORICAL_AIR_QUALITY: dict[AirQuality, AirQualityBucket] = {
    AirQuality.EXCELLENT: AirQualityBucket.EXCELLENT,
    AirQuality.GOOD: AirQualityBucket.GOOD,
    AirQuality.FAIR: AirQualityBucket.FAIR,
    AirQuality.INFERIOR: AirQualityBucket.INFERIOR,
}

_FAN_PERCENT: dict[Fan, int] = {
    Fan.LOW: 33,
    Fan.MEDIUM: 66,
    Fan.HIGH: 100,
    Fan.OFF: 0,
    Fan.UNKNOWN: 0,
}

# Off maps to Auto: a powered-off purifier resumes its previous program when it
# is switched back on, so the target it will return to is the automatic one.
_TARGET_MODE: dict[Mode, TargetMode] = {
    Mode.SMART: TargetMode.AUTO,
    Mode.SMART_ECO: TargetMode.AUTO,
    Mode.RAPID: TargetMode.AUTO,
    Mode.SLEEP: TargetMode.AUTO,
    Mode.OFF: TargetMode.AUTO,
    Mode.MANUAL: TargetMode.MANUAL,
}

_LIGHT_STATE: dict[Light, LightState] = {
    Light.ON: LightState.ON,
    Light.AQI_OFF: LightState.AQI_OFF,
    Light.OFF: LightState.OFF,
}

_E = TypeVar("_E", bound=StrEnum)


def _parse_code(enum_type: type[_E], field: str, raw: str) -> _E:
    try:
        return enum_type(raw)
    except ValueError as err:
        raise CowayIocareUnmodeledCodeError(field, raw) from err


def raw_mode(snapshot: DeviceSnapshot) -> Mode:
    return _parse_code(Mode, "prodStatus.prodMode", snapshot.status_code("prodMode"))


def raw_fan(snapshot: DeviceSnapshot) -> Fan:
    return _parse_code(Fan, "prodStatus.airVolume", snapshot.status_code("airVolume"))


def decode_power(snapshot: DeviceSnapshot) -> PowerState:
    power = _parse_code(Power, "prodStatus.power", snapshot.status_code("power"))
    return PowerState.ON if power is Power.ON else PowerState.OFF


def decode_run_state(snapshot: DeviceSnapshot) -> RunState:
    if raw_mode(snapshot) is Mode.OFF:
        return RunState.INACTIVE
    if raw_fan(snapshot) is Fan.OFF:
        return RunState.IDLE
    return RunState.PURIFYING


def decode_target_mode(snapshot: DeviceSnapshot) -> TargetMode:
    return _TARGET_MODE[raw_mode(snapshot)]


def decode_fan_percent(snapshot: DeviceSnapshot) -> int:
    return _FAN_PERCENT[raw_fan(snapshot)]


def decode_light(snapshot: DeviceSnapshot) -> LightState:
    """Decode the indicator light.

    Raises:
        CowayIocareDataUnavailableError: If the light code is empty.
        CowayIocareUnmodeledCodeError: If the light code is unknown.
    """
    raw = snapshot.status_code("light")
    if raw == "":
        raise CowayIocareDataUnavailableError("prodStatus.light")
    light = _parse_code(Light, "prodStatus.light", raw)
    return _LIGHT_STATE[light]


def particulate_density(snapshot: DeviceSnapshot, key: str) -> int:
    """Return a particulate reading in µg/m³.

    Raises:
        CowayIocareDataUnavailableError: If the reading is empty.
        CowayIocareParseError: If the reading is not numeric.
    """
    raw = snapshot.iaq_reading(key)
    if raw == "":
        raise CowayIocareDataUnavailableError(f"IAQ.{key}")
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return int(float(raw))
    except ValueError as err:
        raise CowayIocareParseError(f"IAQ.{key} is not numeric: {raw!r}") from err


def categorical_air_quality(snapshot: DeviceSnapshot) -> AirQualityBucket | None:
    """Return the bucket from `IAQ.inairquality`, or None when empty/unknown."""
    raw = snapshot.iaq_reading("inairquality")
    try:
        return _CATEGORICAL_AIR_QUALITY[AirQuality(raw)]
    except ValueError:
        return None


def air_quality_from_density(density: int) -> AirQualityBucket:
    for minimum, bucket in _PARTICULATE_THRESHOLDS:
        if density >= minimum:
            return bucket
    raise CowayIocareUnmodeledCodeError("particulate density", density)


def decode_air_quality(snapshot: DeviceSnapshot) -> AirQualityBucket:
    """Resolve the indoor air quality bucket.

    The categorical code wins when recognized. Otherwise the first non-empty
    particulate reading (PM2.5, then PM10, then PM1) is bucketed.

    Raises:
        CowayIocareDataUnavailableError: If no categorical code and no
            particulate reading is available.
    """
    bucket = categorical_air_quality(snapshot)
    if bucket is not None:
        return bucket

    for key in PARTICULATE_PRIORITY:
        if snapshot.iaq_reading(key) != "":
            return air_quality_from_density(particulate_density(snapshot, key))

    raise CowayIocareDataUnavailableError("IAQ air quality")


def filter_needs_change(entry: FilterEntry) -> bool:
    return entry.percent_remaining < FILTER_CHANGE_THRESHOLD


@dataclass(frozen=True)
class FilterStatus:
    entry: FilterEntry
    needs_change: bool


@dataclass(frozen=True)
class SemanticState:
    """Decoded view of a snapshot.

    Unavailable readings are `None` (light, particulates) or
    `AirQualityBucket.UNKNOWN` (air quality).
    """

    power: PowerState
    run_state: RunState
    target_mode: TargetMode
    fan_percent: int
    light: LightState | None
    air_quality: AirQualityBucket
    pm25: int | None
    pm10: int | None
    filters: tuple[FilterStatus, ...]


def _optional_density(snapshot: DeviceSnapshot, key: str) -> int | None:
    try:
        return particulate_density(snapshot, key)
    except CowayIocareDataUnavailableError:
        return None


def decode(snapshot: DeviceSnapshot) -> SemanticState:
    """Decode every field of a snapshot.

    Raises:
        CowayIocareUnmodeledCodeError: If any status code is unknown.
        CowayIocareParseError: If the PM2.5 or PM10 reading is not numeric.
    """
    try:
        air_quality = decode_air_quality(snapshot)
    except (CowayIocareDataUnavailableError, CowayIocareParseError):
        # PM1 is only read here, so a malformed PM1 fallback is not fatal.
        air_quality = AirQualityBucket.UNKNOWN
    try:
        light: LightState | None = decode_light(snapshot)
    except CowayIocareDataUnavailableError:
        light = None

    return SemanticState(
        power=decode_power(snapshot),
        run_state=decode_run_state(snapshot),
        target_mode=decode_target_mode(snapshot),
        fan_percent=decode_fan_percent(snapshot),
        light=light,
        air_quality=air_quality,
        pm25=_optional_density(snapshot, PM25),
        pm10=_optional_density(snapshot, PM10),
        filters=tuple(
            FilterStatus(entry=entry, needs_change=filter_needs_change(entry))
            for entry in snapshot.filters
        ),
    )


# -----------------------------------------------------------------------------
# Intent -> vendor codes
# -----------------------------------------------------------------------------


def power_code(on: bool) -> Power:
    return Power.ON if on else Power.OFF


def mode_code_for_target(target: TargetMode) -> Mode:
    return Mode.SMART if target is TargetMode.AUTO else Mode.MANUAL


def fan_code_for_percent(percent: int | float) -> Fan:
    """Map a 0-100 speed to the nearest fan level (never Off)."""
    if percent < 0 or percent > 100:
        raise ValueError(f"Fan percentage out of range: {percent}")
    if percent > 66:
        return Fan.HIGH
    if percent > 33:
        return Fan.MEDIUM
    return Fan.LOW


def light_code_for_state(state: LightState) -> Light:
    for code, mapped in _LIGHT_STATE.items():
        if mapped is state:
            return code
    raise CowayIocareUnmodeledCodeError("light state", state)
