"""Internal Coway IoCare domain package.

This package holds the device synchronization and command translation core so
Home Assistant platform files can stay small and focused.

The package provides:
    - Vendor code enumerations
    - An immutable snapshot model and a single-slot state cache
    - A pure status decoder (vendor codes -> semantic values)
    - Command composition that preserves the indicator light
    - An aiohttp client and a control gateway
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
from .cache import StateCache
from .client import CowayIocareClient
from .codes import AirQuality, Fan, FunctionId, Light, Mode, Power
from .composer import (
    ControlCommand,
    ControlRequest,
    async_compose_control_request,
    compose_control_request,
)
from .decoder import (
    AirQualityBucket,
    LightState,
    PowerState,
    RunState,
    SemanticState,
    TargetMode,
    decode,
)
from .device import DeviceIdentity
from .gateway import ControlGateway, ControlResult
from .snapshot import ControlStatus, DeviceSnapshot, FilterEntry

__all__ = [
    "AirQuality",
    "AirQualityBucket",
    "ControlCommand",
    "ControlGateway",
    "ControlRequest",
    "ControlResult",
    "ControlStatus",
    "CowayIocareClient",
    "DeviceIdentity",
    "DeviceSnapshot",
    "Fan",
    "FilterEntry",
    "FunctionId",
    "Light",
    "LightState",
    "Mode",
    "Power",
    "PowerState",
    "RunState",
    "SemanticState",
    "StateCache",
    "TargetMode",
    "async_compose_control_request",
    "compose_control_request",
    "decode",
]
