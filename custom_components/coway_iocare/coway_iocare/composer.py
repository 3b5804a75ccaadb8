"""Control command composition.

The IoCare control endpoint resets the indicator light unless the light
function is sent with every request. A partial command list is therefore
merged over the device's current control status: when the caller does not set
the light, the current light value is resent unchanged. When that status
cannot be read, composition fails and nothing is sent.

This module intentionally avoids Home Assistant imports.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .codes import FUNCTION_VALUE_TYPES, FunctionId, Light
from .device import DeviceIdentity
from .exceptions import CowayIocareCompositionError, CowayIocareError
from .snapshot import ControlStatus


@dataclass(frozen=True)
class ControlCommand:
    """A single function change (`funcId` / `cmdVal`)."""

    function_id: FunctionId
    value: StrEnum

    def __post_init__(self) -> None:
        expected = FUNCTION_VALUE_TYPES[self.function_id]
        if not isinstance(self.value, expected):
            raise CowayIocareCompositionError(
                f"{self.function_id.name} expects a {expected.__name__} value, "
                f"got {self.value!r}"
            )

    def as_payload(self) -> dict[str, str]:
        return {"funcId": self.function_id.value, "cmdVal": self.value.value}


@dataclass(frozen=True)
class ControlRequest:
    """A complete control-device request body."""

    device_id: str
    commands: tuple[ControlCommand, ...]
    type_code: str
    is_multi_control: bool = False

    def as_payload(self) -> dict[str, Any]:
        return {
            "devId": self.device_id,
            "funcList": [command.as_payload() for command in self.commands],
            "dvcTypeCd": self.type_code,
            "isMultiControl": self.is_multi_control,
        }


def _unique_commands(commands: Iterable[ControlCommand]) -> list[ControlCommand]:
    seen: set[FunctionId] = set()
    result: list[ControlCommand] = []
    for command in commands:
        if command.function_id in seen:
            raise CowayIocareCompositionError(
                f"Duplicate command for {command.function_id.name}"
            )
        seen.add(command.function_id)
        result.append(command)
    return result


def needs_light_fallback(commands: Iterable[ControlCommand]) -> bool:
    return all(command.function_id is not FunctionId.LIGHT for command in commands)


def compose_control_request(
    commands: Iterable[ControlCommand],
    *,
    device: DeviceIdentity,
    current_light: Light | None = None,
) -> ControlRequest:
    """Build a control request from a partial command list.

    Args:
        commands: Commands the caller intends to apply.
        device: Target device.
        current_light: Light value currently set on the device. Required when
            `commands` does not include a light command.

    Returns:
        The complete request.

    Raises:
        CowayIocareCompositionError: On duplicate function ids, an empty list,
            or a missing light value.
    """
    composed = _unique_commands(commands)
    if not composed:
        raise CowayIocareCompositionError("No commands to send")

    if needs_light_fallback(composed):
        if current_light is None:
            raise CowayIocareCompositionError(
                "Current light value is required to compose this request"
            )
        composed.append(ControlCommand(FunctionId.LIGHT, current_light))

    return ControlRequest(
        device_id=device.barcode,
        commands=tuple(composed),
        type_code=device.type_code,
    )


async def async_compose_control_request(
    commands: Iterable[ControlCommand],
    *,
    device: DeviceIdentity,
    fetch_control_status: Callable[[], Awaitable[ControlStatus]],
) -> ControlRequest:
    """Compose a request, reading the current light only when it is missing.

    Raises:
        CowayIocareCompositionError: If the request cannot be composed,
            including when the control status read fails.
    """
    composed = _unique_commands(commands)
    if not composed or not needs_light_fallback(composed):
        return compose_control_request(composed, device=device)

    try:
        status = await fetch_control_status()
        current_light = status.light
    except CowayIocareError as err:
        raise CowayIocareCompositionError(
            f"Could not read current control status for {device.barcode}: {err}"
        ) from err

    return compose_control_request(
        composed, device=device, current_light=current_light
    )
