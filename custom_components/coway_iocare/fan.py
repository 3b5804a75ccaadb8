"""Fan entity for Coway IoCare purifiers.

The purifier itself: power, fan speed (three levels) and the auto/manual
target mode as preset modes. Every setter sends a single-function command.
"""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.fan import FanEntity, FanEntityFeature
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, LOGGER_NAME
from .coordinator import CowayIocareDataUpdateCoordinator
from .coway_iocare.decoder import (
    PowerState,
    TargetMode,
    decode_fan_percent,
    decode_light,
    decode_power,
    decode_run_state,
    decode_target_mode,
)
from .coway_iocare.exceptions import CowayIocareDataUnavailableError
from .coway_iocare.snapshot import DeviceSnapshot
from .entity import CowayIocareEntity

_LOGGER = logging.getLogger(LOGGER_NAME)

PRESET_MODES: list[str] = [mode.value for mode in TargetMode]


def _light_or_none(snapshot: DeviceSnapshot) -> str | None:
    try:
        return decode_light(snapshot).value
    except CowayIocareDataUnavailableError:
        return None


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up the purifier fan from a config entry.

    Args:
        hass: Home Assistant instance.
        entry: The config entry.
        async_add_entities: Callback to add entities.
    """
    coordinator: CowayIocareDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([CowayPurifierFan(coordinator)])


class CowayPurifierFan(CowayIocareEntity, FanEntity):
    """Air purifier exposed as a fan."""

    _attr_name = None
    _attr_translation_key = "purifier"
    _attr_supported_features = (
        FanEntityFeature.TURN_ON
        | FanEntityFeature.TURN_OFF
        | FanEntityFeature.SET_SPEED
        | FanEntityFeature.PRESET_MODE
    )
    _attr_speed_count = 3
    _attr_preset_modes = PRESET_MODES

    def __init__(self, coordinator: CowayIocareDataUpdateCoordinator) -> None:
        super().__init__(coordinator, key="purifier")

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        self._attr_is_on = decode_power(snapshot) is PowerState.ON
        self._attr_percentage = decode_fan_percent(snapshot)
        self._attr_preset_mode = decode_target_mode(snapshot).value
        self._attr_extra_state_attributes = {
            "run_state": decode_run_state(snapshot).value,
            "raw_mode": snapshot.status_code("prodMode") or None,
            "light": _light_or_none(snapshot),
        }
        _LOGGER.debug(
            "Fan state device=%s is_on=%s percentage=%s preset=%s",
            self._coordinator.device.barcode,
            self._attr_is_on,
            self._attr_percentage,
            self._attr_preset_mode,
        )

    async def async_turn_on(
        self,
        percentage: int | None = None,
        preset_mode: str | None = None,
        **kwargs: Any,
    ) -> None:
        await self._coordinator.async_set_power(True)
        if preset_mode is not None:
            await self.async_set_preset_mode(preset_mode)
        if percentage:
            await self._coordinator.async_set_fan_percentage(percentage)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self._coordinator.async_set_power(False)

    async def async_set_percentage(self, percentage: int) -> None:
        if percentage == 0:
            await self.async_turn_off()
            return
        if not 0 < percentage <= 100:
            raise HomeAssistantError(f"Invalid fan percentage: {percentage}")
        await self._coordinator.async_set_fan_percentage(percentage)

    async def async_set_preset_mode(self, preset_mode: str) -> None:
        if preset_mode not in PRESET_MODES:
            raise HomeAssistantError(f"Invalid preset mode: {preset_mode}")
        await self._coordinator.async_set_target_mode(TargetMode(preset_mode))
