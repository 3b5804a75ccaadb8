"""Select entity for the purifier indicator light."""

from __future__ import annotations

from homeassistant.components.select import SelectEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import CowayIocareDataUpdateCoordinator
from .coway_iocare.decoder import LightState, decode_light
from .coway_iocare.exceptions import CowayIocareDataUnavailableError
from .coway_iocare.snapshot import DeviceSnapshot
from .entity import CowayIocareEntity


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    coordinator: CowayIocareDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([CowayLightSelect(coordinator)])


class CowayLightSelect(CowayIocareEntity, SelectEntity):
    """Indicator light: on, air quality light off, or off."""

    _attr_name = "Indicator light"
    _attr_translation_key = "light"
    _attr_icon = "mdi:lightbulb"
    _attr_options = [state.value for state in LightState]

    def __init__(self, coordinator: CowayIocareDataUpdateCoordinator) -> None:
        super().__init__(coordinator, key="light")

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        try:
            self._attr_current_option = decode_light(snapshot).value
        except CowayIocareDataUnavailableError:
            self._attr_current_option = None

    async def async_select_option(self, option: str) -> None:
        if option not in self._attr_options:
            raise HomeAssistantError(f"Invalid light option: {option}")
        await self._coordinator.async_set_light(LightState(option))
