"""Binary sensors for Coway IoCare purifiers.

One "change filter" problem sensor per filter reported by the purifier.
"""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import CowayIocareDataUpdateCoordinator
from .coway_iocare.decoder import filter_needs_change
from .coway_iocare.exceptions import CowayIocareDeviceOfflineError
from .coway_iocare.snapshot import DeviceSnapshot
from .entity import CowayIocareEntity
from .sensor import filter_display_name, filter_entry_at


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up filter binary sensors from a config entry.

    Args:
        hass: Home Assistant instance.
        entry: The config entry.
        async_add_entities: Callback to add entities.
    """
    coordinator: CowayIocareDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]

    added: set[int] = set()

    def _add_filter_sensors() -> None:
        try:
            filters = coordinator.snapshot.filters
        except CowayIocareDeviceOfflineError:
            return
        new_entities: list[BinarySensorEntity] = []
        for filter_entry in filters:
            if filter_entry.index in added:
                continue
            new_entities.append(
                CowayFilterChangeBinarySensor(coordinator, index=filter_entry.index)
            )
            added.add(filter_entry.index)
        if new_entities:
            async_add_entities(new_entities)

    _add_filter_sensors()
    remove = coordinator.async_add_listener(_add_filter_sensors)
    entry.async_on_unload(remove)


class CowayFilterChangeBinarySensor(CowayIocareEntity, BinarySensorEntity):
    """On when the filter should be replaced."""

    _attr_device_class = BinarySensorDeviceClass.PROBLEM
    _attr_icon = "mdi:air-filter"

    def __init__(self, coordinator: CowayIocareDataUpdateCoordinator, *, index: int) -> None:
        self._index = index
        self._attr_name = f"{filter_display_name(index)} change needed"
        super().__init__(coordinator, key=f"filter_{index}_change")

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        entry = filter_entry_at(snapshot, self._index)
        self._attr_is_on = None if entry is None else filter_needs_change(entry)
