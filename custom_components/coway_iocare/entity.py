"""Shared entity plumbing for Coway IoCare platforms.

Entities subscribe to the coordinator directly and recompute their state from
the cached snapshot on every notification. An entity is available whenever a
snapshot exists, so a failed poll keeps showing the last good readings.
"""

from __future__ import annotations

from typing import Callable

from homeassistant.helpers.entity import Entity

from .coordinator import CowayIocareDataUpdateCoordinator
from .coway_iocare.exceptions import CowayIocareDeviceOfflineError
from .coway_iocare.snapshot import DeviceSnapshot


class CowayIocareEntity(Entity):
    """Common base for purifier entities."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(self, coordinator: CowayIocareDataUpdateCoordinator, *, key: str) -> None:
        """Initialize the entity.

        Args:
            coordinator: Coordinator owning the state cache.
            key: Per-device unique key for this entity.
        """
        super().__init__()
        self._coordinator = coordinator
        self._unsub: Callable[[], None] | None = None
        self._attr_unique_id = f"{coordinator.device.barcode}_{key}".lower()
        self._attr_device_info = coordinator.device_info
        # Do not call async_write_ha_state() in __init__ (entity has no platform yet).
        self._refresh_attrs()

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        raise NotImplementedError

    def _refresh_attrs(self) -> None:
        try:
            snapshot = self._coordinator.snapshot
        except CowayIocareDeviceOfflineError:
            self._attr_available = False
            return
        self._attr_available = True
        self._read_state(snapshot)

    def _handle_coordinator_update(self) -> None:
        self._refresh_attrs()
        self.async_write_ha_state()

    async def async_added_to_hass(self) -> None:
        self._unsub = self._coordinator.async_add_listener(
            self._handle_coordinator_update
        )
        self._handle_coordinator_update()

    async def async_will_remove_from_hass(self) -> None:
        if self._unsub is not None:
            self._unsub()
            self._unsub = None
