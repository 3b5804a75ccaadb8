"""The Coway IoCare integration.

This integration polls Coway air purifiers through the IoCare cloud API and
controls them with the same API.
"""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.loader import async_get_integration

from .const import DOMAIN, LOGGER_NAME, PLATFORMS
from .coordinator import CowayIocareDataUpdateCoordinator

_LOGGER = logging.getLogger(LOGGER_NAME)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Coway IoCare from a config entry.

    Args:
        hass: Home Assistant instance.
        entry: The config entry.

    Returns:
        True if setup succeeds.
    """
    coordinator = CowayIocareDataUpdateCoordinator(hass, entry=entry)

    integration = await async_get_integration(hass, DOMAIN)
    coordinator.sw_version = str(integration.version) if integration.version else None

    await coordinator.async_config_entry_first_refresh()

    # Keep the entry title in sync with the configured nickname.
    desired_title = coordinator.device.display_name
    if desired_title and str(entry.title or "") != desired_title:
        hass.config_entries.async_update_entry(entry, title=desired_title)

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.debug("Set up Coway IoCare device=%s", coordinator.device.barcode)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry.

    Polling stops; an in-flight status request is allowed to finish.

    Args:
        hass: Home Assistant instance.
        entry: The config entry.

    Returns:
        True if the entry was unloaded.
    """
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        coordinator: CowayIocareDataUpdateCoordinator | None = hass.data.get(
            DOMAIN, {}
        ).pop(entry.entry_id, None)
        if coordinator is not None:
            await coordinator.async_shutdown()
    return unload_ok
