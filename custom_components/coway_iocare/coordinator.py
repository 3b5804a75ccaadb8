"""Coordinator polling the IoCare cloud for one purifier.

The coordinator is the poller: each cycle fetches the home status, validates it
by decoding it, stores it in the state cache and notifies listeners. The next
cycle is scheduled only after the current one has finished. A failed cycle is
reported through `UpdateFailed`; the cached snapshot is kept.

Control requests go through the control gateway, which composes the request,
sends it and forces an immediate refresh.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .coway_iocare.cache import StateCache
from .coway_iocare.client import CowayIocareClient, envelope_code, home_path
from .coway_iocare.codes import FunctionId
from .coway_iocare.composer import ControlCommand
from .coway_iocare.decoder import (
    LightState,
    SemanticState,
    TargetMode,
    categorical_air_quality,
    decode,
    fan_code_for_percent,
    light_code_for_state,
    mode_code_for_target,
    power_code,
)
from .coway_iocare.device import DeviceIdentity
from .coway_iocare.exceptions import (
    CowayIocareCompositionError,
    CowayIocareError,
)
from .coway_iocare.gateway import ControlGateway, ControlResult
from .coway_iocare.snapshot import DeviceSnapshot
from .const import (
    CONF_ACCESS_TOKEN,
    CONF_BARCODE,
    CONF_BRAND_CODE,
    CONF_MODEL,
    CONF_NICKNAME,
    CONF_PRODUCT_NAME,
    CONF_TYPE_CODE,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_TIMEOUT_SECONDS,
    DOMAIN,
    LOGGER_NAME,
    MANUFACTURER,
)

_LOGGER = logging.getLogger(LOGGER_NAME)


class PollState(StrEnum):
    IDLE = "idle"
    POLLING = "polling"


def device_identity_from_config(data: Mapping[str, Any]) -> DeviceIdentity:
    """Build the device identity from config entry data.

    Args:
        data: Config entry data.

    Returns:
        DeviceIdentity instance.
    """
    model = str(data.get(CONF_MODEL) or "").strip() or None
    return DeviceIdentity(
        barcode=str(data.get(CONF_BARCODE, "")).strip(),
        brand_code=str(data.get(CONF_BRAND_CODE, "")).strip(),
        type_code=str(data.get(CONF_TYPE_CODE, "")).strip(),
        product_name=str(data.get(CONF_PRODUCT_NAME, "")).strip(),
        nickname=str(data.get(CONF_NICKNAME) or "").strip(),
        model=model,
    )


def build_device_info(device: DeviceIdentity, *, sw_version: str | None = None) -> DeviceInfo:
    """Build DeviceInfo for a purifier.

    Args:
        device: Device identity.
        sw_version: Integration version shown as firmware revision.

    Returns:
        DeviceInfo instance.
    """
    return DeviceInfo(
        identifiers={(DOMAIN, device.barcode)},
        name=device.display_name,
        manufacturer=MANUFACTURER,
        model=device.model or device.product_name or None,
        serial_number=device.barcode,
        sw_version=sw_version,
    )


class CowayIocareDataUpdateCoordinator(DataUpdateCoordinator[DeviceSnapshot]):
    """Polls the home status endpoint and owns the state cache."""

    def __init__(
        self,
        hass: HomeAssistant,
        *,
        entry: ConfigEntry,
        client: CowayIocareClient | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            hass: Home Assistant instance.
            entry: Config entry containing the device identity and token.
            client: Optional pre-built client (tests).
        """
        self.hass = hass
        self.entry = entry
        self.device = device_identity_from_config(entry.data)
        self.cache = StateCache()
        self.poll_state = PollState.IDLE
        self.sw_version: str | None = None
        self._last_unknown_air_quality: str | None = None

        self._client = client or CowayIocareClient(
            device=self.device,
            access_token=str(entry.data.get(CONF_ACCESS_TOKEN, "")),
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
            session=async_get_clientsession(hass),
        )
        self._gateway = ControlGateway(self._client, refresh=self.async_force_refresh)

        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=f"Coway IoCare ({self.device.barcode})",
            update_interval=DEFAULT_SCAN_INTERVAL,
        )

    @property
    def device_info(self) -> DeviceInfo:
        return build_device_info(self.device, sw_version=self.sw_version)

    @property
    def has_snapshot(self) -> bool:
        return self.cache.has_snapshot

    @property
    def snapshot(self) -> DeviceSnapshot:
        """Return the cached snapshot.

        Raises:
            CowayIocareDeviceOfflineError: Before the first successful poll.
        """
        return self.cache.get()

    def semantic_state(self) -> SemanticState:
        return decode(self.cache.get())

    def _note_air_quality_code(self, snapshot: DeviceSnapshot) -> None:
        raw = snapshot.iaq_reading("inairquality")
        if raw == "":
            _LOGGER.debug(
                "No air quality for %s, falling back to particulates",
                self.device.barcode,
            )
            return
        if categorical_air_quality(snapshot) is not None:
            self._last_unknown_air_quality = None
            return
        if raw != self._last_unknown_air_quality:
            _LOGGER.warning(
                'Unknown air quality "%s" for %s, falling back to particulates',
                raw,
                self.device.barcode,
            )
            self._last_unknown_air_quality = raw

    async def _async_update_data(self) -> DeviceSnapshot:
        """Fetch, validate and cache the device status.

        Returns:
            The newest cached snapshot.

        Raises:
            UpdateFailed: If the fetch or decode fails.
        """
        sequence = self.cache.next_sequence()
        endpoint = home_path(self.device)
        self.poll_state = PollState.POLLING
        _LOGGER.debug(
            "Status update start device=%s sequence=%s", self.device.barcode, sequence
        )
        try:
            snapshot = await self._client.async_fetch_snapshot(sequence=sequence)
            decode(snapshot)
        except CowayIocareError as err:
            _LOGGER.debug(
                "Status update failed endpoint=%s device=%s error=%r",
                endpoint,
                self.device.barcode,
                err,
            )
            raise UpdateFailed(
                f"Error updating status from {endpoint} for device "
                f"{self.device.barcode}: {err}"
            ) from err
        finally:
            self.poll_state = PollState.IDLE

        self._note_air_quality_code(snapshot)
        if not self.cache.set(snapshot):
            _LOGGER.debug(
                "Discarded out-of-date status device=%s sequence=%s",
                self.device.barcode,
                sequence,
            )
        _LOGGER.debug("Updated status device=%s", self.device.barcode)
        return self.cache.get()

    async def async_force_refresh(self) -> None:
        """Refresh immediately, outside the polling schedule."""
        await self.async_refresh()

    async def async_control(self, commands: Iterable[ControlCommand]) -> ControlResult:
        """Send commands to the purifier and refresh its status.

        Args:
            commands: Commands to apply; the light is preserved when omitted.

        Returns:
            The control result.

        Raises:
            HomeAssistantError: If the request could not be composed or sent.
        """
        try:
            result = await self._gateway.async_control(commands)
        except CowayIocareCompositionError as err:
            raise HomeAssistantError(
                f"Could not compose control request for {self.device.barcode}: {err}"
            ) from err
        except CowayIocareError as err:
            raise HomeAssistantError(
                f"Error controlling {self.device.barcode}: {err}"
            ) from err

        _LOGGER.debug(
            "Controlled device %s payload=%s",
            self.device.barcode,
            result.request.as_payload(),
        )
        if not result.accepted:
            _LOGGER.warning(
                "Control request for %s returned code=%s message=%s",
                self.device.barcode,
                envelope_code(result.response) or "<missing>",
                result.response.get("message"),
            )
        return result

    async def async_set_power(self, on: bool) -> None:
        await self.async_control([ControlCommand(FunctionId.POWER, power_code(on))])

    async def async_set_target_mode(self, target: TargetMode) -> None:
        await self.async_control(
            [ControlCommand(FunctionId.MODE, mode_code_for_target(target))]
        )

    async def async_set_fan_percentage(self, percentage: int) -> None:
        await self.async_control(
            [ControlCommand(FunctionId.FAN, fan_code_for_percent(percentage))]
        )

    async def async_set_light(self, state: LightState) -> None:
        await self.async_control(
            [ControlCommand(FunctionId.LIGHT, light_code_for_state(state))]
        )
