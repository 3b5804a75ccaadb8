"""Sensor entities for Coway IoCare purifiers.

Air quality and run state are enum sensors. Particulate sensors keep their
last reading when the purifier reports an empty value, so a single missing
sample does not blank the history. Filter life is one sensor per filter.
"""

from __future__ import annotations

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONCENTRATION_MICROGRAMS_PER_CUBIC_METER, PERCENTAGE
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, FILTER_NAMES
from .coordinator import CowayIocareDataUpdateCoordinator
from .coway_iocare.decoder import (
    PM10,
    PM25,
    AirQualityBucket,
    RunState,
    decode_air_quality,
    decode_run_state,
    particulate_density,
)
from .coway_iocare.exceptions import (
    CowayIocareDataUnavailableError,
    CowayIocareDeviceOfflineError,
    CowayIocareParseError,
)
from .coway_iocare.snapshot import DeviceSnapshot, FilterEntry
from .entity import CowayIocareEntity


def filter_display_name(index: int) -> str:
    return FILTER_NAMES.get(index, f"Filter {index + 1}")


def filter_entry_at(snapshot: DeviceSnapshot, index: int) -> FilterEntry | None:
    if 0 <= index < len(snapshot.filters):
        return snapshot.filters[index]
    return None


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up purifier sensors from a config entry.

    Args:
        hass: Home Assistant instance.
        entry: The config entry.
        async_add_entities: Callback to add entities.
    """
    coordinator: CowayIocareDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]

    async_add_entities(
        [
            CowayAirQualitySensor(coordinator),
            CowayRunStateSensor(coordinator),
            CowayParticulateSensor(
                coordinator,
                reading_key=PM25,
                name="PM2.5",
                device_class=SensorDeviceClass.PM25,
            ),
            CowayParticulateSensor(
                coordinator,
                reading_key=PM10,
                name="PM10",
                device_class=SensorDeviceClass.PM10,
            ),
        ]
    )

    added_filters: set[int] = set()

    def _add_filter_sensors() -> None:
        try:
            filters = coordinator.snapshot.filters
        except CowayIocareDeviceOfflineError:
            return
        new_entities: list[SensorEntity] = []
        for entry_ in filters:
            if entry_.index in added_filters:
                continue
            new_entities.append(CowayFilterLifeSensor(coordinator, index=entry_.index))
            added_filters.add(entry_.index)
        if new_entities:
            async_add_entities(new_entities)

    _add_filter_sensors()
    remove = coordinator.async_add_listener(_add_filter_sensors)
    entry.async_on_unload(remove)


class CowayAirQualitySensor(CowayIocareEntity, SensorEntity):
    """Indoor air quality bucket."""

    _attr_name = "Air quality"
    _attr_translation_key = "air_quality"
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = [
        bucket.value for bucket in AirQualityBucket if bucket is not AirQualityBucket.UNKNOWN
    ]

    def __init__(self, coordinator: CowayIocareDataUpdateCoordinator) -> None:
        super().__init__(coordinator, key="air_quality")

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        try:
            self._attr_native_value = decode_air_quality(snapshot).value
        except (CowayIocareDataUnavailableError, CowayIocareParseError):
            self._attr_native_value = None


class CowayRunStateSensor(CowayIocareEntity, SensorEntity):
    """Inactive / idle / purifying."""

    _attr_name = "Purifier state"
    _attr_translation_key = "run_state"
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = [state.value for state in RunState]

    def __init__(self, coordinator: CowayIocareDataUpdateCoordinator) -> None:
        super().__init__(coordinator, key="run_state")

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        self._attr_native_value = decode_run_state(snapshot).value


class CowayParticulateSensor(CowayIocareEntity, SensorEntity):
    """Particulate density in µg/m³."""

    _attr_native_unit_of_measurement = CONCENTRATION_MICROGRAMS_PER_CUBIC_METER
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self,
        coordinator: CowayIocareDataUpdateCoordinator,
        *,
        reading_key: str,
        name: str,
        device_class: SensorDeviceClass,
    ) -> None:
        self._reading_key = reading_key
        self._attr_name = name
        self._attr_device_class = device_class
        self._attr_native_value = None
        super().__init__(coordinator, key=reading_key)

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        # Empty readings keep the last known value.
        if snapshot.iaq_reading(self._reading_key) == "":
            return
        self._attr_native_value = particulate_density(snapshot, self._reading_key)


class CowayFilterLifeSensor(CowayIocareEntity, SensorEntity):
    """Remaining filter life in percent."""

    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = "mdi:air-filter"

    def __init__(self, coordinator: CowayIocareDataUpdateCoordinator, *, index: int) -> None:
        self._index = index
        self._attr_name = f"{filter_display_name(index)} life"
        super().__init__(coordinator, key=f"filter_{index}_life")

    def _read_state(self, snapshot: DeviceSnapshot) -> None:
        entry = filter_entry_at(snapshot, self._index)
        if entry is None:
            self._attr_native_value = None
            self._attr_extra_state_attributes = {}
            return
        self._attr_native_value = entry.percent_remaining
        self._attr_extra_state_attributes = {
            "filter_code": entry.code or None,
            "change_cycle": entry.change_cycle or None,
            "cycle_info": entry.cycle_info or None,
            "last_change_date": entry.last_change_date or None,
        }
