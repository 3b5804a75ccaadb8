"""Tests for the Coway IoCare sensor platform."""

from __future__ import annotations

from typing import Any, cast

from homeassistant.components.sensor import SensorDeviceClass
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.coway_iocare.const import DOMAIN
from custom_components.coway_iocare.coway_iocare.decoder import PM10, PM25

from .common import BARCODE, ENTRY_DATA, CoordinatorStub, make_snapshot


async def _setup(hass, coordinator: CoordinatorStub) -> list[Any]:
    entry = MockConfigEntry(domain=DOMAIN, data=dict(ENTRY_DATA), unique_id=BARCODE)
    entry.add_to_hass(hass)
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator

    added: list[Any] = []

    def _add_entities(new_entities, update_before_add: bool = False):
        for ent in new_entities:
            ent.async_write_ha_state = lambda *args, **kwargs: None
            added.append(ent)

    from custom_components.coway_iocare import sensor

    await sensor.async_setup_entry(hass, cast(Any, entry), _add_entities)
    return added


def test_filter_helpers() -> None:
    from custom_components.coway_iocare import sensor

    snapshot = make_snapshot()
    assert sensor.filter_display_name(0) == "Pre Filter"
    assert sensor.filter_display_name(1) == "Main Filter"
    assert sensor.filter_display_name(2) == "Filter 3"
    assert sensor.filter_entry_at(snapshot, 1) is snapshot.filters[1]
    assert sensor.filter_entry_at(snapshot, 5) is None


async def test_sensor_setup_creates_entities(hass, enable_custom_integrations):
    from custom_components.coway_iocare import sensor

    added = await _setup(hass, CoordinatorStub(make_snapshot()))

    air = next(e for e in added if isinstance(e, sensor.CowayAirQualitySensor))
    run = next(e for e in added if isinstance(e, sensor.CowayRunStateSensor))
    pm25 = next(
        e
        for e in added
        if isinstance(e, sensor.CowayParticulateSensor)
        and e.device_class == SensorDeviceClass.PM25
    )
    filters = [e for e in added if isinstance(e, sensor.CowayFilterLifeSensor)]

    # Air quality falls back to PM2.5 = 1 when the categorical value is empty.
    assert air.native_value == "excellent"
    assert "unknown" not in air.options
    assert run.native_value == "purifying"
    assert pm25.native_value == 1
    assert [f.native_value for f in filters] == [80, 15]
    assert filters[0].extra_state_attributes["filter_code"] == "3109143"
    assert filters[1].name == "Main Filter life"


async def test_filter_sensors_added_after_first_poll(hass, enable_custom_integrations):
    from custom_components.coway_iocare import sensor

    coordinator = CoordinatorStub()
    added = await _setup(hass, coordinator)

    assert not any(isinstance(e, sensor.CowayFilterLifeSensor) for e in added)
    assert all(e.available is False for e in added)

    coordinator.current = make_snapshot()
    coordinator.fire_update()
    coordinator.fire_update()

    assert len([e for e in added if isinstance(e, sensor.CowayFilterLifeSensor)]) == 2


async def test_particulate_keeps_last_value_when_reading_empty():
    from custom_components.coway_iocare.sensor import CowayParticulateSensor

    coordinator = CoordinatorStub(make_snapshot(iaq={PM10: "22"}))
    ent = CowayParticulateSensor(
        cast(Any, coordinator),
        reading_key=PM10,
        name="PM10",
        device_class=SensorDeviceClass.PM10,
    )
    ent.async_write_ha_state = lambda *args, **kwargs: None
    await ent.async_added_to_hass()
    assert ent.native_value == 22

    coordinator.current = make_snapshot(iaq={PM10: ""})
    coordinator.fire_update()
    assert ent.native_value == 22

    coordinator.current = make_snapshot(iaq={PM10: "30"})
    coordinator.fire_update()
    assert ent.native_value == 30


def test_air_quality_unknown_when_nothing_reported():
    from custom_components.coway_iocare.sensor import CowayAirQualitySensor

    coordinator = CoordinatorStub(
        make_snapshot(iaq={"inairquality": "", PM25: "", PM10: ""})
    )
    ent = CowayAirQualitySensor(cast(Any, coordinator))

    assert ent.available is True
    assert ent.native_value is None


def test_air_quality_prefers_categorical_value():
    from custom_components.coway_iocare.sensor import CowayAirQualitySensor

    ent = CowayAirQualitySensor(
        cast(Any, CoordinatorStub(make_snapshot(iaq={"inairquality": "3"})))
    )
    assert ent.native_value == "fair"


def test_filter_life_sensor_handles_missing_filter():
    from custom_components.coway_iocare.sensor import CowayFilterLifeSensor

    coordinator = CoordinatorStub(make_snapshot(filters=[]))
    ent = CowayFilterLifeSensor(cast(Any, coordinator), index=0)

    assert ent.native_value is None
    assert ent.extra_state_attributes == {}


def test_air_quality_unknown_when_pm1_fallback_malformed():
    from custom_components.coway_iocare.sensor import CowayAirQualitySensor

    coordinator = CoordinatorStub(
        make_snapshot(iaq={"inairquality": "", PM25: "", PM10: "", "dustpm1": "-"})
    )
    ent = CowayAirQualitySensor(cast(Any, coordinator))

    assert ent.available is True
    assert ent.native_value is None
