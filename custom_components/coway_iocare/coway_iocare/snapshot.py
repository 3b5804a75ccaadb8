"""Immutable device snapshot model.

A snapshot is the `data` section of the IoCare "home" endpoint, kept exactly
as received (codes stay raw strings) behind read-only views. Decoding into
semantic values happens in `decoder`.

This module intentionally avoids Home Assistant imports.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, cast

from .codes import FunctionId, Light
from .exceptions import (
    CowayIocareDataUnavailableError,
    CowayIocareParseError,
    CowayIocareUnmodeledCodeError,
)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType(
            {str(k): _freeze(v) for k, v in cast(Mapping[Any, Any], value).items()}
        )
    if isinstance(value, list):
        return tuple(_freeze(v) for v in cast(list[Any], value))
    return value


def _as_code(value: Any) -> str:
    """Normalize a raw vendor field to its string code ("" when missing)."""
    if value is None:
        return ""
    return str(value).strip()


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, str]:
    section_any: Any = data.get(key)
    if not isinstance(section_any, Mapping):
        raise CowayIocareParseError(f"Home payload is missing the {key} section")
    section = cast(Mapping[Any, Any], section_any)
    return MappingProxyType({str(k): _as_code(v) for k, v in section.items()})


@dataclass(frozen=True)
class FilterEntry:
    """One entry of the vendor filter list, in vendor order."""

    index: int
    percent_remaining: int
    name: str
    code: str = ""
    change_cycle: str = ""
    cycle_info: str = ""
    last_change_date: str = ""


def _filters_from_data(data: Mapping[str, Any]) -> tuple[FilterEntry, ...]:
    filters_any: Any = data.get("filterList")
    if filters_any is None:
        return ()
    if not isinstance(filters_any, list):
        raise CowayIocareParseError("filterList was not a list")

    entries: list[FilterEntry] = []
    for idx, item_any in enumerate(cast(list[Any], filters_any)):
        if not isinstance(item_any, Mapping):
            raise CowayIocareParseError(f"filterList[{idx}] was not an object")
        item = cast(Mapping[str, Any], item_any)
        per_any: Any = item.get("filterPer")
        try:
            percent = int(per_any)
        except (TypeError, ValueError) as err:
            raise CowayIocareParseError(
                f"filterList[{idx}].filterPer is not a number: {per_any!r}"
            ) from err
        entries.append(
            FilterEntry(
                index=idx,
                percent_remaining=percent,
                name=_as_code(item.get("filterName")),
                code=_as_code(item.get("filterCode")),
                change_cycle=_as_code(item.get("changeCycle")),
                cycle_info=_as_code(item.get("cycleInfo")),
                last_change_date=_as_code(item.get("lastChangeDate")),
            )
        )
    return tuple(entries)


@dataclass(frozen=True)
class DeviceSnapshot:
    """Last retrieved device readings.

    Attributes:
        prod_status: `prodStatus` codes (power, prodMode, airVolume, light, ...).
        iaq: Indoor air quality readings (`IAQ`); empty strings mean no reading.
        filters: Filter entries in vendor order.
        raw: Read-only view of the full payload.
        sequence: Refresh sequence number the snapshot was fetched under.
    """

    prod_status: Mapping[str, str]
    iaq: Mapping[str, str]
    filters: tuple[FilterEntry, ...]
    raw: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    sequence: int = 0

    def status_code(self, key: str) -> str:
        return self.prod_status.get(key, "")

    def iaq_reading(self, key: str) -> str:
        return self.iaq.get(key, "")


def snapshot_from_home_data(data: Any, *, sequence: int = 0) -> DeviceSnapshot:
    """Build a snapshot from the `data` section of the home endpoint.

    Args:
        data: Parsed `data` object.
        sequence: Refresh sequence number.

    Returns:
        A new immutable snapshot.

    Raises:
        CowayIocareParseError: If required sections are missing or malformed.
    """
    if not isinstance(data, Mapping):
        raise CowayIocareParseError("Home payload data was not a JSON object")
    obj = cast(Mapping[str, Any], data)

    return DeviceSnapshot(
        prod_status=_section(obj, "prodStatus"),
        iaq=_section(obj, "IAQ"),
        filters=_filters_from_data(obj),
        raw=_freeze(copy.deepcopy(dict(obj))),
        sequence=sequence,
    )


@dataclass(frozen=True)
class ControlStatus:
    """Current control values keyed by function id (`controlStatus`)."""

    values: Mapping[str, str]

    @property
    def light(self) -> Light:
        raw = self.values.get(FunctionId.LIGHT.value, "")
        if raw == "":
            raise CowayIocareDataUnavailableError("controlStatus.light")
        try:
            return Light(raw)
        except ValueError as err:
            raise CowayIocareUnmodeledCodeError("controlStatus.light", raw) from err


def control_status_from_data(data: Any) -> ControlStatus:
    """Build a `ControlStatus` from the `data` section of the control endpoint."""
    if not isinstance(data, Mapping):
        raise CowayIocareParseError("Control status data was not a JSON object")
    status_any: Any = cast(Mapping[str, Any], data).get("controlStatus")
    if not isinstance(status_any, Mapping):
        raise CowayIocareParseError("Control status payload is missing controlStatus")
    status = cast(Mapping[Any, Any], status_any)
    return ControlStatus(
        values=MappingProxyType({str(k): _as_code(v) for k, v in status.items()})
    )
