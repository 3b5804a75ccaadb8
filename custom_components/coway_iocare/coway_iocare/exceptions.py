"""Internal API exception types.

These exceptions are raised by the standalone API client, decoder and command
composer. The Home Assistant integration should translate these into
HA-specific exception types.

This module intentionally avoids Home Assistant imports.
"""

from __future__ import annotations

from typing import Any


class CowayIocareError(Exception):
    """Base exception for Coway IoCare failures."""


class CowayIocareTransportError(CowayIocareError):
    """Network or HTTP error talking to the IoCare cloud.

    Attributes:
        endpoint: Endpoint path that failed.
        device_id: Device barcode the request was made for.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        device_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.device_id = device_id


class CowayIocareAuthError(CowayIocareTransportError):
    """Access token rejected by the IoCare cloud."""


class CowayIocareParseError(CowayIocareError):
    """Payload could not be parsed into the device model."""


class CowayIocareUnmodeledCodeError(CowayIocareError, ValueError):
    """A vendor code outside the known enumeration was received."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"Unmodeled vendor code for {field}: {value!r}")
        self.field = field
        self.value = value


class CowayIocareDataUnavailableError(CowayIocareError):
    """A field is legitimately empty in the current snapshot."""

    def __init__(self, field: str) -> None:
        super().__init__(f"No data available for {field}")
        self.field = field


class CowayIocareCompositionError(CowayIocareError):
    """A control request could not be composed; nothing was sent."""


class CowayIocareDeviceOfflineError(CowayIocareError):
    """No snapshot has been fetched for the device yet."""
