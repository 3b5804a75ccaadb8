"""Config flow for the Coway IoCare integration.

This module implements the configuration and reconfigure flows and validates
the device parameters by fetching the device status once.
"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    CONF_ACCESS_TOKEN,
    CONF_BARCODE,
    CONF_BRAND_CODE,
    CONF_MODEL,
    CONF_NICKNAME,
    CONF_PRODUCT_NAME,
    CONF_TYPE_CODE,
    DEFAULT_TIMEOUT_SECONDS,
    DOMAIN,
    LOGGER_NAME,
)
from .coordinator import device_identity_from_config
from .coway_iocare.client import CowayIocareClient
from .coway_iocare.exceptions import (
    CowayIocareAuthError,
    CowayIocareParseError,
    CowayIocareTransportError,
)

_LOGGER = logging.getLogger(LOGGER_NAME)


STEP_USER_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_BARCODE): str,
        vol.Required(CONF_BRAND_CODE): str,
        vol.Required(CONF_TYPE_CODE): str,
        vol.Required(CONF_PRODUCT_NAME): str,
        vol.Required(CONF_ACCESS_TOKEN): str,
        vol.Optional(CONF_NICKNAME, default=""): str,
        vol.Optional(CONF_MODEL, default=""): str,
    }
)


def _step_reconfigure_schema(existing: dict[str, Any]) -> vol.Schema:
    """Build the reconfigure schema with the current values as defaults.

    The barcode identifies the entry and cannot be changed here.

    Args:
        existing: Existing config entry data.

    Returns:
        Voluptuous schema used to prompt for updated values.
    """
    # Token has no default so leaving it blank won't overwrite the existing one.
    return vol.Schema(
        {
            vol.Required(
                CONF_BRAND_CODE, default=str(existing.get(CONF_BRAND_CODE, ""))
            ): str,
            vol.Required(
                CONF_TYPE_CODE, default=str(existing.get(CONF_TYPE_CODE, ""))
            ): str,
            vol.Required(
                CONF_PRODUCT_NAME, default=str(existing.get(CONF_PRODUCT_NAME, ""))
            ): str,
            vol.Optional(CONF_ACCESS_TOKEN): str,
            vol.Optional(
                CONF_NICKNAME, default=str(existing.get(CONF_NICKNAME) or "")
            ): str,
            vol.Optional(CONF_MODEL, default=str(existing.get(CONF_MODEL) or "")): str,
        }
    )


def _normalize_input(user_input: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value.strip() if isinstance(value, str) else value
        for key, value in user_input.items()
    }


class CannotConnect(HomeAssistantError):
    """Error to indicate we cannot reach the IoCare cloud."""


class InvalidAuth(HomeAssistantError):
    """Error to indicate the access token was rejected."""


async def _async_validate_input(
    hass: HomeAssistant, data: dict[str, Any]
) -> dict[str, str]:
    """Validate the device parameters by fetching the home status.

    Args:
        hass: Home Assistant instance.
        data: Config data.

    Returns:
        Dict with `title` and `unique_id`.

    Raises:
        CannotConnect: If the status cannot be fetched or parsed.
        InvalidAuth: If the access token is rejected.
    """
    device = device_identity_from_config(data)
    client = CowayIocareClient(
        device=device,
        access_token=str(data.get(CONF_ACCESS_TOKEN, "")),
        timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
        session=async_get_clientsession(hass),
    )
    try:
        await client.async_fetch_snapshot()
    except CowayIocareAuthError as err:
        raise InvalidAuth from err
    except (CowayIocareTransportError, CowayIocareParseError) as err:
        _LOGGER.debug("Validation failed for %s: %s", device.barcode, err)
        raise CannotConnect from err

    return {"title": device.display_name, "unique_id": device.barcode}


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Coway IoCare."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step.

        Args:
            user_input: User-provided input, if any.

        Returns:
            A Home Assistant flow result.
        """
        errors: dict[str, str] = {}

        if user_input is not None:
            normalized_input = _normalize_input(user_input)

            await self.async_set_unique_id(str(normalized_input[CONF_BARCODE]))
            self._abort_if_unique_id_configured()

            try:
                info = await _async_validate_input(self.hass, normalized_input)
            except CannotConnect:
                errors["base"] = "cannot_connect"
            except InvalidAuth:
                errors["base"] = "invalid_auth"
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Unexpected exception")
                errors["base"] = "unknown"
            else:
                return self.async_create_entry(
                    title=info["title"],
                    data=normalized_input,
                )

        return self.async_show_form(
            step_id="user", data_schema=STEP_USER_SCHEMA, errors=errors
        )

    async def async_step_reconfigure(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Prompt for updated device parameters and reload the entry.

        Args:
            user_input: Optional dict of user-provided values.

        Returns:
            A Home Assistant config flow result.
        """
        entry_id = (self.context or {}).get("entry_id")
        entry = (
            self.hass.config_entries.async_get_entry(entry_id) if entry_id else None
        )
        if entry is None:
            return self.async_abort(reason="unknown")

        errors: dict[str, str] = {}

        if user_input is not None:
            merged: dict[str, Any] = dict(entry.data)
            merged.update(_normalize_input(user_input))

            # The frontend submits empty strings for untouched optional fields.
            if not str(merged.get(CONF_ACCESS_TOKEN) or ""):
                merged[CONF_ACCESS_TOKEN] = entry.data.get(CONF_ACCESS_TOKEN, "")

            try:
                info = await _async_validate_input(self.hass, merged)
            except CannotConnect:
                errors["base"] = "cannot_connect"
            except InvalidAuth:
                errors["base"] = "invalid_auth"
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Unexpected exception during reconfigure")
                errors["base"] = "unknown"
            else:
                self.hass.config_entries.async_update_entry(
                    entry, data=merged, title=info["title"]
                )
                self.hass.config_entries.async_schedule_reload(entry.entry_id)
                return self.async_abort(reason="reconfigure_successful")

        return self.async_show_form(
            step_id="reconfigure",
            data_schema=_step_reconfigure_schema(dict(entry.data)),
            errors=errors,
            description_placeholders={CONF_BARCODE: str(entry.data.get(CONF_BARCODE, ""))},
        )
