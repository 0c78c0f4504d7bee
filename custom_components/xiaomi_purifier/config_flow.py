"""Config flow for Xiaomi Air Purifier integration."""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries, core, exceptions
from homeassistant.const import CONF_HOST, CONF_NAME
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import config_validation as cv

from . import async_get_network
from .api import MiioClient, MiioError
from .api.packet import parse_token
from .const import (
    CONF_BATCH_CHUNK_SIZE,
    CONF_COALESCE_WINDOW_MS,
    CONF_ENABLE_BUZZER,
    CONF_ENABLE_LED,
    CONF_MODE_SETTLE_DELAY_MS,
    CONF_POLL_INTERVAL,
    CONF_TOKEN,
    CONFIG_ENTRY_VERSION,
    DEFAULT_BATCH_CHUNK_SIZE,
    DEFAULT_COALESCE_WINDOW_MS,
    DEFAULT_MODE_SETTLE_DELAY_MS,
    DEFAULT_NAME,
    DEFAULT_POLL_INTERVAL,
    DOMAIN,
)
from .models import PropertyKey

_LOGGER = logging.getLogger(__name__)


async def validate_input(
    hass: core.HomeAssistant, user_input: dict[str, Any]
) -> dict[str, Any]:
    """Validate the user input allows us to connect.

    Returns the device ID learned from the handshake.
    """
    try:
        parse_token(user_input[CONF_TOKEN])
    except ValueError as err:
        raise InvalidToken(str(err)) from err

    client = MiioClient(
        async_get_network(hass), user_input[CONF_HOST], user_input[CONF_TOKEN]
    )
    try:
        async with client:
            await client.batch_read([PropertyKey.POWER])
    except MiioError as err:
        raise CannotConnect(str(err)) from err

    return {"device_id": client.device_id}


class PurifierFlowHandler(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for a Xiaomi air purifier."""

    VERSION = CONFIG_ENTRY_VERSION

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        if user_input is not None:
            try:
                info = await validate_input(self.hass, user_input)
            except InvalidToken:
                errors[CONF_TOKEN] = "invalid_token"
            except CannotConnect as conn_ex:
                _LOGGER.debug("Cannot connect: %s", conn_ex)
                errors["base"] = "cannot_connect"
            except Exception as ex:  # pylint: disable=broad-except
                _LOGGER.exception("Unexpected exception: %s", ex)
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(str(info["device_id"]))
                self._abort_if_unique_id_configured(
                    updates={CONF_HOST: user_input[CONF_HOST]}
                )
                return self.async_create_entry(
                    title=user_input[CONF_NAME], data=user_input
                )

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_HOST): cv.string,
                    vol.Required(CONF_TOKEN): cv.string,
                    vol.Optional(CONF_NAME, default=DEFAULT_NAME): cv.string,
                }
            ),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> PurifierOptionsFlowHandler:
        """Get the options flow."""
        return PurifierOptionsFlowHandler(config_entry)


class PurifierOptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self.options = dict(config_entry.options)

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the options."""
        if user_input is not None:
            self.options.update(user_input)
            return self.async_create_entry(title="", data=self.options)

        options_schema = vol.Schema(
            {
                vol.Optional(
                    CONF_POLL_INTERVAL,
                    default=self.options.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
                ): vol.All(vol.Coerce(int), vol.Range(min=1, max=300)),
                vol.Optional(
                    CONF_BATCH_CHUNK_SIZE,
                    default=self.options.get(
                        CONF_BATCH_CHUNK_SIZE, DEFAULT_BATCH_CHUNK_SIZE
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=1, max=28)),
                vol.Optional(
                    CONF_COALESCE_WINDOW_MS,
                    default=self.options.get(
                        CONF_COALESCE_WINDOW_MS, DEFAULT_COALESCE_WINDOW_MS
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=0, max=5000)),
                vol.Optional(
                    CONF_MODE_SETTLE_DELAY_MS,
                    default=self.options.get(
                        CONF_MODE_SETTLE_DELAY_MS, DEFAULT_MODE_SETTLE_DELAY_MS
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=0, max=5000)),
                vol.Required(
                    CONF_ENABLE_LED,
                    default=self.options.get(CONF_ENABLE_LED, False),
                ): cv.boolean,
                vol.Required(
                    CONF_ENABLE_BUZZER,
                    default=self.options.get(CONF_ENABLE_BUZZER, False),
                ): cv.boolean,
            }
        )

        return self.async_show_form(step_id="init", data_schema=options_schema)


class CannotConnect(exceptions.HomeAssistantError):
    """Error to indicate we cannot connect."""


class InvalidToken(exceptions.HomeAssistantError):
    """Error to indicate the token is malformed."""
