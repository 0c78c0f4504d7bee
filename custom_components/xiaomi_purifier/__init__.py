"""The Xiaomi Air Purifier integration."""
from __future__ import annotations

import logging

from homeassistant.const import CONF_HOST
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from .api import MiioClient, MiioError, MiioNetwork
from .const import CONF_TOKEN, DATA_NETWORK, DOMAIN, PLATFORMS
from .coordinator import PurifierCoordinator
from .models import PurifierConfigEntry, PurifierRuntimeData, SyncConfig

_LOGGER = logging.getLogger(__name__)


def async_get_network(hass: HomeAssistant) -> MiioNetwork:
    """Return the miIO network shared by every purifier entry."""
    domain_data = hass.data.setdefault(DOMAIN, {})
    if DATA_NETWORK not in domain_data:
        domain_data[DATA_NETWORK] = MiioNetwork()
    return domain_data[DATA_NETWORK]


async def async_setup_entry(hass: HomeAssistant, entry: PurifierConfigEntry) -> bool:
    """Set up a purifier from a config entry."""
    host = entry.data[CONF_HOST]
    config = SyncConfig.from_entry(entry)
    _LOGGER.debug("Setting up purifier at %s with %s", host, config)

    client = MiioClient(async_get_network(hass), host, entry.data[CONF_TOKEN])
    try:
        await client.async_connect()
    except MiioError as err:
        await client.close()
        raise ConfigEntryNotReady(f"Failed to open miIO socket: {err}") from err

    coordinator = PurifierCoordinator(hass, entry, client, config, name=entry.title)

    # Fetch initial data so entities start with real values
    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady:
        await coordinator.async_stop()
        raise

    entry.runtime_data = PurifierRuntimeData(
        client=client,
        coordinator=coordinator,
        config=config,
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_options_updated))

    _LOGGER.info("Purifier %s set up at %s", entry.title, host)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: PurifierConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.debug("Unloading purifier %s", entry.title)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        # Stopping closes the client, releasing its network reference
        await entry.runtime_data.coordinator.async_stop()
    return unload_ok


async def async_options_updated(hass: HomeAssistant, entry: PurifierConfigEntry) -> None:
    """Handle options update."""
    _LOGGER.debug("Options updated, reloading purifier %s", entry.title)
    await hass.config_entries.async_reload(entry.entry_id)
