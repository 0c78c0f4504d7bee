"""Diagnostics support for Xiaomi Air Purifier integration.

Provides debug information for troubleshooting without exposing the token.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.const import CONF_HOST
from homeassistant.core import HomeAssistant

from .const import CONF_TOKEN
from .models import PropertyKey, PurifierConfigEntry

# Keys to redact from diagnostic output
TO_REDACT = {
    CONF_TOKEN,
    CONF_HOST,
    PropertyKey.FILTER_RFID_TAG.value,
    PropertyKey.FILTER_RFID_PRODUCT_ID.value,
}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant,
    entry: PurifierConfigEntry,
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    runtime_data = entry.runtime_data
    coordinator = runtime_data.coordinator
    poll_loop = coordinator.poll_loop

    return {
        "entry": {
            "title": entry.title,
            "data": async_redact_data(dict(entry.data), TO_REDACT),
            "options": dict(entry.options),
        },
        "config": asdict(runtime_data.config),
        "device": {
            "device_id": runtime_data.client.device_id,
        },
        "poll": {
            "state": poll_loop.state,
            "interval": poll_loop.interval,
            "last_update_success": coordinator.last_update_success,
            "last_poll_success": poll_loop.last_update_success,
            "consecutive_failures": coordinator.consecutive_failures,
        },
        "snapshot": async_redact_data(coordinator.snapshot.as_dict(), TO_REDACT),
        "facets": coordinator.facet_values,
    }
