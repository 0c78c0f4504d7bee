"""Switch platform for Xiaomi Air Purifier integration.

Provides switch entities for:
- Child lock
- Display LED (optional)
- Button buzzer (optional)
"""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .coordinator import PurifierCoordinator
from .entity import PurifierEntity
from .entity_descriptions.switch import (
    SWITCH_DESCRIPTIONS,
    PurifierSwitchEntityDescription,
)
from .models import PurifierConfigEntry

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: PurifierConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up purifier switches from a config entry."""
    runtime_data = entry.runtime_data
    coordinator = runtime_data.coordinator

    keys = ["child_lock"]
    if runtime_data.config.enable_led:
        keys.append("led")
    if runtime_data.config.enable_buzzer:
        keys.append("buzzer")

    entities = [
        PurifierSwitchEntity(coordinator, entry, SWITCH_DESCRIPTIONS[key])
        for key in keys
    ]

    async_add_entities(entities)
    _LOGGER.debug("Set up %d purifier switch entities", len(entities))


class PurifierSwitchEntity(PurifierEntity, SwitchEntity):
    """Switch toggling one purifier setting."""

    entity_description: PurifierSwitchEntityDescription

    def __init__(
        self,
        coordinator: PurifierCoordinator,
        entry: PurifierConfigEntry,
        description: PurifierSwitchEntityDescription,
    ) -> None:
        """Initialize the switch."""
        super().__init__(coordinator, entry, description.key)
        self.entity_description = description
        self._facets = (description.facet,)

    @property
    def is_on(self) -> bool | None:
        """Return the setting state."""
        return self.facet_value(self.entity_description.facet)

    async def _async_set(self, enabled: bool) -> None:
        command = self.entity_description.command
        setter = getattr(self.coordinator, command)
        await self._async_command(command, lambda cb: setter(enabled, cb))

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the setting on."""
        await self._async_set(True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the setting off."""
        await self._async_set(False)
