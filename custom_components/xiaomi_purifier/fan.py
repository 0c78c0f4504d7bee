"""Fan platform for Xiaomi Air Purifier integration.

Provides the purifier itself as a fan entity with:
- On/Off control
- Speed control (favorite level as percentage)
- Preset modes (auto, silent, favorite)
"""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.fan import FanEntity, FanEntityFeature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .coordinator import PurifierCoordinator
from .entity import PurifierEntity
from .facets import Facet, preset_modes
from .models import PurifierConfigEntry

_LOGGER = logging.getLogger(__name__)

# 16 favorite levels reachable from the percentage scale
SPEED_COUNT = 16


async def async_setup_entry(
    hass: HomeAssistant,
    entry: PurifierConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the purifier fan from a config entry."""
    coordinator = entry.runtime_data.coordinator
    async_add_entities([PurifierFanEntity(coordinator, entry)])


class PurifierFanEntity(PurifierEntity, FanEntity):
    """Air purifier fan entity."""

    _attr_translation_key = "purifier"
    _attr_name = None  # Use device name
    _attr_speed_count = SPEED_COUNT
    _attr_supported_features = (
        FanEntityFeature.TURN_ON
        | FanEntityFeature.TURN_OFF
        | FanEntityFeature.SET_SPEED
        | FanEntityFeature.PRESET_MODE
    )
    _facets = (Facet.ACTIVE, Facet.PRESET_MODE, Facet.ROTATION_SPEED)

    def __init__(
        self,
        coordinator: PurifierCoordinator,
        entry: PurifierConfigEntry,
    ) -> None:
        """Initialize the fan entity."""
        super().__init__(coordinator, entry, "fan")
        self._attr_preset_modes = preset_modes()

    @property
    def is_on(self) -> bool | None:
        """Return True if the purifier is on."""
        return self.facet_value(Facet.ACTIVE)

    @property
    def percentage(self) -> int | None:
        """Return the motor speed as a percentage."""
        if not self.is_on:
            return 0
        return self.facet_value(Facet.ROTATION_SPEED)

    @property
    def preset_mode(self) -> str | None:
        """Return the operating mode."""
        return self.facet_value(Facet.PRESET_MODE)

    async def async_turn_on(
        self,
        percentage: int | None = None,
        preset_mode: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Turn the purifier on."""
        await self._async_command(
            "set_power", lambda cb: self.coordinator.set_active(True, cb)
        )

        if preset_mode is not None:
            await self.async_set_preset_mode(preset_mode)
        elif percentage is not None:
            await self.async_set_percentage(percentage)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the purifier off."""
        await self._async_command(
            "set_power", lambda cb: self.coordinator.set_active(False, cb)
        )

    async def async_set_percentage(self, percentage: int) -> None:
        """Set the speed percentage.

        0% turns the purifier off. Other values switch to favorite mode and set
        the favorite level; bursts of changes are coalesced.
        """
        if percentage == 0:
            await self.async_turn_off()
            return

        _LOGGER.debug("Setting %s speed to %d%%", self.entity_id, percentage)
        self.coordinator.set_rotation_speed(percentage)

    async def async_set_preset_mode(self, preset_mode: str) -> None:
        """Set the operating mode."""
        await self._async_command(
            "set_mode", lambda cb: self.coordinator.set_preset_mode(preset_mode, cb)
        )
