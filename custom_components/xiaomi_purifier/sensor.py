"""Sensor platform for Xiaomi Air Purifier integration.

Provides sensor entities for:
- Air quality level
- PM2.5 (reported AQI)
- Temperature and humidity
- Illuminance
- Filter life remaining
"""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.sensor import SensorEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .coordinator import PurifierCoordinator
from .entity import PurifierEntity
from .entity_descriptions.sensor import (
    SENSOR_DESCRIPTIONS,
    PurifierSensorEntityDescription,
)
from .models import PurifierConfigEntry

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: PurifierConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up purifier sensors from a config entry."""
    coordinator = entry.runtime_data.coordinator

    entities = [
        PurifierSensorEntity(coordinator, entry, description)
        for description in SENSOR_DESCRIPTIONS.values()
    ]

    async_add_entities(entities)
    _LOGGER.debug("Set up %d purifier sensor entities", len(entities))


class PurifierSensorEntity(PurifierEntity, SensorEntity):
    """Sensor showing one purifier facet."""

    entity_description: PurifierSensorEntityDescription

    def __init__(
        self,
        coordinator: PurifierCoordinator,
        entry: PurifierConfigEntry,
        description: PurifierSensorEntityDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, description.key)
        self.entity_description = description
        self._facets = (description.facet,)

    @property
    def native_value(self) -> Any:
        """Return the facet value."""
        return self.facet_value(self.entity_description.facet)
