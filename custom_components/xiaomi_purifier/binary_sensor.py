"""Binary sensor platform for Xiaomi Air Purifier integration."""

from __future__ import annotations

from homeassistant.components.binary_sensor import BinarySensorEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .coordinator import PurifierCoordinator
from .entity import PurifierEntity
from .entity_descriptions.binary_sensor import (
    BINARY_SENSOR_DESCRIPTIONS,
    PurifierBinarySensorEntityDescription,
)
from .models import PurifierConfigEntry


async def async_setup_entry(
    hass: HomeAssistant,
    entry: PurifierConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up purifier binary sensors from a config entry."""
    coordinator = entry.runtime_data.coordinator
    async_add_entities(
        PurifierBinarySensorEntity(coordinator, entry, description)
        for description in BINARY_SENSOR_DESCRIPTIONS.values()
    )


class PurifierBinarySensorEntity(PurifierEntity, BinarySensorEntity):
    """Binary sensor showing one purifier facet."""

    entity_description: PurifierBinarySensorEntityDescription

    def __init__(
        self,
        coordinator: PurifierCoordinator,
        entry: PurifierConfigEntry,
        description: PurifierBinarySensorEntityDescription,
    ) -> None:
        """Initialize the binary sensor."""
        super().__init__(coordinator, entry, description.key)
        self.entity_description = description
        self._facets = (description.facet,)

    @property
    def is_on(self) -> bool | None:
        """Return True when the filter needs replacing."""
        return self.facet_value(self.entity_description.facet)
