from __future__ import annotations

from dataclasses import dataclass

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntityDescription,
)

from ..facets import Facet


@dataclass(frozen=True, kw_only=True)
class PurifierBinarySensorEntityDescription(BinarySensorEntityDescription):
    """Describes a purifier binary sensor entity."""

    facet: Facet


BINARY_SENSOR_DESCRIPTIONS: dict[str, PurifierBinarySensorEntityDescription] = {
    "filter_change": PurifierBinarySensorEntityDescription(
        key="filter_change",
        translation_key="filter_change",
        facet=Facet.FILTER_CHANGE,
        device_class=BinarySensorDeviceClass.PROBLEM,
        icon="mdi:air-filter",
    ),
}
