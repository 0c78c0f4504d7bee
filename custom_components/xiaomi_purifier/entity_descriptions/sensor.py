from __future__ import annotations

from dataclasses import dataclass

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.const import (
    CONCENTRATION_MICROGRAMS_PER_CUBIC_METER,
    LIGHT_LUX,
    PERCENTAGE,
    UnitOfTemperature,
)

from ..facets import AirQuality, Facet


@dataclass(frozen=True, kw_only=True)
class PurifierSensorEntityDescription(SensorEntityDescription):
    """Describes a purifier sensor entity."""

    facet: Facet


SENSOR_DESCRIPTIONS: dict[str, PurifierSensorEntityDescription] = {
    "air_quality": PurifierSensorEntityDescription(
        key="air_quality",
        translation_key="air_quality",
        facet=Facet.AIR_QUALITY,
        device_class=SensorDeviceClass.ENUM,
        options=[quality.value for quality in AirQuality],
        icon="mdi:air-filter",
    ),
    "pm25": PurifierSensorEntityDescription(
        key="pm25",
        facet=Facet.PM25,
        device_class=SensorDeviceClass.PM25,
        native_unit_of_measurement=CONCENTRATION_MICROGRAMS_PER_CUBIC_METER,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    "temperature": PurifierSensorEntityDescription(
        key="temperature",
        facet=Facet.TEMPERATURE,
        device_class=SensorDeviceClass.TEMPERATURE,
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        state_class=SensorStateClass.MEASUREMENT,
        suggested_display_precision=1,
    ),
    "humidity": PurifierSensorEntityDescription(
        key="humidity",
        facet=Facet.HUMIDITY,
        device_class=SensorDeviceClass.HUMIDITY,
        native_unit_of_measurement=PERCENTAGE,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    "illuminance": PurifierSensorEntityDescription(
        key="illuminance",
        facet=Facet.ILLUMINANCE,
        device_class=SensorDeviceClass.ILLUMINANCE,
        native_unit_of_measurement=LIGHT_LUX,
        state_class=SensorStateClass.MEASUREMENT,
        entity_registry_enabled_default=False,
    ),
    "filter_life": PurifierSensorEntityDescription(
        key="filter_life",
        translation_key="filter_life",
        facet=Facet.FILTER_LIFE,
        native_unit_of_measurement=PERCENTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:air-filter",
    ),
}
