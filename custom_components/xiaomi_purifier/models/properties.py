"""Device property keys and their value domains.

The purifier exposes a flat set of named properties read through ``get_prop``.
Keys are listed in the order the device documents them; that order is the
order properties are fetched in and the order changes are dispatched in.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Any, Final


class PowerState(StrEnum):
    """Values of the on/off style properties."""

    ON = "on"
    OFF = "off"

    @classmethod
    def from_bool(cls, value: bool) -> PowerState:
        """Map a boolean to on/off."""
        return cls.ON if value else cls.OFF


class OperatingMode(StrEnum):
    """Purifier operating modes."""

    AUTO = "auto"
    SILENT = "silent"
    FAVORITE = "favorite"


class PropertyKey(StrEnum):
    """Properties readable from the purifier, in declared order."""

    POWER = "power"
    AIR_QUALITY_INDEX = "aqi"
    AVERAGE_AIR_QUALITY_INDEX = "average_aqi"
    HUMIDITY = "humidity"
    TEMPERATURE = "temp_dec"
    MODE = "mode"
    FAVORITE_LEVEL = "favorite_level"
    FILTER_LIFE_REMAINING = "filter1_life"
    FILTER_HOURS_USED = "f1_hour_used"
    USE_TIME = "use_time"
    MOTOR_SPEED = "motor1_speed"
    MOTOR_2_SPEED = "motor2_speed"
    PURIFY_VOLUME = "purify_volume"
    LED = "led"
    LED_BRIGHTNESS = "led_b"
    ILLUMINANCE = "bright"
    BUZZER = "buzzer"
    BUZZER_VOLUME = "volume"
    CHILD_LOCK = "child_lock"
    FILTER_RFID_PRODUCT_ID = "rfid_product_id"
    FILTER_RFID_TAG = "rfid_tag"
    SLEEP_LEARNING_MODE = "act_sleep"
    SLEEP_MODE = "sleep_mode"
    SLEEP_TIME = "sleep_time"
    SLEEP_LEARNING_COUNT = "sleep_data_num"
    EXTRA_FEATURES = "app_extra"
    AUTO_DETECT = "act_det"
    LAST_BUTTON_PRESSED = "button_pressed"


ALL_PROPERTY_KEYS: Final[tuple[PropertyKey, ...]] = tuple(PropertyKey)

# Value reported for each key when the device is idle, off and unconfigured
PROPERTY_DEFAULTS: Final[MappingProxyType[PropertyKey, Any]] = MappingProxyType(
    {
        PropertyKey.POWER: PowerState.OFF.value,
        PropertyKey.AIR_QUALITY_INDEX: 0,
        PropertyKey.AVERAGE_AIR_QUALITY_INDEX: 0,
        PropertyKey.HUMIDITY: 0,
        PropertyKey.TEMPERATURE: 0,
        PropertyKey.MODE: OperatingMode.AUTO.value,
        PropertyKey.FAVORITE_LEVEL: 0,
        PropertyKey.FILTER_LIFE_REMAINING: 0,
        PropertyKey.FILTER_HOURS_USED: 0,
        PropertyKey.USE_TIME: 0,
        PropertyKey.MOTOR_SPEED: 0,
        PropertyKey.MOTOR_2_SPEED: 0,
        PropertyKey.PURIFY_VOLUME: 0,
        PropertyKey.LED: PowerState.OFF.value,
        PropertyKey.LED_BRIGHTNESS: None,
        PropertyKey.ILLUMINANCE: 0,
        PropertyKey.BUZZER: PowerState.OFF.value,
        PropertyKey.BUZZER_VOLUME: None,
        PropertyKey.CHILD_LOCK: PowerState.OFF.value,
        PropertyKey.FILTER_RFID_PRODUCT_ID: "0:0:0:0",
        PropertyKey.FILTER_RFID_TAG: "00:00:00:00:00:00:0",
        PropertyKey.SLEEP_LEARNING_MODE: "close",
        PropertyKey.SLEEP_MODE: "poweroff",
        PropertyKey.SLEEP_TIME: 0,
        PropertyKey.SLEEP_LEARNING_COUNT: 0,
        PropertyKey.EXTRA_FEATURES: 0,
        PropertyKey.AUTO_DETECT: None,
        PropertyKey.LAST_BUTTON_PRESSED: None,
    }
)
