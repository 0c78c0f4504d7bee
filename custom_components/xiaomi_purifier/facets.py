"""Facets derived from purifier properties and the dispatch table feeding them.

Each facet is one externally visible value (an entity state). Its update
action derives the value from the current snapshot; the dispatch table says
which property changes trigger which actions.
"""
from __future__ import annotations

from enum import StrEnum
import math
from typing import Any

from .models import OperatingMode, PowerState, PropertyKey, Snapshot
from .sync import DispatchTable, UpdateAction

# Motor speed (rpm) range reported by motor1_speed in favorite mode
MIN_MOTOR_SPEED = 655
MAX_MOTOR_SPEED = 1605

# Filter life (%) below which the filter should be replaced
FILTER_CHANGE_THRESHOLD = 5

# Width of one favorite level in percent (16 steps over 0-100)
FAVORITE_LEVEL_STEP = 6.25


class Facet(StrEnum):
    """Externally observable purifier characteristics."""

    ACTIVE = "active"
    PURIFYING = "purifying"
    PRESET_MODE = "preset_mode"
    ROTATION_SPEED = "rotation_speed"
    CHILD_LOCK = "child_lock"
    FILTER_LIFE = "filter_life"
    FILTER_CHANGE = "filter_change"
    AIR_QUALITY = "air_quality"
    PM25 = "pm25"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    ILLUMINANCE = "illuminance"
    LED = "led"
    BUZZER = "buzzer"


class AirQuality(StrEnum):
    """Air quality buckets by AQI."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    INFERIOR = "inferior"
    POOR = "poor"


def aqi_to_quality(aqi: int | None) -> AirQuality | None:
    """Bucket an AQI reading."""
    if aqi is None:
        return None
    if aqi >= 200:
        return AirQuality.POOR
    if aqi >= 150:
        return AirQuality.INFERIOR
    if aqi >= 100:
        return AirQuality.FAIR
    if aqi >= 50:
        return AirQuality.GOOD
    return AirQuality.EXCELLENT


def motor_speed_to_percentage(speed: int | None) -> int | None:
    """Scale motor rpm onto 0-100."""
    if speed is None:
        return None
    span = MAX_MOTOR_SPEED - MIN_MOTOR_SPEED
    percentage = (speed - MIN_MOTOR_SPEED) / span * 100
    return round(max(0.0, min(100.0, percentage)))


def percentage_to_favorite_level(percentage: float) -> int:
    """Map a 0-100 speed onto the favorite level scale."""
    return max(0, min(16, math.ceil(percentage / FAVORITE_LEVEL_STEP)))


def _is_on(key: PropertyKey):
    def derive(snapshot: Snapshot) -> bool:
        return snapshot[key] == PowerState.ON

    return derive


def _raw(key: PropertyKey):
    def derive(snapshot: Snapshot) -> Any:
        return snapshot[key]

    return derive


def _temperature(snapshot: Snapshot) -> float | None:
    value = snapshot[PropertyKey.TEMPERATURE]
    if value is None:
        return None
    return round(value * 0.1, 1)


def _filter_change(snapshot: Snapshot) -> bool | None:
    value = snapshot[PropertyKey.FILTER_LIFE_REMAINING]
    if value is None:
        return None
    return value < FILTER_CHANGE_THRESHOLD


UPDATE_ACTIONS: dict[Facet, UpdateAction] = {
    Facet.ACTIVE: UpdateAction(Facet.ACTIVE, _is_on(PropertyKey.POWER)),
    Facet.PURIFYING: UpdateAction(Facet.PURIFYING, _is_on(PropertyKey.POWER)),
    Facet.PRESET_MODE: UpdateAction(Facet.PRESET_MODE, _raw(PropertyKey.MODE)),
    Facet.ROTATION_SPEED: UpdateAction(
        Facet.ROTATION_SPEED,
        lambda snapshot: motor_speed_to_percentage(snapshot[PropertyKey.MOTOR_SPEED]),
    ),
    Facet.CHILD_LOCK: UpdateAction(Facet.CHILD_LOCK, _is_on(PropertyKey.CHILD_LOCK)),
    Facet.FILTER_LIFE: UpdateAction(
        Facet.FILTER_LIFE, _raw(PropertyKey.FILTER_LIFE_REMAINING)
    ),
    Facet.FILTER_CHANGE: UpdateAction(Facet.FILTER_CHANGE, _filter_change),
    Facet.AIR_QUALITY: UpdateAction(
        Facet.AIR_QUALITY,
        lambda snapshot: aqi_to_quality(snapshot[PropertyKey.AIR_QUALITY_INDEX]),
    ),
    Facet.PM25: UpdateAction(Facet.PM25, _raw(PropertyKey.AIR_QUALITY_INDEX)),
    Facet.TEMPERATURE: UpdateAction(Facet.TEMPERATURE, _temperature),
    Facet.HUMIDITY: UpdateAction(Facet.HUMIDITY, _raw(PropertyKey.HUMIDITY)),
    Facet.ILLUMINANCE: UpdateAction(Facet.ILLUMINANCE, _raw(PropertyKey.ILLUMINANCE)),
    Facet.LED: UpdateAction(Facet.LED, _is_on(PropertyKey.LED)),
    Facet.BUZZER: UpdateAction(Facet.BUZZER, _is_on(PropertyKey.BUZZER)),
}

DISPATCH_ENTRIES: dict[PropertyKey, tuple[UpdateAction, ...]] = {
    PropertyKey.POWER: (
        UPDATE_ACTIONS[Facet.ACTIVE],
        UPDATE_ACTIONS[Facet.PURIFYING],
    ),
    PropertyKey.AIR_QUALITY_INDEX: (
        UPDATE_ACTIONS[Facet.AIR_QUALITY],
        UPDATE_ACTIONS[Facet.PM25],
    ),
    PropertyKey.HUMIDITY: (UPDATE_ACTIONS[Facet.HUMIDITY],),
    PropertyKey.TEMPERATURE: (UPDATE_ACTIONS[Facet.TEMPERATURE],),
    PropertyKey.MODE: (
        UPDATE_ACTIONS[Facet.PRESET_MODE],
        UPDATE_ACTIONS[Facet.ROTATION_SPEED],
    ),
    PropertyKey.FILTER_LIFE_REMAINING: (
        UPDATE_ACTIONS[Facet.FILTER_LIFE],
        UPDATE_ACTIONS[Facet.FILTER_CHANGE],
    ),
    PropertyKey.MOTOR_SPEED: (UPDATE_ACTIONS[Facet.ROTATION_SPEED],),
    PropertyKey.LED: (UPDATE_ACTIONS[Facet.LED],),
    PropertyKey.ILLUMINANCE: (UPDATE_ACTIONS[Facet.ILLUMINANCE],),
    PropertyKey.BUZZER: (UPDATE_ACTIONS[Facet.BUZZER],),
    PropertyKey.CHILD_LOCK: (UPDATE_ACTIONS[Facet.CHILD_LOCK],),
}


def build_dispatch_table(
    enable_led: bool = True,
    enable_buzzer: bool = True,
) -> DispatchTable:
    """Build the purifier dispatch table.

    Actions for disabled optional surfaces are left out.
    """
    table = DispatchTable(DISPATCH_ENTRIES)
    excluded: list[UpdateAction] = []
    if not enable_led:
        excluded.append(UPDATE_ACTIONS[Facet.LED])
    if not enable_buzzer:
        excluded.append(UPDATE_ACTIONS[Facet.BUZZER])
    if excluded:
        table = table.without_actions(excluded)
    return table


def preset_modes() -> list[str]:
    """Operating modes selectable as fan presets."""
    return [mode.value for mode in OperatingMode]
