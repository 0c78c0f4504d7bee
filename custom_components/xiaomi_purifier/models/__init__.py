"""Xiaomi purifier models."""
from __future__ import annotations

from .commands import (
    BuzzerCommand,
    ChildLockCommand,
    FavoriteLevelCommand,
    LedCommand,
    ModeCommand,
    PowerCommand,
    PurifierCommand,
)
from .config import PurifierConfigEntry, PurifierRuntimeData, SyncConfig
from .properties import (
    ALL_PROPERTY_KEYS,
    PROPERTY_DEFAULTS,
    OperatingMode,
    PowerState,
    PropertyKey,
)
from .snapshot import Snapshot

__all__ = [
    "ALL_PROPERTY_KEYS",
    "PROPERTY_DEFAULTS",
    "BuzzerCommand",
    "ChildLockCommand",
    "FavoriteLevelCommand",
    "LedCommand",
    "ModeCommand",
    "OperatingMode",
    "PowerCommand",
    "PowerState",
    "PropertyKey",
    "PurifierCommand",
    "PurifierConfigEntry",
    "PurifierRuntimeData",
    "Snapshot",
    "SyncConfig",
]
