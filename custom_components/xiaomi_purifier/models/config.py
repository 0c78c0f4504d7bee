from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..const import (
    CONF_BATCH_CHUNK_SIZE,
    CONF_COALESCE_WINDOW_MS,
    CONF_ENABLE_BUZZER,
    CONF_ENABLE_LED,
    CONF_MODE_SETTLE_DELAY_MS,
    CONF_POLL_INTERVAL,
    DEFAULT_BATCH_CHUNK_SIZE,
    DEFAULT_COALESCE_WINDOW_MS,
    DEFAULT_MODE_SETTLE_DELAY_MS,
    DEFAULT_POLL_INTERVAL,
)

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry

    from ..api import MiioClient
    from ..coordinator import PurifierCoordinator


@dataclass(frozen=True)
class SyncConfig:
    """Tunables for polling and command pacing, in seconds."""

    poll_interval: float = DEFAULT_POLL_INTERVAL
    batch_chunk_size: int = DEFAULT_BATCH_CHUNK_SIZE
    coalesce_window: float = DEFAULT_COALESCE_WINDOW_MS / 1000
    mode_settle_delay: float = DEFAULT_MODE_SETTLE_DELAY_MS / 1000
    enable_led: bool = False
    enable_buzzer: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SyncConfig:
        """Build from config entry style keys, using defaults for the rest."""
        return cls(
            poll_interval=float(data.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL)),
            batch_chunk_size=int(
                data.get(CONF_BATCH_CHUNK_SIZE, DEFAULT_BATCH_CHUNK_SIZE)
            ),
            coalesce_window=float(
                data.get(CONF_COALESCE_WINDOW_MS, DEFAULT_COALESCE_WINDOW_MS)
            )
            / 1000,
            mode_settle_delay=float(
                data.get(CONF_MODE_SETTLE_DELAY_MS, DEFAULT_MODE_SETTLE_DELAY_MS)
            )
            / 1000,
            enable_led=bool(data.get(CONF_ENABLE_LED, False)),
            enable_buzzer=bool(data.get(CONF_ENABLE_BUZZER, False)),
        )

    @classmethod
    def from_entry(cls, entry: ConfigEntry) -> SyncConfig:
        """Read options over data over defaults."""
        return cls.from_mapping({**entry.data, **entry.options})


@dataclass
class PurifierRuntimeData:
    client: MiioClient
    coordinator: PurifierCoordinator
    config: SyncConfig


# Type alias for ConfigEntry with PurifierRuntimeData
type PurifierConfigEntry = ConfigEntry[PurifierRuntimeData]
