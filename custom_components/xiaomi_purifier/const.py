"""Constants for the Xiaomi Air Purifier integration."""
from __future__ import annotations

from homeassistant.const import Platform

DOMAIN = "xiaomi_purifier"

# Config entry data
CONF_TOKEN = "token"

# Config entry options
CONF_POLL_INTERVAL = "poll_interval"
CONF_BATCH_CHUNK_SIZE = "batch_chunk_size"
CONF_COALESCE_WINDOW_MS = "coalesce_window_ms"
CONF_MODE_SETTLE_DELAY_MS = "mode_settle_delay_ms"
CONF_ENABLE_LED = "enable_led"
CONF_ENABLE_BUZZER = "enable_buzzer"

DEFAULT_NAME = "Air Purifier"

# Default poll interval (seconds)
DEFAULT_POLL_INTERVAL = 5

# miIO get_prop accepts at most this many properties per call
DEFAULT_BATCH_CHUNK_SIZE = 15

# Quiet window for rotation speed writes (milliseconds)
DEFAULT_COALESCE_WINDOW_MS = 100

# Wait after switching into favorite mode before setting the level (milliseconds)
DEFAULT_MODE_SETTLE_DELAY_MS = 300

# Key in hass.data[DOMAIN] holding the shared miIO network handle
DATA_NETWORK = "network"

MANUFACTURER = "Xiaomi"
MODEL = "Air Purifier"

PLATFORMS: list[Platform] = [
    Platform.BINARY_SENSOR,
    Platform.FAN,
    Platform.SENSOR,
    Platform.SWITCH,
]

# Config entry version for migrations
CONFIG_ENTRY_VERSION = 1
