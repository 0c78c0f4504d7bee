"""Shared test fixtures for Xiaomi Air Purifier integration tests."""
from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Generator, Sequence
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from homeassistant.const import CONF_HOST, CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.xiaomi_purifier.const import (
    CONF_COALESCE_WINDOW_MS,
    CONF_ENABLE_BUZZER,
    CONF_ENABLE_LED,
    CONF_MODE_SETTLE_DELAY_MS,
    CONF_POLL_INTERVAL,
    CONF_TOKEN,
    DOMAIN,
)
from custom_components.xiaomi_purifier.models import (
    PROPERTY_DEFAULTS,
    PropertyKey,
    Snapshot,
    SyncConfig,
)

TEST_HOST = "192.168.1.50"
TEST_TOKEN = "00112233445566778899aabbccddeeff"
TEST_DEVICE_ID = 0x0A1B2C3D


# ==============================================================================
# Fake Transport
# ==============================================================================


class FakeTransport:
    """In-memory purifier answering batch reads and commands.

    Commands update the stored properties the way the device would, so the
    next read reflects them.
    """

    COMMAND_EFFECTS = {
        "set_power": PropertyKey.POWER,
        "set_mode": PropertyKey.MODE,
        "set_child_lock": PropertyKey.CHILD_LOCK,
        "set_level_favorite": PropertyKey.FAVORITE_LEVEL,
        "set_led": PropertyKey.LED,
        "set_buzzer": PropertyKey.BUZZER,
    }

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = {
            key.value: value for key, value in PROPERTY_DEFAULTS.items()
        }
        self.values.update(values or {})
        self.reads: list[list[str]] = []
        self.commands: list[tuple[str, list[Any]]] = []
        self.read_error: Exception | None = None
        self.command_errors: dict[str, Exception] = {}
        self.close_count = 0
        self.device_id = TEST_DEVICE_ID

    async def batch_read(self, keys: Sequence[str]) -> list[Any]:
        self.reads.append([str(key) for key in keys])
        if self.read_error is not None:
            raise self.read_error
        return [self.values[str(key)] for key in keys]

    async def send_command(self, name: str, params: list[Any]) -> Any:
        self.commands.append((name, params))
        if name in self.command_errors:
            raise self.command_errors[name]
        if name in self.COMMAND_EFFECTS:
            self.values[self.COMMAND_EFFECTS[name].value] = params[0]
        return ["ok"]

    async def async_connect(self) -> None:
        pass

    async def close(self) -> None:
        self.close_count += 1


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Create a fake transport holding default property values."""
    return FakeTransport()


@pytest.fixture
def running_transport() -> FakeTransport:
    """Create a fake transport for a purifier that is on in favorite mode."""
    return FakeTransport(
        {
            PropertyKey.POWER.value: "on",
            PropertyKey.MODE.value: "favorite",
            PropertyKey.AIR_QUALITY_INDEX.value: 42,
            PropertyKey.HUMIDITY.value: 37,
            PropertyKey.TEMPERATURE.value: 215,
            PropertyKey.FILTER_LIFE_REMAINING.value: 80,
            PropertyKey.MOTOR_SPEED.value: 1130,
            PropertyKey.ILLUMINANCE.value: 12,
            PropertyKey.CHILD_LOCK.value: "off",
        }
    )


@pytest.fixture
def running_snapshot(running_transport: FakeTransport) -> Snapshot:
    """Snapshot matching running_transport."""
    return Snapshot.from_values(running_transport.values)


# ==============================================================================
# Mock Client Fixtures
# ==============================================================================


@pytest.fixture
def mock_transport() -> MagicMock:
    """Create a mock property transport."""
    transport = MagicMock()
    transport.batch_read = AsyncMock(return_value=[])
    transport.send_command = AsyncMock(return_value=["ok"])
    transport.close = AsyncMock()
    return transport


# ==============================================================================
# Config Fixtures
# ==============================================================================


@pytest.fixture
def sync_config() -> SyncConfig:
    """Sync config with short windows for fast tests."""
    return SyncConfig(
        poll_interval=60,
        batch_chunk_size=15,
        coalesce_window=0.01,
        mode_settle_delay=0,
        enable_led=True,
        enable_buzzer=True,
    )


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Create a mock purifier config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="Living Room Purifier",
        data={
            CONF_HOST: TEST_HOST,
            CONF_TOKEN: TEST_TOKEN,
            CONF_NAME: "Living Room Purifier",
        },
        options={
            CONF_POLL_INTERVAL: 60,
            CONF_COALESCE_WINDOW_MS: 10,
            CONF_MODE_SETTLE_DELAY_MS: 0,
            CONF_ENABLE_LED: True,
            CONF_ENABLE_BUZZER: False,
        },
        entry_id="test_entry_id",
        unique_id=str(TEST_DEVICE_ID),
    )


# ==============================================================================
# Home Assistant Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(
    enable_custom_integrations: Generator[None, None, None],
) -> Generator[None, None, None]:
    """Enable custom integrations for all tests."""
    yield


@pytest.fixture
async def setup_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,
    running_transport: FakeTransport,
) -> AsyncGenerator[MockConfigEntry, None]:
    """Set up the integration against running_transport and unload it after."""
    mock_config_entry.add_to_hass(hass)

    with patch(
        "custom_components.xiaomi_purifier.MiioClient",
        return_value=running_transport,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    yield mock_config_entry

    await hass.config_entries.async_unload(mock_config_entry.entry_id)
    await hass.async_block_till_done()


@pytest.fixture
def entity_id_for(hass: HomeAssistant) -> Callable[[str, str], str | None]:
    """Look up an entity id by platform and unique id suffix."""
    registry = er.async_get(hass)

    def _lookup(platform: str, key: str) -> str | None:
        return registry.async_get_entity_id(
            platform, DOMAIN, f"{TEST_DEVICE_ID}_{key}"
        )

    return _lookup
