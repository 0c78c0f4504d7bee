"""Test the purifier config flow."""
from __future__ import annotations

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType

from custom_components.xiaomi_purifier.api import (
    MiioConnectionError,
    MiioTimeoutError,
)
from custom_components.xiaomi_purifier.config_flow import (
    CannotConnect,
    InvalidToken,
    validate_input,
)
from custom_components.xiaomi_purifier.const import (
    CONF_BATCH_CHUNK_SIZE,
    CONF_COALESCE_WINDOW_MS,
    CONF_ENABLE_BUZZER,
    CONF_ENABLE_LED,
    CONF_MODE_SETTLE_DELAY_MS,
    CONF_POLL_INTERVAL,
    CONF_TOKEN,
    DOMAIN,
)

TOKEN = "00112233445566778899aabbccddeeff"
USER_INPUT = {
    CONF_HOST: "192.168.1.60",
    CONF_TOKEN: TOKEN,
    CONF_NAME: "Bedroom Purifier",
}


@pytest.fixture
def mock_client() -> Generator[MagicMock, None, None]:
    """Patch the miIO client used for validation."""
    with patch(
        "custom_components.xiaomi_purifier.config_flow.MiioClient"
    ) as mock_client_class:
        client = mock_client_class.return_value
        client.batch_read = AsyncMock(return_value=["on"])
        client.device_id = 4242
        client.__aexit__ = AsyncMock(return_value=False)
        yield client


@pytest.fixture
def mock_setup_entry() -> Generator[AsyncMock, None, None]:
    """Skip entry setup after the flow creates it."""
    with patch(
        "custom_components.xiaomi_purifier.async_setup_entry",
        return_value=True,
    ) as mock_setup:
        yield mock_setup


# ==============================================================================
# Validation Tests
# ==============================================================================


class TestValidateInput:
    """Test validate_input helper."""

    @pytest.mark.asyncio
    async def test_success(self, hass: HomeAssistant, mock_client):
        """Test a reachable purifier returns its device id."""
        result = await validate_input(hass, USER_INPUT)

        assert result == {"device_id": 4242}
        mock_client.batch_read.assert_awaited_once_with(["power"])

    @pytest.mark.asyncio
    async def test_invalid_token(self, hass: HomeAssistant, mock_client):
        """Test a malformed token is rejected before connecting."""
        with pytest.raises(InvalidToken):
            await validate_input(hass, {**USER_INPUT, CONF_TOKEN: "xyz"})

        mock_client.batch_read.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unreachable(self, hass: HomeAssistant, mock_client):
        """Test a timeout maps to CannotConnect."""
        mock_client.batch_read.side_effect = MiioTimeoutError()

        with pytest.raises(CannotConnect):
            await validate_input(hass, USER_INPUT)

    @pytest.mark.asyncio
    async def test_socket_failure(self, hass: HomeAssistant, mock_client):
        """Test a socket that cannot be opened maps to CannotConnect."""
        mock_client.__aenter__ = AsyncMock(
            side_effect=MiioConnectionError("Address in use")
        )

        with pytest.raises(CannotConnect):
            await validate_input(hass, USER_INPUT)

        mock_client.batch_read.assert_not_awaited()


# ==============================================================================
# User Step Tests
# ==============================================================================


class TestUserStep:
    """Test the user step."""

    @pytest.mark.asyncio
    async def test_form(self, hass: HomeAssistant):
        """Test the form is shown."""
        result = await hass.config_entries.flow.async_init(
            DOMAIN, context={"source": config_entries.SOURCE_USER}
        )

        assert result["type"] == FlowResultType.FORM
        assert result["step_id"] == "user"
        assert result["errors"] == {}

    @pytest.mark.asyncio
    async def test_create_entry(
        self, hass: HomeAssistant, mock_client, mock_setup_entry
    ):
        """Test a valid purifier creates an entry keyed by device id."""
        result = await hass.config_entries.flow.async_init(
            DOMAIN, context={"source": config_entries.SOURCE_USER}
        )
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], USER_INPUT
        )
        await hass.async_block_till_done()

        assert result["type"] == FlowResultType.CREATE_ENTRY
        assert result["title"] == "Bedroom Purifier"
        assert result["data"] == USER_INPUT
        assert result["result"].unique_id == "4242"

    @pytest.mark.asyncio
    async def test_invalid_token_error(self, hass: HomeAssistant, mock_client):
        """Test a bad token shows a field error."""
        result = await hass.config_entries.flow.async_init(
            DOMAIN, context={"source": config_entries.SOURCE_USER}
        )
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], {**USER_INPUT, CONF_TOKEN: "not hex"}
        )

        assert result["type"] == FlowResultType.FORM
        assert result["errors"] == {CONF_TOKEN: "invalid_token"}

    @pytest.mark.asyncio
    async def test_cannot_connect_error(self, hass: HomeAssistant, mock_client):
        """Test an unreachable purifier shows cannot_connect."""
        mock_client.batch_read.side_effect = MiioTimeoutError()
        result = await hass.config_entries.flow.async_init(
            DOMAIN, context={"source": config_entries.SOURCE_USER}
        )
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], USER_INPUT
        )

        assert result["type"] == FlowResultType.FORM
        assert result["errors"] == {"base": "cannot_connect"}

    @pytest.mark.asyncio
    async def test_socket_failure_error(self, hass: HomeAssistant, mock_client):
        """Test a socket bind failure shows cannot_connect, not unknown."""
        mock_client.__aenter__ = AsyncMock(
            side_effect=MiioConnectionError("Address in use")
        )
        result = await hass.config_entries.flow.async_init(
            DOMAIN, context={"source": config_entries.SOURCE_USER}
        )
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], USER_INPUT
        )

        assert result["errors"] == {"base": "cannot_connect"}

    @pytest.mark.asyncio
    async def test_unexpected_error(self, hass: HomeAssistant, mock_client):
        """Test an unexpected exception shows unknown."""
        mock_client.batch_read.side_effect = RuntimeError("boom")
        result = await hass.config_entries.flow.async_init(
            DOMAIN, context={"source": config_entries.SOURCE_USER}
        )
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], USER_INPUT
        )

        assert result["errors"] == {"base": "unknown"}

    @pytest.mark.asyncio
    async def test_already_configured(
        self, hass: HomeAssistant, mock_client, mock_config_entry
    ):
        """Test the same device cannot be added twice."""
        mock_client.device_id = int(mock_config_entry.unique_id)
        mock_config_entry.add_to_hass(hass)

        result = await hass.config_entries.flow.async_init(
            DOMAIN, context={"source": config_entries.SOURCE_USER}
        )
        with patch(
            "custom_components.xiaomi_purifier.async_setup_entry",
            return_value=True,
        ):
            result = await hass.config_entries.flow.async_configure(
                result["flow_id"], USER_INPUT
            )
            await hass.async_block_till_done()

        assert result["type"] == FlowResultType.ABORT
        assert result["reason"] == "already_configured"
        assert mock_config_entry.data[CONF_HOST] == USER_INPUT[CONF_HOST]


# ==============================================================================
# Options Flow Tests
# ==============================================================================


class TestOptionsFlow:
    """Test the options flow."""

    @pytest.mark.asyncio
    async def test_options(
        self, hass: HomeAssistant, mock_config_entry, mock_setup_entry
    ):
        """Test every tunable can be changed."""
        mock_config_entry.add_to_hass(hass)

        result = await hass.config_entries.options.async_init(
            mock_config_entry.entry_id
        )
        assert result["type"] == FlowResultType.FORM
        assert result["step_id"] == "init"

        new_options = {
            CONF_POLL_INTERVAL: 10,
            CONF_BATCH_CHUNK_SIZE: 7,
            CONF_COALESCE_WINDOW_MS: 200,
            CONF_MODE_SETTLE_DELAY_MS: 500,
            CONF_ENABLE_LED: False,
            CONF_ENABLE_BUZZER: True,
        }
        result = await hass.config_entries.options.async_configure(
            result["flow_id"], new_options
        )
        await hass.async_block_till_done()

        assert result["type"] == FlowResultType.CREATE_ENTRY
        assert mock_config_entry.options == new_options
