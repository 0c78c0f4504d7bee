"""Test purifier switches."""
from __future__ import annotations

import pytest
from homeassistant.components.switch import DOMAIN as SWITCH_DOMAIN
from homeassistant.const import (
    ATTR_ENTITY_ID,
    SERVICE_TURN_OFF,
    SERVICE_TURN_ON,
    STATE_OFF,
    STATE_ON,
)
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.xiaomi_purifier.api import MiioResponseError


class TestSwitchSetup:
    """Test which switches are created."""

    @pytest.mark.asyncio
    async def test_optional_switches(
        self, hass: HomeAssistant, setup_integration, entity_id_for
    ):
        """Test child lock always, LED when enabled, buzzer not when disabled."""
        assert entity_id_for(SWITCH_DOMAIN, "child_lock") is not None
        assert entity_id_for(SWITCH_DOMAIN, "led") is not None
        assert entity_id_for(SWITCH_DOMAIN, "buzzer") is None


class TestChildLockSwitch:
    """Test the child lock switch."""

    @pytest.mark.asyncio
    async def test_state(self, hass: HomeAssistant, setup_integration, entity_id_for):
        """Test the initial lock state."""
        state = hass.states.get(entity_id_for(SWITCH_DOMAIN, "child_lock"))

        assert state.state == STATE_OFF

    @pytest.mark.asyncio
    async def test_turn_on_then_poll(
        self,
        hass: HomeAssistant,
        setup_integration,
        entity_id_for,
        running_transport,
    ):
        """Test locking sends the command and the next poll shows it."""
        entity_id = entity_id_for(SWITCH_DOMAIN, "child_lock")

        await hass.services.async_call(
            SWITCH_DOMAIN, SERVICE_TURN_ON, {ATTR_ENTITY_ID: entity_id}, blocking=True
        )
        assert running_transport.commands == [("set_child_lock", ["on"])]

        await setup_integration.runtime_data.coordinator.async_refresh()
        await hass.async_block_till_done()

        assert hass.states.get(entity_id).state == STATE_ON

    @pytest.mark.asyncio
    async def test_failure_raises(
        self,
        hass: HomeAssistant,
        setup_integration,
        entity_id_for,
        running_transport,
    ):
        """Test a rejected command raises and the state is unchanged."""
        entity_id = entity_id_for(SWITCH_DOMAIN, "child_lock")
        running_transport.command_errors["set_child_lock"] = MiioResponseError("no")

        with pytest.raises(HomeAssistantError):
            await hass.services.async_call(
                SWITCH_DOMAIN,
                SERVICE_TURN_ON,
                {ATTR_ENTITY_ID: entity_id},
                blocking=True,
            )

        assert hass.states.get(entity_id).state == STATE_OFF


class TestLedSwitch:
    """Test the display LED switch."""

    @pytest.mark.asyncio
    async def test_turn_off(
        self,
        hass: HomeAssistant,
        setup_integration,
        entity_id_for,
        running_transport,
    ):
        """Test the LED switch sends set_led."""
        await hass.services.async_call(
            SWITCH_DOMAIN,
            SERVICE_TURN_OFF,
            {ATTR_ENTITY_ID: entity_id_for(SWITCH_DOMAIN, "led")},
            blocking=True,
        )

        assert running_transport.commands == [("set_led", ["off"])]
