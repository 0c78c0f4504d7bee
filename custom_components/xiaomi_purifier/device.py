"""Typed command surface of the air purifier."""
from __future__ import annotations

import logging
from typing import Any

from .models import (
    BuzzerCommand,
    ChildLockCommand,
    FavoriteLevelCommand,
    LedCommand,
    ModeCommand,
    OperatingMode,
    PowerCommand,
    PowerState,
    PurifierCommand,
)
from .protocols import IPropertyTransport

_LOGGER = logging.getLogger(__name__)


class AirPurifierDevice:
    """Send purifier commands over a property transport."""

    def __init__(self, transport: IPropertyTransport) -> None:
        """Initialize with the transport used for writes."""
        self._transport = transport

    async def async_send(self, command: PurifierCommand) -> Any:
        """Send one command and return the device's reply."""
        _LOGGER.debug("Sending %s %s", command.method, command.get_params())
        return await self._transport.send_command(command.method, command.get_params())

    async def set_power(self, state: PowerState) -> Any:
        return await self.async_send(PowerCommand(state))

    async def set_mode(self, mode: OperatingMode) -> Any:
        return await self.async_send(ModeCommand(mode))

    async def set_child_lock(self, state: PowerState) -> Any:
        return await self.async_send(ChildLockCommand(state))

    async def set_favorite_level(self, level: int) -> Any:
        """Set the favorite mode motor level.

        Raises:
            ValueError: If level is outside 0-17; nothing is sent.
        """
        return await self.async_send(FavoriteLevelCommand(level))

    async def set_led(self, state: PowerState) -> Any:
        return await self.async_send(LedCommand(state))

    async def set_buzzer(self, state: PowerState) -> Any:
        return await self.async_send(BuzzerCommand(state))
