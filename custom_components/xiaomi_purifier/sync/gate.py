"""Mode-gated command sequencing."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import Any, TypeVar

from .exceptions import SequenceError

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class CommandGate:
    """Run commands that only take effect in a particular device mode.

    If the last known mode differs from the required one, the gate switches
    mode, waits for the device to settle, then sends the command. A failed
    mode switch aborts the sequence before the command is sent.
    """

    def __init__(
        self,
        current_mode: Callable[[], str],
        switch_mode: Callable[[str], Awaitable[Any]],
        settle_delay: float,
    ) -> None:
        """Initialize the gate.

        Args:
            current_mode: Returns the last known device mode.
            switch_mode: Coroutine function that changes the device mode.
            settle_delay: Seconds to wait after a mode switch.
        """
        self._current_mode = current_mode
        self._switch_mode = switch_mode
        self._settle_delay = settle_delay

    @property
    def settle_delay(self) -> float:
        """Default wait after a mode switch, in seconds."""
        return self._settle_delay

    async def async_ensure_mode_then_apply(
        self,
        required_mode: str,
        command: Callable[[], Awaitable[T]],
        settle_delay: float | None = None,
    ) -> T:
        """Ensure ``required_mode`` is active, then run ``command``.

        Raises:
            SequenceError: If the mode switch failed; ``command`` was not run.
        """
        if self._current_mode() != required_mode:
            _LOGGER.debug("Switching to %s mode before command", required_mode)
            try:
                await self._switch_mode(required_mode)
            except Exception as err:
                raise SequenceError(required_mode, err) from err

            delay = self._settle_delay if settle_delay is None else settle_delay
            await asyncio.sleep(delay)

        return await command()
