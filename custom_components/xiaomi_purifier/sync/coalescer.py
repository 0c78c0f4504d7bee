"""Debounced write coalescing for continuous-valued commands."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import Any, Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

type CommandCallback = Callable[[Exception | None], None]


class CommandCoalescer(Generic[T]):
    """Collapse bursts of submissions into one apply of the latest value.

    Every ``submit`` restarts the quiet window. When the window elapses with
    no further submission, ``apply`` runs once with the most recent value and
    that submission's callback receives ``None`` or the raised exception.
    Callbacks of superseded submissions are never called: their request was
    replaced by a newer one.

    Must be used from the event loop thread.
    """

    def __init__(
        self,
        apply: Callable[[T], Awaitable[Any]],
        window: float,
        *,
        name: str = "command",
    ) -> None:
        """Initialize the coalescer.

        Args:
            apply: Coroutine function performing the write.
            window: Quiet period in seconds.
            name: Used in log messages.
        """
        self._apply = apply
        self._window = window
        self._name = name

        self._timer: asyncio.TimerHandle | None = None
        self._pending: tuple[T, CommandCallback | None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()

    @property
    def window(self) -> float:
        """Quiet period in seconds."""
        return self._window

    @property
    def pending(self) -> bool:
        """True while a submission is waiting for its window to close."""
        return self._timer is not None

    @property
    def inflight(self) -> int:
        """Number of applies currently running."""
        return len(self._inflight)

    def submit(self, value: T, callback: CommandCallback | None = None) -> None:
        """Schedule ``apply(value)`` after the quiet window.

        Replaces any submission still waiting.
        """
        if self._timer is not None:
            self._timer.cancel()
            _LOGGER.debug("%s: superseding pending value %s", self._name, self._pending)

        self._pending = (value, callback)
        self._timer = asyncio.get_running_loop().call_later(self._window, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self._pending is None:
            return
        value, callback = self._pending
        self._pending = None

        task = asyncio.get_running_loop().create_task(
            self._async_apply(value, callback),
            name=f"xiaomi_purifier {self._name}",
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _async_apply(self, value: T, callback: CommandCallback | None) -> None:
        _LOGGER.debug("%s: applying %s", self._name, value)
        error: Exception | None = None
        try:
            await self._apply(value)
        except Exception as err:
            error = err

        if callback is not None:
            callback(error)
        elif error is not None:
            _LOGGER.error("%s: failed to apply %s: %s", self._name, value, error)

    def cancel(self) -> None:
        """Drop a waiting submission without applying it."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None

    async def async_shutdown(self) -> None:
        """Cancel the waiting submission and let in-flight applies finish."""
        self.cancel()
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)
