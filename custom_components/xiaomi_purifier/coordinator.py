"""DataUpdateCoordinator wiring the sync engine to Home Assistant entities."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timedelta
import logging
from typing import TYPE_CHECKING, Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .device import AirPurifierDevice
from .facets import Facet, build_dispatch_table, percentage_to_favorite_level
from .models import OperatingMode, PowerState, PropertyKey, Snapshot, SyncConfig
from .protocols import IPropertyTransport
from .sync import (
    CommandCallback,
    CommandCoalescer,
    CommandError,
    CommandGate,
    PollLoop,
    PropertyFetcher,
    SnapshotStore,
)

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry

_LOGGER = logging.getLogger(__name__)


class PurifierCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Own the poll loop and command paths of one purifier.

    Each refresh runs one poll cycle. Update actions push facet values into
    ``data``; listeners are only called when a value changed. Write commands
    report completion through a callback taking ``None`` on success or a
    ``CommandError``.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        transport: IPropertyTransport,
        config: SyncConfig,
        *,
        name: str = "purifier",
    ) -> None:
        """Initialize the coordinator.

        The transport is closed when the coordinator stops.
        """
        self.config = config

        self._transport = transport
        self._device = AirPurifierDevice(transport)
        self._store = SnapshotStore()
        self._table = build_dispatch_table(config.enable_led, config.enable_buzzer)

        self._values: dict[str, Any] = {}
        self._changed: set[str] = set()
        self._has_polled = False
        self._tasks: set[asyncio.Task[None]] = set()

        # Facets start at the values derived from the default snapshot
        for action in self._table.actions:
            self._values[action.facet] = action.derive(self._store.current)

        self._poll_loop = PollLoop(
            PropertyFetcher(transport, chunk_size=config.batch_chunk_size),
            self._store,
            self._table,
            self,
            interval=config.poll_interval,
            on_stop=transport.close,
            name=name,
        )
        self._speed = CommandCoalescer[int](
            self._async_apply_rotation_speed,
            config.coalesce_window,
            name=f"{name} rotation speed",
        )
        self._gate = CommandGate(
            lambda: self._store.current[PropertyKey.MODE],
            lambda mode: self._device.set_mode(OperatingMode(mode)),
            config.mode_settle_delay,
        )

        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=name,
            update_interval=timedelta(seconds=config.poll_interval),
            always_update=False,
        )
        self.data = dict(self._values)

    @property
    def device(self) -> AirPurifierDevice:
        """Typed command surface."""
        return self._device

    @property
    def snapshot(self) -> Snapshot:
        """Last accepted snapshot."""
        return self._store.current

    @property
    def poll_loop(self) -> PollLoop:
        return self._poll_loop

    @property
    def consecutive_failures(self) -> int:
        return self._poll_loop.consecutive_failures

    @property
    def facet_values(self) -> dict[str, Any]:
        """Copy of every published facet value."""
        return dict(self.data)

    @property
    def changed_facets(self) -> frozenset[str]:
        """Facets pushed during the last refresh."""
        return frozenset(self._changed)

    def facet_value(self, facet: Facet | str) -> Any:
        """Published value of one facet, None if it has none."""
        return self.data.get(facet)

    def push(self, facet: str, value: Any) -> None:
        """Store a facet value; it is published when the refresh completes."""
        self._values[facet] = value
        self._changed.add(facet)

    async def _async_update_data(self) -> dict[str, Any]:
        """Run one poll cycle and publish the facet values.

        A failed cycle keeps the last values. Only a purifier that has never
        answered is reported as failed.
        """
        self._changed = set()
        await self._poll_loop.async_poll()

        if self._poll_loop.last_update_success:
            self._has_polled = True
        elif not self._has_polled:
            raise UpdateFailed(f"{self.name} did not answer")

        return dict(self._values)

    async def async_stop(self) -> None:
        """Stop polling, settle pending commands and close the transport."""
        await self.async_shutdown()
        await self._speed.async_shutdown()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._poll_loop.async_stop()

    def _run_command(
        self,
        name: str,
        command: Callable[[], Awaitable[Any]],
        callback: CommandCallback | None,
    ) -> None:
        async def _async_run() -> None:
            error = await self._async_execute(name, command)
            if callback is not None:
                callback(error)
            elif error is not None:
                _LOGGER.error("%s: %s", self.name, error)

        task = asyncio.get_running_loop().create_task(
            _async_run(), name=f"xiaomi_purifier {self.name} {name}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _async_execute(
        self, name: str, command: Callable[[], Awaitable[Any]]
    ) -> CommandError | None:
        try:
            await command()
        except CommandError as err:
            _LOGGER.warning("%s: %s", self.name, err)
            return err
        except Exception as err:
            _LOGGER.warning("%s: command %s failed: %s", self.name, name, err)
            return CommandError(name, err)
        return None

    def set_active(self, active: bool, callback: CommandCallback | None = None) -> None:
        """Turn the purifier on or off."""
        state = PowerState.from_bool(active)
        if self._store.current[PropertyKey.POWER] == state:
            _LOGGER.debug("%s already %s, not sending", self.name, state)
            if callback is not None:
                callback(None)
            return
        self._run_command("set_power", lambda: self._device.set_power(state), callback)

    def set_preset_mode(
        self, mode: OperatingMode | str, callback: CommandCallback | None = None
    ) -> None:
        """Switch operating mode."""

        async def _async_set_mode() -> None:
            await self._device.set_mode(OperatingMode(mode))

        self._run_command("set_mode", _async_set_mode, callback)

    def set_child_lock(
        self, locked: bool, callback: CommandCallback | None = None
    ) -> None:
        self._run_command(
            "set_child_lock",
            lambda: self._device.set_child_lock(PowerState.from_bool(locked)),
            callback,
        )

    def set_led(self, enabled: bool, callback: CommandCallback | None = None) -> None:
        self._run_command(
            "set_led",
            lambda: self._device.set_led(PowerState.from_bool(enabled)),
            callback,
        )

    def set_buzzer(
        self, enabled: bool, callback: CommandCallback | None = None
    ) -> None:
        self._run_command(
            "set_buzzer",
            lambda: self._device.set_buzzer(PowerState.from_bool(enabled)),
            callback,
        )

    def set_rotation_speed(
        self, percentage: float, callback: CommandCallback | None = None
    ) -> None:
        """Set the fan speed.

        Rapid calls are coalesced; only the last one within the quiet window is
        sent and only its callback is called. The purifier is switched to
        favorite mode first if needed.
        """
        level = percentage_to_favorite_level(percentage)
        self._speed.submit(level, callback)

    async def _async_apply_rotation_speed(self, level: int) -> None:
        error = await self._async_execute(
            "set_level_favorite",
            lambda: self._gate.async_ensure_mode_then_apply(
                OperatingMode.FAVORITE,
                lambda: self._device.set_favorite_level(level),
            ),
        )
        if error is not None:
            raise error
