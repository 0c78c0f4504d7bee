"""Recurring poll cycle driving snapshot updates."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import contextlib
from enum import StrEnum
import logging

from ..models import PropertyKey, Snapshot
from ..protocols import IUpdateSink
from .dispatch import DispatchTable
from .exceptions import FetchError
from .fetcher import PropertyFetcher
from .store import SnapshotStore

_LOGGER = logging.getLogger(__name__)


def _consume_outcome(fetch: asyncio.Future[Snapshot]) -> None:
    # Outcomes of abandoned fetches are discarded
    if not fetch.cancelled():
        fetch.exception()


class PollState(StrEnum):
    """Phase of the poll loop."""

    IDLE = "idle"
    FETCHING = "fetching"
    DIFFING = "diffing"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"


class PollLoop:
    """Periodically fetch, diff and dispatch device state.

    One cycle runs at a time: Idle -> Fetching -> Diffing -> Dispatching ->
    Idle. A failed fetch returns straight to Idle and leaves the store as it
    was; the next tick retries. Stopping is terminal.
    """

    def __init__(
        self,
        fetcher: PropertyFetcher,
        store: SnapshotStore,
        table: DispatchTable,
        sink: IUpdateSink,
        *,
        interval: float,
        on_stop: Callable[[], Awaitable[None]] | None = None,
        name: str = "purifier",
    ) -> None:
        """Initialize the poll loop.

        Args:
            fetcher: Reads full snapshots from the device.
            store: Holds the current snapshot.
            table: Resolves changed keys into update actions.
            sink: Receives facet values.
            interval: Seconds between the start of one wait and the next cycle.
            on_stop: Releases transport resources; awaited once on stop.
            name: Used in log messages.
        """
        self._fetcher = fetcher
        self._store = store
        self._table = table
        self._sink = sink
        self._interval = interval
        self._on_stop = on_stop
        self._name = name

        self._state = PollState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._fetch: asyncio.Future[Snapshot] | None = None
        self._closed = False

        self.last_update_success = False
        self.consecutive_failures = 0

    @property
    def state(self) -> PollState:
        """Current phase."""
        return self._state

    @property
    def interval(self) -> float:
        """Seconds between cycles."""
        return self._interval

    @property
    def running(self) -> bool:
        """True while the timer task is scheduled."""
        return self._task is not None and not self._task.done()

    async def async_start(self) -> None:
        """Start polling. The first cycle runs immediately."""
        if self._state is PollState.STOPPED:
            _LOGGER.debug("Poll loop for %s already stopped, not starting", self._name)
            return
        if self.running:
            return

        _LOGGER.debug(
            "Start polling %s every %.1fs", self._name, self._interval
        )
        self._task = asyncio.get_running_loop().create_task(
            self._async_run(), name=f"xiaomi_purifier poll {self._name}"
        )

    async def _async_run(self) -> None:
        while self._state is not PollState.STOPPED:
            try:
                await self.async_poll()
            except Exception:
                _LOGGER.exception("Unexpected error polling %s", self._name)
            await asyncio.sleep(self._interval)

    async def async_poll(self) -> frozenset[PropertyKey]:
        """Run one cycle.

        Returns:
            Keys that changed, empty if the cycle was skipped or failed.

        Raises:
            Whatever the fetcher raises other than ``FetchError``; the loop
            is back in Idle either way.
        """
        if self._state is not PollState.IDLE:
            _LOGGER.debug(
                "Skipping poll of %s, loop is %s", self._name, self._state
            )
            return frozenset()

        self._state = PollState.FETCHING
        try:
            try:
                snapshot = await self._async_fetch()
            except FetchError as err:
                if self._state is not PollState.STOPPED:
                    self._record_failure(err)
                return frozenset()

            if self._state is PollState.STOPPED:
                _LOGGER.debug(
                    "Discarding snapshot for %s fetched after stop", self._name
                )
                return frozenset()

            self._record_success()

            self._state = PollState.DIFFING
            changed = self._store.accept(snapshot)
            if not changed:
                return changed

            for key in changed:
                _LOGGER.debug(
                    "%s state requires update: %s -> %s",
                    self._name,
                    key.value,
                    snapshot[key],
                )

            self._state = PollState.DISPATCHING
            current = self._store.current
            for action in self._table.resolve(changed):
                action(current, self._sink)
            return changed
        finally:
            if self._state is not PollState.STOPPED:
                self._state = PollState.IDLE

    async def _async_fetch(self) -> Snapshot:
        # Shielded so a stop lets the transport call finish
        fetch = asyncio.ensure_future(self._fetcher.async_fetch())
        fetch.add_done_callback(_consume_outcome)
        self._fetch = fetch
        try:
            return await asyncio.shield(fetch)
        finally:
            if fetch.done() and self._fetch is fetch:
                self._fetch = None

    def _record_failure(self, err: FetchError) -> None:
        self.consecutive_failures += 1
        self.last_update_success = False
        if self.consecutive_failures == 2:
            _LOGGER.warning("Polling %s keeps failing: %s", self._name, err)
        else:
            _LOGGER.debug(
                "Failed to poll %s (%d consecutive failures): %s",
                self._name,
                self.consecutive_failures,
                err,
            )

    def _record_success(self) -> None:
        if self.consecutive_failures > 1:
            _LOGGER.info(
                "Polling %s recovered after %d failures",
                self._name,
                self.consecutive_failures,
            )
        self.consecutive_failures = 0
        self.last_update_success = True

    async def async_stop(self) -> None:
        """Stop polling and release transport resources.

        A fetch in flight is allowed to finish; its result is discarded. Safe
        to call more than once and before ``async_start``.
        """
        self._state = PollState.STOPPED

        fetch, self._fetch = self._fetch, None
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            _LOGGER.debug("Stop polling %s", self._name)
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if fetch is not None and not fetch.done():
            _LOGGER.debug("Waiting for in-flight fetch of %s", self._name)
            await asyncio.wait([fetch])

        if self._closed:
            return
        self._closed = True
        if self._on_stop is not None:
            await self._on_stop()
