"""Shared UDP endpoint for talking to miIO devices."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging

from .const import MIIO_PORT
from .exceptions import MiioConnectionError

_LOGGER = logging.getLogger(__name__)

type DatagramHandler = Callable[[bytes], None]


class MiioNetwork:
    """One UDP socket shared by every device client.

    Users call ``async_acquire`` before sending and ``async_release`` when
    done; the socket opens with the first user and closes after the last.
    Incoming datagrams are routed to every handler registered for their
    source host. Several clients may listen on one host; each drops replies
    it did not ask for.
    """

    def __init__(self, *, port: int = MIIO_PORT) -> None:
        """Initialize the network handle (socket opens on first acquire)."""
        self._port = port
        self._transport: asyncio.DatagramTransport | None = None
        self._handlers: dict[str, list[DatagramHandler]] = {}
        self._users = 0
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        """True while the socket is bound."""
        return self._transport is not None

    @property
    def users(self) -> int:
        """Number of outstanding acquisitions."""
        return self._users

    async def async_acquire(self) -> None:
        """Take a reference, opening the socket if this is the first one.

        Raises:
            MiioConnectionError: If the socket cannot be opened.
        """
        loop = asyncio.get_running_loop()

        class _Protocol(asyncio.DatagramProtocol):
            def __init__(self, outer: MiioNetwork) -> None:
                self._outer = outer

            def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
                self._outer._handle_datagram(data, addr)

            def error_received(self, exc: Exception) -> None:
                _LOGGER.debug("miIO socket error: %s", exc)

        async with self._lock:
            if self._transport is None:
                try:
                    transport, _ = await loop.create_datagram_endpoint(
                        lambda: _Protocol(self),
                        local_addr=("0.0.0.0", 0),
                    )
                except OSError as err:
                    raise MiioConnectionError(f"Failed to open socket: {err}") from err
                self._transport = transport
                _LOGGER.debug("Opened miIO socket")
            self._users += 1

    async def async_release(self) -> None:
        """Drop a reference, closing the socket after the last one."""
        async with self._lock:
            if self._users == 0:
                return
            self._users -= 1
            if self._users == 0 and self._transport is not None:
                self._transport.close()
                self._transport = None
                self._handlers.clear()
                _LOGGER.debug("Closed miIO socket")

    def register(self, host: str, handler: DatagramHandler) -> Callable[[], None]:
        """Route datagrams from ``host`` to ``handler``.

        Earlier handlers for the same host keep receiving datagrams.

        Returns:
            Callable that removes this registration only.
        """
        handlers = self._handlers.setdefault(host, [])
        handlers.append(handler)

        def _unregister() -> None:
            if handler in handlers:
                handlers.remove(handler)
            if not handlers and self._handlers.get(host) is handlers:
                del self._handlers[host]

        return _unregister

    def sendto(self, host: str, data: bytes) -> None:
        """Send a datagram to a device.

        Raises:
            MiioConnectionError: If the socket is not open or the send fails.
        """
        if self._transport is None:
            raise MiioConnectionError("miIO socket is not open")
        try:
            self._transport.sendto(data, (host, self._port))
        except OSError as err:
            raise MiioConnectionError(f"Failed to send to {host}: {err}") from err

    def _handle_datagram(self, data: bytes, addr: tuple[str, int]) -> None:
        handlers = self._handlers.get(addr[0])
        if not handlers:
            _LOGGER.debug("Ignoring datagram from unknown host %s", addr[0])
            return
        for handler in list(handlers):
            handler(data)
