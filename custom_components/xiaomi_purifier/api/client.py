"""miIO client for a single device."""
from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
import logging
import time
from typing import Any

import async_timeout

from .const import (
    HANDSHAKE_MAX_AGE,
    HANDSHAKE_TIMEOUT,
    MAX_REQUEST_ID,
    METHOD_GET_PROP,
    REQUEST_TIMEOUT,
    RESULT_OK,
)
from .exceptions import (
    MiioConnectionError,
    MiioPacketError,
    MiioResponseError,
    MiioTimeoutError,
)
from .network import MiioNetwork
from .packet import (
    HELLO_PACKET,
    MiioCipher,
    PacketHeader,
    build_packet,
    decode_message,
    decode_packet,
    encode_message,
    parse_token,
)

_LOGGER = logging.getLogger(__name__)


class MiioClient:
    """Request/response client for one miIO device over a shared network."""

    def __init__(
        self,
        network: MiioNetwork,
        host: str,
        token: str,
        *,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Raises:
            ValueError: If the token is not 32 hex characters.
        """
        self._network = network
        self._host = host
        self._cipher = MiioCipher(parse_token(token))
        self._timeout = timeout

        self._device_id: int | None = None
        self._stamp = 0
        self._stamp_at = 0.0
        self._request_id = 0

        self._pending: dict[int, asyncio.Future[dict[str, Any]]] = {}
        self._hello: asyncio.Future[PacketHeader] | None = None
        self._handshake_lock = asyncio.Lock()
        self._unregister: Callable[[], None] | None = None
        self._connected = False
        self._closed = False

    async def __aenter__(self) -> MiioClient:
        """Async context manager entry."""
        await self.async_connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def host(self) -> str:
        """Device address."""
        return self._host

    @property
    def device_id(self) -> int | None:
        """Device ID from the last handshake."""
        return self._device_id

    async def async_connect(self) -> None:
        """Take a reference on the shared network and listen for replies."""
        if self._closed:
            raise MiioConnectionError("Client is closed")
        if self._connected:
            return
        await self._network.async_acquire()
        self._unregister = self._network.register(self._host, self._handle_datagram)
        self._connected = True

    async def close(self) -> None:
        """Stop listening and release the network reference."""
        if self._closed:
            return
        self._closed = True

        if self._unregister is not None:
            self._unregister()
            self._unregister = None

        for future in self._pending.values():
            if not future.done():
                future.set_exception(MiioConnectionError("Client closed"))
        self._pending.clear()

        if self._connected:
            self._connected = False
            await self._network.async_release()

    async def _async_handshake(self) -> None:
        async with self._handshake_lock:
            if (
                self._device_id is not None
                and time.monotonic() - self._stamp_at < HANDSHAKE_MAX_AGE
            ):
                return

            self._hello = asyncio.get_running_loop().create_future()
            try:
                self._network.sendto(self._host, HELLO_PACKET)
                async with async_timeout.timeout(HANDSHAKE_TIMEOUT):
                    header = await self._hello
            except asyncio.TimeoutError as err:
                raise MiioTimeoutError(f"No hello reply from {self._host}") from err
            finally:
                self._hello = None

            self._device_id = header.device_id
            self._stamp = header.stamp
            self._stamp_at = time.monotonic()
            _LOGGER.debug(
                "Handshake with %s: device id %s, stamp %s",
                self._host,
                self._device_id,
                self._stamp,
            )

    def _next_request_id(self) -> int:
        self._request_id = self._request_id % MAX_REQUEST_ID + 1
        while self._request_id in self._pending:
            self._request_id = self._request_id % MAX_REQUEST_ID + 1
        return self._request_id

    def _next_stamp(self) -> int:
        return self._stamp + int(time.monotonic() - self._stamp_at) + 1

    async def send(self, method: str, params: list[Any] | None = None) -> Any:
        """Send a request and wait for its result.

        Args:
            method: miIO method name
            params: Positional params

        Returns:
            The ``result`` field of the reply

        Raises:
            MiioTimeoutError: No reply in time
            MiioResponseError: Device returned an error
            MiioConnectionError: Socket unavailable
        """
        await self.async_connect()
        await self._async_handshake()
        assert self._device_id is not None

        request_id = self._next_request_id()
        future: asyncio.Future[dict[str, Any]] = (
            asyncio.get_running_loop().create_future()
        )
        self._pending[request_id] = future

        packet = build_packet(
            self._cipher,
            self._device_id,
            self._next_stamp(),
            encode_message(request_id, method, params or []),
        )
        _LOGGER.debug("%s -> %s(%s) id=%d", self._host, method, params, request_id)

        try:
            self._network.sendto(self._host, packet)
            async with async_timeout.timeout(self._timeout):
                response = await future
        except asyncio.TimeoutError as err:
            # Force a new handshake on the next request
            self._device_id = None
            raise MiioTimeoutError(f"{method} to {self._host} timed out") from err
        finally:
            self._pending.pop(request_id, None)

        if "error" in response:
            error = response["error"]
            if isinstance(error, dict):
                raise MiioResponseError(
                    error.get("message", "Unknown error"), code=error.get("code")
                )
            raise MiioResponseError(str(error))
        if "result" not in response:
            raise MiioResponseError(f"Reply to {method} has no result")

        return response["result"]

    async def batch_read(self, keys: Sequence[str]) -> list[Any]:
        """Read several properties with get_prop."""
        result = await self.send(METHOD_GET_PROP, list(keys))
        if not isinstance(result, list):
            raise MiioResponseError(f"get_prop returned {type(result).__name__}")
        return result

    async def send_command(self, name: str, params: list[Any]) -> Any:
        """Send a write command; the device must answer ["ok"]."""
        result = await self.send(name, params)
        if result != [RESULT_OK]:
            raise MiioResponseError(f"{name} returned {result!r}")
        return result

    def _handle_datagram(self, data: bytes) -> None:
        try:
            header, payload = decode_packet(self._cipher, data)
        except MiioPacketError as err:
            _LOGGER.debug("Dropping packet from %s: %s", self._host, err)
            return

        if header.is_hello:
            if self._hello is not None and not self._hello.done():
                self._hello.set_result(header)
            return

        try:
            message = decode_message(payload)
        except MiioPacketError as err:
            _LOGGER.debug("Dropping reply from %s: %s", self._host, err)
            return

        future = self._pending.get(message.get("id"))
        if future is None or future.done():
            _LOGGER.debug("Unmatched reply from %s: %s", self._host, message)
            return
        future.set_result(message)
