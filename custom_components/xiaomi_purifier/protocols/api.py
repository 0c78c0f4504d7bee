"""Transport protocol interface.

Defines the contract the sync engine needs from whatever talks to the device.
Enables dependency injection and testing with fake transports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IPropertyTransport(Protocol):
    """Protocol for a property based device transport.

    Implementations own the network exchange with a single device.
    """

    async def batch_read(self, keys: Sequence[str]) -> list[Any]:
        """Read several properties in one request.

        Args:
            keys: Property names, in the order values should be returned.

        Returns:
            One value per key, positionally matched.

        Raises:
            MiioError: If the request fails.
        """
        ...

    async def send_command(self, name: str, params: list[Any]) -> Any:
        """Send a write command.

        Args:
            name: Method name (e.g. "set_power").
            params: Positional parameters.

        Returns:
            The device's result payload.

        Raises:
            MiioError: If the command fails or is rejected.
        """
        ...

    async def close(self) -> None:
        """Release network resources held for this device."""
        ...
