"""miIO client package."""
from __future__ import annotations

from .client import MiioClient
from .const import MIIO_PORT, REQUEST_TIMEOUT
from .exceptions import (
    MiioConnectionError,
    MiioError,
    MiioPacketError,
    MiioResponseError,
    MiioTimeoutError,
)
from .network import MiioNetwork

__all__ = [
    # Client
    "MiioClient",
    "MiioNetwork",
    # Exceptions
    "MiioConnectionError",
    "MiioError",
    "MiioPacketError",
    "MiioResponseError",
    "MiioTimeoutError",
    # Constants
    "MIIO_PORT",
    "REQUEST_TIMEOUT",
]
