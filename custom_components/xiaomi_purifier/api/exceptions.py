"""Exceptions for the miIO client."""
from __future__ import annotations


class MiioError(Exception):
    """Base exception for miIO errors."""

    def __init__(self, message: str, code: int | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self.code = code


class MiioConnectionError(MiioError):
    """Connection error - socket closed or unreachable."""

    def __init__(self, message: str = "Failed to reach device") -> None:
        """Initialize connection error."""
        super().__init__(message)


class MiioTimeoutError(MiioError):
    """No response within the request timeout."""

    def __init__(self, message: str = "Request timed out") -> None:
        """Initialize timeout error."""
        super().__init__(message)


class MiioPacketError(MiioError):
    """Malformed packet or checksum mismatch."""


class MiioResponseError(MiioError):
    """The device answered with an error or an unexpected result."""

    def __init__(self, message: str, code: int | None = None) -> None:
        """Initialize response error."""
        super().__init__(message, code=code)
