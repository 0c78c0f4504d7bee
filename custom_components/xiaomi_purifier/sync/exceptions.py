"""Exceptions raised by the state synchronization engine."""
from __future__ import annotations


class SyncError(Exception):
    """Base exception for sync engine errors."""


class FetchError(SyncError):
    """A snapshot could not be fetched.

    Raised when a batch read fails or returns the wrong number of values.
    The poll loop recovers by skipping the cycle.
    """

    def __init__(self, message: str, chunk: tuple[str, ...] | None = None) -> None:
        """Initialize fetch error."""
        super().__init__(message)
        self.chunk = chunk


class CommandError(SyncError):
    """A write command failed. Reported to the caller, never retried."""

    def __init__(self, command: str, error: Exception | None = None) -> None:
        """Initialize command error."""
        message = f"Command {command} failed"
        if error is not None:
            message = f"{message}: {error}"
        super().__init__(message)
        self.command = command
        self.error = error


class SequenceError(CommandError):
    """The mode switch preceding a gated command failed.

    The follow-up command was not attempted.
    """

    def __init__(self, required_mode: str, error: Exception) -> None:
        """Initialize sequence error."""
        super().__init__(f"switch to {required_mode} mode", error)
        self.required_mode = required_mode
