"""Translatable exceptions for the Xiaomi Air Purifier integration.

Exception Hierarchy:
    PurifierException (HomeAssistantError)
    └── PurifierCommandError - A write command was rejected or timed out
"""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError

from .const import DOMAIN


class PurifierException(HomeAssistantError):
    """Base exception with translation support.

    Attributes:
        translation_domain: Always DOMAIN
        translation_key: Key in the strings.json exceptions section
        translation_placeholders: Values substituted into the message
    """

    translation_domain: str = DOMAIN
    translation_key: str = "unknown_error"

    def __init__(
        self,
        translation_key: str | None = None,
        translation_placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize translatable exception."""
        effective_key = (
            translation_key if translation_key is not None else type(self).translation_key
        )
        super().__init__(
            translation_domain=type(self).translation_domain,
            translation_key=effective_key,
            translation_placeholders=translation_placeholders or {},
        )


class PurifierCommandError(PurifierException):
    """A command sent to the purifier failed.

    Raised by entities when the coordinator reports a failed write. Commands
    are not retried.
    """

    translation_key = "command_failed"

    def __init__(self, command: str, error: str) -> None:
        """Initialize with the command name and the reported error.

        Args:
            command: Command that failed
            error: Reason reported by the device or transport
        """
        super().__init__(
            translation_key=self.translation_key,
            translation_placeholders={"command": command, "error": error},
        )
        self.command = command
        self.error = error
