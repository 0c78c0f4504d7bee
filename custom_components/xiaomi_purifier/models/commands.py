"""Command pattern models for purifier control.

Each command encapsulates a single write and knows how to serialize itself
as a miIO method call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from .properties import OperatingMode, PowerState

# Favorite level accepted by set_level_favorite
FAVORITE_LEVEL_MIN = 0
FAVORITE_LEVEL_MAX = 17


@dataclass(frozen=True)
class PurifierCommand(ABC):
    """Base class for purifier commands.

    Commands are immutable value objects; ``method`` and ``params`` are what
    goes on the wire.
    """

    @property
    @abstractmethod
    def method(self) -> str:
        """Get the miIO method name for this command."""
        ...

    @abstractmethod
    def get_params(self) -> list[Any]:
        """Get the positional params to send."""
        ...


@dataclass(frozen=True)
class PowerCommand(PurifierCommand):
    """Command to turn the purifier on or off."""

    state: PowerState

    @property
    def method(self) -> str:
        return "set_power"

    def get_params(self) -> list[Any]:
        return [self.state.value]


@dataclass(frozen=True)
class ModeCommand(PurifierCommand):
    """Command to change the operating mode."""

    mode: OperatingMode

    @property
    def method(self) -> str:
        return "set_mode"

    def get_params(self) -> list[Any]:
        return [self.mode.value]


@dataclass(frozen=True)
class ChildLockCommand(PurifierCommand):
    """Command to lock or unlock the physical buttons."""

    state: PowerState

    @property
    def method(self) -> str:
        return "set_child_lock"

    def get_params(self) -> list[Any]:
        return [self.state.value]


@dataclass(frozen=True)
class FavoriteLevelCommand(PurifierCommand):
    """Command to set the motor level used in favorite mode."""

    level: int

    def __post_init__(self) -> None:
        """Validate level is within the device range."""
        if not FAVORITE_LEVEL_MIN <= self.level <= FAVORITE_LEVEL_MAX:
            raise ValueError(
                f"Favorite level must be {FAVORITE_LEVEL_MIN}-{FAVORITE_LEVEL_MAX}, "
                f"got {self.level}"
            )

    @property
    def method(self) -> str:
        return "set_level_favorite"

    def get_params(self) -> list[Any]:
        return [self.level]


@dataclass(frozen=True)
class LedCommand(PurifierCommand):
    """Command to toggle the display LED."""

    state: PowerState

    @property
    def method(self) -> str:
        return "set_led"

    def get_params(self) -> list[Any]:
        return [self.state.value]


@dataclass(frozen=True)
class BuzzerCommand(PurifierCommand):
    """Command to toggle the button buzzer."""

    state: PowerState

    @property
    def method(self) -> str:
        return "set_buzzer"

    def get_params(self) -> list[Any]:
        return [self.state.value]
