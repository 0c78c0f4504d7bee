"""Point-in-time snapshot of every device property."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from .properties import ALL_PROPERTY_KEYS, PROPERTY_DEFAULTS, PropertyKey


def _hashable(value: Any) -> Any:
    """Hashable stand-in for a reported value that compares the same way."""
    if isinstance(value, list):
        return tuple(_hashable(item) for item in value)
    if isinstance(value, dict):
        return frozenset((key, _hashable(item)) for key, item in value.items())
    return value


class Snapshot(Mapping[PropertyKey, Any]):
    """Immutable mapping holding a value for every PropertyKey.

    Keys not supplied take their default, so a snapshot is always fully
    populated and iterates in declared key order. Values are stored exactly
    as reported by the device.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[PropertyKey | str, Any] | None = None) -> None:
        """Build a snapshot from a partial mapping.

        Raises:
            KeyError: If a key is not a known property.
        """
        supplied: dict[PropertyKey, Any] = {}
        for key, value in (values or {}).items():
            try:
                supplied[PropertyKey(key)] = value
            except ValueError as err:
                raise KeyError(f"Unknown property key: {key}") from err

        self._values: dict[PropertyKey, Any] = {
            key: supplied.get(key, PROPERTY_DEFAULTS[key]) for key in ALL_PROPERTY_KEYS
        }

    @classmethod
    def default(cls) -> Snapshot:
        """Snapshot of an idle device with every property at its default."""
        return cls()

    @classmethod
    def from_values(cls, values: Mapping[PropertyKey | str, Any]) -> Snapshot:
        """Create from fetched values, filling absent keys with defaults."""
        return cls(values)

    def __getitem__(self, key: PropertyKey | str) -> Any:
        return self._values[PropertyKey(key)]

    def __iter__(self) -> Iterator[PropertyKey]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snapshot):
            return self._values == other._values
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(_hashable(value) for value in self._values.values()))

    def __repr__(self) -> str:
        changed = {
            key.value: value
            for key, value in self._values.items()
            if value != PROPERTY_DEFAULTS[key]
        }
        return f"Snapshot({changed!r})"

    def diff(self, other: Snapshot) -> frozenset[PropertyKey]:
        """Return keys whose values differ between the two snapshots."""
        return frozenset(
            key for key in ALL_PROPERTY_KEYS if self._values[key] != other._values[key]
        )

    def replace(self, **changes: Any) -> Snapshot:
        """Return a copy with values replaced by wire name."""
        values: dict[PropertyKey | str, Any] = dict(self._values)
        values.update(changes)
        return Snapshot(values)

    def as_dict(self) -> dict[str, Any]:
        """Return a plain dict keyed by wire name."""
        return {key.value: value for key, value in self._values.items()}
