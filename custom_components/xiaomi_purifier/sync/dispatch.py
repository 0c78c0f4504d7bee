"""Property to update action dispatch.

A change to one property can affect several facets, and one facet can depend
on several properties. The mapping is a static table so every key's effect
set can be inspected and tested without running a poll.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..models import ALL_PROPERTY_KEYS, PropertyKey, Snapshot
from ..protocols import IUpdateSink


@dataclass(frozen=True)
class UpdateAction:
    """Push one facet value derived from a snapshot.

    Idempotent: running it twice against the same snapshot pushes the same
    value twice.
    """

    facet: str
    derive: Callable[[Snapshot], Any]

    def __call__(self, snapshot: Snapshot, sink: IUpdateSink) -> None:
        """Derive the facet value and push it to the sink."""
        sink.push(self.facet, self.derive(snapshot))


class DispatchTable:
    """Map each PropertyKey to an ordered tuple of update actions."""

    def __init__(
        self,
        entries: Mapping[PropertyKey, Sequence[UpdateAction]] | None = None,
    ) -> None:
        """Initialize the table. Keys without an entry map to no actions."""
        entries = entries or {}
        self._entries: dict[PropertyKey, tuple[UpdateAction, ...]] = {
            key: tuple(entries.get(key, ())) for key in ALL_PROPERTY_KEYS
        }

    def actions_for(self, key: PropertyKey) -> tuple[UpdateAction, ...]:
        """Actions triggered by a change to ``key``."""
        return self._entries[key]

    @property
    def actions(self) -> list[UpdateAction]:
        """Every distinct action in the table, in first-use order."""
        return self.resolve(ALL_PROPERTY_KEYS)

    def resolve(self, changed: Iterable[PropertyKey]) -> list[UpdateAction]:
        """Resolve changed keys into actions to run.

        Keys are visited in declared order, not iteration order of
        ``changed``, and each action appears at most once.
        """
        changed_keys = set(changed)
        resolved: list[UpdateAction] = []
        seen: set[UpdateAction] = set()

        for key in ALL_PROPERTY_KEYS:
            if key not in changed_keys:
                continue
            for action in self._entries[key]:
                if action not in seen:
                    seen.add(action)
                    resolved.append(action)

        return resolved

    def with_entries(
        self, entries: Mapping[PropertyKey, Sequence[UpdateAction]]
    ) -> DispatchTable:
        """Return a new table with the given entries replaced."""
        merged: dict[PropertyKey, Sequence[UpdateAction]] = dict(self._entries)
        merged.update(entries)
        return DispatchTable(merged)

    def without_actions(self, excluded: Iterable[UpdateAction]) -> DispatchTable:
        """Return a new table with the given actions removed everywhere."""
        dropped = set(excluded)
        return DispatchTable(
            {
                key: tuple(action for action in actions if action not in dropped)
                for key, actions in self._entries.items()
            }
        )
