"""Holder for the last accepted snapshot."""
from __future__ import annotations

from ..models import PropertyKey, Snapshot


class SnapshotStore:
    """Keep the current snapshot and diff incoming ones against it."""

    def __init__(self, initial: Snapshot | None = None) -> None:
        """Start from ``initial`` or a fully defaulted snapshot."""
        self._current = initial if initial is not None else Snapshot.default()

    @property
    def current(self) -> Snapshot:
        """The last accepted snapshot."""
        return self._current

    @staticmethod
    def diff(previous: Snapshot, next_snapshot: Snapshot) -> frozenset[PropertyKey]:
        """Keys whose values differ between two snapshots."""
        return previous.diff(next_snapshot)

    def accept(self, next_snapshot: Snapshot) -> frozenset[PropertyKey]:
        """Make ``next_snapshot`` current.

        The diff is computed against the prior snapshot before the swap.

        Returns:
            Keys that changed.
        """
        changed = self.diff(self._current, next_snapshot)
        self._current = next_snapshot
        return changed
