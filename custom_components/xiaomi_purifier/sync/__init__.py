"""State synchronization engine.

Polls a property based device, diffs snapshots, dispatches facet updates and
paces write commands. Talks to the device and the UI only through the
interfaces in ``protocols``.
"""
from __future__ import annotations

from .coalescer import CommandCallback, CommandCoalescer
from .dispatch import DispatchTable, UpdateAction
from .exceptions import CommandError, FetchError, SequenceError, SyncError
from .fetcher import PropertyFetcher
from .gate import CommandGate
from .poll_loop import PollLoop, PollState
from .store import SnapshotStore

__all__ = [
    "CommandCallback",
    "CommandCoalescer",
    "CommandError",
    "CommandGate",
    "DispatchTable",
    "FetchError",
    "PollLoop",
    "PollState",
    "PropertyFetcher",
    "SequenceError",
    "SnapshotStore",
    "SyncError",
    "UpdateAction",
]
