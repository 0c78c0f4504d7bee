"""Update sink protocol interface.

Separates the sync engine from whatever presents device state.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IUpdateSink(Protocol):
    """Protocol for receivers of derived facet values.

    Implemented by the coordinator, which fans values out to entities.
    """

    def push(self, facet: str, value: Any) -> None:
        """Reflect a new facet value.

        Args:
            facet: Facet identifier.
            value: Value derived from the current snapshot.
        """
        ...
