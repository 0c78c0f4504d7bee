"""Chunked snapshot fetching."""
from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from ..const import DEFAULT_BATCH_CHUNK_SIZE
from ..models import ALL_PROPERTY_KEYS, PropertyKey, Snapshot
from ..protocols import IPropertyTransport
from .exceptions import FetchError

_LOGGER = logging.getLogger(__name__)


class PropertyFetcher:
    """Fetch a full snapshot through a transport with a per-call key limit.

    The key list is split into consecutive chunks in declared order, each
    chunk is read with one ``batch_read`` call, and the responses are zipped
    back onto their keys. Any failed or short chunk fails the whole fetch.
    """

    def __init__(
        self,
        transport: IPropertyTransport,
        keys: Sequence[PropertyKey] = ALL_PROPERTY_KEYS,
        chunk_size: int = DEFAULT_BATCH_CHUNK_SIZE,
    ) -> None:
        """Initialize the fetcher."""
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._transport = transport
        self._keys = tuple(keys)
        self._chunk_size = chunk_size

    @property
    def keys(self) -> tuple[PropertyKey, ...]:
        """Keys read on every fetch."""
        return self._keys

    def chunks(self) -> list[tuple[PropertyKey, ...]]:
        """Partition the key list into request-sized chunks."""
        return [
            self._keys[start : start + self._chunk_size]
            for start in range(0, len(self._keys), self._chunk_size)
        ]

    async def async_fetch(self) -> Snapshot:
        """Read every key and return a new snapshot.

        Raises:
            FetchError: If any chunk fails or returns a mismatched result.
        """
        values: dict[PropertyKey, Any] = {}
        chunks = self.chunks()

        for chunk in chunks:
            names = tuple(key.value for key in chunk)
            try:
                result = await self._transport.batch_read(list(names))
            except Exception as err:
                raise FetchError(f"Batch read failed: {err}", chunk=names) from err

            if not isinstance(result, list | tuple):
                raise FetchError(
                    f"Batch read returned {type(result).__name__}, expected a list",
                    chunk=names,
                )
            if len(result) != len(chunk):
                raise FetchError(
                    f"Batch read returned {len(result)} values for {len(chunk)} keys",
                    chunk=names,
                )

            values.update(zip(chunk, result, strict=True))

        _LOGGER.debug(
            "Fetched %d properties in %d requests", len(values), len(chunks)
        )
        return Snapshot.from_values(values)
