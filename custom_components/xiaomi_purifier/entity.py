"""Base entity for Xiaomi Air Purifier integration."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_NAME
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DEFAULT_NAME, DOMAIN, MANUFACTURER, MODEL
from .coordinator import PurifierCoordinator
from .exceptions import PurifierCommandError
from .facets import Facet
from .sync import CommandCallback


class PurifierEntity(CoordinatorEntity[PurifierCoordinator]):
    """Base entity for purifier facets.

    State is written after a refresh that changed one of the facets in
    ``_facets``, or when availability changes.
    """

    _attr_has_entity_name = True
    _facets: tuple[Facet, ...] = ()

    def __init__(
        self,
        coordinator: PurifierCoordinator,
        entry: ConfigEntry,
        key: str,
    ) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self._key = key
        self._was_available = True

        device_key = entry.unique_id or entry.entry_id
        self._attr_unique_id = f"{device_key}_{key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, device_key)},
            name=entry.data.get(CONF_NAME, DEFAULT_NAME),
            manufacturer=MANUFACTURER,
            model=MODEL,
        )
        self._host = entry.data[CONF_HOST]

    async def async_added_to_hass(self) -> None:
        """Subscribe to coordinator updates."""
        await super().async_added_to_hass()
        self._was_available = self.available

    @callback
    def _handle_coordinator_update(self) -> None:
        """Write state only if one of this entity's facets changed."""
        available = self.available
        if (
            available == self._was_available
            and self.coordinator.changed_facets.isdisjoint(self._facets)
        ):
            return
        self._was_available = available
        super()._handle_coordinator_update()

    def facet_value(self, facet: Facet) -> Any:
        """Current value of a facet."""
        return self.coordinator.facet_value(facet)

    async def _async_command(
        self,
        command: str,
        submit: Callable[[CommandCallback], None],
    ) -> None:
        """Submit a command and wait for its completion callback.

        Raises:
            PurifierCommandError: If the coordinator reports a failure.
        """
        done: asyncio.Future[Exception | None] = self.hass.loop.create_future()

        def _on_complete(error: Exception | None) -> None:
            if not done.done():
                done.set_result(error)

        submit(_on_complete)
        error = await done
        if error is not None:
            raise PurifierCommandError(command, str(error)) from error

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return extra state attributes."""
        return {"host": self._host}
