from __future__ import annotations

from dataclasses import dataclass

from homeassistant.components.switch import SwitchDeviceClass, SwitchEntityDescription
from homeassistant.const import EntityCategory

from ..facets import Facet


@dataclass(frozen=True, kw_only=True)
class PurifierSwitchEntityDescription(SwitchEntityDescription):
    """Describes a purifier switch entity.

    ``command`` names the coordinator entry point that toggles it.
    """

    facet: Facet
    command: str


SWITCH_DESCRIPTIONS: dict[str, PurifierSwitchEntityDescription] = {
    "child_lock": PurifierSwitchEntityDescription(
        key="child_lock",
        translation_key="child_lock",
        facet=Facet.CHILD_LOCK,
        command="set_child_lock",
        device_class=SwitchDeviceClass.SWITCH,
        entity_category=EntityCategory.CONFIG,
        icon="mdi:lock",
    ),
    "led": PurifierSwitchEntityDescription(
        key="led",
        translation_key="led",
        facet=Facet.LED,
        command="set_led",
        device_class=SwitchDeviceClass.SWITCH,
        entity_category=EntityCategory.CONFIG,
        icon="mdi:led-outline",
    ),
    "buzzer": PurifierSwitchEntityDescription(
        key="buzzer",
        translation_key="buzzer",
        facet=Facet.BUZZER,
        command="set_buzzer",
        device_class=SwitchDeviceClass.SWITCH,
        entity_category=EntityCategory.CONFIG,
        icon="mdi:volume-high",
    ),
}
