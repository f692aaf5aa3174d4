"""Content registry -- loads and serves action, consumable and healer
definitions for the ragequit simulator.

Default content ships as JSON next to this module in ``data/``.  Extra
or replacement definitions can be registered directly, which is how
tests build small bespoke catalogs.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ragequit.ir.actions import ActionDefinition
from ragequit.ir.consumables import ConsumableDefinition
from ragequit.ir.healers import HealerTemplate

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_ACTIONS_PATH = _DATA_DIR / "actions.json"
DEFAULT_CONSUMABLES_PATH = _DATA_DIR / "consumables.json"
DEFAULT_HEALERS_PATH = _DATA_DIR / "healers.json"


def _read_json_list(path: str | Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        raw: list[dict[str, Any]] = json.load(f)
    return [entry for entry in raw if "_section" not in entry]


class ContentRegistry:
    """Single source of truth for catalog content during a run.

    Usage::

        registry = ContentRegistry.load_default()

        punch = registry.get_action("punch")
        bomb = registry.get_consumable("smoke_bomb")
        roster = registry.healers_for_level(3)

    Dictionaries keep insertion order, which is also the order the shop
    lists items in.
    """

    def __init__(self) -> None:
        self.actions: dict[str, ActionDefinition] = {}
        self.consumables: dict[str, ConsumableDefinition] = {}
        self.healers: dict[str, HealerTemplate] = {}

    @classmethod
    def load_default(cls) -> ContentRegistry:
        """Registry with every bundled content file loaded."""
        registry = cls()
        registry.load_actions()
        registry.load_consumables()
        registry.load_healers()
        return registry

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_actions(self, path: str | Path | None = None) -> None:
        """Load action definitions (defaults to the bundled ``actions.json``)."""
        for raw in _read_json_list(path or DEFAULT_ACTIONS_PATH):
            self.register_action(ActionDefinition.model_validate(raw))

    def load_consumables(self, path: str | Path | None = None) -> None:
        for raw in _read_json_list(path or DEFAULT_CONSUMABLES_PATH):
            self.register_consumable(ConsumableDefinition.model_validate(raw))

    def load_healers(self, path: str | Path | None = None) -> None:
        for raw in _read_json_list(path or DEFAULT_HEALERS_PATH):
            self.register_healer(HealerTemplate.model_validate(raw))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_action(self, definition: ActionDefinition) -> None:
        if definition.id in self.actions:
            logger.debug("Replacing action definition %s", definition.id)
        self.actions[definition.id] = definition

    def register_consumable(self, definition: ConsumableDefinition) -> None:
        if definition.id in self.consumables:
            logger.debug("Replacing consumable definition %s", definition.id)
        self.consumables[definition.id] = definition

    def register_healer(self, template: HealerTemplate) -> None:
        if template.id in self.healers:
            logger.debug("Replacing healer template %s", template.id)
        self.healers[template.id] = template

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_action(self, action_id: str) -> ActionDefinition | None:
        return self.actions.get(action_id)

    def get_consumable(self, consumable_id: str) -> ConsumableDefinition | None:
        return self.consumables.get(consumable_id)

    def get_healer(self, healer_id: str) -> HealerTemplate | None:
        return self.healers.get(healer_id)

    def healers_for_level(self, level_number: int) -> list[HealerTemplate]:
        """Every archetype present on *level_number*, in registration order."""
        return [t for t in self.healers.values() if t.appears_on(level_number)]

    def __repr__(self) -> str:
        return (
            f"ContentRegistry(actions={len(self.actions)}, "
            f"consumables={len(self.consumables)}, "
            f"healers={len(self.healers)})"
        )
