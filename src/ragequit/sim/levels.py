"""Level construction -- healer roster, HP pool and timer per level.

Levels are fully determined by their number:

- level 1: the apprentice alone
- level 2: a single cleric
- level 3+: the shaman joins
- level 5+: the paladin joins

Each level adds HP and a few seconds to the timer.

Healer magnitudes grow by each ability's ``magnitude_per_level`` for
every level past the archetype's introduction.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ragequit.ir.healers import HealerTemplate
from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.core.config import GameConfig
from ragequit.sim.core.entities import Healer, HealerAbility


class LevelDefinition(BaseModel):
    """Everything ``LevelController.load_level`` needs to start a level."""

    level_number: int = Field(ge=1)
    max_hp: float = Field(gt=0)
    time_limit: float = Field(gt=0)
    healers: list[Healer]


def build_healer(template: HealerTemplate, level_number: int, index: int = 0) -> Healer:
    """Instantiate *template* for *level_number*."""
    levels_past_intro = max(0, level_number - template.intro_level)
    abilities = [
        HealerAbility(
            id=ability.id,
            name=ability.name,
            icon=ability.icon,
            kind=ability.kind,
            cooldown_seconds=ability.cooldown_seconds,
            time_to_next_use=ability.first_use,
            magnitude=ability.magnitude + ability.magnitude_per_level * levels_past_intro,
            duration=ability.duration,
        )
        for ability in template.abilities
    ]
    return Healer(
        id=f"{template.id}-{index}",
        name=template.name,
        icon=template.icon,
        abilities=abilities,
    )


class LevelFactory:
    """Builds :class:`LevelDefinition` objects from registry templates."""

    def __init__(self, registry: ContentRegistry, config: GameConfig | None = None) -> None:
        self.registry = registry
        self.config = config or GameConfig()

    def build(self, level_number: int) -> LevelDefinition:
        if level_number < 1:
            raise ValueError(f"level_number must be >= 1, got {level_number}")
        templates = self.registry.healers_for_level(level_number)
        healers = [
            build_healer(template, level_number, index)
            for index, template in enumerate(templates)
        ]
        return LevelDefinition(
            level_number=level_number,
            max_hp=self.config.max_hp_for_level(level_number),
            time_limit=self.config.time_limit_for_level(level_number),
            healers=healers,
        )
