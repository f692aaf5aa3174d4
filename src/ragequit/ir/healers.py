"""Healer templates -- the NPCs that try to keep the player alive."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class HealerAbilityKind(str, Enum):
    """What an ability does when its countdown reaches zero."""

    DIRECT_HEAL = "direct_heal"
    CLEANSE = "cleanse"
    SHIELD = "shield"
    REGENERATION = "regeneration"


class HealerAbilityTemplate(BaseModel):
    """A healer ability before level scaling is applied."""

    id: str
    name: str
    icon: str = ""
    kind: HealerAbilityKind

    cooldown_seconds: float = Field(gt=0)
    first_use: float = Field(ge=0)
    """Seconds into the level before the first cast."""

    magnitude: float = Field(default=0, ge=0)
    """Heal / shield / total regeneration amount.  Unused by cleanse."""

    magnitude_per_level: float = 0
    """Added to ``magnitude`` for every level past the healer's intro level."""

    duration: float | None = None
    """Regeneration length in seconds."""


class HealerTemplate(BaseModel):
    """An archetype that the level factory instantiates."""

    id: str
    name: str
    icon: str = ""
    intro_level: int = Field(ge=1)
    """First level this archetype appears on."""

    last_level: int | None = None
    """Last level this archetype appears on, or ``None`` for every later level."""

    abilities: list[HealerAbilityTemplate]

    def appears_on(self, level_number: int) -> bool:
        if level_number < self.intro_level:
            return False
        return self.last_level is None or level_number <= self.last_level
