"""Player action definitions -- the self-damaging moves sold in the shop."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from .effects import EffectTemplate


class ActionRarity(str, Enum):
    """Shop rarity tier; purely descriptive for the shop collaborator."""

    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"


class ActionUpgrade(BaseModel):
    """Stat deltas applied each time an action gains a level.

    Every field is a per-level delta.  ``None`` means the stat is not
    touched by upgrades.  Negative cooldown / self-stun deltas are
    improvements; all other deltas are expected to be non-negative.
    """

    base_damage: float | None = None
    cooldown_seconds: float | None = None
    instability_gain: float | None = None
    dot_magnitude: float | None = None
    """Added to the attached DoT's per-second magnitude."""

    missing_hp_damage_scalar: float | None = None
    healer_stun_chance: float | None = None
    self_stun_duration: float | None = None


class ActionDefinition(BaseModel):
    """Catalog entry for a player action.

    The roster holds :class:`~ragequit.sim.core.entities.PlayerActionState`
    copies built from these definitions.
    """

    id: str
    name: str
    icon: str = ""
    description: str = ""
    rarity: ActionRarity = ActionRarity.COMMON

    base_damage: float = Field(ge=0)
    cooldown_seconds: float = Field(gt=0)
    instability_gain: float = Field(default=0, ge=0)

    self_stun_duration: float | None = None
    """Seconds the player is stunned after using the action."""

    dot: EffectTemplate | None = None
    """DoT applied to the player on use."""

    missing_hp_damage_scalar: float | None = None
    """Extra damage per point of missing HP."""

    healer_stun_chance: float | None = Field(default=None, ge=0, le=1)
    healer_stun_duration: float | None = None

    cost: int = Field(ge=0)
    """Shop price in rage points."""

    upgrade: ActionUpgrade = Field(default_factory=ActionUpgrade)
    """Per-level deltas used by the shop's upgrade items."""
