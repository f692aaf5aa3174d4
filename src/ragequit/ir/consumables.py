"""Consumable definitions -- single-use items with a tagged effect."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .effects import EffectTemplate


class StunAllHealers(BaseModel):
    """Adds ``duration`` seconds of stun to every healer."""

    kind: Literal["stun_all_healers"] = "stun_all_healers"
    duration: float = Field(gt=0)


class ApplySelfDot(BaseModel):
    """Installs (or refreshes) a DoT on the player."""

    kind: Literal["apply_self_dot"] = "apply_self_dot"
    dot: EffectTemplate


class ReduceHealing(BaseModel):
    """Opens a window during which all incoming healing is reduced."""

    kind: Literal["reduce_healing"] = "reduce_healing"
    percent: float = Field(gt=0, le=1)
    """Fraction of healing removed (``0.5`` halves every heal)."""

    duration: float = Field(gt=0)


class DamageAndDot(BaseModel):
    """Instant self-damage followed by a DoT."""

    kind: Literal["damage_and_dot"] = "damage_and_dot"
    damage: float = Field(ge=0)
    dot: EffectTemplate


ConsumableEffect = Annotated[
    Union[StunAllHealers, ApplySelfDot, ReduceHealing, DamageAndDot],
    Field(discriminator="kind"),
]


class ConsumableDefinition(BaseModel):
    """Catalog entry for a consumable sold in the shop."""

    id: str
    name: str
    icon: str = ""
    description: str = ""
    effect: ConsumableEffect
    cost: int = Field(ge=0)
