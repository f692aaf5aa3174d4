"""Mutable entities that live inside a run.

All models are Pydantic v2 ``BaseModel`` instances so collaborators can
serialise snapshots with ``model_dump``.  Numeric fields that count
down are clamped to zero by the helpers that mutate them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ragequit.ir.actions import ActionDefinition, ActionRarity
from ragequit.ir.consumables import ConsumableDefinition, ConsumableEffect
from ragequit.ir.effects import EffectTemplate
from ragequit.ir.healers import HealerAbilityKind


# ---------------------------------------------------------------------------
# Shield / effects
# ---------------------------------------------------------------------------

class ShieldInstance(BaseModel):
    """Damage absorption pool in front of the player's HP."""

    amount: float = Field(default=0, ge=0)

    def grant(self, amount: float) -> None:
        """Add *amount* (must be >= 0).  Shields accumulate."""
        if amount < 0:
            raise ValueError(f"shield grant must be >= 0, got {amount}")
        self.amount += amount


class ActiveEffectInstance(BaseModel):
    """A running DoT or HoT."""

    effect_id: str
    """Template identifier, shared by every application of the effect."""

    icon: str = ""
    remaining_duration: float
    per_second: float

    @classmethod
    def from_template(cls, template: EffectTemplate) -> ActiveEffectInstance:
        return cls(
            effect_id=template.id,
            icon=template.icon,
            remaining_duration=template.duration,
            per_second=template.magnitude,
        )


# ---------------------------------------------------------------------------
# Player actions
# ---------------------------------------------------------------------------

class PlayerActionState(BaseModel):
    """An action in the player's roster, with its live cooldown."""

    id: str
    name: str
    icon: str = ""
    description: str = ""
    rarity: ActionRarity = ActionRarity.COMMON

    base_damage: float
    cooldown_seconds: float
    current_cooldown: float = 0
    instability_gain: float = 0
    level: int = 1

    self_stun_duration: float | None = None
    dot: EffectTemplate | None = None
    missing_hp_damage_scalar: float | None = None
    healer_stun_chance: float | None = None
    healer_stun_duration: float | None = None

    @classmethod
    def from_definition(cls, definition: ActionDefinition) -> PlayerActionState:
        """Build a fresh level-1 roster entry from a catalog definition."""
        return cls(
            id=definition.id,
            name=definition.name,
            icon=definition.icon,
            description=definition.description,
            rarity=definition.rarity,
            base_damage=definition.base_damage,
            cooldown_seconds=definition.cooldown_seconds,
            instability_gain=definition.instability_gain,
            self_stun_duration=definition.self_stun_duration,
            dot=definition.dot.model_copy() if definition.dot else None,
            missing_hp_damage_scalar=definition.missing_hp_damage_scalar,
            healer_stun_chance=definition.healer_stun_chance,
            healer_stun_duration=definition.healer_stun_duration,
        )

    @property
    def is_ready(self) -> bool:
        return self.current_cooldown <= 0

    def effective_damage(self, max_hp: float, current_hp: float) -> float:
        """Base damage plus missing-HP scaling (before difficulty)."""
        damage = self.base_damage
        if self.missing_hp_damage_scalar:
            damage += self.missing_hp_damage_scalar * max(0.0, max_hp - current_hp)
        return damage

    def tick_cooldown(self, delta: float) -> None:
        self.current_cooldown = max(0.0, self.current_cooldown - delta)


# ---------------------------------------------------------------------------
# Healers
# ---------------------------------------------------------------------------

class HealerAbility(BaseModel):
    """A healer ability with its own countdown."""

    id: str
    name: str
    icon: str = ""
    kind: HealerAbilityKind
    cooldown_seconds: float
    time_to_next_use: float
    magnitude: float = 0
    duration: float | None = None
    """Regeneration length in seconds."""

    @property
    def is_ready(self) -> bool:
        return self.time_to_next_use <= 0


class Healer(BaseModel):
    """An opposing NPC.  Stunned healers freeze all ability countdowns."""

    id: str
    name: str
    icon: str = ""
    abilities: list[HealerAbility] = Field(default_factory=list)
    stun_timer: float = 0

    @property
    def is_stunned(self) -> bool:
        return self.stun_timer > 0

    def add_stun(self, duration: float) -> None:
        """Extend the stun additively."""
        if duration > 0:
            self.stun_timer += duration


# ---------------------------------------------------------------------------
# Consumables
# ---------------------------------------------------------------------------

class Consumable(BaseModel):
    """An inventory stack of one consumable kind."""

    id: str
    name: str
    icon: str = ""
    description: str = ""
    effect: ConsumableEffect
    quantity: int = Field(default=1, ge=0)

    @classmethod
    def from_definition(
        cls, definition: ConsumableDefinition, quantity: int = 1,
    ) -> Consumable:
        return cls(
            id=definition.id,
            name=definition.name,
            icon=definition.icon,
            description=definition.description,
            effect=definition.effect.model_copy(deep=True),
            quantity=quantity,
        )
