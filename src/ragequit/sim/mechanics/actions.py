"""Player commands -- invoking roster actions and consumables.

Both entry points are guarded: an action on cooldown, any action while
the player is stunned, or a consumable that is missing or empty is a
silent no-op (``None`` is returned and nothing changes).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from ragequit.ir.consumables import (
    ApplySelfDot,
    DamageAndDot,
    ReduceHealing,
    StunAllHealers,
)
from ragequit.sim.mechanics.combat import DamageResult, apply_damage
from ragequit.sim.mechanics.instability import add_instability, stun_random_healer

if TYPE_CHECKING:
    from ragequit.sim.core.config import DifficultyModifiers, GameConfig
    from ragequit.sim.core.entities import Consumable, Healer, PlayerActionState
    from ragequit.sim.core.rng import GameRNG
    from ragequit.sim.core.run_state import RunState
    from ragequit.sim.mechanics.effects import EffectLedger

logger = logging.getLogger(__name__)


@dataclass
class ActionOutcome:
    action_id: str
    damage: DamageResult
    overflow_stuns: list[str] = field(default_factory=list)
    """Ids of healers stunned by instability overflow."""

    chance_stun: str | None = None
    """Id of the healer stunned by the action's stun chance, if it landed."""

    self_stun: float = 0.0
    dot_applied: str | None = None


@dataclass
class ConsumableOutcome:
    consumable_id: str
    kind: str
    damage: DamageResult = field(default_factory=DamageResult)
    healers_stunned: list[str] = field(default_factory=list)
    dot_applied: str | None = None
    depleted: bool = False


def invoke_action(
    state: RunState,
    ledger: EffectLedger,
    healers: Sequence[Healer],
    action: PlayerActionState,
    rng: GameRNG,
    modifiers: DifficultyModifiers,
    config: GameConfig,
) -> ActionOutcome | None:
    """Use *action* if it is ready and the player can act.

    Order of resolution:
        1. Start the cooldown.
        2. Direct damage (base + missing-HP scaling, then difficulty).
        3. Instability gain and overflow stuns.
        4. Self-stun, DoT, healer stun chance.
    """
    if action.current_cooldown > 0 or state.is_stunned:
        return None

    action.current_cooldown = action.cooldown_seconds

    raw = action.effective_damage(state.max_hp, state.current_hp)
    damage = apply_damage(state, raw, modifiers.player_damage_modifier)

    stunned = add_instability(state, healers, action.instability_gain, rng, config)
    outcome = ActionOutcome(
        action_id=action.id,
        damage=damage,
        overflow_stuns=[h.id for h in stunned],
    )

    if action.self_stun_duration:
        state.apply_self_stun(action.self_stun_duration)
        outcome.self_stun = action.self_stun_duration

    if action.dot is not None:
        ledger.add_dot(action.dot)
        outcome.dot_applied = action.dot.id

    if action.healer_stun_chance and rng.chance(action.healer_stun_chance):
        target = stun_random_healer(
            healers, rng, action.healer_stun_duration or config.instability_stun_duration,
        )
        if target is not None:
            outcome.chance_stun = target.id

    return outcome


def invoke_consumable(
    state: RunState,
    ledger: EffectLedger,
    healers: Sequence[Healer],
    inventory: list[Consumable],
    consumable_id: str,
    modifiers: DifficultyModifiers,
) -> ConsumableOutcome | None:
    """Use one unit of a consumable from *inventory* (mutated in place)."""
    consumable = next((c for c in inventory if c.id == consumable_id), None)
    if consumable is None or consumable.quantity <= 0:
        return None

    consumable.quantity -= 1
    effect = consumable.effect
    outcome = ConsumableOutcome(consumable_id=consumable.id, kind=effect.kind)

    if isinstance(effect, StunAllHealers):
        for healer in healers:
            healer.add_stun(effect.duration)
        outcome.healers_stunned = [h.id for h in healers]

    elif isinstance(effect, ApplySelfDot):
        ledger.add_dot(effect.dot)
        outcome.dot_applied = effect.dot.id

    elif isinstance(effect, ReduceHealing):
        state.healing_reduction.open(effect.percent, effect.duration)

    elif isinstance(effect, DamageAndDot):
        outcome.damage = apply_damage(state, effect.damage, modifiers.player_damage_modifier)
        ledger.add_dot(effect.dot)
        outcome.dot_applied = effect.dot.id

    else:
        raise ValueError(f"Unknown consumable effect: {effect!r}")

    if consumable.quantity <= 0:
        inventory.remove(consumable)
        outcome.depleted = True
    return outcome
