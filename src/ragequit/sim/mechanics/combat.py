"""Combat resolver -- damage and healing against the player.

Damage pipeline:
    amount -> difficulty modifier (direct damage only) -> shield -> HP

DoT damage skips the difficulty modifier: its magnitude already comes
from the action's stats.  HP may go below zero here; callers read
``RunState.current_hp`` for the clamped value.

Healing pipeline:
    amount -> healing-reduction window -> HP (capped at max_hp)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ragequit.sim.core.entities import ShieldInstance

if TYPE_CHECKING:
    from ragequit.sim.core.run_state import RunState


@dataclass(frozen=True)
class DamageResult:
    shield_absorbed: float = 0.0
    hp_lost: float = 0.0

    @property
    def total(self) -> float:
        return self.shield_absorbed + self.hp_lost


def apply_damage(
    state: RunState,
    amount: float,
    damage_modifier: float = 1.0,
    is_dot: bool = False,
) -> DamageResult:
    """Deal *amount* damage to the player, shield first.

    Returns how much the shield absorbed and how much HP was lost.
    """
    if amount <= 0:
        return DamageResult()
    if not is_dot:
        amount *= damage_modifier

    absorbed = 0.0
    shield = state.shield
    if shield is not None and shield.amount > 0:
        absorbed = min(shield.amount, amount)
        shield.amount -= absorbed
        amount -= absorbed
    if shield is not None and shield.amount <= 0:
        state.shield = None

    state.hp -= amount
    return DamageResult(shield_absorbed=absorbed, hp_lost=amount)


def apply_healing(state: RunState, amount: float) -> float:
    """Heal the player.  Returns the HP actually restored."""
    if amount <= 0:
        return 0.0
    window = state.healing_reduction
    if window.is_active:
        amount *= 1.0 - window.percent

    before = state.hp
    state.hp = min(state.max_hp, state.hp + amount)
    return max(0.0, state.hp - before)


def grant_shield(state: RunState, amount: float) -> None:
    """Add *amount* to the player's shield, creating it if absent."""
    if amount <= 0:
        return
    if state.shield is None:
        state.shield = ShieldInstance()
    state.shield.grant(amount)
