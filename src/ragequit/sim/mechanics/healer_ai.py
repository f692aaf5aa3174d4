"""Healer AI -- ability countdowns and autonomous casting.

Each ability runs a tiny state machine::

    Idle (time_to_next_use > 0) --countdown--> Ready (<= 0)
    Ready --resolve effect--> Idle (time_to_next_use = cooldown * modifier)

A stunned healer freezes every one of its countdowns; only its stun
timer keeps running.  The difficulty cooldown modifier is applied each
time an ability resets, never to the countdowns loaded with the level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from ragequit.ir.effects import EffectTemplate
from ragequit.ir.healers import HealerAbilityKind
from ragequit.sim.mechanics.combat import apply_healing, grant_shield

if TYPE_CHECKING:
    from ragequit.sim.core.entities import Healer, HealerAbility
    from ragequit.sim.core.run_state import RunState
    from ragequit.sim.mechanics.effects import EffectLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbilityResolution:
    """What one ability cast did."""

    healer_id: str
    ability_id: str
    kind: HealerAbilityKind
    amount: float = 0.0
    """HP healed, shield granted, regeneration total or DoTs removed."""


def advance_healers(healers: Sequence[Healer], delta: float) -> None:
    """Run every healer's countdowns forward by *delta* seconds."""
    if delta <= 0:
        return
    for healer in healers:
        if healer.is_stunned:
            healer.stun_timer = max(0.0, healer.stun_timer - delta)
            continue
        for ability in healer.abilities:
            ability.time_to_next_use = max(0.0, ability.time_to_next_use - delta)


def trigger_ready_abilities(
    state: RunState,
    ledger: EffectLedger,
    healers: Sequence[Healer],
    cooldown_modifier: float = 1.0,
) -> list[AbilityResolution]:
    """Cast every ready ability of every non-stunned healer."""
    resolutions: list[AbilityResolution] = []
    for healer in healers:
        if healer.is_stunned:
            continue
        for ability in healer.abilities:
            if not ability.is_ready:
                continue
            resolution = resolve_ability(state, ledger, healer, ability)
            ability.time_to_next_use = ability.cooldown_seconds * cooldown_modifier
            logger.debug(
                "%s cast %s (%s, %.1f)",
                healer.id, ability.id, ability.kind.value, resolution.amount,
            )
            resolutions.append(resolution)
    return resolutions


def resolve_ability(
    state: RunState,
    ledger: EffectLedger,
    healer: Healer,
    ability: HealerAbility,
) -> AbilityResolution:
    """Apply one ability's effect to the run."""
    kind = ability.kind
    amount = 0.0

    if kind == HealerAbilityKind.DIRECT_HEAL:
        amount = apply_healing(state, ability.magnitude)

    elif kind == HealerAbilityKind.SHIELD:
        grant_shield(state, ability.magnitude)
        amount = ability.magnitude

    elif kind == HealerAbilityKind.REGENERATION:
        duration = ability.duration or 1.0
        ledger.add_hot(EffectTemplate(
            id=f"regen:{ability.id}",
            icon=ability.icon,
            duration=duration,
            magnitude=ability.magnitude / duration,
        ))
        amount = ability.magnitude

    elif kind == HealerAbilityKind.CLEANSE:
        amount = float(ledger.clear_dots())

    else:
        raise ValueError(f"Unknown healer ability kind: {kind!r}")

    return AbilityResolution(
        healer_id=healer.id,
        ability_id=ability.id,
        kind=kind,
        amount=amount,
    )
