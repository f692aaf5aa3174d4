"""Simulation mechanics for the ragequit core.

Re-exports the primary functions from each mechanics module for convenience.

Usage::

    from ragequit.sim.mechanics import (
        EffectLedger,
        apply_damage, apply_healing, grant_shield,
        add_instability, stun_random_healer,
        advance_healers, trigger_ready_abilities,
        invoke_action, invoke_consumable,
    )
"""

# -- effects -----------------------------------------------------------------
from .effects import EffectLedger, EffectTotals

# -- combat ------------------------------------------------------------------
from .combat import DamageResult, apply_damage, apply_healing, grant_shield

# -- instability -------------------------------------------------------------
from .instability import add_instability, stun_random_healer

# -- healer AI ---------------------------------------------------------------
from .healer_ai import (
    AbilityResolution,
    advance_healers,
    resolve_ability,
    trigger_ready_abilities,
)

# -- player commands ---------------------------------------------------------
from .actions import (
    ActionOutcome,
    ConsumableOutcome,
    invoke_action,
    invoke_consumable,
)

__all__ = [
    # effects
    "EffectLedger",
    "EffectTotals",
    # combat
    "DamageResult",
    "apply_damage",
    "apply_healing",
    "grant_shield",
    # instability
    "add_instability",
    "stun_random_healer",
    # healer AI
    "AbilityResolution",
    "advance_healers",
    "resolve_ability",
    "trigger_ready_abilities",
    # player commands
    "ActionOutcome",
    "ConsumableOutcome",
    "invoke_action",
    "invoke_consumable",
]
