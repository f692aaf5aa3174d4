"""Content definitions (IR) for the ragequit simulator.

Re-exports every definition model so callers can do::

    from ragequit.ir import ActionDefinition, ConsumableDefinition
"""

from .actions import ActionDefinition, ActionRarity, ActionUpgrade
from .consumables import (
    ApplySelfDot,
    ConsumableDefinition,
    ConsumableEffect,
    DamageAndDot,
    ReduceHealing,
    StunAllHealers,
)
from .effects import EffectTemplate
from .healers import HealerAbilityKind, HealerAbilityTemplate, HealerTemplate

__all__ = [
    # effects
    "EffectTemplate",
    # actions
    "ActionDefinition",
    "ActionRarity",
    "ActionUpgrade",
    # consumables
    "ConsumableDefinition",
    "ConsumableEffect",
    "StunAllHealers",
    "ApplySelfDot",
    "ReduceHealing",
    "DamageAndDot",
    # healers
    "HealerAbilityKind",
    "HealerAbilityTemplate",
    "HealerTemplate",
]
