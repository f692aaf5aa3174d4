"""Core simulation primitives for the ragequit simulator."""

from ragequit.sim.core.config import Difficulty, DifficultyModifiers, GameConfig
from ragequit.sim.core.entities import (
    ActiveEffectInstance,
    Consumable,
    Healer,
    HealerAbility,
    PlayerActionState,
    ShieldInstance,
)
from ragequit.sim.core.loop import (
    AsyncioScheduler,
    LoopHandle,
    ManualScheduler,
    Scheduler,
)
from ragequit.sim.core.rng import GameRNG
from ragequit.sim.core.run_state import (
    HealingReductionWindow,
    LevelSummary,
    PendingReplacement,
    Phase,
    Progression,
    RunState,
)

__all__ = [
    # config
    "Difficulty",
    "DifficultyModifiers",
    "GameConfig",
    # rng
    "GameRNG",
    # entities
    "ShieldInstance",
    "ActiveEffectInstance",
    "PlayerActionState",
    "Healer",
    "HealerAbility",
    "Consumable",
    # run_state
    "Phase",
    "HealingReductionWindow",
    "LevelSummary",
    "RunState",
    "PendingReplacement",
    "Progression",
    # loop
    "LoopHandle",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
]
