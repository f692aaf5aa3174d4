"""Read-only views of the controller's state for collaborators.

A :class:`RunSnapshot` is a deep copy: mutating it (or anything inside
it) never reaches the live simulation.  Views poll
``LevelController.snapshot()`` each frame.
"""

from __future__ import annotations

from pydantic import BaseModel

from ragequit.sim.core.config import Difficulty
from ragequit.sim.core.entities import (
    ActiveEffectInstance,
    Consumable,
    Healer,
    PlayerActionState,
)
from ragequit.sim.core.run_state import (
    HealingReductionWindow,
    LevelSummary,
    PendingReplacement,
    Phase,
)
from ragequit.sim.event_log import LogEntry
from ragequit.sim.shop import ShopItem


class RunSnapshot(BaseModel):
    model_config = {"frozen": True}

    phase: Phase
    difficulty: Difficulty
    current_level: int
    win: bool

    hp: float
    """Clamped to ``[0, max_hp]``."""

    max_hp: float
    shield: float | None
    instability: float
    max_instability: float
    instability_triggered: bool
    timer: float
    stun_timer: float
    healing_reduction: HealingReductionWindow

    active_dots: list[ActiveEffectInstance]
    active_hots: list[ActiveEffectInstance]
    healers: list[Healer]
    player_actions: list[PlayerActionState]
    consumables: list[Consumable]

    currency: int
    level_summary: LevelSummary | None = None
    pending_replacement: PendingReplacement | None = None
    shop_items: list[ShopItem] = []
    events: list[LogEntry] = []

    @property
    def is_stunned(self) -> bool:
        return self.stun_timer > 0

    def ready_actions(self) -> list[PlayerActionState]:
        """Actions the player could invoke right now."""
        if self.phase != Phase.PLAYING or self.is_stunned:
            return []
        return [a for a in self.player_actions if a.current_cooldown <= 0]

    def get_action(self, action_id: str) -> PlayerActionState | None:
        return next((a for a in self.player_actions if a.id == action_id), None)
