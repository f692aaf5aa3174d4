"""Per-level simulation state.

``RunState`` is rebuilt every time a level loads.  It holds the player's
HP pool, shield, meters and timers plus the two effect lists that the
:class:`~ragequit.sim.mechanics.effects.EffectLedger` manages.

HP is stored raw: a finishing blow may push ``hp`` below zero so the
overkill bonus can be measured.  Anything that shows or reasons about
"current HP" must use :attr:`RunState.current_hp`.
"""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, Field

from ragequit.sim.core.entities import (
    ActiveEffectInstance,
    Consumable,
    PlayerActionState,
    ShieldInstance,
)


class Phase(str, Enum):
    START = "start"
    SHOP = "shop"
    PLAYING = "playing"
    LEVEL_WON = "level_won"
    GAME_OVER = "game_over"


class HealingReductionWindow(BaseModel):
    """While ``remaining_seconds > 0`` healing is cut by ``percent``."""

    remaining_seconds: float = 0
    percent: float = 0

    @property
    def is_active(self) -> bool:
        return self.remaining_seconds > 0

    def open(self, percent: float, duration: float) -> None:
        """Install a window, replacing any running one."""
        self.percent = percent
        self.remaining_seconds = duration

    def tick(self, delta: float) -> None:
        self.remaining_seconds = max(0.0, self.remaining_seconds - delta)
        if self.remaining_seconds == 0:
            self.percent = 0


class LevelSummary(BaseModel):
    """Currency breakdown computed once when a level is won."""

    model_config = {"frozen": True}

    damage_bonus: int
    time_bonus: int
    overkill_bonus: int
    total: int


class RunState(BaseModel):
    """Full mutable state of one level in progress."""

    level_number: int = 1
    hp: float
    max_hp: float
    shield: ShieldInstance | None = None
    instability: float = 0
    timer: float
    stun_timer: float = 0
    healing_reduction: HealingReductionWindow = Field(
        default_factory=HealingReductionWindow,
    )
    phase: Phase = Phase.PLAYING
    elapsed: float = 0

    active_dots: list[ActiveEffectInstance] = Field(default_factory=list)
    active_hots: list[ActiveEffectInstance] = Field(default_factory=list)

    instability_flash: float = 0
    """Seconds left on the "instability triggered" indicator.
    Observational only."""

    # -- queries -------------------------------------------------------------

    @property
    def current_hp(self) -> float:
        return min(self.max_hp, max(0.0, self.hp))

    @property
    def missing_hp(self) -> float:
        return self.max_hp - self.current_hp

    @property
    def overkill(self) -> float:
        return max(0.0, -self.hp)

    @property
    def is_stunned(self) -> bool:
        return self.stun_timer > 0

    @property
    def shield_amount(self) -> float:
        return self.shield.amount if self.shield is not None else 0.0

    # -- timers --------------------------------------------------------------

    def tick_timers(self, delta: float) -> None:
        """Count down the level timer, player stun and observational flags."""
        self.elapsed += delta
        self.timer = max(0.0, self.timer - delta)
        self.stun_timer = max(0.0, self.stun_timer - delta)
        self.instability_flash = max(0.0, self.instability_flash - delta)
        self.healing_reduction.tick(delta)

    def apply_self_stun(self, duration: float) -> None:
        """Stun the player.  A longer running stun is kept, never summed."""
        if duration > 0:
            self.stun_timer = max(self.stun_timer, duration)

    # -- scoring -------------------------------------------------------------

    def summarize(
        self,
        damage_rate: float = 1.5,
        time_rate: float = 10,
        overkill_rate: float = 5,
    ) -> LevelSummary:
        damage_bonus = math.floor((self.max_hp - self.current_hp) * damage_rate)
        time_bonus = math.floor(self.timer * time_rate)
        overkill_bonus = math.floor(self.overkill * overkill_rate)
        return LevelSummary(
            damage_bonus=damage_bonus,
            time_bonus=time_bonus,
            overkill_bonus=overkill_bonus,
            total=damage_bonus + time_bonus + overkill_bonus,
        )


# ---------------------------------------------------------------------------
# Progression (persists across levels within a run)
# ---------------------------------------------------------------------------

class PendingReplacement(BaseModel):
    """An action purchase waiting for the player to pick a roster slot.

    The cost has already been debited; the purchase ends either in a
    replacement or in a refund.
    """

    model_config = {"frozen": True}

    item_id: str
    action_id: str
    cost: int


class Progression(BaseModel):
    """Currency, roster and inventory carried from level to level."""

    currency: int = 0
    currency_spent: int = 0
    roster: list[PlayerActionState] = Field(default_factory=list)
    inventory: list[Consumable] = Field(default_factory=list)
    pending_replacement: PendingReplacement | None = None

    def debit(self, amount: int) -> None:
        self.currency -= amount
        self.currency_spent += amount

    def refund(self, amount: int) -> None:
        self.currency += amount
        self.currency_spent -= amount

    def get_action(self, action_id: str) -> PlayerActionState | None:
        return next((a for a in self.roster if a.id == action_id), None)

    def owns_action(self, action_id: str) -> bool:
        return self.get_action(action_id) is not None

    def get_consumable(self, consumable_id: str) -> Consumable | None:
        return next((c for c in self.inventory if c.id == consumable_id), None)
