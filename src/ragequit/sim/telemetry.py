"""Telemetry data models for per-level and per-run statistics.

These lightweight dataclasses capture what is needed to judge balance
(how fast levels are cleared, how much the healers undo, how often
instability pays off) without storing every tick:

- **LevelTelemetry**: outcome and damage/heal accounting for one level.
- **RunTelemetry**: seed, difficulty, ordered level results, purchases.

Both are plain ``dataclass`` instances (not Pydantic models) so the
controller can update them every tick at negligible cost.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LevelTelemetry:
    """Stats from one level.

    Attributes
    ----------
    level:
        Level number.
    result:
        ``"win"`` if HP hit zero in time, ``"loss"`` if the timer ran out,
        ``"aborted"`` if the level was torn down before either.
    elapsed:
        Seconds of simulated time.
    hp_start:
        Max HP the level started with.
    damage_taken:
        HP removed by direct hits and DoTs (after shields).
    shield_absorbed:
        Damage soaked by healer shields.
    healing_received:
        HP restored by healers (after healing reduction and the max-HP cap).
    actions_used_by_id:
        ``action_id -> use count``.
    consumables_used:
        ``consumable_id -> use count``.
    healer_abilities_fired:
        ``ability kind -> cast count``.
    healer_stuns:
        Healer stuns caused by instability overflow or stun-chance actions.
    instability_overflows:
        Number of stuns issued by instability overflow.
    currency_earned:
        Rage points awarded for the level (0 on loss).
    """

    level: int
    hp_start: float
    result: str = "aborted"
    elapsed: float = 0.0
    damage_taken: float = 0.0
    shield_absorbed: float = 0.0
    healing_received: float = 0.0
    actions_used_by_id: dict[str, int] = field(default_factory=dict)
    consumables_used: dict[str, int] = field(default_factory=dict)
    healer_abilities_fired: dict[str, int] = field(default_factory=dict)
    healer_stuns: int = 0
    instability_overflows: int = 0
    currency_earned: int = 0

    @property
    def actions_used(self) -> int:
        return sum(self.actions_used_by_id.values())


@dataclass
class RunTelemetry:
    """Stats from a full run.

    Attributes
    ----------
    seed:
        Master RNG seed.
    difficulty:
        Difficulty value (``"easy"``, ``"normal"``, ``"hard"``).
    levels:
        One entry per level played, in order.
    final_result:
        ``"loss"`` when the run ended on a timeout, ``"win"`` when it was
        stopped after clearing the requested number of levels.
    currency_spent:
        Rage points spent in the shop (net of refunds).
    roster:
        Action ids held at the end of the run.
    """

    seed: int
    difficulty: str = "normal"
    levels: list[LevelTelemetry] = field(default_factory=list)
    final_result: str = "loss"
    currency_spent: int = 0
    roster: list[str] = field(default_factory=list)

    @property
    def levels_cleared(self) -> int:
        return sum(1 for lvl in self.levels if lvl.result == "win")
