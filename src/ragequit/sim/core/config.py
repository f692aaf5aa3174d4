"""Tunable constants for the simulation core.

All balance numbers live in :class:`GameConfig` so tests and balance
experiments can override them without touching module globals.  The
defaults reproduce the shipped game.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class Difficulty(str, Enum):
    """Difficulty chosen once at run start."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class DifficultyModifiers(BaseModel):
    """The two scalars a difficulty setting controls."""

    healer_cooldown_modifier: float = Field(gt=0)
    """Multiplies every healer ability cooldown when it resets.
    Above 1.0 means healers cast less often."""

    player_damage_modifier: float = Field(gt=0)
    """Multiplies direct (non-DoT) self-damage."""

    description: str = ""


def _default_difficulty_modifiers() -> dict[Difficulty, DifficultyModifiers]:
    return {
        Difficulty.EASY: DifficultyModifiers(
            healer_cooldown_modifier=1.25,
            player_damage_modifier=1.2,
            description="Healers are sluggish and your blows land harder.",
        ),
        Difficulty.NORMAL: DifficultyModifiers(
            healer_cooldown_modifier=1.0,
            player_damage_modifier=1.0,
            description="A balanced challenge.",
        ),
        Difficulty.HARD: DifficultyModifiers(
            healer_cooldown_modifier=0.8,
            player_damage_modifier=0.85,
            description="Healers are relentless and your blows feel softer.",
        ),
    }


class GameConfig(BaseModel):
    """Every constant the core reads."""

    tick_seconds: float = Field(default=0.1, gt=0)
    """Fixed step used by the scheduled tick loop."""

    # -- instability ---------------------------------------------------------
    max_instability: float = Field(default=100, gt=0)
    instability_stun_duration: float = Field(default=3.0, gt=0)
    instability_flash_seconds: float = Field(default=0.6, ge=0)

    # -- levels --------------------------------------------------------------
    base_hp: float = Field(default=100, gt=0)
    hp_growth_per_level: float = Field(default=20, ge=0)
    level_time_limit: float = Field(default=60, gt=0)
    """Timer of level 1."""

    time_growth_per_level: float = Field(default=5, ge=0)

    # -- progression ---------------------------------------------------------
    starting_currency: int = Field(default=50, ge=0)
    max_actions: int = Field(default=4, ge=1)
    max_consumables: int = Field(default=3, ge=1)
    """Maximum number of *distinct* consumables in the inventory."""

    max_action_level: int = Field(default=5, ge=1)
    upgrade_base_cost: int = Field(default=40, ge=0)
    min_cooldown_seconds: float = Field(default=0.5, gt=0)

    # -- summary scoring -----------------------------------------------------
    damage_bonus_rate: float = 1.5
    time_bonus_rate: float = 10
    overkill_bonus_rate: float = 5

    event_log_size: int = Field(default=50, ge=1)

    difficulty_modifiers: dict[Difficulty, DifficultyModifiers] = Field(
        default_factory=_default_difficulty_modifiers,
    )

    def modifiers_for(self, difficulty: Difficulty) -> DifficultyModifiers:
        return self.difficulty_modifiers[difficulty]

    def max_hp_for_level(self, level_number: int) -> float:
        return self.base_hp + self.hp_growth_per_level * (level_number - 1)

    def time_limit_for_level(self, level_number: int) -> float:
        return self.level_time_limit + self.time_growth_per_level * (level_number - 1)

    @classmethod
    def from_file(cls, path: str | Path) -> GameConfig:
        """Load a config from a JSON file.  Missing keys keep their defaults."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
