"""Level/run controller -- the orchestrator of the simulation core.

The controller exclusively owns every piece of mutable run state (the
per-level :class:`RunState`, the healer roster, the player's
:class:`Progression`) and the tick-loop handle.  Collaborators read
state through :meth:`LevelController.snapshot` and change it only
through the command methods; commands never raise for invalid use, they
return ``None``/``False``/a rejected :class:`PurchaseResult` instead.

One step of :meth:`LevelController.tick` runs, in order:

1. timers: level timer, player stun, healing reduction, action
   cooldowns, healer stuns / ability countdowns
2. effect ledger: DoT/HoT accrual
3. combat resolver: aggregated DoT damage, then HoT healing
4. healer AI: cast every ready ability
5. terminal check: HP at zero wins (checked first), timer at zero loses
"""

from __future__ import annotations

import logging

from ragequit.ir.healers import HealerAbilityKind
from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.core.config import Difficulty, DifficultyModifiers, GameConfig
from ragequit.sim.core.entities import Healer, PlayerActionState
from ragequit.sim.core.loop import LoopHandle, ManualScheduler, Scheduler
from ragequit.sim.core.rng import GameRNG
from ragequit.sim.core.run_state import LevelSummary, Phase, Progression, RunState
from ragequit.sim.event_log import EventLog, LogKind
from ragequit.sim.levels import LevelFactory
from ragequit.sim.mechanics.actions import (
    ActionOutcome,
    ConsumableOutcome,
    invoke_action,
    invoke_consumable,
)
from ragequit.sim.mechanics.combat import DamageResult, apply_damage, apply_healing
from ragequit.sim.mechanics.effects import EffectLedger
from ragequit.sim.mechanics.healer_ai import (
    AbilityResolution,
    advance_healers,
    trigger_ready_abilities,
)
from ragequit.sim.shop import PurchaseResult, PurchaseStatus, Shop, ShopItem
from ragequit.sim.snapshot import RunSnapshot
from ragequit.sim.telemetry import LevelTelemetry, RunTelemetry

logger = logging.getLogger(__name__)


class LevelController:
    """Runs levels, owns the tick loop and exposes the command surface.

    Parameters
    ----------
    registry:
        Catalog content (actions, consumables, healer templates).
    config:
        Balance constants.  Defaults to :class:`GameConfig` defaults.
    scheduler:
        Creates the repeating tick loop.  Defaults to a
        :class:`ManualScheduler`, which only ticks when advanced.
    rng:
        Master RNG; the controller forks ``"combat"`` from it for
        instability targets and stun-chance rolls.
    level_factory:
        Builds level definitions.  Defaults to a :class:`LevelFactory`
        over *registry*.
    """

    def __init__(
        self,
        registry: ContentRegistry,
        config: GameConfig | None = None,
        scheduler: Scheduler | None = None,
        rng: GameRNG | None = None,
        level_factory: LevelFactory | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or GameConfig()
        self.scheduler = scheduler or ManualScheduler()
        self.rng = rng or GameRNG(0)
        self.level_factory = level_factory or LevelFactory(registry, self.config)
        self.shop = Shop(registry, self.config)
        self.event_log = event_log or EventLog(self.config.event_log_size)

        self._combat_rng = self.rng.fork("combat")
        self._loop: LoopHandle | None = None

        self.difficulty = Difficulty.NORMAL
        self.progression = Progression()
        self.state = self._idle_state(Phase.START)
        self.ledger = EffectLedger(self.state)
        self.healers: list[Healer] = []
        self.current_level = 1
        self.levels_played = 0
        self.win = False
        self.level_summary: LevelSummary | None = None

        self.telemetry = RunTelemetry(seed=self.rng.seed)
        self._level_telemetry: LevelTelemetry | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def modifiers(self) -> DifficultyModifiers:
        return self.config.modifiers_for(self.difficulty)

    @property
    def currency(self) -> int:
        return self.progression.currency

    @property
    def roster(self) -> list[PlayerActionState]:
        return self.progression.roster

    @property
    def loop_active(self) -> bool:
        return self._loop is not None and self._loop.active

    def shop_items(self) -> list[ShopItem]:
        return self.shop.items(self.progression)

    def snapshot(self) -> RunSnapshot:
        """Deep-copied view of everything a collaborator may render."""
        state = self.state
        return RunSnapshot(
            phase=state.phase,
            difficulty=self.difficulty,
            current_level=self.current_level,
            win=self.win,
            hp=state.current_hp,
            max_hp=state.max_hp,
            shield=state.shield.amount if state.shield is not None else None,
            instability=state.instability,
            max_instability=self.config.max_instability,
            instability_triggered=state.instability_flash > 0,
            timer=state.timer,
            stun_timer=state.stun_timer,
            healing_reduction=state.healing_reduction.model_copy(),
            active_dots=[d.model_copy() for d in state.active_dots],
            active_hots=[h.model_copy() for h in state.active_hots],
            healers=[h.model_copy(deep=True) for h in self.healers],
            player_actions=[a.model_copy(deep=True) for a in self.progression.roster],
            consumables=[c.model_copy(deep=True) for c in self.progression.inventory],
            currency=self.progression.currency,
            level_summary=self.level_summary,
            pending_replacement=self.progression.pending_replacement,
            shop_items=self.shop_items() if state.phase == Phase.SHOP else [],
            events=self.event_log.entries(),
        )

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def start_run(self, difficulty: Difficulty = Difficulty.NORMAL) -> None:
        """Reset currency, roster and level counter, then open the shop."""
        self.stop_loop()
        self.difficulty = Difficulty(difficulty)
        self.progression = Progression(currency=self.config.starting_currency)
        self.healers = []
        self.current_level = 1
        self.levels_played = 0
        self.win = False
        self.level_summary = None
        self.state = self._idle_state(Phase.SHOP)
        self.ledger = EffectLedger(self.state)
        self.event_log.clear()
        self.telemetry = RunTelemetry(seed=self.rng.seed, difficulty=self.difficulty.value)
        self._level_telemetry = None
        logger.info("Run started (difficulty=%s)", self.difficulty.value)

    def restart_run(self) -> None:
        """Tear everything down and return to the start screen."""
        self.stop_loop()
        self._close_level_telemetry("aborted")
        self.healers = []
        self.win = False
        self.level_summary = None
        self.state = self._idle_state(Phase.START)
        self.ledger = EffectLedger(self.state)

    def load_level(self, level_number: int) -> None:
        """Build level *level_number* and start its tick loop."""
        self.stop_loop()
        self._close_level_telemetry("aborted")

        level = self.level_factory.build(level_number)
        self.state = RunState(
            level_number=level.level_number,
            hp=level.max_hp,
            max_hp=level.max_hp,
            timer=level.time_limit,
            phase=Phase.PLAYING,
        )
        self.ledger = EffectLedger(self.state)
        self.healers = [h.model_copy(deep=True) for h in level.healers]
        for action in self.progression.roster:
            action.current_cooldown = 0.0

        self.current_level = level.level_number
        self.levels_played += 1
        self.win = False
        self.level_summary = None
        self.event_log.clear()
        self._level_telemetry = LevelTelemetry(level=level.level_number, hp_start=level.max_hp)
        self.telemetry.levels.append(self._level_telemetry)

        self.event_log.add(
            LogKind.INFO,
            f"Level {level.level_number}: {len(self.healers)} healer(s), "
            f"{level.time_limit:.0f}s to die",
        )
        logger.info(
            "Level %d loaded: max_hp=%.0f timer=%.0f healers=%s",
            level.level_number, level.max_hp, level.time_limit,
            [h.id for h in self.healers],
        )
        self._loop = self.scheduler.schedule_repeating(self.config.tick_seconds, self._on_loop_tick)

    def stop_loop(self) -> None:
        """Cancel the tick loop.  Safe to call at any time, any number of times."""
        loop, self._loop = self._loop, None
        if loop is not None:
            loop.cancel()

    def enter_shop(self) -> bool:
        if self.state.phase not in (Phase.LEVEL_WON, Phase.SHOP):
            return False
        self.stop_loop()
        self.state.phase = Phase.SHOP
        return True

    def proceed_to_next_level(self) -> bool:
        """Leave the shop (or the win screen) for the next level.

        Refused while the roster is empty or a replacement is pending.
        """
        if self.state.phase not in (Phase.SHOP, Phase.LEVEL_WON):
            return False
        if not self.progression.roster or self.progression.pending_replacement is not None:
            return False
        next_level = 1 if self.levels_played == 0 else self.current_level + 1
        self.load_level(next_level)
        return True

    def exit_shop(self) -> bool:
        if self.state.phase != Phase.SHOP:
            return False
        return self.proceed_to_next_level()

    # ------------------------------------------------------------------
    # Simulation step
    # ------------------------------------------------------------------

    def _on_loop_tick(self) -> None:
        self.tick(self.config.tick_seconds)

    def tick(self, delta: float) -> None:
        """Advance the level by *delta* seconds.  No-op unless playing."""
        state = self.state
        if state.phase != Phase.PLAYING or delta <= 0:
            return

        state.tick_timers(delta)
        for action in self.progression.roster:
            action.tick_cooldown(delta)
        advance_healers(self.healers, delta)

        totals = self.ledger.tick(delta)
        if totals.damage > 0:
            self._record_damage(apply_damage(state, totals.damage, is_dot=True))
        if totals.healing > 0:
            self._record_healing(apply_healing(state, totals.healing))

        resolutions = trigger_ready_abilities(
            state, self.ledger, self.healers, self.modifiers.healer_cooldown_modifier,
        )
        for resolution in resolutions:
            self._record_ability(resolution)

        self._evaluate_terminal()

    def _evaluate_terminal(self) -> None:
        state = self.state
        if state.hp <= 0:
            self._finish_level(won=True)
        elif state.timer <= 0:
            self._finish_level(won=False)

    def _finish_level(self, won: bool) -> None:
        state = self.state
        self.win = won
        self.stop_loop()
        if won:
            state.phase = Phase.LEVEL_WON
            self.level_summary = state.summarize(
                self.config.damage_bonus_rate,
                self.config.time_bonus_rate,
                self.config.overkill_bonus_rate,
            )
            self.progression.currency += self.level_summary.total
            if self._level_telemetry is not None:
                self._level_telemetry.currency_earned = self.level_summary.total
            self._close_level_telemetry("win")
            self.event_log.add(
                LogKind.INFO,
                f"Level {state.level_number} complete: +{self.level_summary.total} rage",
                state.elapsed,
            )
            logger.info(
                "Level %d won at %.1fs (overkill=%.1f, earned=%d)",
                state.level_number, state.elapsed, state.overkill, self.level_summary.total,
            )
        else:
            state.phase = Phase.GAME_OVER
            self.telemetry.final_result = "loss"
            self._close_level_telemetry("loss")
            self.event_log.add(LogKind.INFO, "Time's up. The healers win.", state.elapsed)
            logger.info(
                "Level %d lost with %.1f HP left", state.level_number, state.current_hp,
            )

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------

    def use_action(self, action_id: str) -> ActionOutcome | None:
        """Invoke a roster action.  ``None`` if it could not be used."""
        if self.state.phase != Phase.PLAYING:
            return None
        action = self.progression.get_action(action_id)
        if action is None:
            return None

        outcome = invoke_action(
            self.state, self.ledger, self.healers, action,
            self._combat_rng, self.modifiers, self.config,
        )
        if outcome is None:
            return None

        self._record_damage(outcome.damage)
        self.event_log.add(
            LogKind.DAMAGE,
            f"{action.name} hits for {outcome.damage.total:.0f}",
            self.state.elapsed,
        )
        if outcome.self_stun:
            self.event_log.add(
                LogKind.EFFECT, f"Stunned for {outcome.self_stun:.1f}s", self.state.elapsed,
            )
        if outcome.dot_applied:
            self.event_log.add(
                LogKind.EFFECT, f"{outcome.dot_applied} applied", self.state.elapsed,
            )
        for healer_id in outcome.overflow_stuns:
            self.event_log.add(
                LogKind.INFO, f"Instability overflow stuns {healer_id}", self.state.elapsed,
            )
        if outcome.chance_stun:
            self.event_log.add(
                LogKind.INFO, f"{action.name} stuns {outcome.chance_stun}", self.state.elapsed,
            )

        lt = self._level_telemetry
        if lt is not None:
            lt.actions_used_by_id[action.id] = lt.actions_used_by_id.get(action.id, 0) + 1
            lt.instability_overflows += len(outcome.overflow_stuns)
            lt.healer_stuns += len(outcome.overflow_stuns) + (1 if outcome.chance_stun else 0)
        return outcome

    def use_consumable(self, consumable_id: str) -> ConsumableOutcome | None:
        """Use one unit of a consumable.  ``None`` if it is missing or empty."""
        if self.state.phase != Phase.PLAYING:
            return None
        outcome = invoke_consumable(
            self.state, self.ledger, self.healers,
            self.progression.inventory, consumable_id, self.modifiers,
        )
        if outcome is None:
            return None

        self._record_damage(outcome.damage)
        self.event_log.add(
            LogKind.EFFECT, f"Used {outcome.consumable_id}", self.state.elapsed,
        )
        lt = self._level_telemetry
        if lt is not None:
            lt.consumables_used[outcome.consumable_id] = (
                lt.consumables_used.get(outcome.consumable_id, 0) + 1
            )
        return outcome

    def buy_shop_item(self, item_id: str) -> PurchaseResult:
        if self.state.phase != Phase.SHOP:
            return PurchaseResult(
                status=PurchaseStatus.REJECTED, item_id=item_id, message="shop is closed",
            )
        return self.shop.buy(self.progression, item_id)

    def confirm_replacement(self, existing_action_id: str) -> PurchaseResult:
        result = self.shop.confirm_replacement(self.progression, existing_action_id)
        if result.status == PurchaseStatus.REFUNDED:
            self.event_log.add(LogKind.INFO, result.message)
        return result

    def cancel_replacement(self) -> PurchaseResult:
        return self.shop.cancel_replacement(self.progression)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _idle_state(self, phase: Phase) -> RunState:
        max_hp = self.config.max_hp_for_level(1)
        return RunState(
            hp=max_hp, max_hp=max_hp, timer=self.config.level_time_limit, phase=phase,
        )

    def _record_damage(self, result: DamageResult) -> None:
        lt = self._level_telemetry
        if lt is None:
            return
        lt.damage_taken += result.hp_lost
        lt.shield_absorbed += result.shield_absorbed

    def _record_healing(self, healed: float) -> None:
        if self._level_telemetry is not None:
            self._level_telemetry.healing_received += healed

    def _record_ability(self, resolution: AbilityResolution) -> None:
        kind = resolution.kind
        if kind == HealerAbilityKind.DIRECT_HEAL:
            self._record_healing(resolution.amount)
            self.event_log.add(
                LogKind.HEAL,
                f"{resolution.healer_id} heals {resolution.amount:.0f}",
                self.state.elapsed,
            )
        elif kind == HealerAbilityKind.SHIELD:
            self.event_log.add(
                LogKind.SHIELD,
                f"{resolution.healer_id} shields {resolution.amount:.0f}",
                self.state.elapsed,
            )
        elif kind == HealerAbilityKind.REGENERATION:
            self.event_log.add(
                LogKind.HEAL,
                f"{resolution.healer_id} starts regeneration",
                self.state.elapsed,
            )
        else:
            self.event_log.add(
                LogKind.EFFECT,
                f"{resolution.healer_id} cleanses {resolution.amount:.0f} effect(s)",
                self.state.elapsed,
            )

        lt = self._level_telemetry
        if lt is not None:
            lt.healer_abilities_fired[kind.value] = lt.healer_abilities_fired.get(kind.value, 0) + 1

    def _close_level_telemetry(self, result: str) -> None:
        lt = self._level_telemetry
        if lt is None:
            return
        lt.result = result
        lt.elapsed = self.state.elapsed
        self.telemetry.currency_spent = self.progression.currency_spent
        self.telemetry.roster = [a.id for a in self.progression.roster]
        self._level_telemetry = None
