"""Tests for the level/run controller: lifecycle, tick order and commands."""

import pytest

from ragequit.ir.actions import ActionDefinition
from ragequit.ir.consumables import ConsumableDefinition, StunAllHealers
from ragequit.ir.effects import EffectTemplate
from ragequit.ir.healers import HealerAbilityKind, HealerAbilityTemplate, HealerTemplate
from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.controller import LevelController
from ragequit.sim.core.config import Difficulty, GameConfig
from ragequit.sim.core.entities import PlayerActionState
from ragequit.sim.core.loop import ManualScheduler
from ragequit.sim.core.rng import GameRNG
from ragequit.sim.core.run_state import Phase
from ragequit.sim.shop import PurchaseStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_registry(heal_magnitude: float = 10, heal_cooldown: float = 5, first_use: float = 5):
    """One 30-damage action and one healer with a single direct heal."""
    registry = ContentRegistry()
    registry.register_action(ActionDefinition(
        id="hit", name="Hit", base_damage=30, cooldown_seconds=2, cost=10,
    ))
    registry.register_action(ActionDefinition(
        id="tap", name="Tap", base_damage=1, cooldown_seconds=1, cost=10,
    ))
    registry.register_consumable(ConsumableDefinition(
        id="smoke_bomb", name="Smoke Bomb", cost=10, effect=StunAllHealers(duration=4),
    ))
    registry.register_healer(HealerTemplate(
        id="medic", name="Medic", intro_level=1,
        abilities=[HealerAbilityTemplate(
            id="patch", name="Patch", kind=HealerAbilityKind.DIRECT_HEAL,
            cooldown_seconds=heal_cooldown, first_use=first_use, magnitude=heal_magnitude,
        )],
    ))
    return registry


def _make_controller(registry=None, **config_overrides):
    scheduler = ManualScheduler()
    controller = LevelController(
        registry or _make_registry(),
        GameConfig(**config_overrides),
        scheduler=scheduler,
        rng=GameRNG(42),
    )
    return controller, scheduler


def _start_with(controller, *action_ids: str, difficulty=Difficulty.NORMAL) -> None:
    controller.start_run(difficulty)
    for action_id in action_ids:
        controller.progression.roster.append(
            PlayerActionState.from_definition(controller.registry.get_action(action_id)),
        )


def _advance(scheduler, seconds: float, step: float = 0.1) -> None:
    for _ in range(round(seconds / step)):
        scheduler.advance(step)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_new_controller_is_idle(self):
        controller, _ = _make_controller()
        assert controller.phase == Phase.START
        assert not controller.loop_active

    def test_start_run_opens_shop(self):
        controller, _ = _make_controller()
        controller.start_run(Difficulty.HARD)
        assert controller.phase == Phase.SHOP
        assert controller.currency == 50
        assert controller.difficulty == Difficulty.HARD
        assert controller.roster == []

    def test_exit_shop_requires_roster(self):
        controller, _ = _make_controller()
        controller.start_run()
        assert not controller.exit_shop()
        assert controller.phase == Phase.SHOP

    def test_exit_shop_loads_first_level(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        assert controller.exit_shop()
        assert controller.phase == Phase.PLAYING
        assert controller.current_level == 1
        assert controller.loop_active
        assert controller.state.timer == 60
        assert controller.state.hp == 100

    def test_exit_shop_blocked_while_replacement_pending(self):
        controller, _ = _make_controller(max_actions=1)
        _start_with(controller, "hit")
        result = controller.buy_shop_item("action:tap")
        assert result.status == PurchaseStatus.PENDING_REPLACEMENT
        assert not controller.exit_shop()
        controller.cancel_replacement()
        assert controller.exit_shop()

    def test_load_level_resets_cooldowns(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.roster[0].current_cooldown = 1.5
        controller.load_level(2)
        assert controller.roster[0].current_cooldown == 0
        assert controller.state.max_hp == 120

    def test_restart_run_returns_to_start(self):
        controller, scheduler = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.restart_run()
        assert controller.phase == Phase.START
        assert scheduler.active_loops == []


# ---------------------------------------------------------------------------
# Tick loop
# ---------------------------------------------------------------------------

class TestTickLoop:
    def test_scheduler_drives_ticks(self):
        controller, scheduler = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        _advance(scheduler, 1.0)
        assert controller.state.timer == pytest.approx(59.0)
        assert controller.state.elapsed == pytest.approx(1.0)

    def test_tick_outside_playing_is_noop(self):
        controller, _ = _make_controller()
        controller.start_run()
        controller.tick(1.0)
        assert controller.state.elapsed == 0

    def test_dot_damage_applied_each_tick(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.ledger.add_dot(EffectTemplate(id="burn", duration=5, magnitude=10))
        controller.tick(0.1)
        assert controller.state.hp == pytest.approx(99)

    def test_dot_damage_not_scaled_by_difficulty(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit", difficulty=Difficulty.EASY)
        controller.exit_shop()
        controller.ledger.add_dot(EffectTemplate(id="burn", duration=5, magnitude=10))
        controller.tick(0.1)
        assert controller.state.hp == pytest.approx(99)

    def test_stunned_healer_does_not_heal(self):
        controller, scheduler = _make_controller(_make_registry(first_use=1))
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.use_action("hit")
        controller.healers[0].add_stun(3)
        _advance(scheduler, 2.0)
        assert controller.state.hp == pytest.approx(70)

    def test_timeout_is_game_over(self):
        controller, scheduler = _make_controller(level_time_limit=1)
        _start_with(controller, "hit")
        controller.exit_shop()
        _advance(scheduler, 1.5)
        assert controller.phase == Phase.GAME_OVER
        assert not controller.win
        assert not controller.loop_active
        assert controller.telemetry.levels[-1].result == "loss"


# ---------------------------------------------------------------------------
# Terminal evaluation
# ---------------------------------------------------------------------------

class TestTerminal:
    def test_win_awards_currency(self):
        controller, scheduler = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.state.hp = 20
        controller.use_action("hit")
        scheduler.advance(0.1)

        assert controller.phase == Phase.LEVEL_WON
        assert controller.win
        summary = controller.level_summary
        assert summary.overkill_bonus == 50  # floor(10 * 5)
        assert summary.damage_bonus == 150
        assert controller.currency == 50 + summary.total
        assert not controller.loop_active

    def test_simultaneous_zero_hp_and_timeout_is_a_win(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.state.hp = 0.5
        controller.state.timer = 0.05
        controller.ledger.add_dot(EffectTemplate(id="burn", duration=1, magnitude=10))
        controller.tick(0.1)

        assert controller.phase == Phase.LEVEL_WON
        assert controller.win

    def test_heal_in_the_same_tick_prevents_the_win(self):
        controller, _ = _make_controller(_make_registry(first_use=0.1, heal_magnitude=50))
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.state.hp = 20
        controller.use_action("hit")
        controller.tick(0.1)
        assert controller.phase == Phase.PLAYING
        assert controller.state.hp == pytest.approx(40)

    def test_shop_then_next_level(self):
        controller, scheduler = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.state.hp = 1
        controller.use_action("hit")
        scheduler.advance(0.1)

        assert controller.enter_shop()
        assert controller.phase == Phase.SHOP
        assert controller.exit_shop()
        assert controller.current_level == 2
        assert controller.phase == Phase.PLAYING


# ---------------------------------------------------------------------------
# Idempotent stop
# ---------------------------------------------------------------------------

class TestStopLoop:
    def test_double_stop(self):
        controller, scheduler = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.stop_loop()
        controller.stop_loop()
        elapsed = controller.state.elapsed
        _advance(scheduler, 1.0)
        assert controller.state.elapsed == elapsed
        assert scheduler.active_loops == []

    def test_stop_after_natural_end(self):
        controller, scheduler = _make_controller(level_time_limit=0.5)
        _start_with(controller, "hit")
        controller.exit_shop()
        _advance(scheduler, 1.0)
        controller.stop_loop()
        controller.stop_loop()
        assert controller.phase == Phase.GAME_OVER

    def test_reload_replaces_loop(self):
        controller, scheduler = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.load_level(1)
        assert len(scheduler.active_loops) == 1
        _advance(scheduler, 1.0)
        assert controller.state.elapsed == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestCommands:
    def test_actions_ignored_outside_play(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        assert controller.use_action("hit") is None
        assert controller.use_consumable("smoke_bomb") is None

    def test_unknown_action_is_noop(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        assert controller.use_action("nope") is None
        assert controller.state.hp == 100

    def test_cooldown_blocks_repeat(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        assert controller.use_action("hit") is not None
        assert controller.use_action("hit") is None
        assert controller.state.hp == 70

    def test_consumable_depletes(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        assert controller.buy_shop_item("consumable:smoke_bomb").ok
        controller.exit_shop()

        outcome = controller.use_consumable("smoke_bomb")
        assert outcome.depleted
        assert controller.progression.inventory == []
        assert all(h.stun_timer == 4 for h in controller.healers)
        assert controller.use_consumable("smoke_bomb") is None

    def test_purchases_only_in_shop(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        result = controller.buy_shop_item("consumable:smoke_bomb")
        assert result.status == PurchaseStatus.REJECTED

    def test_bad_replacement_target_logged(self):
        controller, _ = _make_controller(max_actions=1)
        _start_with(controller, "hit")
        controller.buy_shop_item("action:tap")
        result = controller.confirm_replacement("nope")
        assert result.status == PurchaseStatus.REFUNDED
        assert controller.currency == 50
        assert any("nope" in e.message for e in controller.event_log.entries())


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

class TestSnapshot:
    def test_snapshot_is_a_copy(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        snapshot = controller.snapshot()
        snapshot.player_actions[0].current_cooldown = 99
        snapshot.healers[0].stun_timer = 99
        assert controller.roster[0].current_cooldown == 0
        assert controller.healers[0].stun_timer == 0

    def test_snapshot_clamps_hp(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()
        controller.state.hp = -15
        snapshot = controller.snapshot()
        assert snapshot.hp == 0
        assert snapshot.max_hp == 100

    def test_shop_items_listed_only_in_shop(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit")
        assert controller.snapshot().shop_items
        controller.exit_shop()
        assert controller.snapshot().shop_items == []

    def test_ready_actions(self):
        controller, _ = _make_controller()
        _start_with(controller, "hit", "tap")
        controller.exit_shop()
        controller.use_action("hit")
        assert [a.id for a in controller.snapshot().ready_actions()] == ["tap"]


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------

class TestEndToEnd:
    def test_three_hits_then_one_heal(self):
        """30-damage hits every ~2s; the healer's first heal lands at t=5s."""
        controller, scheduler = _make_controller()
        _start_with(controller, "hit")
        controller.exit_shop()

        for _ in range(55):
            controller.use_action("hit")
            scheduler.advance(0.1)

        # 100 - 30 * 3 + 10 * 1
        assert controller.state.elapsed == pytest.approx(5.5)
        assert controller.state.hp == pytest.approx(20)
        assert controller.telemetry.levels[-1].actions_used == 3
        assert controller.telemetry.levels[-1].healer_abilities_fired == {"direct_heal": 1}

    def test_invariants_hold_through_a_run(self, registry):
        scheduler = ManualScheduler()
        controller = LevelController(registry, scheduler=scheduler, rng=GameRNG(7))
        controller.start_run()
        for action_id in ("punch", "bleed", "headbutt", "voodoo_curse"):
            controller.progression.roster.append(
                PlayerActionState.from_definition(registry.get_action(action_id)),
            )
        controller.load_level(5)

        while controller.phase == Phase.PLAYING:
            for action in list(controller.roster):
                controller.use_action(action.id)
            scheduler.advance(0.1)

            snapshot = controller.snapshot()
            assert 0 <= snapshot.hp <= snapshot.max_hp
            assert snapshot.timer >= 0
            assert snapshot.stun_timer >= 0
            assert 0 <= snapshot.instability < snapshot.max_instability
            assert all(a.current_cooldown >= 0 for a in snapshot.player_actions)
            assert all(
                ab.time_to_next_use >= 0
                for h in snapshot.healers for ab in h.abilities
            )

        assert controller.phase in (Phase.LEVEL_WON, Phase.GAME_OVER)
