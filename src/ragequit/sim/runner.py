"""Headless run driver for ragequit.

Provides two classes:

- **RunSimulator**: plays one full run (shop, level, shop, level, ...)
  with a :class:`PlayAgent` making every decision and a
  :class:`ManualScheduler` advancing simulated time in fixed steps.
- **BatchRunner**: plays many seeded runs, sequentially or across
  processes, and returns their :class:`RunTelemetry`.
"""

from __future__ import annotations

import logging
import multiprocessing
from typing import Any

from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.controller import LevelController
from ragequit.sim.core.config import Difficulty, GameConfig
from ragequit.sim.core.loop import ManualScheduler
from ragequit.sim.core.rng import GameRNG
from ragequit.sim.core.run_state import Phase
from ragequit.sim.play_agents.base import CommandKind, PlayAgent
from ragequit.sim.play_agents.random_agent import RandomAgent
from ragequit.sim.shop import PurchaseStatus
from ragequit.sim.telemetry import RunTelemetry

logger = logging.getLogger(__name__)


# =====================================================================
# RunSimulator
# =====================================================================

class RunSimulator:
    """Plays a single run to completion.

    Parameters
    ----------
    registry:
        Catalog content.
    agent:
        Decision maker for commands, purchases and replacements.
    config:
        Balance constants.  Defaults to :class:`GameConfig` defaults.
    difficulty:
        Difficulty the run is started with.
    max_levels:
        The run is stopped (and counted as a win) once this many levels
        have been cleared.
    max_shop_decisions:
        Upper bound on purchases per shop visit.
    """

    def __init__(
        self,
        registry: ContentRegistry,
        agent: PlayAgent,
        config: GameConfig | None = None,
        difficulty: Difficulty = Difficulty.NORMAL,
        max_levels: int = 10,
        max_shop_decisions: int = 20,
    ) -> None:
        self.registry = registry
        self.agent = agent
        self.config = config or GameConfig()
        self.difficulty = difficulty
        self.max_levels = max_levels
        self.max_shop_decisions = max_shop_decisions

    def run(self, seed: int) -> RunTelemetry:
        scheduler = ManualScheduler()
        controller = LevelController(
            self.registry, self.config, scheduler=scheduler, rng=GameRNG(seed),
        )
        controller.start_run(self.difficulty)

        while True:
            self._shop(controller)
            if not controller.proceed_to_next_level():
                logger.info("Seed %d: agent left the shop without a usable roster", seed)
                break

            self._play_level(controller, scheduler)
            if controller.phase != Phase.LEVEL_WON:
                break
            if controller.current_level >= self.max_levels:
                controller.telemetry.final_result = "win"
                break
            controller.enter_shop()

        controller.stop_loop()
        telemetry = controller.telemetry
        telemetry.currency_spent = controller.progression.currency_spent
        telemetry.roster = [a.id for a in controller.roster]
        logger.info(
            "Seed %d finished: %s after %d level(s)",
            seed, telemetry.final_result, telemetry.levels_cleared,
        )
        return telemetry

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _shop(self, controller: LevelController) -> None:
        for _ in range(self.max_shop_decisions):
            item_id = self.agent.choose_purchase(controller.snapshot())
            if item_id is None:
                return

            result = controller.buy_shop_item(item_id)
            if result.status == PurchaseStatus.PENDING_REPLACEMENT:
                pending = controller.progression.pending_replacement
                target = self.agent.choose_replacement(controller.snapshot(), pending)
                if target is None:
                    result = controller.cancel_replacement()
                else:
                    result = controller.confirm_replacement(target)

            if not result.ok:
                logger.debug("Shopping stopped: %s (%s)", result.status.value, result.message)
                return

    def _play_level(self, controller: LevelController, scheduler: ManualScheduler) -> None:
        tick = self.config.tick_seconds
        while controller.phase == Phase.PLAYING and controller.loop_active:
            command = self.agent.choose_command(controller.snapshot())
            if command is not None:
                if command.kind == CommandKind.ACTION:
                    controller.use_action(command.ref_id)
                else:
                    controller.use_consumable(command.ref_id)
            scheduler.advance(tick)


# =====================================================================
# BatchRunner
# =====================================================================

def _make_agent(agent_class: type[PlayAgent], seed: int) -> PlayAgent:
    agent_rng = GameRNG(seed).fork("agent")
    try:
        return agent_class(rng=agent_rng)  # type: ignore[call-arg]
    except TypeError:
        return agent_class()  # type: ignore[call-arg]


def _worker_run_single(args: tuple) -> RunTelemetry:
    """Top-level worker function for multiprocessing (must be picklable)."""
    agent_class, config_data, difficulty, max_levels, seed = args

    registry = ContentRegistry.load_default()
    config = GameConfig.model_validate(config_data)
    simulator = RunSimulator(
        registry, _make_agent(agent_class, seed), config,
        difficulty=difficulty, max_levels=max_levels,
    )
    return simulator.run(seed)


class BatchRunner:
    """Runs many seeded runs, optionally in parallel.

    Parallel workers reload the bundled content rather than receiving a
    pickled registry, so custom registries are only honoured by the
    sequential path.
    """

    def __init__(
        self,
        registry: ContentRegistry,
        agent_class: type[PlayAgent] = RandomAgent,
        config: GameConfig | None = None,
        difficulty: Difficulty = Difficulty.NORMAL,
    ) -> None:
        self.registry = registry
        self.agent_class = agent_class
        self.config = config or GameConfig()
        self.difficulty = difficulty

    def run_batch(
        self,
        n_runs: int,
        base_seed: int = 42,
        max_levels: int = 10,
        parallel: bool = False,
    ) -> list[RunTelemetry]:
        """Play *n_runs* runs with seeds ``base_seed .. base_seed + n_runs - 1``."""
        seeds = [base_seed + i for i in range(n_runs)]

        if parallel and n_runs > 1:
            return self._run_parallel(seeds, max_levels)
        return self._run_sequential(seeds, max_levels)

    def _run_sequential(self, seeds: list[int], max_levels: int) -> list[RunTelemetry]:
        results: list[RunTelemetry] = []
        for seed in seeds:
            simulator = RunSimulator(
                self.registry, _make_agent(self.agent_class, seed), self.config,
                difficulty=self.difficulty, max_levels=max_levels,
            )
            results.append(simulator.run(seed))
        return results

    def _run_parallel(self, seeds: list[int], max_levels: int) -> list[RunTelemetry]:
        config_data: dict[str, Any] = self.config.model_dump(mode="json")
        work_items = [
            (self.agent_class, config_data, self.difficulty, max_levels, seed)
            for seed in seeds
        ]

        n_workers = min(len(seeds), multiprocessing.cpu_count() or 1)

        with multiprocessing.Pool(processes=n_workers) as pool:
            results = pool.map(_worker_run_single, work_items)

        return results
