"""Play a batch of headless runs and print a balance summary.

Usage:
    python scripts/simulate_runs.py [--runs 200] [--agent greedy] [--difficulty normal]
"""

from __future__ import annotations

import argparse
import logging
import time
from collections import Counter

from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.core.config import Difficulty, GameConfig
from ragequit.sim.play_agents import GreedyAgent, RandomAgent
from ragequit.sim.runner import BatchRunner

_AGENTS = {"random": RandomAgent, "greedy": GreedyAgent}


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate ragequit runs")
    parser.add_argument("--runs", type=int, default=200, help="Number of runs")
    parser.add_argument("--agent", choices=sorted(_AGENTS), default="greedy")
    parser.add_argument(
        "--difficulty", choices=[d.value for d in Difficulty], default=Difficulty.NORMAL.value,
    )
    parser.add_argument("--max-levels", type=int, default=10, help="Stop a run after this many wins")
    parser.add_argument("--seed", type=int, default=42, help="Base seed")
    parser.add_argument("--config", type=str, default=None, help="GameConfig JSON file")
    parser.add_argument("--parallel", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    registry = ContentRegistry.load_default()
    config = GameConfig.from_file(args.config) if args.config else GameConfig()
    runner = BatchRunner(
        registry,
        agent_class=_AGENTS[args.agent],
        config=config,
        difficulty=Difficulty(args.difficulty),
    )

    print(f"Running {args.runs:,} runs with {args.agent} on {args.difficulty}...")
    t0 = time.perf_counter()
    telemetry = runner.run_batch(
        args.runs, base_seed=args.seed, max_levels=args.max_levels, parallel=args.parallel,
    )
    elapsed = time.perf_counter() - t0
    print(f"Done in {elapsed:.1f}s")

    cleared = Counter(r.levels_cleared for r in telemetry)
    wins = sum(1 for r in telemetry if r.final_result == "win")
    levels = [lvl for r in telemetry for lvl in r.levels]
    won_levels = [lvl for lvl in levels if lvl.result == "win"]

    print()
    print(f"Runs reaching level {args.max_levels}: {wins}/{len(telemetry)}")
    print("Levels cleared per run:")
    for n in sorted(cleared):
        print(f"  {n:>3}: {cleared[n]}")
    if won_levels:
        avg_time = sum(lvl.elapsed for lvl in won_levels) / len(won_levels)
        avg_heal = sum(lvl.healing_received for lvl in won_levels) / len(won_levels)
        avg_earned = sum(lvl.currency_earned for lvl in won_levels) / len(won_levels)
        print(f"Avg clear time: {avg_time:.1f}s")
        print(f"Avg healing undone per cleared level: {avg_heal:.1f}")
        print(f"Avg rage earned per cleared level: {avg_earned:.0f}")

    usage: Counter[str] = Counter()
    for lvl in levels:
        usage.update(lvl.actions_used_by_id)
    if usage:
        print("Most used actions:")
        for action_id, count in usage.most_common(5):
            print(f"  {action_id:<16} {count}")


if __name__ == "__main__":
    main()
