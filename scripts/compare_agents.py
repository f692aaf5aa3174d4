"""Compare RandomAgent vs GreedyAgent over many runs.

Usage:
    python scripts/compare_agents.py [--runs N] [--difficulty normal]

Requires the ``analysis`` extra (numpy, matplotlib).
"""

from __future__ import annotations

import argparse
import time

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.core.config import Difficulty
from ragequit.sim.play_agents import GreedyAgent, RandomAgent
from ragequit.sim.runner import BatchRunner

_COLORS = {"RandomAgent": "#e74c3c", "GreedyAgent": "#2ecc71"}


def run_comparison(n_runs: int, difficulty: Difficulty, max_levels: int) -> None:
    registry = ContentRegistry.load_default()

    results = {}
    for label, agent_class in [("RandomAgent", RandomAgent), ("GreedyAgent", GreedyAgent)]:
        print(f"\nRunning {n_runs} runs with {label}...")
        runner = BatchRunner(registry, agent_class=agent_class, difficulty=difficulty)
        t0 = time.time()
        telemetry = runner.run_batch(n_runs=n_runs, base_seed=0, max_levels=max_levels)
        elapsed = time.time() - t0

        cleared = [r.levels_cleared for r in telemetry]
        clear_times = [
            lvl.elapsed for r in telemetry for lvl in r.levels if lvl.result == "win"
        ]
        results[label] = {
            "cleared": cleared,
            "clear_times": clear_times,
            "elapsed": elapsed,
        }

        print(f"  Time: {elapsed:.1f}s ({elapsed/n_runs*1000:.0f}ms/run)")
        print(f"  Avg levels cleared: {np.mean(cleared):.2f} (median {np.median(cleared):.0f})")
        print(f"  Max levels cleared: {max(cleared)}")
        if clear_times:
            print(f"  Avg clear time: {np.mean(clear_times):.1f}s")

    generate_charts(results, n_runs)


def generate_charts(results: dict, n_runs: int) -> None:
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    fig.suptitle(f"RandomAgent vs GreedyAgent: {n_runs} runs", fontsize=16, fontweight="bold")
    labels = list(results.keys())

    # --- Levels cleared distribution ---
    ax = axes[0]
    max_cleared = max(max(results[l]["cleared"]) for l in labels)
    bins = np.arange(-0.5, max_cleared + 1.5, 1)
    for label in labels:
        cleared = results[label]["cleared"]
        ax.hist(cleared, bins=bins, alpha=0.6, label=f"{label} (avg={np.mean(cleared):.1f})",
                color=_COLORS[label], edgecolor="black", linewidth=0.3)
    ax.set_xlabel("Levels Cleared Per Run")
    ax.set_ylabel("Count")
    ax.set_title("Levels Cleared")
    ax.legend()

    # --- Clear time distribution ---
    ax = axes[1]
    for label in labels:
        times = results[label]["clear_times"]
        if times:
            ax.hist(times, bins=30, alpha=0.6, label=label,
                    color=_COLORS[label], edgecolor="black", linewidth=0.3)
    ax.set_xlabel("Seconds To Clear A Level")
    ax.set_ylabel("Count")
    ax.set_title("Clear Time")
    ax.legend()

    plt.tight_layout()
    out_path = "agent_comparison.png"
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    print(f"\nChart saved to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--runs", type=int, default=200, help="Number of runs per agent")
    parser.add_argument(
        "--difficulty", choices=[d.value for d in Difficulty], default=Difficulty.NORMAL.value,
    )
    parser.add_argument("--max-levels", type=int, default=10)
    args = parser.parse_args()
    run_comparison(args.runs, Difficulty(args.difficulty), args.max_levels)
