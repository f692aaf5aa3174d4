"""Random agent -- picks legal commands and purchases uniformly at random.

The ``RandomAgent`` is the baseline for batch runs: it exercises every
command path of the controller and gives a lower bound on how far the
content lets a player get.

Behaviour:
    - Each tick there is an ``idle_chance`` of doing nothing.
    - Otherwise it picks uniformly among ready actions and consumables.
    - In the shop it buys a random affordable item, stopping once
      nothing is affordable or with ``leave_shop_chance`` per decision.
    - When asked for a replacement slot it picks a random roster action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ragequit.sim.core.rng import GameRNG
from ragequit.sim.play_agents.base import Command, CommandKind, PlayAgent

if TYPE_CHECKING:
    from ragequit.sim.core.run_state import PendingReplacement
    from ragequit.sim.snapshot import RunSnapshot


class RandomAgent(PlayAgent):
    """Agent that issues random legal commands.

    Parameters
    ----------
    rng:
        Seeded RNG for deterministic randomness.  If ``None``, a default
        ``GameRNG(seed=0)`` is created.
    idle_chance:
        Probability that the agent waits instead of acting on a tick.
    leave_shop_chance:
        Probability that the agent stops shopping on each shop decision
        once it owns at least one action.
    """

    def __init__(
        self,
        rng: GameRNG | None = None,
        idle_chance: float = 0.5,
        leave_shop_chance: float = 0.25,
    ) -> None:
        self._rng = rng or GameRNG(seed=0)
        self._idle_chance = idle_chance
        self._leave_shop_chance = leave_shop_chance

    # ------------------------------------------------------------------
    # PlayAgent interface
    # ------------------------------------------------------------------

    def choose_command(self, snapshot: RunSnapshot) -> Command | None:
        options = [Command(CommandKind.ACTION, a.id) for a in snapshot.ready_actions()]
        options += [
            Command(CommandKind.CONSUMABLE, c.id)
            for c in snapshot.consumables
            if c.quantity > 0
        ]
        if not options:
            return None
        if self._rng.random_float() < self._idle_chance:
            return None
        return self._rng.random_choice(options)

    def choose_purchase(self, snapshot: RunSnapshot) -> str | None:
        affordable = [i for i in snapshot.shop_items if i.cost <= snapshot.currency]
        if not affordable:
            return None
        if snapshot.player_actions and self._rng.random_float() < self._leave_shop_chance:
            return None
        return self._rng.random_choice(affordable).id

    def choose_replacement(
        self,
        snapshot: RunSnapshot,
        pending: PendingReplacement,
    ) -> str | None:
        if not snapshot.player_actions:
            return None
        return self._rng.random_choice(snapshot.player_actions).id
