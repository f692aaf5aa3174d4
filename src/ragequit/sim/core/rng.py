"""Seeded random number generator for deterministic level simulation.

Every random decision in the core (which healer an instability overflow
stuns, whether a stun-chance action lands, agent choices in headless
runs) goes through a :class:`GameRNG`.  Sub-systems take a *forked*
stream so that, for example, an agent consuming random values never
shifts which healer gets stunned.
"""

from __future__ import annotations

import hashlib
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class GameRNG:
    """Deterministic RNG that can be forked into independent sub-streams.

    Parameters
    ----------
    seed:
        Integer seed for the underlying Mersenne Twister.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    # -- draws ---------------------------------------------------------------

    def random_float(self) -> float:
        """Return a float in ``[0.0, 1.0)``."""
        return self._rng.random()

    def chance(self, probability: float) -> bool:
        """Roll once; ``True`` with the given probability."""
        if probability <= 0:
            return False
        return self._rng.random() < probability

    def random_choice(self, seq: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        return self._rng.choice(seq)

    def shuffle(self, lst: list[T]) -> None:
        self._rng.shuffle(lst)

    # -- forking -------------------------------------------------------------

    def fork(self, name: str) -> GameRNG:
        """Derive a child RNG from ``(seed, name)``.

        Forking is stable: the same parent seed and *name* always give
        the same child seed, independent of how many values the parent
        has produced.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        return GameRNG(int.from_bytes(digest[:8], "big"))

    def __repr__(self) -> str:
        return f"GameRNG(seed={self._seed})"
