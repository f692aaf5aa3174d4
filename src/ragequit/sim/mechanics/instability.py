"""Instability meter and the random healer stuns it causes.

Every action adds its ``instability_gain`` to the meter.  Each time the
meter reaches ``max_instability`` it drops by ``max_instability`` and a
random healer that is *not currently stunned* is stunned.  A single big
gain can overflow several times; each overflow re-reads which healers
are free, so one event never stuns the same healer twice.  When every
healer is already stunned the remaining overflows are forfeited.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ragequit.sim.core.config import GameConfig
    from ragequit.sim.core.entities import Healer
    from ragequit.sim.core.rng import GameRNG
    from ragequit.sim.core.run_state import RunState

logger = logging.getLogger(__name__)


def stun_random_healer(
    healers: Sequence[Healer], rng: GameRNG, duration: float,
) -> Healer | None:
    """Stun one uniformly chosen non-stunned healer (stun is additive).

    Returns the healer stunned, or ``None`` if every healer is stunned.
    """
    candidates = [h for h in healers if not h.is_stunned]
    if not candidates:
        return None
    target = rng.random_choice(candidates)
    target.add_stun(duration)
    return target


def add_instability(
    state: RunState,
    healers: Sequence[Healer],
    gain: float,
    rng: GameRNG,
    config: GameConfig,
) -> list[Healer]:
    """Add *gain* to the meter and resolve every overflow.

    Returns the healers stunned, in the order they were hit.
    """
    stunned: list[Healer] = []
    if gain <= 0:
        return stunned

    state.instability += gain
    limit = config.max_instability
    overflowed = False
    while state.instability >= limit:
        state.instability -= limit
        overflowed = True
        target = stun_random_healer(healers, rng, config.instability_stun_duration)
        if target is None:
            logger.debug("Instability overflow with no free healer; stun forfeited")
            break
        logger.debug("Instability overflow stunned %s", target.id)
        stunned.append(target)

    # Forfeited overflows still drain the meter.
    state.instability %= limit

    if overflowed:
        state.instability_flash = config.instability_flash_seconds
    return stunned
