"""Greedy agent -- a hand-written policy that tries to die fast.

Decision rules:

- **In level**: if a non-stunned healer is about to heal (or shield) and
  a disruptive consumable is in the bag, use it.  Otherwise invoke the
  ready action with the highest effective damage right now, which makes
  missing-HP scaling actions climb the list as the fight goes on.
- **Shop**: fill the roster with the priciest affordable actions, then
  buy the cheapest affordable upgrade, then top up a small stock of
  consumables.  Never buys an action into a full roster.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ragequit.ir.healers import HealerAbilityKind
from ragequit.sim.play_agents.base import Command, CommandKind, PlayAgent
from ragequit.sim.shop import ShopItemKind

if TYPE_CHECKING:
    from ragequit.sim.core.rng import GameRNG
    from ragequit.sim.snapshot import RunSnapshot

# Healer abilities worth disrupting
_RESTORING_KINDS = frozenset({
    HealerAbilityKind.DIRECT_HEAL,
    HealerAbilityKind.SHIELD,
    HealerAbilityKind.REGENERATION,
})

# Consumable effects that blunt an incoming heal
_DISRUPTIVE_EFFECTS = ("stun_all_healers", "reduce_healing")


class GreedyAgent(PlayAgent):
    """Priority-based agent.

    Parameters
    ----------
    rng:
        Accepted for interface parity with :class:`RandomAgent`; the
        greedy policy is deterministic.
    max_actions:
        Roster capacity the agent plans around.
    heal_warning_seconds:
        How close to a heal the agent reaches for a disruptive consumable.
    consumable_stock:
        Total consumable units the agent tries to keep.
    """

    def __init__(
        self,
        rng: GameRNG | None = None,
        max_actions: int = 4,
        heal_warning_seconds: float = 0.5,
        consumable_stock: int = 2,
    ) -> None:
        self._rng = rng
        self._max_actions = max_actions
        self._heal_warning_seconds = heal_warning_seconds
        self._consumable_stock = consumable_stock

    # ------------------------------------------------------------------
    # PlayAgent interface
    # ------------------------------------------------------------------

    def choose_command(self, snapshot: RunSnapshot) -> Command | None:
        if self._heal_imminent(snapshot):
            for consumable in snapshot.consumables:
                if consumable.quantity > 0 and consumable.effect.kind in _DISRUPTIVE_EFFECTS:
                    return Command(CommandKind.CONSUMABLE, consumable.id)

        ready = snapshot.ready_actions()
        if not ready:
            return None
        best = max(ready, key=lambda a: a.effective_damage(snapshot.max_hp, snapshot.hp))
        return Command(CommandKind.ACTION, best.id)

    def choose_purchase(self, snapshot: RunSnapshot) -> str | None:
        affordable = [i for i in snapshot.shop_items if i.cost <= snapshot.currency]

        if len(snapshot.player_actions) < self._max_actions:
            actions = [i for i in affordable if i.kind == ShopItemKind.ACTION]
            if actions:
                return max(actions, key=lambda i: i.cost).id

        upgrades = [i for i in affordable if i.kind == ShopItemKind.UPGRADE]
        if upgrades:
            return min(upgrades, key=lambda i: i.cost).id

        stock = sum(c.quantity for c in snapshot.consumables)
        if stock < self._consumable_stock:
            consumables = [i for i in affordable if i.kind == ShopItemKind.CONSUMABLE]
            if consumables:
                return min(consumables, key=lambda i: i.cost).id
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _heal_imminent(self, snapshot: RunSnapshot) -> bool:
        for healer in snapshot.healers:
            if healer.is_stunned:
                continue
            for ability in healer.abilities:
                if (
                    ability.kind in _RESTORING_KINDS
                    and ability.time_to_next_use <= self._heal_warning_seconds
                ):
                    return True
        return False
