"""Base class for agents that play ragequit runs headlessly.

All play agents must subclass ``PlayAgent`` and implement the abstract
methods.  The run simulator polls them at decision points: once per tick
while a level is playing, repeatedly while the shop is open, and once
whenever an action purchase is waiting for a roster slot.

Agents only ever see :class:`~ragequit.sim.snapshot.RunSnapshot` copies;
they act by returning ids, which the simulator turns into controller
commands.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ragequit.sim.core.run_state import PendingReplacement
    from ragequit.sim.snapshot import RunSnapshot


class CommandKind(str, Enum):
    ACTION = "action"
    CONSUMABLE = "consumable"


@dataclass(frozen=True)
class Command:
    """One in-level command chosen by an agent."""

    kind: CommandKind
    ref_id: str


class PlayAgent(ABC):
    """Base class for AI agents that play the game."""

    @abstractmethod
    def choose_command(self, snapshot: RunSnapshot) -> Command | None:
        """Choose what to do during this tick of a level.

        Parameters
        ----------
        snapshot:
            Current state of the run, with ``phase == PLAYING``.

        Returns
        -------
        Command | None
            The action or consumable to use, or ``None`` to wait.
        """

    @abstractmethod
    def choose_purchase(self, snapshot: RunSnapshot) -> str | None:
        """Choose one shop item id to buy, or ``None`` to leave the shop.

        Called repeatedly while the shop is open; ``snapshot.shop_items``
        lists what is on offer.
        """

    def choose_replacement(
        self,
        snapshot: RunSnapshot,
        pending: PendingReplacement,
    ) -> str | None:
        """Choose the roster action to give up for *pending*.

        Returns ``None`` to cancel the purchase and take the refund.  The
        default gives up the lowest-damage action.
        """
        if not snapshot.player_actions:
            return None
        weakest = min(snapshot.player_actions, key=lambda a: a.base_damage)
        return weakest.id
