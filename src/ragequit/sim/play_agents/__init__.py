"""Play agent implementations for headless run simulation.

Re-exports the base class and all concrete agent implementations so
consumers can do::

    from ragequit.sim.play_agents import PlayAgent, RandomAgent
"""

from .base import Command, CommandKind, PlayAgent
from .greedy_agent import GreedyAgent
from .random_agent import RandomAgent

__all__ = ["Command", "CommandKind", "PlayAgent", "GreedyAgent", "RandomAgent"]
