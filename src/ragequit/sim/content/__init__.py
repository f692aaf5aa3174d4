"""Bundled game content and the registry that serves it."""

from ragequit.sim.content.registry import ContentRegistry

__all__ = ["ContentRegistry"]
