"""Shared fixtures for simulation tests."""

from __future__ import annotations

import pytest

from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.core.config import GameConfig


@pytest.fixture(scope="module")
def registry() -> ContentRegistry:
    """Module-scoped registry with the bundled content loaded once."""
    return ContentRegistry.load_default()


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()
