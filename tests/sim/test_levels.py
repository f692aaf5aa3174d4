"""Tests for level construction and healer scaling."""

import pytest

from ragequit.sim.core.config import GameConfig
from ragequit.sim.levels import LevelFactory


def _names(level) -> list[str]:
    return [h.id.rsplit("-", 1)[0] for h in level.healers]


class TestHealerRoster:
    @pytest.mark.parametrize(
        "level_number, expected",
        [
            (1, ["apprentice"]),
            (2, ["cleric"]),
            (3, ["cleric", "shaman"]),
            (4, ["cleric", "shaman"]),
            (5, ["cleric", "shaman", "paladin"]),
            (9, ["cleric", "shaman", "paladin"]),
        ],
    )
    def test_roster_by_level(self, registry, level_number, expected):
        level = LevelFactory(registry).build(level_number)
        assert _names(level) == expected

    def test_healer_ids_unique(self, registry):
        level = LevelFactory(registry).build(5)
        ids = [h.id for h in level.healers]
        assert len(ids) == len(set(ids))


class TestScaling:
    def test_hp_and_timer(self, registry):
        level = LevelFactory(registry, GameConfig()).build(3)
        assert level.max_hp == 140
        assert level.time_limit == 70

    def test_magnitude_grows_past_intro(self, registry):
        factory = LevelFactory(registry)
        at_intro = factory.build(2).healers[0].abilities[0]
        later = factory.build(4).healers[0].abilities[0]
        template = registry.get_healer("cleric").abilities[0]
        assert at_intro.magnitude == template.magnitude
        assert later.magnitude == template.magnitude + 2 * template.magnitude_per_level

    def test_first_use_loaded_as_countdown(self, registry):
        ability = LevelFactory(registry).build(1).healers[0].abilities[0]
        assert ability.time_to_next_use == registry.get_healer("apprentice").abilities[0].first_use

    def test_levels_are_independent_copies(self, registry):
        factory = LevelFactory(registry)
        a = factory.build(2)
        b = factory.build(2)
        a.healers[0].add_stun(3)
        assert not b.healers[0].is_stunned

    def test_invalid_level_number(self, registry):
        with pytest.raises(ValueError):
            LevelFactory(registry).build(0)
