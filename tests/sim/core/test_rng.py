"""Tests for the seeded, forkable GameRNG."""

from ragequit.sim.core.rng import GameRNG


class TestGameRNGDeterminism:
    def test_same_seed_same_sequence(self):
        a = GameRNG(7)
        b = GameRNG(7)
        assert [a.random_float() for _ in range(5)] == [b.random_float() for _ in range(5)]

    def test_different_seeds_diverge(self):
        a = GameRNG(1)
        b = GameRNG(2)
        assert [a.random_float() for _ in range(5)] != [b.random_float() for _ in range(5)]

    def test_random_choice_from_sequence(self):
        rng = GameRNG(3)
        picks = {rng.random_choice(["a", "b", "c"]) for _ in range(50)}
        assert picks <= {"a", "b", "c"}
        assert len(picks) > 1


class TestChance:
    def test_zero_probability_never_hits(self):
        rng = GameRNG(0)
        assert not any(rng.chance(0.0) for _ in range(100))

    def test_certain_probability_always_hits(self):
        rng = GameRNG(0)
        assert all(rng.chance(1.0) for _ in range(100))


class TestFork:
    def test_fork_is_stable(self):
        assert GameRNG(42).fork("combat").seed == GameRNG(42).fork("combat").seed

    def test_fork_ignores_parent_consumption(self):
        parent = GameRNG(42)
        before = parent.fork("agent").seed
        for _ in range(10):
            parent.random_float()
        assert parent.fork("agent").seed == before

    def test_named_forks_differ(self):
        parent = GameRNG(42)
        assert parent.fork("combat").seed != parent.fork("agent").seed

    def test_repr(self):
        assert repr(GameRNG(5)) == "GameRNG(seed=5)"
