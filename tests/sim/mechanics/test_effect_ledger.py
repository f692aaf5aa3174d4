"""Tests for DoT/HoT refresh rules and accrual."""

import pytest

from ragequit.ir.effects import EffectTemplate
from ragequit.sim.core.run_state import RunState
from ragequit.sim.mechanics.effects import EffectLedger


def _make_ledger() -> EffectLedger:
    return EffectLedger(RunState(hp=100, max_hp=100, timer=60))


def _burn(duration: float = 5, magnitude: float = 10) -> EffectTemplate:
    return EffectTemplate(id="burn", duration=duration, magnitude=magnitude)


# ---------------------------------------------------------------------------
# Refresh
# ---------------------------------------------------------------------------

class TestRefresh:
    def test_reapply_refreshes_not_stacks(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn())
        ledger.tick(2.0)
        ledger.add_dot(_burn())

        assert len(ledger.dots) == 1
        assert ledger.dots[0].remaining_duration == 5
        assert ledger.dots[0].per_second == 10

    def test_refresh_adopts_new_magnitude(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn(magnitude=10))
        ledger.add_dot(_burn(magnitude=14))
        assert ledger.dots[0].per_second == 14

    def test_distinct_ids_coexist(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn())
        ledger.add_dot(EffectTemplate(id="bleed", duration=4, magnitude=3))
        assert {d.effect_id for d in ledger.dots} == {"burn", "bleed"}

    def test_dots_and_hots_are_separate(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn())
        ledger.add_hot(EffectTemplate(id="burn", duration=3, magnitude=2))
        assert len(ledger.dots) == 1
        assert len(ledger.hots) == 1


# ---------------------------------------------------------------------------
# Accrual
# ---------------------------------------------------------------------------

class TestAccrual:
    def test_tick_reports_totals(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn(magnitude=10))
        ledger.add_hot(EffectTemplate(id="regen", duration=9, magnitude=3))
        totals = ledger.tick(0.1)
        assert totals.damage == pytest.approx(1.0)
        assert totals.healing == pytest.approx(0.3)

    def test_tick_does_not_touch_hp(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn())
        ledger.tick(1.0)
        assert ledger.state.hp == 100

    def test_expired_instances_removed(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn(duration=0.25))
        ledger.tick(0.1)
        ledger.tick(0.1)
        assert len(ledger.dots) == 1
        ledger.tick(0.1)
        assert ledger.dots == []

    def test_no_accrual_past_expiry(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn(duration=0.05, magnitude=10))
        totals = ledger.tick(0.1)
        assert totals.damage == pytest.approx(0.5)

    def test_full_duration_deals_template_total(self):
        ledger = _make_ledger()
        template = EffectTemplate(id="bleed", duration=4, magnitude=3)
        ledger.add_dot(template)
        dealt = sum(ledger.tick(0.1).damage for _ in range(45))
        assert dealt == pytest.approx(template.total)


class TestClear:
    def test_clear_dots_leaves_hots(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn())
        ledger.add_dot(EffectTemplate(id="bleed", duration=4, magnitude=3))
        ledger.add_hot(EffectTemplate(id="regen", duration=9, magnitude=3))
        assert ledger.clear_dots() == 2
        assert ledger.dots == []
        assert len(ledger.hots) == 1

    def test_clear_everything(self):
        ledger = _make_ledger()
        ledger.add_dot(_burn())
        ledger.add_hot(EffectTemplate(id="regen", duration=9, magnitude=3))
        ledger.clear()
        assert ledger.dots == [] and ledger.hots == []
