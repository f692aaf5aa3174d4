"""Effect ledger -- DoT/HoT bookkeeping.

The ledger owns ``RunState.active_dots`` and ``RunState.active_hots``.
Each list holds at most one instance per effect id: re-applying an
effect refreshes its duration to the template's full duration (it does
not stack magnitude and does not extend additively).

``tick`` only *reports* totals.  The caller hands the aggregated damage
and healing to the combat resolver once per step so shield absorption
sees a single damage event per tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ragequit.sim.core.entities import ActiveEffectInstance

if TYPE_CHECKING:
    from ragequit.ir.effects import EffectTemplate
    from ragequit.sim.core.run_state import RunState


@dataclass(frozen=True)
class EffectTotals:
    """Damage and healing accrued by one ledger tick."""

    damage: float = 0.0
    healing: float = 0.0


class EffectLedger:
    """Applies refresh rules and per-tick accrual to a run's effects."""

    def __init__(self, state: RunState) -> None:
        self.state = state

    @property
    def dots(self) -> list[ActiveEffectInstance]:
        return self.state.active_dots

    @property
    def hots(self) -> list[ActiveEffectInstance]:
        return self.state.active_hots

    # -- application ---------------------------------------------------------

    def add_dot(self, template: EffectTemplate) -> ActiveEffectInstance:
        return _install(self.state.active_dots, template)

    def add_hot(self, template: EffectTemplate) -> ActiveEffectInstance:
        return _install(self.state.active_hots, template)

    def clear_dots(self) -> int:
        """Remove every DoT; HoTs are untouched.  Returns how many were removed."""
        removed = len(self.state.active_dots)
        self.state.active_dots = []
        return removed

    def clear(self) -> None:
        self.state.active_dots = []
        self.state.active_hots = []

    # -- time ----------------------------------------------------------------

    def tick(self, delta: float) -> EffectTotals:
        """Advance every instance by *delta* seconds and report the totals."""
        if delta <= 0:
            return EffectTotals()
        damage, self.state.active_dots = _accrue(self.state.active_dots, delta)
        healing, self.state.active_hots = _accrue(self.state.active_hots, delta)
        return EffectTotals(damage=damage, healing=healing)


def _install(
    instances: list[ActiveEffectInstance], template: EffectTemplate,
) -> ActiveEffectInstance:
    for instance in instances:
        if instance.effect_id == template.id:
            instance.remaining_duration = template.duration
            instance.per_second = template.magnitude
            instance.icon = template.icon
            return instance
    instance = ActiveEffectInstance.from_template(template)
    instances.append(instance)
    return instance


def _accrue(
    instances: list[ActiveEffectInstance], delta: float,
) -> tuple[float, list[ActiveEffectInstance]]:
    total = 0.0
    survivors: list[ActiveEffectInstance] = []
    for instance in instances:
        # Never accrue past the end of the effect.
        active_for = min(delta, instance.remaining_duration)
        total += instance.per_second * active_for
        instance.remaining_duration = max(0.0, instance.remaining_duration - delta)
        if instance.remaining_duration > 0:
            survivors.append(instance)
    return total, survivors
