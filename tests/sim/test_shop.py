"""Tests for shop listings, purchases, upgrades and pending replacements."""

import pytest

from ragequit.ir.actions import ActionUpgrade
from ragequit.sim.core.config import GameConfig
from ragequit.sim.core.entities import PlayerActionState
from ragequit.sim.core.run_state import Progression
from ragequit.sim.shop import PurchaseStatus, Shop, apply_upgrade


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_shop(registry, **config_overrides) -> Shop:
    return Shop(registry, GameConfig(**config_overrides))


def _own(registry, progression: Progression, *action_ids: str) -> None:
    for action_id in action_ids:
        progression.roster.append(
            PlayerActionState.from_definition(registry.get_action(action_id)),
        )


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

class TestItems:
    def test_fresh_shop_lists_actions_and_consumables(self, registry):
        items = _make_shop(registry).items(Progression())
        ids = [i.id for i in items]
        assert "action:punch" in ids
        assert "consumable:smoke_bomb" in ids
        assert not any(i.startswith("upgrade:") for i in ids)

    def test_owned_action_offered_as_upgrade(self, registry):
        progression = Progression()
        _own(registry, progression, "punch")
        ids = [i.id for i in _make_shop(registry).items(progression)]
        assert "action:punch" not in ids
        assert "upgrade:punch" in ids

    def test_upgrade_cost_scales_with_level(self, registry):
        shop = _make_shop(registry)
        progression = Progression()
        _own(registry, progression, "punch")
        progression.roster[0].level = 3
        item = shop.find_item(progression, "upgrade:punch")
        assert item.cost == 120
        assert item.next_level == 4

    def test_max_level_action_not_upgradeable(self, registry):
        progression = Progression()
        _own(registry, progression, "punch")
        progression.roster[0].level = 5
        assert _make_shop(registry).find_item(progression, "upgrade:punch") is None


# ---------------------------------------------------------------------------
# Buying
# ---------------------------------------------------------------------------

class TestBuy:
    def test_buy_action(self, registry):
        progression = Progression(currency=100)
        result = _make_shop(registry).buy(progression, "action:punch")

        assert result.status == PurchaseStatus.PURCHASED
        assert result.ok
        assert progression.currency == 50
        assert progression.currency_spent == 50
        assert [a.id for a in progression.roster] == ["punch"]

    def test_unaffordable_rejected(self, registry):
        progression = Progression(currency=10)
        result = _make_shop(registry).buy(progression, "action:punch")
        assert result.status == PurchaseStatus.REJECTED
        assert progression.currency == 10
        assert progression.roster == []

    def test_unknown_item_rejected(self, registry):
        result = _make_shop(registry).buy(Progression(currency=999), "action:nope")
        assert result.status == PurchaseStatus.REJECTED

    def test_buy_upgrade(self, registry):
        progression = Progression(currency=100)
        _own(registry, progression, "punch")
        before = progression.roster[0].base_damage

        result = _make_shop(registry).buy(progression, "upgrade:punch")
        assert result.status == PurchaseStatus.PURCHASED
        assert progression.currency == 60
        assert progression.roster[0].level == 2
        assert progression.roster[0].base_damage >= before

    def test_consumables_stack(self, registry):
        progression = Progression(currency=200)
        shop = _make_shop(registry)
        shop.buy(progression, "consumable:smoke_bomb")
        shop.buy(progression, "consumable:smoke_bomb")
        assert len(progression.inventory) == 1
        assert progression.inventory[0].quantity == 2

    def test_full_inventory_refunds_new_kind(self, registry):
        progression = Progression(currency=500)
        shop = _make_shop(registry, max_consumables=1)
        shop.buy(progression, "consumable:smoke_bomb")
        currency = progression.currency

        result = shop.buy(progression, "consumable:painful_onion")
        assert result.status == PurchaseStatus.REFUNDED
        assert progression.currency == currency
        assert [c.id for c in progression.inventory] == ["smoke_bomb"]


# ---------------------------------------------------------------------------
# Pending replacement
# ---------------------------------------------------------------------------

def _full_roster(registry, currency: int = 500) -> tuple[Shop, Progression]:
    shop = _make_shop(registry, max_actions=2)
    progression = Progression(currency=currency)
    _own(registry, progression, "slap", "punch")
    return shop, progression


class TestPendingReplacement:
    def test_full_roster_defers_purchase(self, registry):
        shop, progression = _full_roster(registry)
        result = shop.buy(progression, "action:headbutt")

        assert result.status == PurchaseStatus.PENDING_REPLACEMENT
        assert progression.currency == 400
        assert progression.pending_replacement.action_id == "headbutt"
        assert [a.id for a in progression.roster] == ["slap", "punch"]

    def test_other_purchases_blocked_while_pending(self, registry):
        shop, progression = _full_roster(registry)
        shop.buy(progression, "action:headbutt")
        assert shop.buy(progression, "consumable:smoke_bomb").status == PurchaseStatus.REJECTED

    def test_confirm_replaces_in_place(self, registry):
        shop, progression = _full_roster(registry)
        shop.buy(progression, "action:headbutt")
        result = shop.confirm_replacement(progression, "slap")

        assert result.status == PurchaseStatus.REPLACED
        assert [a.id for a in progression.roster] == ["headbutt", "punch"]
        assert progression.pending_replacement is None
        assert progression.currency == 400

    def test_cancel_refunds(self, registry):
        shop, progression = _full_roster(registry)
        shop.buy(progression, "action:headbutt")
        result = shop.cancel_replacement(progression)

        assert result.status == PurchaseStatus.CANCELLED
        assert progression.currency == 500
        assert progression.currency_spent == 0
        assert progression.pending_replacement is None

    def test_bad_target_refunds_with_diagnostic(self, registry):
        shop, progression = _full_roster(registry)
        shop.buy(progression, "action:headbutt")
        result = shop.confirm_replacement(progression, "not_in_roster")

        assert result.status == PurchaseStatus.REFUNDED
        assert "not_in_roster" in result.message
        assert progression.currency == 500
        assert progression.pending_replacement is None
        assert [a.id for a in progression.roster] == ["slap", "punch"]

    def test_confirm_without_pending_rejected(self, registry):
        shop, progression = _full_roster(registry)
        assert shop.confirm_replacement(progression, "slap").status == PurchaseStatus.REJECTED
        assert shop.cancel_replacement(progression).status == PurchaseStatus.REJECTED


# ---------------------------------------------------------------------------
# apply_upgrade
# ---------------------------------------------------------------------------

class TestApplyUpgrade:
    def test_cooldown_floor(self):
        action = PlayerActionState(id="a", name="A", base_damage=5, cooldown_seconds=1)
        apply_upgrade(action, ActionUpgrade(cooldown_seconds=-10), GameConfig())
        assert action.cooldown_seconds == 0.5
        assert action.level == 2

    def test_stats_never_get_worse(self):
        action = PlayerActionState(
            id="a", name="A", base_damage=5, cooldown_seconds=4,
            healer_stun_chance=0.9, self_stun_duration=1.0,
        )
        apply_upgrade(
            action,
            ActionUpgrade(
                base_damage=-3, cooldown_seconds=2, healer_stun_chance=0.5,
                self_stun_duration=0.5,
            ),
            GameConfig(),
        )
        assert action.base_damage == 5
        assert action.cooldown_seconds == 4
        assert action.healer_stun_chance == 1.0
        assert action.self_stun_duration == 1.0

    def test_self_stun_removed_at_zero(self):
        action = PlayerActionState(
            id="a", name="A", base_damage=5, cooldown_seconds=4, self_stun_duration=0.5,
        )
        apply_upgrade(action, ActionUpgrade(self_stun_duration=-1), GameConfig())
        assert action.self_stun_duration is None

    def test_dot_magnitude_grows(self, registry):
        action = PlayerActionState.from_definition(registry.get_action("bleed"))
        before = action.dot.magnitude
        apply_upgrade(action, ActionUpgrade(dot_magnitude=1), GameConfig())
        assert action.dot.magnitude == pytest.approx(before + 1)
