"""Shop -- turns rage points into actions, upgrades and consumables.

The shop itself is stateless: every method reads and mutates a
:class:`~ragequit.sim.core.run_state.Progression` handed in by the
controller.  Purchases never raise for invalid requests; they return a
:class:`PurchaseResult` whose ``status`` says what happened.

Currency invariant: whenever currency is debited the purchase either
completes or is refunded.  The only state in which money has been spent
without anything gained yet is ``Progression.pending_replacement``, and
that state is left only through :meth:`Shop.confirm_replacement` or
:meth:`Shop.cancel_replacement`.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel

from ragequit.ir.actions import ActionRarity, ActionUpgrade
from ragequit.sim.content.registry import ContentRegistry
from ragequit.sim.core.config import GameConfig
from ragequit.sim.core.entities import Consumable, PlayerActionState
from ragequit.sim.core.run_state import PendingReplacement, Progression

logger = logging.getLogger(__name__)


class ShopItemKind(str, Enum):
    ACTION = "action"
    UPGRADE = "upgrade"
    CONSUMABLE = "consumable"


class ShopItem(BaseModel):
    """One purchasable entry as shown to the player."""

    model_config = {"frozen": True}

    id: str
    """``"<kind>:<ref_id>"``."""

    kind: ShopItemKind
    ref_id: str
    """Action or consumable id the item refers to."""

    name: str
    description: str = ""
    cost: int
    rarity: ActionRarity | None = None
    next_level: int | None = None
    """For upgrades: the level the action reaches after purchase."""


class PurchaseStatus(str, Enum):
    PURCHASED = "purchased"
    PENDING_REPLACEMENT = "pending_replacement"
    REPLACED = "replaced"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    REJECTED = "rejected"


class PurchaseResult(BaseModel):
    model_config = {"frozen": True}

    status: PurchaseStatus
    item_id: str | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (
            PurchaseStatus.PURCHASED,
            PurchaseStatus.PENDING_REPLACEMENT,
            PurchaseStatus.REPLACED,
        )


def item_id_for(kind: ShopItemKind, ref_id: str) -> str:
    return f"{kind.value}:{ref_id}"


def apply_upgrade(action: PlayerActionState, upgrade: ActionUpgrade, config: GameConfig) -> None:
    """Level *action* up once using its per-level deltas.

    Every stat either improves or stays put: cooldowns never drop below
    ``config.min_cooldown_seconds``, self-stun never below zero and the
    healer stun chance never above 1.
    """
    if upgrade.base_damage:
        action.base_damage += max(0.0, upgrade.base_damage)
    if upgrade.cooldown_seconds:
        lowered = max(config.min_cooldown_seconds, action.cooldown_seconds + upgrade.cooldown_seconds)
        action.cooldown_seconds = min(action.cooldown_seconds, lowered)
    if upgrade.instability_gain:
        action.instability_gain += max(0.0, upgrade.instability_gain)
    if upgrade.dot_magnitude and action.dot is not None:
        action.dot = action.dot.model_copy(
            update={"magnitude": action.dot.magnitude + max(0.0, upgrade.dot_magnitude)},
        )
    if upgrade.missing_hp_damage_scalar:
        action.missing_hp_damage_scalar = (
            (action.missing_hp_damage_scalar or 0.0) + max(0.0, upgrade.missing_hp_damage_scalar)
        )
    if upgrade.healer_stun_chance:
        action.healer_stun_chance = min(
            1.0, (action.healer_stun_chance or 0.0) + max(0.0, upgrade.healer_stun_chance),
        )
    if upgrade.self_stun_duration and action.self_stun_duration:
        shorter = max(0.0, action.self_stun_duration + min(0.0, upgrade.self_stun_duration))
        action.self_stun_duration = shorter or None
    action.level += 1


class Shop:
    """Catalog and purchase rules.

    Parameters
    ----------
    registry:
        Source of action and consumable definitions.
    config:
        Capacity limits, upgrade pricing and floors.
    """

    def __init__(self, registry: ContentRegistry, config: GameConfig | None = None) -> None:
        self.registry = registry
        self.config = config or GameConfig()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def items(self, progression: Progression) -> list[ShopItem]:
        """Everything currently on offer, actions first."""
        items: list[ShopItem] = []
        for definition in self.registry.actions.values():
            if progression.owns_action(definition.id):
                continue
            items.append(ShopItem(
                id=item_id_for(ShopItemKind.ACTION, definition.id),
                kind=ShopItemKind.ACTION,
                ref_id=definition.id,
                name=definition.name,
                description=definition.description,
                cost=definition.cost,
                rarity=definition.rarity,
            ))
        for action in progression.roster:
            if action.level >= self.config.max_action_level:
                continue
            if self.registry.get_action(action.id) is None:
                continue
            items.append(ShopItem(
                id=item_id_for(ShopItemKind.UPGRADE, action.id),
                kind=ShopItemKind.UPGRADE,
                ref_id=action.id,
                name=f"{action.name} Lv.{action.level + 1}",
                description=f"Improve {action.name}.",
                cost=self.upgrade_cost(action),
                rarity=action.rarity,
                next_level=action.level + 1,
            ))
        for definition in self.registry.consumables.values():
            items.append(ShopItem(
                id=item_id_for(ShopItemKind.CONSUMABLE, definition.id),
                kind=ShopItemKind.CONSUMABLE,
                ref_id=definition.id,
                name=definition.name,
                description=definition.description,
                cost=definition.cost,
            ))
        return items

    def find_item(self, progression: Progression, item_id: str) -> ShopItem | None:
        return next((i for i in self.items(progression) if i.id == item_id), None)

    def upgrade_cost(self, action: PlayerActionState) -> int:
        return self.config.upgrade_base_cost * action.level

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def buy(self, progression: Progression, item_id: str) -> PurchaseResult:
        if progression.pending_replacement is not None:
            return _rejected(item_id, "a replacement is pending")
        item = self.find_item(progression, item_id)
        if item is None:
            return _rejected(item_id, "item not on offer")
        if progression.currency < item.cost:
            return _rejected(item_id, "not enough rage points")

        if item.kind == ShopItemKind.ACTION:
            return self._buy_action(progression, item)
        if item.kind == ShopItemKind.UPGRADE:
            return self._buy_upgrade(progression, item)
        return self._buy_consumable(progression, item)

    def _buy_action(self, progression: Progression, item: ShopItem) -> PurchaseResult:
        definition = self.registry.get_action(item.ref_id)
        if definition is None:
            return _rejected(item.id, "unknown action")

        progression.debit(item.cost)
        if len(progression.roster) >= self.config.max_actions:
            progression.pending_replacement = PendingReplacement(
                item_id=item.id, action_id=definition.id, cost=item.cost,
            )
            return PurchaseResult(
                status=PurchaseStatus.PENDING_REPLACEMENT,
                item_id=item.id,
                message="roster full; choose an action to replace",
            )

        progression.roster.append(PlayerActionState.from_definition(definition))
        logger.info("Bought action %s for %d", definition.id, item.cost)
        return PurchaseResult(status=PurchaseStatus.PURCHASED, item_id=item.id)

    def _buy_upgrade(self, progression: Progression, item: ShopItem) -> PurchaseResult:
        action = progression.get_action(item.ref_id)
        definition = self.registry.get_action(item.ref_id)
        if action is None or definition is None:
            return _rejected(item.id, "action not owned")
        if action.level >= self.config.max_action_level:
            return _rejected(item.id, "action already at max level")

        progression.debit(item.cost)
        apply_upgrade(action, definition.upgrade, self.config)
        logger.info("Upgraded %s to level %d", action.id, action.level)
        return PurchaseResult(status=PurchaseStatus.PURCHASED, item_id=item.id)

    def _buy_consumable(self, progression: Progression, item: ShopItem) -> PurchaseResult:
        definition = self.registry.get_consumable(item.ref_id)
        if definition is None:
            return _rejected(item.id, "unknown consumable")

        progression.debit(item.cost)
        existing = progression.get_consumable(definition.id)
        if existing is not None:
            existing.quantity += 1
        elif len(progression.inventory) >= self.config.max_consumables:
            progression.refund(item.cost)
            return PurchaseResult(
                status=PurchaseStatus.REFUNDED,
                item_id=item.id,
                message="inventory full",
            )
        else:
            progression.inventory.append(Consumable.from_definition(definition))
        return PurchaseResult(status=PurchaseStatus.PURCHASED, item_id=item.id)

    # ------------------------------------------------------------------
    # Pending replacement
    # ------------------------------------------------------------------

    def confirm_replacement(self, progression: Progression, existing_action_id: str) -> PurchaseResult:
        """Swap the pending action in for *existing_action_id*.

        An unknown target aborts the transaction: the cost is refunded,
        the pending state cleared and the diagnostic returned.
        """
        pending = progression.pending_replacement
        if pending is None:
            return _rejected(None, "no replacement pending")

        progression.pending_replacement = None
        index = next(
            (i for i, a in enumerate(progression.roster) if a.id == existing_action_id),
            None,
        )
        definition = self.registry.get_action(pending.action_id)
        if index is None or definition is None:
            progression.refund(pending.cost)
            message = f"cannot replace {existing_action_id!r}: not in roster; refunded {pending.cost}"
            logger.warning(message)
            return PurchaseResult(
                status=PurchaseStatus.REFUNDED, item_id=pending.item_id, message=message,
            )

        progression.roster[index] = PlayerActionState.from_definition(definition)
        logger.info("Replaced %s with %s", existing_action_id, definition.id)
        return PurchaseResult(status=PurchaseStatus.REPLACED, item_id=pending.item_id)

    def cancel_replacement(self, progression: Progression) -> PurchaseResult:
        pending = progression.pending_replacement
        if pending is None:
            return _rejected(None, "no replacement pending")
        progression.pending_replacement = None
        progression.refund(pending.cost)
        return PurchaseResult(
            status=PurchaseStatus.CANCELLED,
            item_id=pending.item_id,
            message=f"refunded {pending.cost}",
        )


def _rejected(item_id: str | None, message: str) -> PurchaseResult:
    return PurchaseResult(status=PurchaseStatus.REJECTED, item_id=item_id, message=message)
