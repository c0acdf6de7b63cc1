"""Inventory and equipment management.

The InventoryManager owns a character's item instances, tracks which slot
each equipped item occupies, enforces slot-conflict and stat-requirement
rules, and aggregates the bonuses of everything equipped.

Equipment changes never reach the character on their own. A caller must
invoke ``sync_equipment_to_character`` after equipping or unequipping for
AC, attack and resource values to pick the change up.

Example:
    >>> inventory = InventoryManager()
    >>> sword = create_inventory_item("Longsword")
    >>> inventory.add_item(sword)
    True
    >>> inventory.equip_item(sword.id)
    True
    >>> inventory.sync_equipment_to_character(character)
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from char_engine.core.config import get_settings
from char_engine.core.exceptions import UnknownTemplateError
from char_engine.core.logging import get_logger
from char_engine.models.catalog import EquipmentTemplate, get_equipment_template
from char_engine.models.enums import (
    ArmorType,
    EquipmentSlot,
    ItemType,
    ResourceType,
    Stat,
    WeaponType,
)


if TYPE_CHECKING:
    from char_engine.models.character import Character


logger = get_logger(__name__)


# =============================================================================
# Items
# =============================================================================


class InventoryItem(BaseModel):
    """An equipped-or-not instance of an equipment template."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(default_factory=lambda: uuid4().hex)
    template_name: str = Field(description="Name of the equipment template")
    name: str | None = Field(default=None, description="Display name override")
    description: str | None = Field(default=None, description="Description override")
    enchantment_level: int = Field(default=0)
    equipped: bool = Field(default=False)
    equipment_slot: EquipmentSlot | None = Field(default=None)
    custom_stat_bonuses: dict[Stat, int] = Field(default_factory=dict)
    custom_resource_bonuses: dict[ResourceType, int] = Field(default_factory=dict)
    notes: str = Field(default="")

    @property
    def template(self) -> EquipmentTemplate:
        return get_equipment_template(self.template_name)

    @property
    def display_name(self) -> str:
        return self.name or self.template_name

    @property
    def item_type(self) -> ItemType:
        return self.template.item_type

    def stat_bonuses(self) -> dict[Stat, int]:
        """Stat bonuses this item grants at its current enchantment."""
        template = self.template
        bonuses: Counter[Stat] = Counter()
        for modifier in template.stat_modifiers:
            bonuses[modifier.stat] += modifier.value_at(
                self.enchantment_level, template.max_enchantment_level
            )
        for stat, bonus in self.custom_stat_bonuses.items():
            bonuses[Stat(stat)] += bonus
        return dict(bonuses)

    def resource_bonuses(self) -> dict[ResourceType, int]:
        """Resource-pool bonuses this item grants; curses never go below base."""
        template = self.template
        bonuses: Counter[ResourceType] = Counter()
        for modifier in template.resource_modifiers:
            bonuses[modifier.resource] += modifier.value_at(
                self.enchantment_level, template.max_enchantment_level
            )
        for resource, bonus in self.custom_resource_bonuses.items():
            bonuses[ResourceType(resource)] += bonus
        return dict(bonuses)


def create_inventory_item(template_name: str, **overrides: Any) -> InventoryItem:
    """Instantiate an unequipped item from a catalog template.

    Args:
        template_name: Name of the equipment template.
        **overrides: Any InventoryItem field (name, enchantment_level, ...).

    Returns:
        A new InventoryItem with a fresh id unless one is given.

    Raises:
        UnknownTemplateError: If the template does not exist.
    """
    get_equipment_template(template_name)
    overrides.pop("equipped", None)
    overrides.pop("equipment_slot", None)
    return InventoryItem(template_name=template_name, **overrides)


# =============================================================================
# Snapshot pushed to the character
# =============================================================================


@dataclass(frozen=True)
class WeaponLoadout:
    """What the combat calculator needs to know about a wielded weapon."""

    item_id: str
    name: str
    weapon_type: WeaponType
    governing_stat: Stat
    damage_die: int
    enchantment_level: int
    attack_bonus: int = 0


@dataclass(frozen=True)
class EquipmentSnapshot:
    """Resolved equipment state as last synced onto a character.

    Attributes:
        main_hand: Weapon in the main hand, if any.
        off_hand: Weapon in the off hand, if any.
        armor_type: Weight class of worn armor.
        has_shield: Whether a shield is equipped.
        armor_class_bonus: Armor and shield AC plus their enchantment levels.
        stat_bonuses: Aggregate stat bonuses of all equipped items.
        resource_bonuses: Aggregate resource bonuses of all equipped items.
    """

    main_hand: WeaponLoadout | None = None
    off_hand: WeaponLoadout | None = None
    armor_type: ArmorType = ArmorType.NONE
    has_shield: bool = False
    armor_class_bonus: int = 0
    stat_bonuses: dict[Stat, int] = field(default_factory=dict)
    resource_bonuses: dict[ResourceType, int] = field(default_factory=dict)


class EquippedWeapons(NamedTuple):
    main_hand: InventoryItem | None
    off_hand: InventoryItem | None


# =============================================================================
# Manager
# =============================================================================


class InventoryManager:
    """Owns item instances and their slot occupancy for one character.

    Args:
        items: Items to start with (equip state is taken as given).
        max_items: Capacity; defaults to the configured value.
    """

    def __init__(
        self,
        items: Iterable[InventoryItem] | None = None,
        *,
        max_items: int | None = None,
    ) -> None:
        settings = get_settings().inventory
        self._items: list[InventoryItem] = []
        self._max_items = max_items if max_items is not None else settings.max_items
        self._min_enchantment = settings.min_enchantment
        self._max_enchantment = settings.max_enchantment
        self._base_stats: dict[Stat, int] | None = None
        if items is not None:
            self.load_items(items)
        logger.debug("InventoryManager initialized", item_count=len(self._items))

    # -------------------------------------------------------------------------
    # Character stats used for requirement checks
    # -------------------------------------------------------------------------

    def set_character_stats(self, stats: Mapping[Stat | str, int]) -> None:
        """Record the character's scores before equipment bonuses."""
        self._base_stats = {Stat(stat): value for stat, value in stats.items()}

    def current_stats(self, *, excluding: str | None = None) -> dict[Stat, int] | None:
        """Character scores plus equipped bonuses, leaving out one item.

        Returns:
            The stats, or None when no character stats were provided.
        """
        if self._base_stats is None:
            return None
        bonuses = self.get_equipped_stat_bonuses(excluding=excluding)
        return {stat: value + bonuses.get(stat, 0) for stat, value in self._base_stats.items()}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_item(self, item_id: str) -> InventoryItem | None:
        return next((item for item in self._items if item.id == item_id), None)

    def get_items(self) -> list[InventoryItem]:
        return list(self._items)

    def get_items_by_type(self, item_type: ItemType) -> list[InventoryItem]:
        return [item for item in self._items if item.item_type == item_type]

    def get_equipped_items(self) -> list[InventoryItem]:
        return [item for item in self._items if item.equipped]

    def get_equipped_item_by_slot(self, slot: EquipmentSlot) -> InventoryItem | None:
        return next(
            (item for item in self._items if item.equipped and item.equipment_slot == slot),
            None,
        )

    def get_equipped_weapon(self, slot: EquipmentSlot) -> InventoryItem | None:
        """The weapon in a hand slot, or None."""
        item = self.get_equipped_item_by_slot(slot)
        if item is None or item.item_type != ItemType.WEAPON:
            return None
        return item

    def get_equipped_weapons(self) -> EquippedWeapons:
        return EquippedWeapons(
            main_hand=self.get_equipped_weapon(EquipmentSlot.MAIN_HAND),
            off_hand=self.get_equipped_weapon(EquipmentSlot.OFF_HAND),
        )

    def __len__(self) -> int:
        return len(self._items)

    # -------------------------------------------------------------------------
    # Adding and removing
    # -------------------------------------------------------------------------

    def add_item(self, item: InventoryItem) -> bool:
        """Insert an item, unequipped.

        Returns:
            False if the inventory is full or the id is already present.

        Raises:
            UnknownTemplateError: If the item's template does not exist.
        """
        try:
            get_equipment_template(item.template_name)
        except UnknownTemplateError as exc:
            logger.warning("Rejected item with unknown template", template=item.template_name)
            raise UnknownTemplateError(
                exc.message,
                template_name=item.template_name,
                item_id=item.id,
            ) from exc

        if self._max_items is not None and len(self._items) >= self._max_items:
            logger.info(
                "Cannot add item: inventory full",
                item=item.display_name,
                max_items=self._max_items,
            )
            return False
        if self.get_item(item.id) is not None:
            logger.info("Cannot add item: already exists", item_id=item.id)
            return False

        item.equipped = False
        item.equipment_slot = None
        self._items.append(item)
        logger.info(
            "Item added to inventory",
            item=item.display_name,
            item_type=item.item_type.value,
            total_items=len(self._items),
        )
        return True

    def remove_item(self, item_id: str) -> bool:
        """Remove an item, unequipping it first."""
        item = self.get_item(item_id)
        if item is None:
            logger.info("Cannot remove item: not found", item_id=item_id)
            return False
        was_equipped = item.equipped
        self._vacate(item)
        self._items.remove(item)
        logger.info(
            "Item removed from inventory",
            item=item.display_name,
            was_equipped=was_equipped,
            total_items=len(self._items),
        )
        return True

    def load_items(self, items: Iterable[InventoryItem]) -> None:
        """Replace the inventory wholesale, keeping equip state (used on load)."""
        self._items = []
        occupied: set[EquipmentSlot] = set()
        for item in items:
            get_equipment_template(item.template_name)
            if item.equipped and (item.equipment_slot is None or item.equipment_slot in occupied):
                item.equipped = False
                item.equipment_slot = None
            if item.equipped and item.equipment_slot is not None:
                occupied.add(item.equipment_slot)
            if not item.equipped:
                item.equipment_slot = None
            self._items.append(item)
        logger.info(
            "Inventory loaded",
            item_count=len(self._items),
            equipped_count=len(self.get_equipped_items()),
        )

    # -------------------------------------------------------------------------
    # Equipping
    # -------------------------------------------------------------------------

    def explain_equip_block(self, item_id: str) -> str | None:
        """Why an item cannot be equipped right now, or None if it can."""
        item = self.get_item(item_id)
        if item is None:
            return "Item not found"
        stats = self.current_stats(excluding=item.id)
        if stats is None:
            return None
        for stat, required in item.template.stat_requirements.items():
            have = stats.get(Stat(stat), 0)
            if have < required:
                return f"Requires {required} {Stat(stat).value.upper()} (you have {have})"
        return None

    def can_equip_item(self, item_id: str) -> bool:
        """Whether current stats, before this item's own bonuses, meet its requirements."""
        return self.explain_equip_block(item_id) is None

    def equip_item(self, item_id: str, slot: EquipmentSlot | str | None = None) -> bool:
        """Equip an item, vacating its slot and every conflicting slot.

        Args:
            item_id: Id of an item in this inventory.
            slot: Explicit target slot; must be one of the template's
                valid slots. Defaults to the first free valid slot.

        Returns:
            False, with nothing changed, when the item is unknown, the
            slot is invalid, or requirements are not met.
        """
        item = self.get_item(item_id)
        if item is None:
            logger.info("Cannot equip item: not found", item_id=item_id)
            return False

        reason = self.explain_equip_block(item_id)
        if reason is not None:
            logger.info("Cannot equip item: requirements not met", item=item.display_name, reason=reason)
            return False

        template = item.template
        if slot is not None:
            try:
                target = EquipmentSlot(slot)
            except ValueError:
                logger.info("Cannot equip item: unknown slot", item=item.display_name, slot=slot)
                return False
            if target not in template.valid_slots:
                logger.info(
                    "Cannot equip item: invalid slot",
                    item=item.display_name,
                    slot=target.value,
                    valid_slots=[s.value for s in template.valid_slots],
                )
                return False
        else:
            target = self._resolve_slot(item)

        if item.equipped:
            self._vacate(item)

        vacate = {target, *template.conflicts_with}
        for other in self.get_equipped_items():
            if other.equipment_slot in vacate or target in other.template.conflicts_with:
                logger.info(
                    "Unequipped conflicting item",
                    item=other.display_name,
                    slot=other.equipment_slot.value if other.equipment_slot else None,
                    displaced_by=item.display_name,
                )
                self._vacate(other)

        item.equipped = True
        item.equipment_slot = target
        logger.info(
            "Item equipped",
            item=item.display_name,
            slot=target.value,
            enchantment_level=item.enchantment_level,
        )
        return True

    def unequip_item(self, item_id: str) -> bool:
        item = self.get_item(item_id)
        if item is None or not item.equipped:
            logger.info("Cannot unequip item", item_id=item_id, found=item is not None)
            return False
        self._vacate(item)
        logger.info("Item unequipped", item=item.display_name)
        return True

    def _vacate(self, item: InventoryItem) -> None:
        item.equipped = False
        item.equipment_slot = None

    def _blockers(self, slot: EquipmentSlot, item: InventoryItem) -> list[InventoryItem]:
        return [
            other
            for other in self.get_equipped_items()
            if other.id != item.id and slot in other.template.conflicts_with
        ]

    def _resolve_slot(self, item: InventoryItem) -> EquipmentSlot:
        """Pick a default slot.

        Order: a free, unblocked valid slot; then a free slot whose blockers
        sit outside this item's valid slots; then the first valid slot.
        """
        valid = item.template.valid_slots
        free = [
            slot
            for slot in valid
            if (occupant := self.get_equipped_item_by_slot(slot)) is None or occupant.id == item.id
        ]
        for slot in free:
            if not self._blockers(slot, item):
                return slot
        for slot in free:
            if all(blocker.equipment_slot not in valid for blocker in self._blockers(slot, item)):
                return slot
        return valid[0]

    # -------------------------------------------------------------------------
    # Enchantment
    # -------------------------------------------------------------------------

    def modify_enchantment(self, item_id: str, change: int) -> bool:
        """Shift an item's enchantment level by ``change`` within the allowed range."""
        item = self.get_item(item_id)
        if item is None:
            logger.info("Cannot enchant item: not found", item_id=item_id)
            return False
        new_level = item.enchantment_level + change
        if new_level < self._min_enchantment:
            logger.info(
                f"Cannot enchant below {self._min_enchantment} (maximum curse)",
                item=item.display_name,
            )
            return False
        if new_level > self._max_enchantment:
            logger.info(
                f"Cannot enchant above +{self._max_enchantment} (maximum enchantment)",
                item=item.display_name,
            )
            return False
        return self._apply_enchantment(item, new_level)

    def set_enchantment(self, item_id: str, level: int) -> bool:
        """Set an item's enchantment level directly."""
        item = self.get_item(item_id)
        if item is None:
            logger.info("Cannot enchant item: not found", item_id=item_id)
            return False
        if not self._min_enchantment <= level <= self._max_enchantment:
            logger.info(
                "Enchantment level out of range",
                item=item.display_name,
                enchantment_level=level,
                min_level=self._min_enchantment,
                max_level=self._max_enchantment,
            )
            return False
        return self._apply_enchantment(item, level)

    def _apply_enchantment(self, item: InventoryItem, level: int) -> bool:
        old_level = item.enchantment_level
        item.enchantment_level = level
        logger.info(
            "Enchantment changed",
            item=item.display_name,
            old_level=old_level,
            new_level=level,
            is_equipped=item.equipped,
        )
        return True

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def get_equipped_stat_bonuses(self, *, excluding: str | None = None) -> dict[Stat, int]:
        """Sum of stat bonuses over equipped items, one entry per stat."""
        totals = {stat: 0 for stat in Stat}
        for item in self.get_equipped_items():
            if item.id == excluding:
                continue
            for stat, bonus in item.stat_bonuses().items():
                totals[stat] += bonus
        return totals

    def get_equipped_resource_bonuses(self) -> dict[ResourceType, int]:
        totals = {resource: 0 for resource in ResourceType}
        for item in self.get_equipped_items():
            for resource, bonus in item.resource_bonuses().items():
                totals[resource] += bonus
        return totals

    def get_equipped_ac_bonus(self) -> int:
        """AC from worn armor and shield, including their enchantment levels."""
        total = 0
        for item in self.get_equipped_items():
            if item.item_type in (ItemType.ARMOR, ItemType.SHIELD):
                total += item.template.base_ac_bonus + item.enchantment_level
        return total

    def get_inventory_summary(self) -> dict[str, Any]:
        by_type = Counter(item.item_type.value for item in self._items)
        return {
            "total": len(self._items),
            "equipped": len(self.get_equipped_items()),
            "by_type": {item_type.value: by_type.get(item_type.value, 0) for item_type in ItemType},
        }

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    def build_snapshot(self) -> EquipmentSnapshot:
        """Resolve the current equipment into the value a character consumes."""
        weapons = self.get_equipped_weapons()
        armor = self.get_equipped_item_by_slot(EquipmentSlot.ARMOR)
        shield = self.get_equipped_item_by_slot(EquipmentSlot.SHIELD)
        return EquipmentSnapshot(
            main_hand=_loadout(weapons.main_hand),
            off_hand=_loadout(weapons.off_hand),
            armor_type=(
                armor.template.armor_type or ArmorType.NONE if armor is not None else ArmorType.NONE
            ),
            has_shield=shield is not None,
            armor_class_bonus=self.get_equipped_ac_bonus(),
            stat_bonuses=self.get_equipped_stat_bonuses(),
            resource_bonuses=self.get_equipped_resource_bonuses(),
        )

    def sync_equipment_to_character(self, character: Character) -> EquipmentSnapshot:
        """Push resolved equipment onto a character.

        This is the only path by which inventory state reaches the
        character's derived stats.
        """
        snapshot = self.build_snapshot()
        character.apply_equipment(snapshot)
        logger.info(
            "Equipment synced to character",
            character=character.name,
            main_hand=snapshot.main_hand.name if snapshot.main_hand else None,
            off_hand=snapshot.off_hand.name if snapshot.off_hand else None,
            armor=snapshot.armor_type.value,
            shield=snapshot.has_shield,
        )
        return snapshot


def _loadout(item: InventoryItem | None) -> WeaponLoadout | None:
    if item is None:
        return None
    template = item.template
    if template.weapon_type is None or template.damage_die is None:
        return None
    return WeaponLoadout(
        item_id=item.id,
        name=item.display_name,
        weapon_type=template.weapon_type,
        governing_stat=template.governing_stat or Stat.STR,
        damage_die=template.damage_die,
        enchantment_level=item.enchantment_level,
        attack_bonus=template.base_attack_bonus,
    )


__all__ = [
    "InventoryItem",
    "create_inventory_item",
    "WeaponLoadout",
    "EquipmentSnapshot",
    "EquippedWeapons",
    "InventoryManager",
]
