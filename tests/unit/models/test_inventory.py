"""Tests for the inventory and equipment manager."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from char_engine.core.exceptions import UnknownTemplateError
from char_engine.models.enums import ArmorType, EquipmentSlot, ItemType, ResourceType, Stat
from char_engine.models.inventory import (
    InventoryItem,
    InventoryManager,
    create_inventory_item,
)


AddItem = Callable[..., InventoryItem]


class TestAddRemove:
    """Tests for adding and removing items."""

    def test_added_items_start_unequipped(self, inventory: InventoryManager) -> None:
        """Test add_item clears any equip state on the incoming item."""
        item = InventoryItem(
            template_name="Longsword",
            equipped=True,
            equipment_slot=EquipmentSlot.MAIN_HAND,
        )

        assert inventory.add_item(item) is True
        assert item.equipped is False
        assert item.equipment_slot is None
        assert inventory.get_equipped_items() == []

    def test_unknown_template_rejected(self, inventory: InventoryManager) -> None:
        """Test an unknown template is a hard failure."""
        with pytest.raises(UnknownTemplateError) as exc_info:
            inventory.add_item(InventoryItem(template_name="Vorpal Spoon"))

        assert exc_info.value.details["template_name"] == "Vorpal Spoon"
        assert len(inventory) == 0

    def test_create_unknown_template_rejected(self) -> None:
        """Test the factory validates the template too."""
        with pytest.raises(UnknownTemplateError):
            create_inventory_item("Vorpal Spoon")

    def test_duplicate_id_rejected(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test the same item cannot be added twice."""
        item = add_item(inventory, "Dagger")

        assert inventory.add_item(item) is False
        assert len(inventory) == 1

    def test_capacity(self, add_item: AddItem) -> None:
        """Test a full inventory rejects new items."""
        inventory = InventoryManager(max_items=1)
        add_item(inventory, "Dagger")

        assert inventory.add_item(create_inventory_item("Rapier")) is False

    def test_capacity_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test capacity defaults to the configured value."""
        monkeypatch.setenv("CHAR_ENGINE_INVENTORY_MAX_ITEMS", "2")

        inventory = InventoryManager()
        results = [inventory.add_item(create_inventory_item("Dagger")) for _ in range(3)]

        assert results == [True, True, False]

    def test_remove_unequips(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test removing an equipped item frees its slot."""
        sword = add_item(inventory, "Longsword")
        inventory.equip_item(sword.id)

        assert inventory.remove_item(sword.id) is True
        assert sword.equipped is False
        assert inventory.get_equipped_item_by_slot(EquipmentSlot.MAIN_HAND) is None
        assert inventory.remove_item(sword.id) is False

    def test_items_by_type(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test filtering by item type."""
        add_item(inventory, "Dagger")
        add_item(inventory, "Chain Mail")
        add_item(inventory, "Rapier")

        weapons = inventory.get_items_by_type(ItemType.WEAPON)

        assert [item.template_name for item in weapons] == ["Dagger", "Rapier"]


class TestSlotRules:
    """Tests for slot occupancy and conflicts."""

    def test_default_slot(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test a one-handed weapon goes to the main hand first."""
        sword = add_item(inventory, "Longsword")

        assert inventory.equip_item(sword.id) is True
        assert sword.equipment_slot is EquipmentSlot.MAIN_HAND

    def test_second_weapon_goes_off_hand(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test the next free valid slot is used."""
        sword = add_item(inventory, "Longsword")
        dagger = add_item(inventory, "Dagger")
        inventory.equip_item(sword.id)
        inventory.equip_item(dagger.id)

        weapons = inventory.get_equipped_weapons()
        assert weapons.main_hand is sword
        assert weapons.off_hand is dagger

    def test_unknown_slot_rejected(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test an unrecognized slot name fails without raising or changing anything."""
        sword = add_item(inventory, "Longsword")

        assert inventory.equip_item(sword.id, "tail") is False
        assert sword.equipped is False
        assert inventory.get_equipped_items() == []

    def test_occupied_slot_is_replaced(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test equipping into an occupied slot unequips the occupant."""
        first = add_item(inventory, "Chain Mail")
        second = add_item(inventory, "Leather Armor")
        inventory.equip_item(first.id)
        inventory.equip_item(second.id)

        assert first.equipped is False
        assert inventory.get_equipped_item_by_slot(EquipmentSlot.ARMOR) is second

    def test_two_handed_vacates_off_hand(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test a two-handed weapon leaves the off-hand empty."""
        sword = add_item(inventory, "Longsword")
        dagger = add_item(inventory, "Dagger")
        greatsword = add_item(inventory, "Greatsword")
        inventory.equip_item(sword.id)
        inventory.equip_item(dagger.id)

        assert inventory.equip_item(greatsword.id) is True

        assert inventory.get_equipped_item_by_slot(EquipmentSlot.OFF_HAND) is None
        assert inventory.get_equipped_items() == [greatsword]

    def test_two_handed_vacates_shield(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test a two-handed weapon removes a shield."""
        shield = add_item(inventory, "Wooden Shield")
        bow = add_item(inventory, "Longbow")
        inventory.equip_item(shield.id)
        inventory.equip_item(bow.id)

        assert shield.equipped is False
        assert bow.equipment_slot is EquipmentSlot.MAIN_HAND

    def test_shield_displaces_two_handed(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test conflicts apply in both directions."""
        greatsword = add_item(inventory, "Greatsword")
        shield = add_item(inventory, "Metal Shield")
        inventory.equip_item(greatsword.id)
        inventory.equip_item(shield.id)

        assert greatsword.equipped is False
        assert shield.equipment_slot is EquipmentSlot.SHIELD

    def test_shield_displaces_off_hand_weapon(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test a shield vacates the off hand but keeps the main hand."""
        sword = add_item(inventory, "Longsword")
        dagger = add_item(inventory, "Dagger")
        shield = add_item(inventory, "Tower Shield")
        for item in (sword, dagger, shield):
            inventory.equip_item(item.id)

        assert sword.equipment_slot is EquipmentSlot.MAIN_HAND
        assert dagger.equipped is False
        assert shield.equipped is True

    def test_off_hand_weapon_displaces_shield(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test a second weapon swaps out the shield rather than the main hand."""
        sword = add_item(inventory, "Longsword")
        shield = add_item(inventory, "Wooden Shield")
        dagger = add_item(inventory, "Dagger")
        for item in (sword, shield, dagger):
            inventory.equip_item(item.id)

        assert sword.equipment_slot is EquipmentSlot.MAIN_HAND
        assert dagger.equipment_slot is EquipmentSlot.OFF_HAND
        assert shield.equipped is False

    def test_one_hander_replaces_two_hander_in_main(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test a one-handed weapon takes the main hand from a two-hander."""
        greatsword = add_item(inventory, "Greatsword")
        sword = add_item(inventory, "Longsword")
        inventory.equip_item(greatsword.id)
        inventory.equip_item(sword.id)

        assert greatsword.equipped is False
        assert sword.equipment_slot is EquipmentSlot.MAIN_HAND

    def test_invalid_explicit_slot(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test an explicit slot outside the valid list fails without change."""
        greatsword = add_item(inventory, "Greatsword")

        assert inventory.equip_item(greatsword.id, EquipmentSlot.OFF_HAND) is False
        assert greatsword.equipped is False

    def test_explicit_off_hand(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test an explicit valid slot is honoured."""
        dagger = add_item(inventory, "Dagger")

        assert inventory.equip_item(dagger.id, "off-hand") is True
        assert dagger.equipment_slot is EquipmentSlot.OFF_HAND

    def test_moving_between_hands(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test re-equipping an item moves it."""
        dagger = add_item(inventory, "Dagger")
        inventory.equip_item(dagger.id)
        inventory.equip_item(dagger.id, EquipmentSlot.OFF_HAND)

        assert inventory.get_equipped_item_by_slot(EquipmentSlot.MAIN_HAND) is None
        assert dagger.equipment_slot is EquipmentSlot.OFF_HAND

    def test_unequip(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test unequipping frees the slot."""
        ring = add_item(inventory, "Ring of Precision")
        inventory.equip_item(ring.id)

        assert inventory.unequip_item(ring.id) is True
        assert inventory.unequip_item(ring.id) is False
        assert inventory.get_equipped_items() == []

    def test_unknown_item(self, inventory: InventoryManager) -> None:
        """Test operations on unknown ids fail softly."""
        assert inventory.equip_item("missing") is False
        assert inventory.unequip_item("missing") is False
        assert inventory.can_equip_item("missing") is False


class TestRequirements:
    """Tests for stat requirements."""

    def test_no_stats_means_no_block(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test requirements are not enforced without character stats."""
        plate = add_item(inventory, "Plate Armor")

        assert inventory.can_equip_item(plate.id) is True

    def test_requirement_not_met(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test equipping fails and explains why."""
        inventory.set_character_stats({Stat.STR: 6, Stat.DEX: 16, Stat.INT: 10})
        plate = add_item(inventory, "Plate Armor")

        assert inventory.can_equip_item(plate.id) is False
        assert inventory.explain_equip_block(plate.id) == "Requires 16 STR (you have 6)"
        assert inventory.equip_item(plate.id) is False
        assert plate.equipped is False

    def test_requirement_met(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test equipping succeeds at the threshold."""
        inventory.set_character_stats({"str": 14, "dex": 10, "int": 6})
        mail = add_item(inventory, "Chain Mail")

        assert inventory.explain_equip_block(mail.id) is None
        assert inventory.equip_item(mail.id) is True

    def test_other_items_count(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test bonuses from other equipped items help meet a requirement."""
        inventory.set_character_stats({Stat.STR: 14, Stat.DEX: 10, Stat.INT: 6})
        belt = add_item(inventory, "Belt of Giant Strength")
        plate = add_item(inventory, "Plate Armor")

        assert inventory.can_equip_item(plate.id) is False
        inventory.equip_item(belt.id)
        assert inventory.can_equip_item(plate.id) is True

    def test_own_bonus_excluded(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test an item's own bonus does not count toward its requirement."""
        inventory.set_character_stats({Stat.STR: 13, Stat.DEX: 10, Stat.INT: 6})
        belt = add_item(inventory, "Belt of Giant Strength", custom_stat_bonuses={Stat.STR: 0})
        inventory.equip_item(belt.id)

        assert inventory.current_stats(excluding=belt.id) == {Stat.STR: 13, Stat.DEX: 10, Stat.INT: 6}
        assert inventory.current_stats() == {Stat.STR: 15, Stat.DEX: 10, Stat.INT: 6}


class TestEnchantment:
    """Tests for enchantment changes and scaling."""

    def test_modify_within_range(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test enchantment can climb to +3 and no further."""
        sword = add_item(inventory, "Longsword")

        assert [inventory.modify_enchantment(sword.id, 1) for _ in range(4)] == [True, True, True, False]
        assert sword.enchantment_level == 3

    def test_modify_below_curse_floor(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test enchantment cannot fall below -3."""
        sword = add_item(inventory, "Longsword", enchantment_level=-3)

        assert inventory.modify_enchantment(sword.id, -1) is False
        assert sword.enchantment_level == -3

    @pytest.mark.parametrize(("level", "accepted"), [(-3, True), (0, True), (3, True), (4, False), (-4, False)])
    def test_set_enchantment(
        self,
        inventory: InventoryManager,
        add_item: AddItem,
        level: int,
        accepted: bool,
    ) -> None:
        """Test set_enchantment enforces the configured range."""
        sword = add_item(inventory, "Longsword")

        assert inventory.set_enchantment(sword.id, level) is accepted
        assert sword.enchantment_level == (level if accepted else 0)

    @pytest.mark.parametrize(("level", "bonus"), [(0, 2), (1, 3), (3, 5), (-2, 0), (-3, -1)])
    def test_stat_bonus_uses_signed_level(
        self,
        inventory: InventoryManager,
        add_item: AddItem,
        level: int,
        bonus: int,
    ) -> None:
        """Test stat modifiers scale linearly with signed enchantment."""
        belt = add_item(inventory, "Belt of Giant Strength", enchantment_level=level)
        inventory.equip_item(belt.id)

        assert inventory.get_equipped_stat_bonuses()[Stat.STR] == bonus

    @pytest.mark.parametrize(("level", "bonus"), [(0, 1), (2, 3), (-1, 1), (-3, 1)])
    def test_resource_bonus_floors_at_base(
        self,
        inventory: InventoryManager,
        add_item: AddItem,
        level: int,
        bonus: int,
    ) -> None:
        """Test cursed resource items never drop below their base contribution."""
        amulet = add_item(inventory, "Amulet of the Arcane", enchantment_level=level)
        inventory.equip_item(amulet.id)

        assert inventory.get_equipped_resource_bonuses()[ResourceType.SORCERY] == bonus

    def test_unequipped_items_contribute_nothing(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test only equipped items are aggregated."""
        add_item(inventory, "Gloves of Nimbleness", enchantment_level=2)

        assert inventory.get_equipped_stat_bonuses() == {Stat.STR: 0, Stat.DEX: 0, Stat.INT: 0}

    def test_custom_bonuses(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test per-item overrides stack with template modifiers."""
        circlet = add_item(
            inventory,
            "Circlet of Intellect",
            custom_stat_bonuses={Stat.DEX: 1},
            custom_resource_bonuses={ResourceType.FINESSE: 2},
        )
        inventory.equip_item(circlet.id)

        assert inventory.get_equipped_stat_bonuses() == {Stat.STR: 0, Stat.DEX: 1, Stat.INT: 2}
        assert inventory.get_equipped_resource_bonuses()[ResourceType.FINESSE] == 2


class TestAggregates:
    """Tests for AC, summaries and snapshots."""

    def test_ac_bonus(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test armor and shield AC include their enchantments."""
        mail = add_item(inventory, "Chain Mail", enchantment_level=1)
        shield = add_item(inventory, "Wooden Shield")
        inventory.equip_item(mail.id)
        inventory.equip_item(shield.id)

        assert inventory.get_equipped_ac_bonus() == 2 + 1 + 2

    def test_weapon_enchantment_not_ac(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test weapon enchantments do not add AC."""
        sword = add_item(inventory, "Longsword", enchantment_level=3)
        inventory.equip_item(sword.id)

        assert inventory.get_equipped_ac_bonus() == 0

    def test_summary(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test the inventory summary counts."""
        sword = add_item(inventory, "Longsword")
        add_item(inventory, "Leather Armor")
        add_item(inventory, "Dagger")
        inventory.equip_item(sword.id)

        summary = inventory.get_inventory_summary()

        assert summary["total"] == 3
        assert summary["equipped"] == 1
        assert summary["by_type"]["weapon"] == 2
        assert summary["by_type"]["armor"] == 1
        assert summary["by_type"]["shield"] == 0

    def test_snapshot(self, inventory: InventoryManager, add_item: AddItem) -> None:
        """Test the snapshot resolves weapons, armor and bonuses."""
        sword = add_item(inventory, "Longsword", enchantment_level=2)
        rapier = add_item(inventory, "Rapier")
        armor = add_item(inventory, "Splint Armor")
        belt = add_item(inventory, "Belt of Giant Strength")
        for item in (sword, rapier, armor, belt):
            inventory.equip_item(item.id)

        snapshot = inventory.build_snapshot()

        assert snapshot.main_hand is not None
        assert snapshot.main_hand.name == "Longsword"
        assert snapshot.main_hand.damage_die == 8
        assert snapshot.main_hand.governing_stat is Stat.STR
        assert snapshot.main_hand.enchantment_level == 2
        assert snapshot.off_hand is not None
        assert snapshot.off_hand.governing_stat is Stat.DEX
        assert snapshot.armor_type is ArmorType.HEAVY
        assert snapshot.has_shield is False
        assert snapshot.armor_class_bonus == 3
        assert snapshot.stat_bonuses[Stat.STR] == 2

    def test_empty_snapshot(self, inventory: InventoryManager) -> None:
        """Test an empty inventory resolves to no equipment."""
        snapshot = inventory.build_snapshot()

        assert snapshot.main_hand is None
        assert snapshot.off_hand is None
        assert snapshot.armor_type is ArmorType.NONE
        assert snapshot.armor_class_bonus == 0
