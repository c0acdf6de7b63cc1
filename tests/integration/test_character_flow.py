"""Integration tests for the character lifecycle.

Tests the complete flow: create, level up, equip, sync, roll, rest,
save and load.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from char_engine.engine.combat import CombatCalculator
from char_engine.models.character import Character
from char_engine.models.enums import AbilityType, EquipmentSlot, Race, ResourceType, Stat
from char_engine.models.inventory import InventoryItem
from char_engine.models.record import CharacterRecord, verify_record_hash


class TestRogueCampaign:
    """A dual-wielding elf rogue from creation to a reloaded save."""

    @pytest.fixture
    def quill(
        self,
        make_character: Callable[..., Character],
        add_item: Callable[..., InventoryItem],
    ) -> Character:
        """Level-3 elf rogue with a full kit, synced."""
        hero = make_character("dex", "str", race=Race.ELF, name="Quill")
        assert hero.get_base_stats() == {Stat.STR: 10, Stat.DEX: 18, Stat.INT: 6}

        assert hero.start_level_up()
        assert hero.allocate_point("str")
        assert hero.allocate_point("str")
        assert hero.level_up("dex")

        inventory = hero.inventory
        rapier = add_item(inventory, "Rapier")
        dagger = add_item(inventory, "Dagger")
        leather = add_item(inventory, "Studded Leather")
        ring = add_item(inventory, "Ring of Precision", enchantment_level=1)
        assert inventory.equip_item(rapier.id)
        assert inventory.equip_item(dagger.id, EquipmentSlot.OFF_HAND)
        assert inventory.equip_item(leather.id)
        assert inventory.equip_item(ring.id)
        hero.sync_equipment_from_inventory()
        return hero

    def test_progression(self, quill: Character) -> None:
        """Test level, stats and finesse after three levels."""
        assert quill.level == 3
        assert quill.get_base_stats() == {Stat.STR: 12, Stat.DEX: 20, Stat.INT: 6}
        assert quill.finesse_threshold_level == 1
        assert len(quill.hp_rolls) == 4
        assert quill.hp == sum(quill.hp_rolls)

    def test_equipment_applied(self, quill: Character) -> None:
        """Test the synced kit feeds AC and the finesse pool."""
        assert quill.ac() == 13 + 5 + 1
        assert quill.max_finesse_points == 2 + 2
        assert quill.finesse_points == 4
        assert quill.max_sorcery_points == 0
        assert quill.max_combat_maneuver_points == 0

    def test_combat_rolls(self, quill: Character) -> None:
        """Test average-mode attack, damage and hide totals."""
        calculator = CombatCalculator(quill)

        main_attack = calculator.main_hand_attack()
        off_attack = calculator.off_hand_attack()
        main_damage = calculator.main_hand_damage()
        off_damage = calculator.off_hand_damage()

        assert main_attack is not None and main_attack.total == 10 + 5 + 3
        assert off_attack is not None and off_attack.total == 10 + 5
        assert main_damage is not None and main_damage.total == 3 + 5
        assert off_damage is not None and off_damage.total == 3
        assert calculator.hide().total == 10 + 5 + 2 * 3

    def test_spend_and_rest(self, quill: Character) -> None:
        """Test spending finesse then recovering on a short rest."""
        assert quill.spend_finesse_point()
        assert quill.spend_finesse_point()
        assert quill.finesse_points == 2

        quill.short_rest()

        assert quill.finesse_points == 4

    def test_save_and_load(self, quill: Character) -> None:
        """Test a JSON round trip through storage keeps everything."""
        quill.spend_finesse_point()
        quill.add_note("Owes the fence 30 gold")
        quill.learn_ability("Daring", AbilityType.COMBAT_MANEUVER)

        stored = quill.to_record().model_dump_json()
        record = CharacterRecord.model_validate_json(stored)

        assert verify_record_hash(record)
        restored = Character.from_record(record)

        assert restored.get_base_stats() == quill.get_base_stats()
        assert restored.ac() == quill.ac()
        assert restored.finesse_points == 3
        assert restored.notes == ["Owes the fence 30 gold"]
        assert restored.ability_ledger.has_ability("Daring", AbilityType.COMBAT_MANEUVER)
        assert restored.inventory.get_inventory_summary()["equipped"] == 4
        restored_attack = CombatCalculator(restored).main_hand_attack()
        assert restored_attack is not None
        assert restored_attack.total == 18

    def test_unequip_after_load_caps_pool(self, quill: Character) -> None:
        """Test removing the ring after a reload shrinks the finesse pool."""
        restored = Character.from_record(quill.to_record())
        ring = next(
            item for item in restored.inventory.get_equipped_items() if item.template_name == "Ring of Precision"
        )

        assert restored.inventory.unequip_item(ring.id)
        restored.sync_equipment_from_inventory()

        assert restored.max_finesse_points == 2
        assert restored.finesse_points == 2


class TestCasterCampaign:
    """A gnome caster who doubles sorcery from the first level."""

    @pytest.fixture
    def mira(self, make_character: Callable[..., Character]) -> Character:
        """Level-2 gnome caster."""
        hero = make_character("int", "str", race="gnome", name="Mira")
        hero.start_level_up()
        hero.allocate_point("int")
        hero.allocate_point("int")
        return hero

    def test_sorcery_doubles(self, mira: Character) -> None:
        """Test INT 18 at creation anchors both sorcery thresholds."""
        assert mira.sorcery_threshold_level == 1
        assert mira.double_sorcery_threshold_level == 1
        assert mira.max_sorcery_points == 3 + 1 + 1
        assert mira.maneuvers("int") == 5

    def test_cursed_amulet_keeps_base(
        self,
        mira: Character,
        add_item: Callable[..., InventoryItem],
    ) -> None:
        """Test a cursed amulet still adds its base sorcery point."""
        amulet = add_item(mira.inventory, "Amulet of the Arcane", enchantment_level=-1)
        assert mira.inventory.equip_item(amulet.id)
        mira.sync_equipment_from_inventory()

        assert mira.max_sorcery_points == 6
        assert mira.get_current(ResourceType.SORCERY) == 6

    def test_heavy_armor_blocked(self, mira: Character, add_item: Callable[..., InventoryItem]) -> None:
        """Test a weak caster cannot wear plate."""
        plate = add_item(mira.inventory, "Plate Armor")

        assert mira.inventory.explain_equip_block(plate.id) == "Requires 16 STR (you have 10)"
        assert mira.inventory.equip_item(plate.id) is False

    def test_staff_attack(self, mira: Character, add_item: Callable[..., InventoryItem]) -> None:
        """Test a staff attacks with INT plus level."""
        staff = add_item(mira.inventory, "Staff")
        mira.inventory.equip_item(staff.id)
        mira.sync_equipment_from_inventory()

        attack = CombatCalculator(mira).main_hand_attack()

        assert attack is not None
        assert attack.total == 10 + 5 + 2

    def test_exhaust_and_long_rest(self, mira: Character) -> None:
        """Test spending every point then fully recovering."""
        spent = 0
        while mira.spend_sorcery_point():
            spent += 1

        assert spent == 5
        assert mira.sorcery_points == 0

        mira.long_rest()
        assert mira.sorcery_points == 5

    def test_update_subscribers(self, mira: Character) -> None:
        """Test subscribers hear explicit updates only."""
        updates: list[int] = []

        def record_level(character: Character) -> None:
            updates.append(character.level)

        mira.on(record_level)
        mira.level_up("int")
        assert updates == []

        mira.trigger_update()
        assert updates == [3]
