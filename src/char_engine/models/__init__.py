"""Domain models for the character progression engine.

Submodules:
    enums: Stats, races, slots, item and ability types
    catalog: Read-only equipment, race and ability reference data
    inventory: Item instances, slot rules and equipment aggregation
    abilities: Learned-ability ledger
    record: Serialization record and integrity hash
    character: The progression engine itself
"""

from __future__ import annotations

from char_engine.models.enums import (
    AbilityType,
    ArmorType,
    EquipmentSlot,
    ItemType,
    Race,
    ResourceType,
    Stat,
    WeaponType,
)
from char_engine.models.catalog import (
    ABILITY_CATALOGS,
    EQUIPMENT_TEMPLATES,
    RACES,
    AbilityTemplate,
    EquipmentTemplate,
    RaceTemplate,
    ResourceModifier,
    StatModifier,
    get_ability_catalog,
    get_ability_template,
    get_equipment_template,
    list_equipment_templates,
)
from char_engine.models.inventory import (
    EquipmentSnapshot,
    EquippedWeapons,
    InventoryItem,
    InventoryManager,
    WeaponLoadout,
    create_inventory_item,
)
from char_engine.models.abilities import AbilityLedger, LearnedAbility
from char_engine.models.record import CharacterRecord, compute_hash, verify_record_hash
from char_engine.models.character import Character, ability_modifier


__all__ = [
    # Enums
    "AbilityType",
    "ArmorType",
    "EquipmentSlot",
    "ItemType",
    "Race",
    "ResourceType",
    "Stat",
    "WeaponType",
    # Catalog
    "ABILITY_CATALOGS",
    "EQUIPMENT_TEMPLATES",
    "RACES",
    "AbilityTemplate",
    "EquipmentTemplate",
    "RaceTemplate",
    "ResourceModifier",
    "StatModifier",
    "get_ability_catalog",
    "get_ability_template",
    "get_equipment_template",
    "list_equipment_templates",
    # Inventory
    "EquipmentSnapshot",
    "EquippedWeapons",
    "InventoryItem",
    "InventoryManager",
    "WeaponLoadout",
    "create_inventory_item",
    # Abilities
    "AbilityLedger",
    "LearnedAbility",
    # Records
    "CharacterRecord",
    "compute_hash",
    "verify_record_hash",
    # Character
    "Character",
    "ability_modifier",
]
