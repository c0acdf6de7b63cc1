"""Character progression engine for a tabletop RPG.

Models a character's numbers: ability scores, level-up protocols,
threshold-anchored resource pools, equipment with slot conflicts and
enchantment scaling, and the combat rolls derived from all of it.

Example:
    >>> from char_engine import Character, CombatCalculator, create_inventory_item
    >>>
    >>> hero = Character.create(high="str", mid="dex", race="dwarf", name="Brom")
    >>> axe = create_inventory_item("Warhammer", enchantment_level=1)
    >>> hero.inventory.add_item(axe)
    >>> hero.inventory.equip_item(axe.id)
    >>> hero.sync_equipment_from_inventory()
    >>> CombatCalculator(hero).main_hand_attack().total

Modules:
    core: Configuration, logging, constants and base exceptions.
    engine: Dice engine and combat roll calculator.
    models: Catalog, inventory, ability ledger and the character itself.
"""

from __future__ import annotations

# Core
from char_engine.core.config import Settings, get_settings
from char_engine.core.exceptions import CharEngineError
from char_engine.core.logging import configure_logging, get_logger

# Engine
from char_engine.engine.dice import (
    DiceMode,
    get_dice_mode,
    roll_from_notation,
    roll_or_average,
    set_dice_mode,
)
from char_engine.engine.combat import CombatCalculator, RollBreakdown, RollTerm

# Models
from char_engine.models.enums import AbilityType, EquipmentSlot, ItemType, Race, Stat
from char_engine.models.inventory import InventoryItem, InventoryManager, create_inventory_item
from char_engine.models.abilities import AbilityLedger
from char_engine.models.record import CharacterRecord, verify_record_hash
from char_engine.models.character import Character


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "CharEngineError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Engine
    "DiceMode",
    "get_dice_mode",
    "set_dice_mode",
    "roll_from_notation",
    "roll_or_average",
    "CombatCalculator",
    "RollBreakdown",
    "RollTerm",
    # Models
    "AbilityType",
    "EquipmentSlot",
    "ItemType",
    "Race",
    "Stat",
    "InventoryItem",
    "InventoryManager",
    "create_inventory_item",
    "AbilityLedger",
    "CharacterRecord",
    "verify_record_hash",
    "Character",
]
