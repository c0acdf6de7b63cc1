"""Enumeration types shared by the character, inventory and combat models."""

from __future__ import annotations

from enum import StrEnum


class Stat(StrEnum):
    """The three ability scores."""

    STR = "str"
    DEX = "dex"
    INT = "int"


class Race(StrEnum):
    """Playable races."""

    ELF = "elf"
    GNOME = "gnome"
    HUMAN = "human"
    DWARF = "dwarf"
    DRAGONBORN = "dragonborn"
    HALFLING = "halfling"


class ItemType(StrEnum):
    """Equipment template categories."""

    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"
    ACCESSORY = "accessory"


class WeaponType(StrEnum):
    """Weapon categories; each maps to a damage die and governing stat."""

    TWO_HAND = "two-hand"
    POLEARM = "polearm"
    ONE_HAND = "one-hand"
    FINESSE = "finesse"
    RANGED = "ranged"
    STAFF = "staff"


class ArmorType(StrEnum):
    """Armor weight classes."""

    HEAVY = "heavy"
    MEDIUM = "medium"
    LIGHT = "light"
    NONE = "none"


class EquipmentSlot(StrEnum):
    """Slots an equipped item can occupy. One item per slot."""

    MAIN_HAND = "main-hand"
    OFF_HAND = "off-hand"
    SHIELD = "shield"
    ARMOR = "armor"
    HEAD = "head"
    NECK = "neck"
    HANDS = "hands"
    WAIST = "waist"
    RING = "ring"


class ResourceType(StrEnum):
    """Point pools tracked by the progression engine."""

    SORCERY = "sorcery"
    FINESSE = "finesse"
    COMBAT = "combat"


class AbilityType(StrEnum):
    """Learnable ability catalogs."""

    METAMAGIC = "metamagic"
    SPELLWORD = "spellword"
    COMBAT_MANEUVER = "combat_maneuver"


__all__ = [
    "Stat",
    "Race",
    "ItemType",
    "WeaponType",
    "ArmorType",
    "EquipmentSlot",
    "ResourceType",
    "AbilityType",
]
