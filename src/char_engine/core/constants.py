"""Rules constants for the character progression engine.

Every number the progression, inventory and combat rules depend on lives
here. Tables are keyed by the plain string values of the enums in
``char_engine.models.enums`` so they can be read with either form.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

HIGH_STAT_BASE = 16
"""Starting value of the score chosen as 'high'."""

MID_STAT_BASE = 10
"""Starting value of the score chosen as 'mid'."""

LOW_STAT_BASE = 6
"""Starting value of the remaining score."""

MIN_STAT_VALUE = 0
"""Lowest value an overridden score may take."""

MAX_STAT_VALUE = 30
"""Highest value an overridden score may take."""

LEVEL_UP_STAT_INCREASE = 2
"""Points granted per level; a traditional level-up puts both in one score."""

# =============================================================================
# Resource Thresholds
# =============================================================================

MIN_SPELLCASTING_INT = 11
"""INT at which sorcery points are first unlocked (anchor threshold)."""

DOUBLE_SPELLCASTING_INT = 15
"""INT at which the double-sorcery tier is unlocked."""

BASE_SORCERY_POINTS = 3
"""Sorcery pool granted at the level the INT threshold is first crossed."""

MIN_FINESSE_DEX = 16
"""DEX at which finesse points are first unlocked."""

BASE_FINESSE_POINTS = 1
"""Finesse pool granted at the level the DEX threshold is first crossed."""

MIN_COMBAT_MANEUVER_STR = 16
"""STR required for combat maneuvers (checked fresh on every query)."""

# =============================================================================
# Hit Points
# =============================================================================

STARTING_HP = 10
"""Hit points every character starts with before the first roll."""

HIT_DICE_FROM_MOD: tuple[int, ...] = (4, 6, 8, 10, 12)
"""Hit die size indexed by STR modifier - 1; modifiers below 1 use d4."""

MIN_HP_GAIN = 1
"""A level never grants fewer hit points than this."""

# =============================================================================
# Armor Class
# =============================================================================

BASE_AC = 13
"""Armor class before DEX, armor, shield and enchantments."""

SHIELD_AC = 2
"""Flat AC granted by an equipped shield."""

ARMOR_MODS: dict[str, int] = {"heavy": 3, "medium": 2, "light": 1, "none": 0}
"""AC granted by each armor category."""

ARMOR_STR_REQ: dict[str, int] = {"heavy": 16, "medium": 14, "light": 12, "none": 0}
"""STR needed to equip each armor category."""

HIDE_LEVEL_FACTOR_NIMBLE = 2
"""Level multiplier on hide rolls for DEX >= 16 characters not in heavy armor."""

# =============================================================================
# Weapons
# =============================================================================

WEAPON_DIE: dict[str, int] = {
    "two-hand": 12,
    "polearm": 10,
    "one-hand": 8,
    "finesse": 6,
    "ranged": 6,
    "staff": 4,
}
"""Damage die size per weapon category."""

WEAPON_STAT: dict[str, str] = {
    "two-hand": "str",
    "polearm": "str",
    "one-hand": "str",
    "finesse": "dex",
    "ranged": "dex",
    "staff": "int",
}
"""Ability score governing attack and damage per weapon category."""

ATTACK_DIE = 20
"""Die rolled for attack and hide checks."""

SNEAK_ATTACK_DIE = 8
"""Die added per finesse point on sneak attacks and assassinations."""

# =============================================================================
# Enchantment
# =============================================================================

MIN_ENCHANTMENT_LEVEL = -3
"""Deepest curse an item can carry."""

MAX_ENCHANTMENT_LEVEL = 3
"""Strongest enchantment an item can carry."""


__all__ = [
    "HIGH_STAT_BASE",
    "MID_STAT_BASE",
    "LOW_STAT_BASE",
    "MIN_STAT_VALUE",
    "MAX_STAT_VALUE",
    "LEVEL_UP_STAT_INCREASE",
    "MIN_SPELLCASTING_INT",
    "DOUBLE_SPELLCASTING_INT",
    "BASE_SORCERY_POINTS",
    "MIN_FINESSE_DEX",
    "BASE_FINESSE_POINTS",
    "MIN_COMBAT_MANEUVER_STR",
    "STARTING_HP",
    "HIT_DICE_FROM_MOD",
    "MIN_HP_GAIN",
    "BASE_AC",
    "SHIELD_AC",
    "ARMOR_MODS",
    "ARMOR_STR_REQ",
    "HIDE_LEVEL_FACTOR_NIMBLE",
    "WEAPON_DIE",
    "WEAPON_STAT",
    "ATTACK_DIE",
    "SNEAK_ATTACK_DIE",
    "MIN_ENCHANTMENT_LEVEL",
    "MAX_ENCHANTMENT_LEVEL",
]
