"""Static reference data: equipment templates, races and ability catalogs.

The engine only ever reads these tables. Inventory items point at an
equipment template by name; characters read racial bonuses once at
creation; the ability ledger validates names against the catalogs.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from char_engine.core.constants import (
    ARMOR_MODS,
    ARMOR_STR_REQ,
    MAX_ENCHANTMENT_LEVEL,
    SHIELD_AC,
    WEAPON_DIE,
    WEAPON_STAT,
)
from char_engine.core.exceptions import UnknownTemplateError
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


# =============================================================================
# Template Schemas
# =============================================================================


class StatModifier(BaseModel):
    """A stat bonus that scales linearly with enchantment.

    Bonus-type modifiers use the signed enchantment level, so a cursed
    item subtracts.
    """

    model_config = ConfigDict(frozen=True)

    stat: Stat
    base_value: int = 0
    per_enchantment: int = 0

    def value_at(self, enchantment: int, max_level: int) -> int:
        """Bonus contributed at the given enchantment level."""
        level = max(-max_level, min(enchantment, max_level))
        return self.base_value + self.per_enchantment * level


class ResourceModifier(BaseModel):
    """A resource-pool bonus that scales with enchantment.

    Negative enchantment is clamped to 0, so a curse never removes points
    below the base contribution.
    """

    model_config = ConfigDict(frozen=True)

    resource: ResourceType
    base_value: int = 0
    per_enchantment: int = 0

    def value_at(self, enchantment: int, max_level: int) -> int:
        """Bonus contributed at the given enchantment level."""
        level = max(0, min(enchantment, max_level))
        return self.base_value + self.per_enchantment * level


class EquipmentTemplate(BaseModel):
    """Immutable catalog entry an inventory item is instantiated from."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Unique template name")
    item_type: ItemType
    description: str = Field(default="")
    weapon_type: WeaponType | None = Field(default=None)
    armor_type: ArmorType | None = Field(default=None)

    valid_slots: tuple[EquipmentSlot, ...] = Field(description="Slots, default first")
    conflicts_with: tuple[EquipmentSlot, ...] = Field(default=())

    base_ac_bonus: int = Field(default=0)
    base_attack_bonus: int = Field(default=0)
    damage_die: int | None = Field(default=None, ge=1)

    stat_requirements: dict[Stat, int] = Field(default_factory=dict)
    stat_modifiers: tuple[StatModifier, ...] = Field(default=())
    resource_modifiers: tuple[ResourceModifier, ...] = Field(default=())
    max_enchantment_level: int = Field(default=MAX_ENCHANTMENT_LEVEL, ge=0)

    @property
    def default_slot(self) -> EquipmentSlot:
        return self.valid_slots[0]

    @property
    def governing_stat(self) -> Stat | None:
        """Ability score used for attack and damage, weapons only."""
        if self.weapon_type is None:
            return None
        return Stat(WEAPON_STAT[self.weapon_type])


class RacialBonus(BaseModel):
    """A fixed or caller-chosen ('any') stat bump granted by a race."""

    model_config = ConfigDict(frozen=True)

    stat: Stat | Literal["any"]
    plus: int


class RaceTemplate(BaseModel):
    """Racial ability and stat bonuses."""

    model_config = ConfigDict(frozen=True)

    race: Race
    ability: str
    ability_description: str = ""
    bonuses: tuple[RacialBonus, ...] = ()

    @property
    def any_bonus_count(self) -> int:
        return sum(1 for bonus in self.bonuses if bonus.stat == "any")


class AbilityTemplate(BaseModel):
    """A learnable ability."""

    model_config = ConfigDict(frozen=True)

    name: str
    ability_type: AbilityType
    description: str
    prerequisites: tuple[str, ...] = ()


# =============================================================================
# Equipment Templates
# =============================================================================

_TWO_HANDED_CONFLICTS = (EquipmentSlot.OFF_HAND, EquipmentSlot.SHIELD)
_EITHER_HAND = (EquipmentSlot.MAIN_HAND, EquipmentSlot.OFF_HAND)


def _weapon_description(weapon_type: WeaponType, valid_slots: tuple[EquipmentSlot, ...]) -> str:
    stat_names = {"str": "strength", "dex": "dexterity", "int": "intelligence"}
    handling = "one-handed" if EquipmentSlot.OFF_HAND in valid_slots else "two-handed"
    if weapon_type is WeaponType.RANGED:
        category = "ranged weapon"
    elif weapon_type is WeaponType.STAFF:
        category = "magical focus"
    else:
        category = "melee weapon"
    stat = stat_names[WEAPON_STAT[weapon_type]]
    return f"A {handling}, {stat}-based {category} that deals 1d{WEAPON_DIE[weapon_type]} damage"


def _weapon(name: str, weapon_type: WeaponType, *, two_handed: bool) -> EquipmentTemplate:
    valid_slots = (EquipmentSlot.MAIN_HAND,) if two_handed else _EITHER_HAND
    return EquipmentTemplate(
        name=name,
        item_type=ItemType.WEAPON,
        weapon_type=weapon_type,
        description=_weapon_description(weapon_type, valid_slots),
        valid_slots=valid_slots,
        conflicts_with=_TWO_HANDED_CONFLICTS if two_handed else (),
        damage_die=WEAPON_DIE[weapon_type],
    )


def _armor(name: str, armor_type: ArmorType) -> EquipmentTemplate:
    return EquipmentTemplate(
        name=name,
        item_type=ItemType.ARMOR,
        armor_type=armor_type,
        description=(
            f"{armor_type.value.capitalize()} armor that provides "
            f"+{ARMOR_MODS[armor_type]} AC"
        ),
        valid_slots=(EquipmentSlot.ARMOR,),
        base_ac_bonus=ARMOR_MODS[armor_type],
        stat_requirements={Stat.STR: ARMOR_STR_REQ[armor_type]},
    )


def _shield(name: str) -> EquipmentTemplate:
    return EquipmentTemplate(
        name=name,
        item_type=ItemType.SHIELD,
        description=f"A shield that provides +{SHIELD_AC} AC when equipped",
        valid_slots=(EquipmentSlot.SHIELD,),
        conflicts_with=(EquipmentSlot.OFF_HAND,),
        base_ac_bonus=SHIELD_AC,
    )


_TEMPLATES: tuple[EquipmentTemplate, ...] = (
    # Weapons
    _weapon("Greatsword", WeaponType.TWO_HAND, two_handed=True),
    _weapon("Halberd", WeaponType.POLEARM, two_handed=True),
    _weapon("Longbow", WeaponType.RANGED, two_handed=True),
    _weapon("Crossbow", WeaponType.RANGED, two_handed=True),
    _weapon("Staff", WeaponType.STAFF, two_handed=True),
    _weapon("Longsword", WeaponType.ONE_HAND, two_handed=False),
    _weapon("Warhammer", WeaponType.ONE_HAND, two_handed=False),
    _weapon("Rapier", WeaponType.FINESSE, two_handed=False),
    _weapon("Dagger", WeaponType.FINESSE, two_handed=False),
    # Armor
    _armor("Plate Armor", ArmorType.HEAVY),
    _armor("Splint Armor", ArmorType.HEAVY),
    _armor("Chain Mail", ArmorType.MEDIUM),
    _armor("Scale Mail", ArmorType.MEDIUM),
    _armor("Leather Armor", ArmorType.LIGHT),
    _armor("Studded Leather", ArmorType.LIGHT),
    # Shields
    _shield("Wooden Shield"),
    _shield("Metal Shield"),
    _shield("Tower Shield"),
    # Accessories
    EquipmentTemplate(
        name="Belt of Giant Strength",
        item_type=ItemType.ACCESSORY,
        description="Grants +2 STR, +1 more per enchantment level",
        valid_slots=(EquipmentSlot.WAIST,),
        stat_modifiers=(StatModifier(stat=Stat.STR, base_value=2, per_enchantment=1),),
    ),
    EquipmentTemplate(
        name="Gloves of Nimbleness",
        item_type=ItemType.ACCESSORY,
        description="Grants +2 DEX, +1 more per enchantment level",
        valid_slots=(EquipmentSlot.HANDS,),
        stat_modifiers=(StatModifier(stat=Stat.DEX, base_value=2, per_enchantment=1),),
    ),
    EquipmentTemplate(
        name="Circlet of Intellect",
        item_type=ItemType.ACCESSORY,
        description="Grants +2 INT, +1 more per enchantment level",
        valid_slots=(EquipmentSlot.HEAD,),
        stat_modifiers=(StatModifier(stat=Stat.INT, base_value=2, per_enchantment=1),),
    ),
    EquipmentTemplate(
        name="Amulet of the Arcane",
        item_type=ItemType.ACCESSORY,
        description="Grants 1 sorcery point, +1 per enchantment level",
        valid_slots=(EquipmentSlot.NECK,),
        resource_modifiers=(
            ResourceModifier(resource=ResourceType.SORCERY, base_value=1, per_enchantment=1),
        ),
    ),
    EquipmentTemplate(
        name="Ring of Precision",
        item_type=ItemType.ACCESSORY,
        description="Grants 1 finesse point, +1 per enchantment level",
        valid_slots=(EquipmentSlot.RING,),
        resource_modifiers=(
            ResourceModifier(resource=ResourceType.FINESSE, base_value=1, per_enchantment=1),
        ),
    ),
)

EQUIPMENT_TEMPLATES: dict[str, EquipmentTemplate] = {t.name: t for t in _TEMPLATES}
"""All equipment templates keyed by name."""


def get_equipment_template(name: str) -> EquipmentTemplate:
    """Look up an equipment template by name.

    Raises:
        UnknownTemplateError: If no template has that name.
    """
    try:
        return EQUIPMENT_TEMPLATES[name]
    except KeyError:
        raise UnknownTemplateError(
            f"Unknown equipment template: {name}",
            template_name=name,
        ) from None


def list_equipment_templates(item_type: ItemType | None = None) -> list[EquipmentTemplate]:
    """Templates in catalog order, optionally filtered by item type."""
    if item_type is None:
        return list(_TEMPLATES)
    return [t for t in _TEMPLATES if t.item_type == item_type]


# =============================================================================
# Races
# =============================================================================

RACES: dict[Race, RaceTemplate] = {
    Race.ELF: RaceTemplate(
        race=Race.ELF,
        ability="Treewalk",
        ability_description="Move through trees and foliage as easily as open ground",
        bonuses=(RacialBonus(stat=Stat.DEX, plus=2),),
    ),
    Race.GNOME: RaceTemplate(
        race=Race.GNOME,
        ability="Tinker",
        ability_description="Build and repair small mechanical devices",
        bonuses=(RacialBonus(stat=Stat.INT, plus=2),),
    ),
    Race.HUMAN: RaceTemplate(
        race=Race.HUMAN,
        ability="Contract",
        ability_description="Bind another party to a spoken agreement",
        bonuses=(RacialBonus(stat="any", plus=1), RacialBonus(stat="any", plus=1)),
    ),
    Race.DWARF: RaceTemplate(
        race=Race.DWARF,
        ability="Stonesense",
        ability_description="Sense the shape and history of worked stone",
        bonuses=(RacialBonus(stat=Stat.STR, plus=2),),
    ),
    Race.DRAGONBORN: RaceTemplate(
        race=Race.DRAGONBORN,
        ability="Flametongue",
        ability_description="Exhale a gout of flame",
        bonuses=(RacialBonus(stat="any", plus=2),),
    ),
    Race.HALFLING: RaceTemplate(
        race=Race.HALFLING,
        ability="Lucky",
        ability_description="Reroll a natural 1 once per rest",
        bonuses=(RacialBonus(stat=Stat.DEX, plus=1), RacialBonus(stat=Stat.INT, plus=1)),
    ),
}
"""Racial data keyed by race."""


# =============================================================================
# Ability Catalogs
# =============================================================================

METAMAGIC: dict[str, str] = {
    "Aura": "Area of effect is centered on you",
    "Cascade": "The spell overwhelms with rapid, repeated impacts",
    "Cloak": "Wreathe yourself in the spell's effects",
    "Distant": "Increase the range of the spell",
    "Empowered": "Increase spell damage or effect potency",
    "Glyph": "Inscribe a textual representation of the spell's effects",
    "Grasp": "Envelop, smother or secure the spell's powers",
    "Heighten": "Cast spell as if from a higher level",
    "Hypnotic": "Add a charm/mesmerizing effect to a spell",
    "Orb": "Shape spell into a floating orb that follows commands",
    "Orbit": "Create multiple smaller versions that circle the target",
    "Precise": "Spell automatically hits or has enhanced accuracy",
    "Quick": "Cast spell as a bonus action instead of full action",
    "Sculpt": "Shape or paint the area of effect precisely",
    "Subtle": "Cast without verbal or somatic components, provide nuance",
    "Twin": "Double, mirror or repeat",
    "Wall": "A barrier, a ledge or a fortress",
}

SPELLWORDS: dict[str, str] = {
    "Chill": "Freeze or slow targets, create ice effects",
    "Confound": "Confuse enemies, scramble thoughts or senses",
    "Counterspell": "Cancel or redirect enemy magic",
    "Deafen": "Remove hearing, create zones of silence",
    "Flametongue": "Create and control fire effects",
    "Growth": "Increase size of objects or creatures",
    "Heat": "Create warmth, melt ice, cause fever",
    "Illusion": "Create false images or sounds",
    "Light": "Illuminate areas, create blinding flashes",
    "Mend": "Repair objects, heal minor wounds",
    "Push/Pull": "Move objects or creatures with force",
    "Rain": "Control weather, create water effects",
    "Reflect": "Bounce attacks or spells back at attackers",
    "Shadow": "Manipulate darkness and shadows",
    "Shield": "Create protective barriers",
    "Soothe": "Calm emotions, reduce pain or fear",
    "Spark": "Create electricity, power devices",
    "Thread": "Bind or connect objects and creatures",
    "Vision": "See distant places, reveal hidden things",
}

COMBAT_MANEUVERS: dict[str, str] = {
    "Blinding": "Strike to temporarily blind opponent",
    "Cleave": "Hit multiple adjacent enemies with one attack",
    "Command": "Force enemy to follow a simple command",
    "Daring": "Gain advantage through risky maneuvers",
    "Disarming": "Remove weapon from enemy's grasp",
    "Enraged": "Enter fury state for increased damage",
    "Goading": "Force enemy to attack you instead of allies",
    "Grappling": "Grab and restrain an opponent",
    "Leaping": "Jump attack for extra damage and mobility",
    "Menace": "Intimidate enemies to reduce their effectiveness",
    "Precision": "Target weak points for extra damage",
    "Preparation": "Set up advantageous position for next attack",
    "Reckless": "All-out attack with increased risk and reward",
    "Riposte": "Counter-attack after successful defense",
    "Stampede": "Charge through multiple enemies",
    "Throw": "Hurl objects or enemies as weapons",
    "Trip": "Knock opponent prone",
}

ABILITY_CATALOGS: dict[AbilityType, dict[str, AbilityTemplate]] = {
    ability_type: {
        name: AbilityTemplate(name=name, ability_type=ability_type, description=description)
        for name, description in table.items()
    }
    for ability_type, table in (
        (AbilityType.METAMAGIC, METAMAGIC),
        (AbilityType.SPELLWORD, SPELLWORDS),
        (AbilityType.COMBAT_MANEUVER, COMBAT_MANEUVERS),
    )
}
"""Ability templates keyed by type, then name."""


def get_ability_catalog(ability_type: AbilityType) -> list[str]:
    """All ability names of one type, in catalog order."""
    return list(ABILITY_CATALOGS.get(ability_type, {}))


def get_ability_template(name: str, ability_type: AbilityType) -> AbilityTemplate | None:
    """Find an ability template, or None if the name is not in that catalog."""
    return ABILITY_CATALOGS.get(ability_type, {}).get(name)


__all__ = [
    "StatModifier",
    "ResourceModifier",
    "EquipmentTemplate",
    "RacialBonus",
    "RaceTemplate",
    "AbilityTemplate",
    "EQUIPMENT_TEMPLATES",
    "RACES",
    "METAMAGIC",
    "SPELLWORDS",
    "COMBAT_MANEUVERS",
    "ABILITY_CATALOGS",
    "get_equipment_template",
    "list_equipment_templates",
    "get_ability_catalog",
    "get_ability_template",
]
