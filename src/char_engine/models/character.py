"""Character progression engine.

A Character owns its ability scores, level, hit points and resource pools,
and implements the two level-up protocols:

* Traditional: ``level_up(stat)`` puts both points into one score and
  finalizes the level immediately.
* Split: ``start_level_up()`` opens the level with two pending points;
  each ``allocate_point(stat)`` spends one, and the level is finalized
  once the second point lands.

Finalizing a level runs the resource recomputation exactly once. Sorcery
and finesse are non-retroactive: each remembers the level at which its
qualifying score first crossed the threshold (the anchor) and accrues per
level after it, even if the score later drops. Combat maneuvers are
retroactive and read the current STR every time.

Equipment reaches the character only through ``apply_equipment``, which
the inventory calls from ``sync_equipment_to_character``.

Example:
    >>> hero = Character.create(high="int", mid="str", name="Mira")
    >>> hero.start_level_up()
    True
    >>> hero.allocate_point("int")
    True
    >>> hero.allocate_point("int")
    True
    >>> hero.max_sorcery_points
    5
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

from char_engine.core.constants import (
    BASE_AC,
    BASE_FINESSE_POINTS,
    BASE_SORCERY_POINTS,
    DOUBLE_SPELLCASTING_INT,
    HIGH_STAT_BASE,
    HIT_DICE_FROM_MOD,
    LEVEL_UP_STAT_INCREASE,
    LOW_STAT_BASE,
    MAX_STAT_VALUE,
    MID_STAT_BASE,
    MIN_COMBAT_MANEUVER_STR,
    MIN_FINESSE_DEX,
    MIN_HP_GAIN,
    MIN_SPELLCASTING_INT,
    MIN_STAT_VALUE,
    STARTING_HP,
)
from char_engine.core.exceptions import ValidationError
from char_engine.core.logging import get_logger
from char_engine.engine.dice import get_dice_mode, roll_or_average
from char_engine.models.abilities import AbilityLedger
from char_engine.models.catalog import EQUIPMENT_TEMPLATES, RACES
from char_engine.models.enums import AbilityType, Race, ResourceType, Stat
from char_engine.models.inventory import EquipmentSnapshot, InventoryItem, InventoryManager
from char_engine.models.record import CharacterRecord, LevelUpEntry, compute_hash


logger = get_logger(__name__)

UpdateHandler = Callable[["Character"], None]


# =============================================================================
# Helpers
# =============================================================================


def ability_modifier(score: int) -> int:
    """Ability modifier: ``floor((score - 10) / 2)``."""
    return (score - 10) // 2


def clamp_stat(value: int) -> int:
    return max(MIN_STAT_VALUE, min(value, MAX_STAT_VALUE))


def parse_stat(value: Stat | str, *, field_name: str = "stat") -> Stat:
    """Coerce a stat name, rejecting anything unrecognized.

    Raises:
        ValidationError: If the value is not one of str/dex/int.
    """
    try:
        return Stat(value)
    except ValueError:
        raise ValidationError(
            f"Unknown stat: {value!r}",
            field_name=field_name,
            invalid_value=value,
        ) from None


def parse_resource(value: ResourceType | str) -> ResourceType:
    """Coerce a resource pool name (sorcery, finesse, combat).

    Raises:
        ValidationError: If the value names no pool.
    """
    try:
        return ResourceType(value)
    except ValueError:
        raise ValidationError(
            f"Unknown resource: {value!r}",
            field_name="resource",
            invalid_value=value,
        ) from None


def hit_die_for(str_mod: int) -> int:
    """Hit die size for a (non-negative) STR modifier."""
    if str_mod < 1:
        return HIT_DICE_FROM_MOD[0]
    return HIT_DICE_FROM_MOD[min(str_mod, len(HIT_DICE_FROM_MOD)) - 1]


def finesse_levels_after(anchor: int, level: int) -> int:
    """Number of odd levels in ``(anchor, level]``."""
    if level <= anchor:
        return 0
    return (level + 1) // 2 - (anchor + 1) // 2


# =============================================================================
# Character
# =============================================================================


class Character:
    """Aggregate root of the progression engine.

    Use ``Character.create`` for a fresh level-1 character and
    ``Character.from_record`` to restore a saved one.
    """

    def __init__(
        self,
        *,
        name: str = "",
        stats: Mapping[Stat, int],
        high: Stat,
        mid: Stat,
        race: Race | None = None,
        racial_choices: Sequence[Stat] = (),
        abilities: Iterable[str] = (),
        level: int = 1,
        hp: int = STARTING_HP,
        hp_rolls: Iterable[int] = (STARTING_HP,),
        inventory: InventoryManager | None = None,
        ability_ledger: AbilityLedger | None = None,
    ) -> None:
        self.name = name
        self.high = high
        self.mid = mid
        self.race = race
        self.racial_choices: tuple[Stat, ...] = tuple(racial_choices)
        self.abilities: list[str] = list(abilities)
        self.level = level
        self.hp = hp
        self.hp_rolls: list[int] = list(hp_rolls)
        self.content_hash = ""
        self.notes: list[str] = []

        self._stats: dict[Stat, int] = {stat: stats.get(stat, LOW_STAT_BASE) for stat in Stat}
        self.pending_level_up_points = 0
        self.level_up_history: list[LevelUpEntry] = []

        self.sorcery_threshold_level: int | None = None
        self.double_sorcery_threshold_level: int | None = None
        self.finesse_threshold_level: int | None = None

        self._use_stat_overrides = False
        self._stat_overrides: dict[Stat, int] = {stat: 0 for stat in Stat}

        self._equipment = EquipmentSnapshot()
        self._current: dict[ResourceType, int] = {resource: 0 for resource in ResourceType}
        self._known_max: dict[ResourceType, int] = {resource: 0 for resource in ResourceType}
        self._handlers: list[UpdateHandler] = []

        self.inventory = inventory if inventory is not None else InventoryManager()
        self.ability_ledger = ability_ledger if ability_ledger is not None else AbilityLedger()
        self._push_stats_to_inventory()

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        high: Stat | str,
        mid: Stat | str,
        *,
        race: Race | str | None = None,
        racial_choices: Sequence[Stat | str] = (),
        name: str = "",
    ) -> Character:
        """Create a level-1 character.

        Args:
            high: Score that starts at 16.
            mid: Score that starts at 10; the remaining one starts at 6.
            race: Optional race whose bonuses are applied once.
            racial_choices: Stats receiving the race's "any" bonuses, in order.
            name: Character name (may be empty).

        Returns:
            A finalized level-1 character with its first HP roll applied.

        Raises:
            ValidationError: On unknown stats or race, ``high == mid``, or
                a racial choice count that does not match the race.
        """
        high_stat = parse_stat(high, field_name="high")
        mid_stat = parse_stat(mid, field_name="mid")
        if high_stat == mid_stat:
            raise ValidationError(
                "High and mid stats must differ",
                field_name="mid",
                invalid_value=mid_stat.value,
            )
        (low_stat,) = (stat for stat in Stat if stat not in (high_stat, mid_stat))
        stats = {high_stat: HIGH_STAT_BASE, mid_stat: MID_STAT_BASE, low_stat: LOW_STAT_BASE}

        choices = tuple(parse_stat(choice, field_name="racial_choices") for choice in racial_choices)
        abilities: list[str] = []
        race_value: Race | None = None
        if race is not None:
            try:
                race_value = Race(race)
            except ValueError:
                raise ValidationError(f"Unknown race: {race!r}", field_name="race", invalid_value=race) from None
            template = RACES[race_value]
            if len(choices) != template.any_bonus_count:
                raise ValidationError(
                    f"{race_value.value} needs {template.any_bonus_count} racial stat choice(s)",
                    field_name="racial_choices",
                    invalid_value=[c.value for c in choices],
                )
            pending_choices = iter(choices)
            for bonus in template.bonuses:
                stat = next(pending_choices) if bonus.stat == "any" else Stat(bonus.stat)
                stats[stat] += bonus.plus
            abilities.append(template.ability)
        elif choices:
            raise ValidationError(
                "Racial choices given without a race",
                field_name="racial_choices",
                invalid_value=[c.value for c in choices],
            )

        character = cls(
            name=name,
            stats=stats,
            high=high_stat,
            mid=mid_stat,
            race=race_value,
            racial_choices=choices,
            abilities=abilities,
        )
        logger.info(
            "Character created",
            name=name,
            high=high_stat.value,
            mid=mid_stat.value,
            race=race_value.value if race_value else None,
            stats={stat.value: value for stat, value in character._stats.items()},
        )
        character._finalize_level()
        return character

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    @property
    def low(self) -> Stat:
        (low_stat,) = (stat for stat in Stat if stat not in (self.high, self.mid))
        return low_stat

    def get_base_stats(self) -> dict[Stat, int]:
        """Scores after racial bonuses and level-ups, before equipment."""
        return dict(self._stats)

    def get_computed_stats(self) -> dict[Stat, int]:
        """Scores plus synced equipment bonuses, ignoring overrides.

        Threshold anchors are always evaluated against these values.
        """
        bonuses = self._equipment.stat_bonuses
        return {stat: value + bonuses.get(stat, 0) for stat, value in self._stats.items()}

    def get_effective_stats(self) -> dict[Stat, int]:
        """Scores used for display, combat, AC, HP and combat maneuvers."""
        computed = self.get_computed_stats()
        if not self._use_stat_overrides:
            return computed
        return {
            stat: clamp_stat(value + self._stat_overrides[stat]) for stat, value in computed.items()
        }

    def modifier(self, stat: Stat | str) -> int:
        return ability_modifier(self.get_effective_stats()[parse_stat(stat)])

    # -------------------------------------------------------------------------
    # Stat overrides
    # -------------------------------------------------------------------------

    def toggle_stat_overrides(self) -> bool:
        """Flip override mode. Returns the new state."""
        self._use_stat_overrides = not self._use_stat_overrides
        logger.info("Stat overrides toggled", name=self.name, enabled=self._use_stat_overrides)
        self._push_stats_to_inventory()
        self._refresh_resource_pools()
        return self._use_stat_overrides

    def is_using_stat_overrides(self) -> bool:
        return self._use_stat_overrides

    def set_stat_override(self, stat: Stat | str, delta: int) -> int:
        """Store an override delta, clamped so the score stays within 0..30.

        Ignored while override mode is off.

        Returns:
            The delta now stored for the stat.
        """
        stat = parse_stat(stat)
        if not self._use_stat_overrides:
            logger.info("Stat override ignored: overrides disabled", name=self.name, stat=stat.value, requested=delta)
            return self._stat_overrides[stat]
        base = self._stats[stat]
        stored = clamp_stat(base + delta) - base
        self._stat_overrides[stat] = stored
        logger.info("Stat override set", name=self.name, stat=stat.value, requested=delta, stored=stored)
        self._push_stats_to_inventory()
        self._refresh_resource_pools()
        return stored

    def get_stat_override(self, stat: Stat | str) -> int:
        return self._stat_overrides[parse_stat(stat)]

    def _push_stats_to_inventory(self) -> None:
        stats = dict(self._stats)
        if self._use_stat_overrides:
            stats = {stat: clamp_stat(value + self._stat_overrides[stat]) for stat, value in stats.items()}
        self.inventory.set_character_stats(stats)

    # -------------------------------------------------------------------------
    # Level-up
    # -------------------------------------------------------------------------

    @property
    def finalized_level(self) -> int:
        """Highest level whose recomputation has run."""
        return self.level - 1 if self.pending_level_up_points else self.level

    def level_up(self, stat: Stat | str) -> bool:
        """Traditional level-up: +2 to one score, then finalize.

        Returns:
            False if a split level-up is still pending.

        Raises:
            ValidationError: If the stat is not recognized.
        """
        stat = parse_stat(stat)
        if self.pending_level_up_points:
            logger.info(
                "Cannot level up: split level-up pending",
                name=self.name,
                pending=self.pending_level_up_points,
            )
            return False

        self.level += 1
        self._stats[stat] += LEVEL_UP_STAT_INCREASE
        self.level_up_history.append(LevelUpEntry(level=self.level, stat=stat))
        logger.info(
            "Level up",
            name=self.name,
            character_level=self.level,
            stat=stat.value,
            new_value=self._stats[stat],
        )
        self._push_stats_to_inventory()
        self._finalize_level()
        return True

    def start_level_up(self) -> bool:
        """Open a split level-up with two pending points."""
        if self.pending_level_up_points:
            logger.info(
                "Cannot start level-up: points still pending",
                name=self.name,
                pending=self.pending_level_up_points,
            )
            return False
        self.level += 1
        self.pending_level_up_points = LEVEL_UP_STAT_INCREASE
        logger.info("Split level-up started", name=self.name, character_level=self.level)
        return True

    def allocate_point(self, stat: Stat | str) -> bool:
        """Spend one pending point; the second point finalizes the level.

        Raises:
            ValidationError: If the stat is not recognized (nothing changes).
        """
        stat = parse_stat(stat)
        if not self.pending_level_up_points:
            logger.info("Cannot allocate point: none pending", name=self.name, stat=stat.value)
            return False

        self._stats[stat] += 1
        self.level_up_history.append(LevelUpEntry(level=self.level, stat=stat))
        self.pending_level_up_points -= 1
        logger.info(
            "Level-up point allocated",
            name=self.name,
            character_level=self.level,
            stat=stat.value,
            new_value=self._stats[stat],
            remaining=self.pending_level_up_points,
        )
        self._push_stats_to_inventory()
        if self.pending_level_up_points == 0:
            self._finalize_level()
        return True

    def _finalize_level(self) -> None:
        """Run the per-level recomputation for the current level."""
        computed = self.get_computed_stats()
        level = self.level

        if self.sorcery_threshold_level is None and computed[Stat.INT] >= MIN_SPELLCASTING_INT:
            self.sorcery_threshold_level = level
            logger.info("Sorcery threshold reached", name=self.name, character_level=level, int=computed[Stat.INT])
        if (
            self.double_sorcery_threshold_level is None
            and computed[Stat.INT] >= DOUBLE_SPELLCASTING_INT
        ):
            self.double_sorcery_threshold_level = level
            logger.info(
                "Double sorcery threshold reached",
                name=self.name,
                character_level=level,
                int=computed[Stat.INT],
            )
        if self.finesse_threshold_level is None and computed[Stat.DEX] >= MIN_FINESSE_DEX:
            self.finesse_threshold_level = level
            logger.info("Finesse threshold reached", name=self.name, character_level=level, dex=computed[Stat.DEX])

        self._roll_hp()
        self._refresh_resource_pools()
        logger.info(
            "Level finalized",
            name=self.name,
            character_level=level,
            hp=self.hp,
            sorcery=self.max_sorcery_points,
            finesse=self.max_finesse_points,
            combat=self.max_combat_maneuver_points,
        )

    def _roll_hp(self) -> None:
        str_mod = max(ability_modifier(self.get_effective_stats()[Stat.STR]), 0)
        hit_die = hit_die_for(str_mod)
        gained = max(roll_or_average(1, hit_die, str_mod), MIN_HP_GAIN)
        self.hp_rolls.append(gained)
        self.hp += gained
        logger.info(
            "HP rolled",
            name=self.name,
            character_level=self.level,
            hit_die=hit_die,
            str_mod=str_mod,
            gained=gained,
            hp=self.hp,
            dice_mode=get_dice_mode().value,
        )

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    @property
    def double_sorcery_bonus(self) -> int:
        """Extra sorcery accrued since the double threshold; never stored."""
        if self.double_sorcery_threshold_level is None:
            return 0
        return max(self.finalized_level - self.double_sorcery_threshold_level, 0)

    @property
    def max_sorcery_points(self) -> int:
        bonus = self._equipment.resource_bonuses.get(ResourceType.SORCERY, 0)
        if self.sorcery_threshold_level is None:
            return max(bonus, 0)
        accrued = max(self.finalized_level - self.sorcery_threshold_level, 0)
        return BASE_SORCERY_POINTS + accrued + self.double_sorcery_bonus + bonus

    @property
    def max_finesse_points(self) -> int:
        bonus = self._equipment.resource_bonuses.get(ResourceType.FINESSE, 0)
        if self.finesse_threshold_level is None:
            return max(bonus, 0)
        accrued = finesse_levels_after(self.finesse_threshold_level, self.finalized_level)
        return BASE_FINESSE_POINTS + accrued + bonus

    @property
    def max_combat_maneuver_points(self) -> int:
        """Finalized level while effective STR meets the requirement, else 0."""
        if self.get_effective_stats()[Stat.STR] >= MIN_COMBAT_MANEUVER_STR:
            return self.finalized_level
        return 0

    @property
    def sorcery_points(self) -> int:
        return min(self._current[ResourceType.SORCERY], self.max_sorcery_points)

    @property
    def finesse_points(self) -> int:
        return min(self._current[ResourceType.FINESSE], self.max_finesse_points)

    @property
    def combat_maneuver_points(self) -> int:
        return min(self._current[ResourceType.COMBAT], self.max_combat_maneuver_points)

    def get_max(self, resource: ResourceType | str) -> int:
        resource = parse_resource(resource)
        if resource is ResourceType.SORCERY:
            return self.max_sorcery_points
        if resource is ResourceType.FINESSE:
            return self.max_finesse_points
        return self.max_combat_maneuver_points

    def get_current(self, resource: ResourceType | str) -> int:
        resource = parse_resource(resource)
        return min(self._current[resource], self.get_max(resource))

    def maneuvers(self, stat: Stat | str) -> int:
        """Points available for a stat's maneuver family.

        INT reports sorcery points and DEX finesse points. STR is computed
        on the spot: the finalized level when effective STR is at least 16,
        else 0.
        """
        stat = parse_stat(stat)
        if stat is Stat.INT:
            return self.sorcery_points
        if stat is Stat.DEX:
            return self.finesse_points
        return self.max_combat_maneuver_points

    def _refresh_resource_pools(self) -> None:
        """Carry current values across a change of maxima.

        A growing maximum grows the current value by the same amount; a
        shrinking one caps it.
        """
        for resource in ResourceType:
            new_max = self.get_max(resource)
            old_max = self._known_max[resource]
            current = self._current[resource]
            if new_max > old_max:
                current += new_max - old_max
            self._current[resource] = max(min(current, new_max), 0)
            self._known_max[resource] = new_max

    def _spend(self, resource: ResourceType) -> bool:
        if self.get_current(resource) <= 0:
            logger.info("Cannot spend point: pool empty", name=self.name, resource=resource.value)
            return False
        self._current[resource] = self.get_current(resource) - 1
        logger.info(
            "Spent point",
            name=self.name,
            resource=resource.value,
            remaining=self._current[resource],
        )
        return True

    def spend_sorcery_point(self) -> bool:
        return self._spend(ResourceType.SORCERY)

    def spend_finesse_point(self) -> bool:
        return self._spend(ResourceType.FINESSE)

    def spend_combat_maneuver_point(self) -> bool:
        return self._spend(ResourceType.COMBAT)

    def short_rest(self) -> None:
        """Restore half of each maximum, rounded up."""
        for resource in ResourceType:
            maximum = self.get_max(resource)
            self._current[resource] = min(maximum, self.get_current(resource) + math.ceil(maximum / 2))
        logger.info("Short rest taken", name=self.name, **self._resource_summary())

    def long_rest(self) -> None:
        for resource in ResourceType:
            self._current[resource] = self.get_max(resource)
        logger.info("Long rest taken", name=self.name, **self._resource_summary())

    def _resource_summary(self) -> dict[str, str]:
        return {
            resource.value: f"{self.get_current(resource)}/{self.get_max(resource)}"
            for resource in ResourceType
        }

    # -------------------------------------------------------------------------
    # Equipment
    # -------------------------------------------------------------------------

    @property
    def equipment(self) -> EquipmentSnapshot:
        """Equipment as of the last sync."""
        return self._equipment

    def apply_equipment(self, snapshot: EquipmentSnapshot) -> None:
        """Accept a snapshot pushed by the inventory."""
        self._equipment = snapshot
        self._refresh_resource_pools()

    def sync_equipment_from_inventory(self) -> EquipmentSnapshot:
        return self.inventory.sync_equipment_to_character(self)

    def ac(self) -> int:
        """13 + DEX modifier + armor and shield AC + their enchantments."""
        return BASE_AC + self.modifier(Stat.DEX) + self._equipment.armor_class_bonus

    def proficiency(self) -> int:
        """Level bonus added to main-hand attacks."""
        return self.level

    # -------------------------------------------------------------------------
    # Abilities and notes
    # -------------------------------------------------------------------------

    def learn_ability(self, name: str, ability_type: AbilityType | str) -> bool:
        return self.ability_ledger.learn_ability(name, ability_type, level=self.level)

    def add_note(self, text: str) -> None:
        self.notes.append(text)

    def remove_note(self, index: int) -> bool:
        if not 0 <= index < len(self.notes):
            return False
        del self.notes[index]
        return True

    # -------------------------------------------------------------------------
    # Update notification
    # -------------------------------------------------------------------------

    def on(self, handler: UpdateHandler) -> None:
        """Subscribe to explicit update notifications."""
        if handler not in self._handlers:
            self._handlers.append(handler)

    def off(self, handler: UpdateHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def trigger_update(self) -> None:
        """Notify subscribers; callers fire this after a batch of mutations."""
        for handler in list(self._handlers):
            handler(self)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_record(self) -> CharacterRecord:
        """Build the plain record stored by the persistence layer."""
        record = CharacterRecord(
            name=self.name,
            level=self.level,
            stats=dict(self._stats),
            high=self.high,
            mid=self.mid,
            race=self.race,
            racial_choices=list(self.racial_choices),
            abilities=list(self.abilities),
            learned_abilities=self.ability_ledger.to_records(),
            hp=self.hp,
            hp_rolls=list(self.hp_rolls),
            level_up_history=list(self.level_up_history),
            pending_level_up_points=self.pending_level_up_points,
            sorcery_threshold_level=self.sorcery_threshold_level,
            double_sorcery_threshold_level=self.double_sorcery_threshold_level,
            finesse_threshold_level=self.finesse_threshold_level,
            sorcery_points=self.sorcery_points,
            finesse_points=self.finesse_points,
            combat_maneuver_points=self.combat_maneuver_points,
            use_stat_overrides=self._use_stat_overrides,
            stat_overrides=dict(self._stat_overrides),
            notes=list(self.notes),
            inventory=[item.model_dump(mode="json") for item in self.inventory.get_items()],
            saved_at=datetime.now(),
        )
        record.hash = compute_hash(record)
        self.content_hash = record.hash
        return record

    @classmethod
    def from_record(cls, data: CharacterRecord | Mapping[str, Any]) -> Character:
        """Rebuild a character, loading what it can.

        Missing or malformed fields fall back to defaults. The stored hash
        is kept as ``content_hash`` so callers can compare it with
        ``verify_record_hash``.
        """
        record = data if isinstance(data, CharacterRecord) else CharacterRecord.from_raw(data)

        high = record.high or Stat.STR
        mid = record.mid if record.mid and record.mid != high else next(s for s in Stat if s != high)

        items: list[InventoryItem] = []
        for raw in record.inventory:
            try:
                items.append(InventoryItem.model_validate(raw))
            except ValueError as exc:
                logger.warning("Skipped malformed inventory item", error=str(exc))
        known_items = [item for item in items if item.template_name in EQUIPMENT_TEMPLATES]
        if len(known_items) != len(items):
            logger.warning("Skipped items with unknown templates", skipped=len(items) - len(known_items))

        ledger = AbilityLedger()
        ledger.load_records(record.learned_abilities)

        character = cls(
            name=record.name,
            stats=record.stats,
            high=high,
            mid=mid,
            race=record.race,
            racial_choices=record.racial_choices,
            abilities=record.abilities,
            level=record.level,
            hp=record.hp,
            hp_rolls=record.hp_rolls,
            inventory=InventoryManager(known_items),
            ability_ledger=ledger,
        )
        character.content_hash = record.hash
        character.level_up_history = list(record.level_up_history)
        character.pending_level_up_points = record.pending_level_up_points
        character.sorcery_threshold_level = record.sorcery_threshold_level
        character.double_sorcery_threshold_level = record.double_sorcery_threshold_level
        character.finesse_threshold_level = record.finesse_threshold_level
        character.notes = list(record.notes)
        character._use_stat_overrides = record.use_stat_overrides
        for stat, delta in record.stat_overrides.items():
            character._stat_overrides[stat] = delta
        character._push_stats_to_inventory()
        character.inventory.sync_equipment_to_character(character)

        character._refresh_resource_pools()
        stored_currents = {
            ResourceType.SORCERY: record.sorcery_points,
            ResourceType.FINESSE: record.finesse_points,
            ResourceType.COMBAT: record.combat_maneuver_points,
        }
        for resource, stored in stored_currents.items():
            if stored is not None:
                character._current[resource] = max(min(stored, character.get_max(resource)), 0)

        logger.info("Character loaded", name=character.name, character_level=character.level, items=len(known_items))
        return character

    def __repr__(self) -> str:
        return f"Character(name={self.name!r}, level={self.level}, stats={self.get_base_stats()!r})"


__all__ = [
    "Character",
    "UpdateHandler",
    "ability_modifier",
    "clamp_stat",
    "parse_stat",
    "parse_resource",
    "hit_die_for",
    "finesse_levels_after",
]
