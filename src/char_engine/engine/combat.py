"""Combat roll calculator.

Derives attack, damage and hide totals from a character's effective stats
and last-synced equipment. Every result carries an ordered breakdown of
named additive terms that sum exactly to the total.

Main hand and off hand are deliberately asymmetric:

* Off-hand attacks never add the level bonus.
* Off-hand damage never adds the stat modifier.

Sneak attacks and assassinations are finesse attacks: they need effective
DEX 16+ and a finesse point, and add a "sneak attack" term of d8s.

Example:
    >>> calculator = CombatCalculator(character)
    >>> attack = calculator.main_hand_attack()
    >>> [(term.name, term.value) for term in attack.terms]
    [('d20', 10), ('STR modifier', 3), ('level', 1), ('enchantment', 2)]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from char_engine.core.constants import (
    ATTACK_DIE,
    HIDE_LEVEL_FACTOR_NIMBLE,
    MIN_FINESSE_DEX,
    SNEAK_ATTACK_DIE,
)
from char_engine.core.logging import get_logger
from char_engine.engine.dice import DiceEngine, DiceRollResult, get_dice_engine
from char_engine.models.enums import ArmorType, Stat


if TYPE_CHECKING:
    from char_engine.models.character import Character
    from char_engine.models.inventory import WeaponLoadout


logger = get_logger(__name__)


@dataclass(frozen=True)
class RollTerm:
    """One named additive component of a roll."""

    name: str
    value: int


@dataclass(frozen=True)
class RollBreakdown:
    """A roll total together with the terms it was built from.

    Attributes:
        label: What was rolled (e.g. "main-hand attack").
        total: Sum of all term values.
        terms: Ordered additive terms.
        rolls: Raw die faces, empty when averaged.
        averaged: Whether average mode produced the die values.
    """

    label: str
    total: int
    terms: tuple[RollTerm, ...] = field(default_factory=tuple)
    rolls: tuple[int, ...] = field(default_factory=tuple)
    averaged: bool = False

    @classmethod
    def from_terms(
        cls,
        label: str,
        terms: list[RollTerm],
        *rolls: DiceRollResult,
    ) -> RollBreakdown:
        return cls(
            label=label,
            total=sum(term.value for term in terms),
            terms=tuple(terms),
            rolls=tuple(face for roll in rolls for face in roll.rolls),
            averaged=any(roll.averaged for roll in rolls),
        )

    def term(self, name: str) -> RollTerm | None:
        return next((t for t in self.terms if t.name == name), None)

    def term_names(self) -> list[str]:
        return [t.name for t in self.terms]


class CombatCalculator:
    """Attack, damage and hide rolls for one character.

    Reads equipment from the character's last sync, so an equip that was
    never synced does not show up here.

    Args:
        character: The character rolling.
        dice: Dice engine to roll with; defaults to the shared engine.
    """

    def __init__(self, character: Character, *, dice: DiceEngine | None = None) -> None:
        self._character = character
        self._dice = dice or get_dice_engine()

    # -------------------------------------------------------------------------
    # Attacks
    # -------------------------------------------------------------------------

    def main_hand_attack(self) -> RollBreakdown | None:
        """d20 + stat modifier + level + enchantment, or None if unarmed."""
        weapon = self._character.equipment.main_hand
        if weapon is None:
            return None
        return self._attack("main-hand attack", weapon, include_level=True)

    def off_hand_attack(self) -> RollBreakdown | None:
        """d20 + stat modifier + enchantment; never adds the level bonus."""
        weapon = self._character.equipment.off_hand
        if weapon is None:
            return None
        return self._attack("off-hand attack", weapon, include_level=False)

    def _attack(self, label: str, weapon: WeaponLoadout, *, include_level: bool) -> RollBreakdown:
        roll = self._dice.roll_with_modifier(1, ATTACK_DIE)
        terms = [
            RollTerm("d20", roll.result),
            RollTerm(f"{weapon.governing_stat.value.upper()} modifier", self._stat_mod(weapon.governing_stat)),
        ]
        if include_level:
            terms.append(RollTerm("level", self._character.proficiency()))
        if weapon.attack_bonus:
            terms.append(RollTerm("weapon bonus", weapon.attack_bonus))
        terms.append(RollTerm("enchantment", weapon.enchantment_level))
        return self._finish(label, terms, roll, weapon=weapon.name)

    # -------------------------------------------------------------------------
    # Damage
    # -------------------------------------------------------------------------

    def main_hand_damage(self) -> RollBreakdown | None:
        """Weapon die + stat modifier + enchantment, or None if unarmed."""
        weapon = self._character.equipment.main_hand
        if weapon is None:
            return None
        return self._damage("main-hand damage", weapon, include_stat=True)

    def off_hand_damage(self) -> RollBreakdown | None:
        """Weapon die + enchantment; never adds the stat modifier."""
        weapon = self._character.equipment.off_hand
        if weapon is None:
            return None
        return self._damage("off-hand damage", weapon, include_stat=False)

    def _damage(self, label: str, weapon: WeaponLoadout, *, include_stat: bool) -> RollBreakdown:
        roll = self._dice.roll_with_modifier(1, weapon.damage_die)
        terms = [RollTerm(f"d{weapon.damage_die}", roll.result)]
        if include_stat:
            terms.append(
                RollTerm(f"{weapon.governing_stat.value.upper()} modifier", self._stat_mod(weapon.governing_stat))
            )
        terms.append(RollTerm("enchantment", weapon.enchantment_level))
        return self._finish(label, terms, roll, weapon=weapon.name)

    # -------------------------------------------------------------------------
    # Finesse attacks
    # -------------------------------------------------------------------------

    def can_perform_finesse_attacks(self) -> bool:
        """True while effective DEX is 16+ and a finesse point is available."""
        dex = self._character.get_effective_stats()[Stat.DEX]
        return dex >= MIN_FINESSE_DEX and self._character.finesse_points > 0

    def main_hand_sneak_attack(self) -> RollBreakdown | None:
        """Main-hand damage plus a d8 per finesse point left after paying one.

        Returns None (and spends nothing) when unarmed or unable to
        perform finesse attacks.
        """
        weapon = self._character.equipment.main_hand
        return self._sneak_attack("main-hand sneak attack", weapon, include_stat=True)

    def off_hand_sneak_attack(self) -> RollBreakdown | None:
        """Off-hand damage plus a d8 per finesse point left after paying one."""
        weapon = self._character.equipment.off_hand
        return self._sneak_attack("off-hand sneak attack", weapon, include_stat=False)

    def main_hand_assassination(self) -> RollBreakdown | None:
        """Critical main-hand damage plus two d8 per finesse point; costs nothing."""
        weapon = self._character.equipment.main_hand
        return self._assassination("main-hand assassination", weapon, include_stat=True)

    def off_hand_assassination(self) -> RollBreakdown | None:
        weapon = self._character.equipment.off_hand
        return self._assassination("off-hand assassination", weapon, include_stat=False)

    def _finesse_ready(self, label: str) -> bool:
        if not self.can_perform_finesse_attacks():
            logger.info(
                "Cannot perform finesse attack",
                character=self._character.name,
                roll=label,
                dex=self._character.get_effective_stats()[Stat.DEX],
                finesse_points=self._character.finesse_points,
            )
            return False
        return True

    def _sneak_attack(
        self,
        label: str,
        weapon: WeaponLoadout | None,
        *,
        include_stat: bool,
    ) -> RollBreakdown | None:
        if weapon is None or not self._finesse_ready(label) or not self._character.spend_finesse_point():
            return None
        sneak_dice = self._character.finesse_points
        return self._finesse_damage(label, weapon, 1, sneak_dice, include_stat=include_stat)

    def _assassination(
        self,
        label: str,
        weapon: WeaponLoadout | None,
        *,
        include_stat: bool,
    ) -> RollBreakdown | None:
        if weapon is None or not self._finesse_ready(label):
            return None
        sneak_dice = self._character.finesse_points * 2
        return self._finesse_damage(label, weapon, 2, sneak_dice, include_stat=include_stat)

    def _finesse_damage(
        self,
        label: str,
        weapon: WeaponLoadout,
        weapon_dice: int,
        sneak_dice: int,
        *,
        include_stat: bool,
    ) -> RollBreakdown:
        weapon_roll = self._dice.roll_with_modifier(weapon_dice, weapon.damage_die)
        sneak_roll = self._dice.roll_with_modifier(sneak_dice, SNEAK_ATTACK_DIE)
        die_name = f"d{weapon.damage_die}" if weapon_dice == 1 else f"{weapon_dice}d{weapon.damage_die}"
        terms = [RollTerm(die_name, weapon_roll.result)]
        if include_stat:
            terms.append(
                RollTerm(f"{weapon.governing_stat.value.upper()} modifier", self._stat_mod(weapon.governing_stat))
            )
        terms.append(RollTerm("enchantment", weapon.enchantment_level))
        terms.append(RollTerm("sneak attack", sneak_roll.result))
        return self._finish(label, terms, weapon_roll, sneak_roll, weapon=weapon.name, sneak_dice=sneak_dice)

    # -------------------------------------------------------------------------
    # Hide
    # -------------------------------------------------------------------------

    def hide_factor(self) -> int:
        """2 for DEX 16+ characters outside heavy armor, else 1."""
        dex = self._character.get_effective_stats()[Stat.DEX]
        if dex >= MIN_FINESSE_DEX and self._character.equipment.armor_type is not ArmorType.HEAVY:
            return HIDE_LEVEL_FACTOR_NIMBLE
        return 1

    def hide(self) -> RollBreakdown:
        """d20 + DEX modifier + level x hide factor."""
        roll = self._dice.roll_with_modifier(1, ATTACK_DIE)
        terms = [
            RollTerm("d20", roll.result),
            RollTerm("DEX modifier", self._stat_mod(Stat.DEX)),
            RollTerm("level bonus", self._character.level * self.hide_factor()),
        ]
        return self._finish("hide", terms, roll)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _stat_mod(self, stat: Stat) -> int:
        return self._character.modifier(stat)

    def _finish(
        self,
        label: str,
        terms: list[RollTerm],
        *rolls: DiceRollResult,
        **context: object,
    ) -> RollBreakdown:
        breakdown = RollBreakdown.from_terms(label, terms, *rolls)
        logger.info(
            "Combat roll",
            character=self._character.name,
            roll=label,
            total=breakdown.total,
            terms={t.name: t.value for t in breakdown.terms},
            averaged=breakdown.averaged,
            **context,
        )
        return breakdown


__all__ = [
    "RollTerm",
    "RollBreakdown",
    "CombatCalculator",
]
