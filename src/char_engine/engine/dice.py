"""Dice engine: the single source of randomness for the rules engine.

Rolls come in two flavours selected by a process-wide mode switch:

* ``random`` rolls real dice through the d20 library.
* ``average`` returns ``floor(count * (sides + 1) / 2) + modifier`` for any
  roll request, which keeps tests and fixed-value tables reproducible.

``roll_die`` and ``roll_dice`` are raw uniform generators and always roll.
Everything that represents a game roll (``roll_with_modifier``,
``roll_from_notation``, ``roll_or_average``) honours the mode.

Example:
    >>> set_dice_mode(DiceMode.AVERAGE)
    >>> roll_from_notation("2d6+3").total
    10
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from enum import StrEnum

import d20

from char_engine.core.config import get_settings
from char_engine.core.exceptions import DiceRollError, InvalidNotationError
from char_engine.core.logging import get_logger


logger = get_logger(__name__)

_NOTATION_PATTERN = re.compile(r"^(\d+)d(\d+)(?:([+-])(\d+))?$", re.IGNORECASE)


class DiceMode(StrEnum):
    """How game rolls are resolved."""

    AVERAGE = "average"
    RANDOM = "random"


@dataclass(frozen=True)
class DiceNotation:
    """A parsed ``NdS±M`` expression.

    Attributes:
        count: Number of dice.
        sides: Sides per die.
        modifier: Flat signed modifier.
    """

    count: int
    sides: int
    modifier: int = 0

    def __str__(self) -> str:
        if self.modifier:
            return f"{self.count}d{self.sides}{self.modifier:+d}"
        return f"{self.count}d{self.sides}"


@dataclass(frozen=True)
class DiceRollResult:
    """Outcome of a game roll.

    Attributes:
        result: Sum of the dice (or the floored average in average mode).
        rolls: Individual die values; empty when the roll was averaged.
        modifier: Flat modifier added to the dice.
        total: ``result + modifier``.
        averaged: Whether the value came from average mode.
    """

    result: int
    rolls: tuple[int, ...] = field(default_factory=tuple)
    modifier: int = 0
    total: int = 0
    averaged: bool = False


# =============================================================================
# Mode switch
# =============================================================================

_dice_mode: DiceMode | None = None


def get_dice_mode() -> DiceMode:
    """Return the active dice mode, falling back to the configured default."""
    if _dice_mode is None:
        return DiceMode(get_settings().dice.mode)
    return _dice_mode


def set_dice_mode(mode: DiceMode | str) -> None:
    """Select how game rolls are resolved for the whole process.

    Args:
        mode: A DiceMode or its string value.

    Raises:
        ValueError: If the mode is not recognized.
    """
    global _dice_mode  # noqa: PLW0603
    _dice_mode = DiceMode(mode)
    logger.info(
        "Dice mode set",
        mode=_dice_mode.value,
        using="random rolls" if _dice_mode is DiceMode.RANDOM else "average values",
    )


def reset_dice_mode() -> None:
    """Forget any explicit mode so the configured default applies again."""
    global _dice_mode  # noqa: PLW0603
    _dice_mode = None


def use_dice_rolls() -> bool:
    """Check whether game rolls are currently random."""
    return get_dice_mode() is DiceMode.RANDOM


# =============================================================================
# Notation
# =============================================================================


def parse_dice_notation(notation: str) -> DiceNotation:
    """Validate and decompose an ``NdS``/``NdS+M``/``NdS-M`` string.

    Args:
        notation: The dice notation, case-insensitive.

    Returns:
        The parsed DiceNotation.

    Raises:
        InvalidNotationError: If the string is malformed or uses zero
            dice or zero sides.
    """
    if not isinstance(notation, str):
        raise InvalidNotationError("Dice notation must be a string", expression=repr(notation))

    match = _NOTATION_PATTERN.match(notation.strip())
    if match is None:
        raise InvalidNotationError(f"Invalid dice notation: {notation}", expression=notation)

    count = int(match.group(1))
    sides = int(match.group(2))
    if count < 1 or sides < 1:
        raise InvalidNotationError(
            f"Invalid dice notation: {notation}",
            expression=notation,
            details={"count": count, "sides": sides},
        )

    modifier_value = int(match.group(4)) if match.group(4) else 0
    modifier = -modifier_value if match.group(3) == "-" else modifier_value
    return DiceNotation(count=count, sides=sides, modifier=modifier)


def average_value(count: int, sides: int, modifier: int = 0) -> int:
    """Expected value of ``count`` dice, floored, plus the modifier.

    Example:
        >>> average_value(2, 6, 3)
        10
    """
    return (count * (sides + 1)) // 2 + modifier


# =============================================================================
# Engine
# =============================================================================


class DiceEngine:
    """Dice rolling with a deterministic-average mode.

    Example:
        >>> engine = DiceEngine(seed=7)
        >>> result = engine.roll_from_notation("1d20+5")
        >>> print(result.total)
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice engine.

        Args:
            seed: Optional random seed for reproducible random-mode rolls.
                Defaults to the configured seed, if any.
        """
        if seed is None:
            seed = get_settings().dice.seed
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceEngine initialized", seed=seed)

    def roll_die(self, sides: int) -> int:
        """Roll one die uniformly in ``[1, sides]``.

        Raises:
            DiceRollError: If sides is not positive.
        """
        if sides < 1:
            raise DiceRollError("A die needs at least one side", details={"sides": sides})
        return d20.roll(f"1d{sides}").total

    def roll_dice(self, count: int, sides: int) -> list[int]:
        """Roll ``count`` independent dice.

        Raises:
            DiceRollError: If count is negative or sides is not positive.
        """
        if count < 0:
            raise DiceRollError("Cannot roll a negative number of dice", details={"count": count})
        return [self.roll_die(sides) for _ in range(count)]

    def roll_with_modifier(self, count: int, sides: int, modifier: int = 0) -> DiceRollResult:
        """Roll ``count`` dice and add a flat modifier, honouring the dice mode.

        Args:
            count: Number of dice.
            sides: Sides per die.
            modifier: Flat signed modifier.

        Returns:
            DiceRollResult with the individual rolls (random mode) or the
            floored average (average mode).
        """
        if not use_dice_rolls():
            result = average_value(count, sides)
            logger.debug(
                "Using average roll",
                dice=f"{count}d{sides}",
                modifier=modifier,
                total=result + modifier,
            )
            return DiceRollResult(
                result=result,
                rolls=(),
                modifier=modifier,
                total=result + modifier,
                averaged=True,
            )

        rolls = self.roll_dice(count, sides)
        result = sum(rolls)
        logger.debug(
            "Dice rolled",
            dice=f"{count}d{sides}",
            rolls=rolls,
            modifier=modifier,
            total=result + modifier,
        )
        return DiceRollResult(
            result=result,
            rolls=tuple(rolls),
            modifier=modifier,
            total=result + modifier,
        )

    def roll_from_notation(self, notation: str) -> DiceRollResult:
        """Parse a notation string and roll it.

        Raises:
            InvalidNotationError: If the notation is malformed.
        """
        parsed = parse_dice_notation(notation)
        return self.roll_with_modifier(parsed.count, parsed.sides, parsed.modifier)

    def roll_or_average(self, count: int, sides: int, modifier: int = 0) -> int:
        """Total of a game roll, as used by the progression and combat rules."""
        return self.roll_with_modifier(count, sides, modifier).total


# Module-level convenience engine
_default_engine: DiceEngine | None = None


def get_dice_engine() -> DiceEngine:
    """Return the shared engine, creating it on first use."""
    global _default_engine  # noqa: PLW0603
    if _default_engine is None:
        _default_engine = DiceEngine()
    return _default_engine


def roll_die(sides: int) -> int:
    """Roll one die with the shared engine."""
    return get_dice_engine().roll_die(sides)


def roll_dice(count: int, sides: int) -> list[int]:
    """Roll several dice with the shared engine."""
    return get_dice_engine().roll_dice(count, sides)


def roll_with_modifier(count: int, sides: int, modifier: int = 0) -> DiceRollResult:
    """Roll dice plus modifier with the shared engine."""
    return get_dice_engine().roll_with_modifier(count, sides, modifier)


def roll_from_notation(notation: str) -> DiceRollResult:
    """Roll a notation string with the shared engine.

    Example:
        >>> result = roll_from_notation("1d8+2")
        >>> print(result.total)
    """
    return get_dice_engine().roll_from_notation(notation)


def roll_or_average(count: int, sides: int, modifier: int = 0) -> int:
    """Total of a game roll with the shared engine."""
    return get_dice_engine().roll_or_average(count, sides, modifier)


__all__ = [
    "DiceMode",
    "DiceNotation",
    "DiceRollResult",
    "DiceEngine",
    "get_dice_mode",
    "set_dice_mode",
    "reset_dice_mode",
    "use_dice_rolls",
    "parse_dice_notation",
    "average_value",
    "get_dice_engine",
    "roll_die",
    "roll_dice",
    "roll_with_modifier",
    "roll_from_notation",
    "roll_or_average",
]
