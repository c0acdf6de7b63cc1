"""Rules engine: dice and combat rolls.

Submodules:
    dice: Dice rolling with a deterministic-average mode (d20 library)
    combat: Attack, damage and hide rolls with additive breakdowns

Example:
    >>> from char_engine.engine import CombatCalculator, set_dice_mode
    >>> set_dice_mode("average")
    >>> CombatCalculator(hero).main_hand_attack().total
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from char_engine.engine.dice import (
    DiceEngine,
    DiceMode,
    DiceNotation,
    DiceRollResult,
    average_value,
    get_dice_engine,
    get_dice_mode,
    parse_dice_notation,
    reset_dice_mode,
    roll_dice,
    roll_die,
    roll_from_notation,
    roll_or_average,
    roll_with_modifier,
    set_dice_mode,
    use_dice_rolls,
)

# =============================================================================
# Combat
# =============================================================================
from char_engine.engine.combat import (
    CombatCalculator,
    RollBreakdown,
    RollTerm,
)


__all__ = [
    # Dice
    "DiceEngine",
    "DiceMode",
    "DiceNotation",
    "DiceRollResult",
    "average_value",
    "get_dice_engine",
    "get_dice_mode",
    "parse_dice_notation",
    "reset_dice_mode",
    "roll_dice",
    "roll_die",
    "roll_from_notation",
    "roll_or_average",
    "roll_with_modifier",
    "set_dice_mode",
    "use_dice_rolls",
    # Combat
    "CombatCalculator",
    "RollBreakdown",
    "RollTerm",
]
