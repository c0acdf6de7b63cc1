"""Learned-ability ledger.

Tracks which catalog abilities (metamagic, spellwords, combat maneuvers) a
character has learned. The ledger validates names against the fixed
catalogs and has no numeric effect on progression.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from char_engine.core.exceptions import AbilityError
from char_engine.core.logging import get_logger
from char_engine.models.catalog import get_ability_catalog, get_ability_template
from char_engine.models.enums import AbilityType


logger = get_logger(__name__)


class LearnedAbility(BaseModel):
    """A catalog ability the character has learned."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Derived from type and name")
    name: str
    ability_type: AbilityType
    description: str = ""
    learned_at: datetime = Field(default_factory=datetime.now)
    level: int | None = Field(default=None, description="Character level when learned")


def ability_id(name: str, ability_type: AbilityType | str) -> str:
    """Stable identifier for a learned ability."""
    return f"{AbilityType(ability_type).value}_{name}"


class AbilityLedger:
    """Membership set of learned abilities, keyed by type and name."""

    def __init__(self, abilities: Iterable[LearnedAbility] | None = None) -> None:
        self._abilities: dict[str, LearnedAbility] = {}
        for ability in abilities or ():
            self._abilities[ability.id] = ability

    def learn_ability(
        self,
        name: str,
        ability_type: AbilityType | str,
        level: int | None = None,
    ) -> bool:
        """Record an ability as learned.

        Returns:
            False if the name is not in that type's catalog or is already known.
        """
        ability_type = _coerce_type(ability_type)
        template = get_ability_template(name, ability_type)
        if template is None:
            logger.info("Cannot learn ability: not in catalog", ability=name, ability_type=ability_type.value)
            return False

        key = ability_id(name, ability_type)
        if key in self._abilities:
            logger.info("Cannot learn ability: already learned", ability=name, ability_type=ability_type.value)
            return False

        self._abilities[key] = LearnedAbility(
            id=key,
            name=name,
            ability_type=ability_type,
            description=template.description,
            level=level,
        )
        logger.info("Ability learned", ability=name, ability_type=ability_type.value, character_level=level)
        return True

    def forget_ability(self, name: str, ability_type: AbilityType | str) -> bool:
        key = ability_id(name, _coerce_type(ability_type))
        if self._abilities.pop(key, None) is None:
            return False
        logger.info("Ability forgotten", ability=name, ability_type=str(ability_type))
        return True

    def has_ability(self, name: str, ability_type: AbilityType | str) -> bool:
        return ability_id(name, _coerce_type(ability_type)) in self._abilities

    def get_abilities_by_type(self, ability_type: AbilityType | str) -> list[LearnedAbility]:
        """Learned abilities of one type, sorted by name."""
        ability_type = _coerce_type(ability_type)
        return sorted(
            (a for a in self._abilities.values() if a.ability_type == ability_type),
            key=lambda a: a.name,
        )

    def get_available_abilities(self, ability_type: AbilityType | str) -> list[str]:
        """Catalog names of one type not yet learned, in catalog order."""
        ability_type = _coerce_type(ability_type)
        return [
            name
            for name in get_ability_catalog(ability_type)
            if ability_id(name, ability_type) not in self._abilities
        ]

    def get_all_abilities(self) -> list[LearnedAbility]:
        """Every learned ability, sorted by type then name."""
        return sorted(self._abilities.values(), key=lambda a: (a.ability_type.value, a.name))

    def get_ability_count(self, ability_type: AbilityType | str | None = None) -> int:
        if ability_type is None:
            return len(self._abilities)
        return len(self.get_abilities_by_type(ability_type))

    def clear_abilities(self) -> None:
        self._abilities.clear()
        logger.info("Ability ledger cleared")

    def names(self) -> list[str]:
        return [ability.name for ability in self.get_all_abilities()]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_records(self) -> list[dict[str, Any]]:
        return [ability.model_dump(mode="json") for ability in self.get_all_abilities()]

    def load_records(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Replace the ledger from serialized records, skipping unknown entries.

        Returns:
            The number of abilities loaded.
        """
        self._abilities.clear()
        for record in records:
            try:
                ability_type = _coerce_type(record.get("ability_type", ""))
            except AbilityError:
                logger.warning("Skipped ability with unknown type", record=dict(record))
                continue
            name = record.get("name", "")
            if get_ability_template(name, ability_type) is None:
                logger.warning("Skipped ability not in catalog", ability=name, ability_type=ability_type.value)
                continue
            ability = LearnedAbility.model_validate(
                {**record, "id": ability_id(name, ability_type), "ability_type": ability_type}
            )
            self._abilities[ability.id] = ability
        return len(self._abilities)

    def __len__(self) -> int:
        return len(self._abilities)

    def __contains__(self, key: object) -> bool:
        return key in self._abilities


def _coerce_type(ability_type: AbilityType | str) -> AbilityType:
    try:
        return AbilityType(ability_type)
    except ValueError:
        raise AbilityError(
            f"Unknown ability type: {ability_type}",
            ability_type=str(ability_type),
        ) from None


__all__ = [
    "LearnedAbility",
    "AbilityLedger",
    "ability_id",
]
