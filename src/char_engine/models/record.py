"""Plain serialization record for a character.

The persistence layer stores and returns a CharacterRecord; the engine
never touches storage itself. Loading is fail-soft: malformed fields fall
back to their defaults so the caller can decide, via
``verify_record_hash``, whether to trust what came back.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from char_engine.core.constants import STARTING_HP
from char_engine.core.logging import get_logger
from char_engine.models.enums import Race, Stat


logger = get_logger(__name__)

HASHED_FIELDS: tuple[str, ...] = (
    "name",
    "level",
    "stats",
    "high",
    "mid",
    "race",
    "racial_choices",
    "abilities",
    "hp",
    "hp_rolls",
    "level_up_history",
)
"""Fields whose values define a character's identity for integrity checks."""


class LevelUpEntry(BaseModel):
    """One allocated level-up point."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1)
    stat: Stat


class CharacterRecord(BaseModel):
    """Everything needed to rebuild a character."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    hash: str = ""
    level: int = Field(default=1, ge=1)
    stats: dict[Stat, int] = Field(default_factory=dict)
    high: Stat | None = None
    mid: Stat | None = None
    race: Race | None = None
    racial_choices: list[Stat] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)
    learned_abilities: list[dict[str, Any]] = Field(default_factory=list)
    hp: int = STARTING_HP
    hp_rolls: list[int] = Field(default_factory=list)
    level_up_history: list[LevelUpEntry] = Field(default_factory=list)
    pending_level_up_points: int = Field(default=0, ge=0, le=2)

    sorcery_threshold_level: int | None = None
    double_sorcery_threshold_level: int | None = None
    finesse_threshold_level: int | None = None
    sorcery_points: int | None = None
    finesse_points: int | None = None
    combat_maneuver_points: int | None = None

    use_stat_overrides: bool = False
    stat_overrides: dict[Stat, int] = Field(default_factory=dict)
    notes: list[str] = Field(default_factory=list)
    inventory: list[dict[str, Any]] = Field(default_factory=list)
    saved_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_raw(cls, data: Mapping[str, Any]) -> CharacterRecord:
        """Validate loosely, dropping any field that fails validation.

        Args:
            data: A mapping as produced by ``model_dump`` or read from storage.

        Returns:
            A record where every invalid field holds its default.
        """
        payload = dict(data)
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            bad_fields = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
            logger.warning("Character record has invalid fields", fields=sorted(bad_fields))
            return cls.model_validate({k: v for k, v in payload.items() if k not in bad_fields})


def compute_hash(record: CharacterRecord) -> str:
    """SHA-256 over the canonical JSON of the identity-bearing fields."""
    data = record.model_dump(mode="json", include=set(HASHED_FIELDS))
    data["learned_abilities"] = sorted(
        f"{entry.get('ability_type')}_{entry.get('name')}" for entry in record.learned_abilities
    )
    data["inventory"] = sorted(
        json.dumps(item, sort_keys=True, default=str) for item in record.inventory
    )
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def verify_record_hash(record: CharacterRecord) -> bool:
    """Whether a record still matches the hash stored in it."""
    matches = bool(record.hash) and compute_hash(record) == record.hash
    if not matches:
        logger.warning("Character record hash mismatch", name=record.name, stored_hash=record.hash)
    return matches


__all__ = [
    "HASHED_FIELDS",
    "LevelUpEntry",
    "CharacterRecord",
    "compute_hash",
    "verify_record_hash",
]
