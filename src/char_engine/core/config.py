"""Configuration management for the character progression engine.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides.

Example:
    >>> from char_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.dice.mode
    'average'

Environment Variables:
    CHAR_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CHAR_ENGINE_LOG_JSON: Emit JSON log lines instead of console output
    CHAR_ENGINE_DICE_MODE: Default dice mode ('average' or 'random')
    CHAR_ENGINE_DICE_SEED: Seed for reproducible random rolls
    CHAR_ENGINE_INVENTORY_MAX_ITEMS: Optional inventory capacity
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from char_engine.core.constants import MAX_ENCHANTMENT_LEVEL, MIN_ENCHANTMENT_LEVEL
from char_engine.core.exceptions import ConfigurationError


class DiceSettings(BaseSettings):
    """Configuration for the dice engine.

    Attributes:
        mode: Default roll mode. 'average' returns deterministic expected
            values, 'random' rolls real dice.
        seed: Optional seed for the random generator.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHAR_ENGINE_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mode: Literal["average", "random"] = Field(
        default="average",
        description="Default dice mode",
    )
    seed: int | None = Field(
        default=None,
        description="Random seed for reproducible rolls",
    )


class InventorySettings(BaseSettings):
    """Configuration for the inventory manager.

    Attributes:
        max_items: Optional capacity; None means unlimited.
        min_enchantment: Lowest allowed enchantment (deepest curse).
        max_enchantment: Highest allowed enchantment.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHAR_ENGINE_INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_items: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of items carried",
    )
    min_enchantment: int = Field(
        default=MIN_ENCHANTMENT_LEVEL,
        ge=-10,
        le=0,
        description="Lowest enchantment level",
    )
    max_enchantment: int = Field(
        default=MAX_ENCHANTMENT_LEVEL,
        ge=0,
        le=10,
        description="Highest enchantment level",
    )

    @model_validator(mode="after")
    def validate_enchantment_range(self) -> "InventorySettings":
        """Ensure the enchantment range is not empty.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If min_enchantment >= max_enchantment.
        """
        if self.min_enchantment >= self.max_enchantment:
            raise ConfigurationError(
                f"min_enchantment ({self.min_enchantment}) must be less than "
                f"max_enchantment ({self.max_enchantment})",
                config_key="min_enchantment",
            )
        return self


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Logging level.
        log_json: Render logs as JSON.
        dice: Dice engine settings.
        inventory: Inventory settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHAR_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Character Progression Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    dice: DiceSettings = Field(default_factory=DiceSettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "DiceSettings",
    "InventorySettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
