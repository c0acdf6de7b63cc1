"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CharEngineError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Caller input errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        character_context: Tag log entries with a character name.
"""

from __future__ import annotations

from char_engine.core.config import (
    DiceSettings,
    InventorySettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from char_engine.core.exceptions import (
    AbilityError,
    CharEngineError,
    ConfigurationError,
    DiceRollError,
    InvalidNotationError,
    InventoryError,
    RulesEngineError,
    UnknownTemplateError,
    ValidationError,
)
from char_engine.core.logging import (
    bind_context,
    character_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "CharEngineError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Rules engine exceptions
    "RulesEngineError",
    "DiceRollError",
    "InvalidNotationError",
    # Inventory exceptions
    "InventoryError",
    "UnknownTemplateError",
    # Ability exceptions
    "AbilityError",
    # Configuration
    "Settings",
    "DiceSettings",
    "InventorySettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "character_context",
    "get_logger",
    "bind_context",
    "clear_context",
]
