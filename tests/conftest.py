"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the character engine test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from char_engine.models.character import Character
    from char_engine.models.inventory import InventoryItem, InventoryManager


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from char_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_dice_mode() -> Generator[None, None, None]:
    """Put the dice engine back on the configured default around each test."""
    from char_engine.engine.dice import reset_dice_mode as _reset

    _reset()
    yield
    _reset()


@pytest.fixture
def average_dice() -> None:
    """Force deterministic-average rolls."""
    from char_engine.engine.dice import DiceMode, set_dice_mode

    set_dice_mode(DiceMode.AVERAGE)


@pytest.fixture
def random_dice() -> None:
    """Force real dice rolls."""
    from char_engine.engine.dice import DiceMode, set_dice_mode

    set_dice_mode(DiceMode.RANDOM)


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "CHAR_ENGINE_DEBUG": "true",
        "CHAR_ENGINE_LOG_LEVEL": "DEBUG",
        "CHAR_ENGINE_DICE_MODE": "random",
        "CHAR_ENGINE_INVENTORY_MAX_ITEMS": "5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def make_character(average_dice: None) -> Callable[..., Character]:
    """Factory for level-1 characters rolled in average mode.

    Returns:
        A callable taking the same arguments as ``Character.create``.
    """
    from char_engine.models.character import Character

    def _make(high: str = "str", mid: str = "dex", **kwargs: object) -> Character:
        return Character.create(high, mid, **kwargs)

    return _make


@pytest.fixture
def fighter(make_character: Callable[..., Character]) -> Character:
    """STR 16 / DEX 10 / INT 6 character."""
    return make_character("str", "dex", name="Brom")


@pytest.fixture
def caster(make_character: Callable[..., Character]) -> Character:
    """INT 16 / STR 10 / DEX 6 character."""
    return make_character("int", "str", name="Mira")


@pytest.fixture
def rogue(make_character: Callable[..., Character]) -> Character:
    """DEX 16 / STR 10 / INT 6 character."""
    return make_character("dex", "str", name="Quill")


@pytest.fixture
def inventory() -> InventoryManager:
    """An empty inventory with no character stats attached."""
    from char_engine.models.inventory import InventoryManager

    return InventoryManager()


@pytest.fixture
def add_item() -> Callable[..., InventoryItem]:
    """Factory that adds a catalog item to an inventory and returns it."""
    from char_engine.models.inventory import create_inventory_item

    def _add(manager: InventoryManager, template_name: str, **overrides: object) -> InventoryItem:
        item = create_inventory_item(template_name, **overrides)
        assert manager.add_item(item)
        return item

    return _add
