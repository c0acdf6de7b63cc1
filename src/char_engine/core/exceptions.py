"""Custom exception hierarchy for the character progression engine.

Everything the engine raises derives from CharEngineError, grouped by
domain: rules (dice, notation), inventory, abilities, configuration and
validation.

Only validation problems raise. Precondition rejections (equipping without
meeting a requirement, allocating with no pending points) return a sentinel
and log the reason instead.

Example:
    >>> from char_engine.core.exceptions import InvalidNotationError
    >>> raise InvalidNotationError("Invalid dice notation", expression="d6+")
"""

from __future__ import annotations

from typing import Any


class CharEngineError(Exception):
    """Root of every error the engine raises.

    ``details`` holds structured context (field names, offending values,
    dice expressions); ``str(error)`` appends it as ``[key=value]`` pairs.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.details:
            return self.message
        pairs = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{pairs}]"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Rules Engine Domain Exceptions
# =============================================================================


class RulesEngineError(CharEngineError):
    """Base exception for dice, progression and combat rule errors."""


class DiceRollError(RulesEngineError):
    """Raised when dice rolling operations fail.

    This typically occurs when a roll is requested with a non-positive
    number of dice or sides.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class InvalidNotationError(DiceRollError):
    """Raised when a dice notation string cannot be parsed.

    Malformed input includes a missing count, missing sides or a
    non-numeric modifier (e.g. ``"d6"``, ``"2d"``, ``"2d6+x"``).
    """


# =============================================================================
# Inventory Domain Exceptions
# =============================================================================


class InventoryError(CharEngineError):
    """Base exception for inventory and equipment errors."""

    def __init__(
        self,
        message: str,
        *,
        item_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize inventory error with item context.

        Args:
            message: Human-readable error description.
            item_id: Identifier of the inventory item involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if item_id:
            combined_details["item_id"] = item_id
        super().__init__(message, details=combined_details)


class UnknownTemplateError(InventoryError):
    """Raised when an item references a template missing from the catalog.

    This is the only hard failure of the inventory manager: everything
    else is reported through boolean results.
    """

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        item_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize unknown template error.

        Args:
            message: Human-readable error description.
            template_name: The template name that could not be resolved.
            item_id: Identifier of the inventory item involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if template_name:
            combined_details["template_name"] = template_name
        super().__init__(message, item_id=item_id, details=combined_details)


# =============================================================================
# Ability Domain Exceptions
# =============================================================================


class AbilityError(CharEngineError):
    """Raised when an ability catalog lookup cannot be satisfied."""

    def __init__(
        self,
        message: str,
        *,
        ability_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ability error with type context.

        Args:
            message: Human-readable error description.
            ability_type: The ability category involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if ability_type:
            combined_details["ability_type"] = ability_type
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(CharEngineError):
    """Raised when engine configuration is invalid.

    This includes invalid values or incompatible configuration
    combinations in the environment or ``.env`` file.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(CharEngineError):
    """Raised when caller input fails validation.

    This includes unrecognized stat names, unknown races and other
    values that must never be silently coerced.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "CharEngineError",
    # Rules engine exceptions
    "RulesEngineError",
    "DiceRollError",
    "InvalidNotationError",
    # Inventory exceptions
    "InventoryError",
    "UnknownTemplateError",
    # Ability exceptions
    "AbilityError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
