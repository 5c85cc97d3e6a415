"""
Base Service Foundation

Purpose
-------
Provides the foundational class for all progression services. Services
implement pure computation over explicit inputs: no persistence, no clocks
of their own, no global state.

Design Notes
------------
This base class provides:
- Structured logging with operation context
- Safe config access patterns against the injected ConfigManager
- Validation helpers that raise domain exceptions

What this class does NOT do:
- Store player state between calls
- Read the wall clock (callers pass `now`)
- Contain game-specific logic

Usage
-----
    class PowerService(BaseService):
        def __init__(self, config_manager):
            super().__init__(config_manager, get_logger(__name__))
            self.scale = self.get_config("power.scale", 12)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from nacho.core.exceptions import ConfigurationError
from nacho.modules.shared.exceptions import (
    ValidationError,
    get_error_severity,
    is_transient_error,
    should_alert,
)

if TYPE_CHECKING:
    from logging import Logger

    from nacho.core.config.manager import ConfigManager


class BaseService:
    """
    Base class for all domain services.

    Args:
        config_manager: Balance configuration for this engine instance
        logger: Structured logger instance
    """

    def __init__(self, config_manager: ConfigManager, logger: Logger) -> None:
        self._config = config_manager
        self.log = logger

    def get_config(
        self, key: str, default: Optional[Any] = None, required: bool = False
    ) -> Any:
        """
        Safely retrieve configuration value.

        Args:
            key: Configuration key to retrieve
            default: Default value if key not found
            required: If True, raise exception if key missing

        Raises:
            ConfigurationError: If required=True and key is missing
        """
        value = self._config.get(key, default)
        if required and value is None:
            raise ConfigurationError(
                key, f"Required configuration key '{key}' is missing"
            )
        return value

    def get_section(self, key: str, required: bool = False) -> Dict[str, Any]:
        """Retrieve a mapping-valued section (a copy), optionally required."""
        section = self._config.section(key)
        if required and not section:
            raise ConfigurationError(
                key, f"Required configuration section '{key}' is missing"
            )
        return section

    def log_operation(self, operation: str, **context: Any) -> None:
        """Log a service operation with structured context (DEBUG)."""
        self.log.debug(
            f"Service operation: {operation}",
            extra={"operation": operation, **context},
        )

    def log_error(self, operation: str, error: Exception, **context: Any) -> None:
        """
        Log a service error with full context.

        Errors that should alert are logged at ERROR, anything milder at
        WARNING.
        """
        level = logging.ERROR if should_alert(error) else logging.WARNING
        self.log.log(
            level,
            f"Service error during {operation}: {str(error)}",
            extra={
                "operation": operation,
                "error_type": type(error).__name__,
                "error_message": str(error),
                "severity": get_error_severity(error).value,
                "retryable": is_transient_error(error),
                **context,
            },
        )

    def validate_positive_int(self, value: int, name: str) -> None:
        """
        Validate that a value is a positive integer.

        Raises:
            ValidationError: If value is not a positive int (bools rejected)
        """
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(
                name, f"{name} must be a positive integer, got {value!r}"
            )

    def validate_non_negative_int(self, value: int, name: str) -> None:
        """
        Validate that a value is a non-negative integer.

        Raises:
            ValidationError: If value is negative or not an int
        """
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(
                name, f"{name} must be a non-negative integer, got {value!r}"
            )

    def validate_range(
        self, value: float, name: str, min_val: float, max_val: float
    ) -> None:
        """
        Validate that a value is within a specified range (inclusive).

        Raises:
            ValidationError: If value is out of range
        """
        if not (min_val <= value <= max_val):
            raise ValidationError(
                name,
                f"{name} must be between {min_val} and {max_val}, got {value}",
            )
