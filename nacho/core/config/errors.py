"""
Configuration error hierarchy for the Nacho progression engine.

Purpose
-------
Provides exceptions for balance-configuration loading, lookup and override
operations with clear error classification.

Responsibilities
----------------
- Define the exception hierarchy for configuration errors
- Keep error messages precise enough to locate the offending key

Non-Responsibilities
--------------------
- Error logging (handled by the caller's logger)
- Recovery logic (handled by ConfigManager)

Exception Hierarchy
-------------------
ConfigError (base)
├── ConfigValidationError (schema/type validation failures)
├── ConfigWriteError (rejected override)
└── ConfigInitializationError (YAML loading failures)
"""


class ConfigError(Exception):
    """
    Base exception for all configuration-related errors.

    All configuration exceptions inherit from this class so callers can
    catch any configuration problem with a single except clause.
    """
    pass


class ConfigValidationError(ConfigError):
    """
    Raised when configuration validation fails.

    This exception is raised when:
    - Schema validation fails (wrong type, invalid structure)
    - Required fields are missing
    - A value is not a mapping where one is expected

    Example
    -------
    >>> try:
    ...     manager.set("power.scale", "twelve")
    ... except ConfigValidationError as e:
    ...     logger.error(f"Validation failed: {e}")
    """
    pass


class ConfigWriteError(ConfigError):
    """
    Raised when a configuration override cannot be applied.

    This includes validation failures raised by registered per-key
    validators, which are re-raised as ConfigWriteError to keep the
    write API's contract explicit.
    """
    pass


class ConfigInitializationError(ConfigError):
    """
    Raised when ConfigManager initialization fails.

    This exception is raised when:
    - The balance directory does not exist
    - A YAML file cannot be parsed
    - A YAML file's root is not a mapping

    This is a critical error: a progression engine without its balance
    tables cannot compute anything meaningful.
    """
    pass


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConfigWriteError",
    "ConfigInitializationError",
]
