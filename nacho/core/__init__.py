"""
Core infrastructure layer for the Nacho engine.

Purpose
-------
Provide a single import surface for infrastructure concerns:

- Configuration management (Config, ConfigManager)
- Logging (structured logging, logger factory, log context)
- Infrastructure exceptions (NachoInfrastructureException hierarchy)

Design Decisions
----------------
- This module is intentionally thin: no logic, no configuration, no I/O.
- Feature modules import from their own domains, not from nacho.core directly.
"""

from __future__ import annotations

from nacho.core.config import Config, ConfigManager
from nacho.core.exceptions import (
    ConfigurationError,
    ErrorSeverity,
    NachoInfrastructureException,
)
from nacho.core.logging import LogContext, get_logger, setup_logging, shutdown_logging

__all__ = [
    # Configuration
    "Config",
    "ConfigManager",
    # Logging
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "LogContext",
    # Exceptions
    "ConfigurationError",
    "ErrorSeverity",
    "NachoInfrastructureException",
]
