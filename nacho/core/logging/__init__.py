"""
Nacho Logging Infrastructure

Exports the structured logging subsystem, log context helpers,
and configuration interface.
"""

from nacho.core.logging.logger import (
    ContextFilter,
    JSONFormatter,
    LogContext,
    LoggerConfig,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "LogContext",
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    "LoggerConfig",
    "ContextFilter",
    "JSONFormatter",
]
