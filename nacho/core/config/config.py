"""
Static configuration management for the Nacho progression engine.

Purpose
-------
Provides process-level settings loaded from environment variables (with
`.env` support) and sensible defaults. These settings govern infrastructure
concerns only: environment name, logging output and where the balance
tables live. Game balance itself is never read from here.

Responsibilities
----------------
- Load configuration from environment variables with .env support
- Provide type-safe access to static values with safe fallbacks
- Resolve the balance directory (packaged default or override)

Non-Responsibilities
--------------------
- Balance tables (handled by ConfigManager)
- Runtime overrides (handled by ConfigManager.set)

Environment Variables
---------------------
- NACHO_ENV: Environment type (default: development)
- NACHO_LOG_LEVEL: Logging level (default: INFO)
- NACHO_LOG_JSON: Force JSON log output (default: production only)
- NACHO_LOG_COLORS: Colored console output on a TTY (default: True)
- NACHO_BALANCE_DIR: Directory of balance YAML files (default: packaged)

Dependencies
------------
- python-dotenv: Environment variable loading
- pathlib: Cross-platform path handling
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# ============================================================================
# Enums and Constants
# ============================================================================


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment from string with a safe fallback.

        Example
        -------
        >>> Environment.from_string("production") == Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") == Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.lower())
        except ValueError:
            # Structured logger is not initialized this early
            logging.warning(
                f"Unknown environment '{value}', defaulting to development"
            )
            return cls.DEVELOPMENT


PACKAGE_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_BALANCE_DIR = PACKAGE_ROOT / "balance"


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Centralized static configuration for the Nacho engine.

    Usage
    -----
    >>> Config.LOG_LEVEL
    'INFO'
    >>> if Config.is_production():
    ...     logger.info("Running in production mode")
    """

    # =========================================================================
    # Environment Configuration
    # =========================================================================

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True

    # =========================================================================
    # Directory Configuration
    # =========================================================================

    BALANCE_DIR: Path = DEFAULT_BALANCE_DIR

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).
        Unrecognized values log a warning and fall back to `default`.
        """
        raw_value = os.getenv(key)
        if raw_value is None:
            return default

        normalized = raw_value.lower().strip()
        if normalized in {"true", "yes", "1", "on"}:
            return True
        if normalized in {"false", "no", "0", "off"}:
            return False

        logging.warning(
            f"{key}='{raw_value}' is not a valid boolean, using default {default}"
        )
        return default

    @classmethod
    def _safe_str(cls, key: str, default: str) -> str:
        """Read a string from environment, treating blank values as unset."""
        raw_value = os.getenv(key)
        if raw_value is None or not raw_value.strip():
            return default
        return raw_value.strip()

    @classmethod
    def _safe_path(cls, key: str, default: Path) -> Path:
        """Read a directory path from environment; missing dirs fall back."""
        raw_value = os.getenv(key)
        if not raw_value:
            return default

        path = Path(raw_value).expanduser()
        if not path.is_dir():
            logging.warning(
                f"{key}='{raw_value}' is not a directory, using default {default}"
            )
            return default
        return path

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """
        Load all configuration from environment variables.

        Called automatically on module import; call again after changing
        the environment (tests do this via monkeypatch).
        """
        env = Environment.from_string(cls._safe_str("NACHO_ENV", "development"))
        cls.ENVIRONMENT = env.value

        level = cls._safe_str("NACHO_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(level), int):
            logging.warning(f"NACHO_LOG_LEVEL='{level}' is not a level, using INFO")
            level = "INFO"
        cls.LOG_LEVEL = level

        cls.LOG_JSON = cls._safe_bool("NACHO_LOG_JSON", None)
        cls.LOG_COLORS = bool(cls._safe_bool("NACHO_LOG_COLORS", True))
        cls.BALANCE_DIR = cls._safe_path("NACHO_BALANCE_DIR", DEFAULT_BALANCE_DIR)

    # =========================================================================
    # Environment Checks
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT == Environment.PRODUCTION.value

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT == Environment.DEVELOPMENT.value

    @classmethod
    def is_testing(cls) -> bool:
        """Check if running in testing environment."""
        return cls.ENVIRONMENT == Environment.TESTING.value

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """Get configuration summary for debugging."""
        return {
            "environment": cls.ENVIRONMENT,
            "log_level": cls.LOG_LEVEL,
            "log_json": cls.LOG_JSON,
            "log_colors": cls.LOG_COLORS,
            "balance_dir": str(cls.BALANCE_DIR),
        }


# Load on import
Config.load()
