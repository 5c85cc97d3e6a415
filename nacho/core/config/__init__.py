"""
Configuration management subsystem for the Nacho engine.

Two layers:

**Static (Config):**
- Loaded from environment variables (.env supported) at import
- Environment name, logging output, balance directory

**Balance (ConfigManager):**
- Loaded from the YAML balance tables
- Dot-notation reads, validated in-memory overrides
- One instance per engine, passed to every service

Usage
-----
```python
from nacho.core.config import ConfigManager

config = ConfigManager.from_yaml()
scale = config.get("power.scale", 12)
config.set("dungeon.power.base", 15000)
```
"""

from nacho.core.config.config import Config, Environment
from nacho.core.config.errors import (
    ConfigError,
    ConfigInitializationError,
    ConfigValidationError,
    ConfigWriteError,
)
from nacho.core.config.manager import ConfigManager
from nacho.core.config.validator import (
    ConfigSchema,
    SchemaField,
    get_schema_for_top_key,
    register_schema,
    unregister_schema,
    validate_config_value,
)

__all__ = [
    # Static configuration
    "Config",
    "Environment",
    # Balance configuration
    "ConfigManager",
    # Error hierarchy
    "ConfigError",
    "ConfigInitializationError",
    "ConfigValidationError",
    "ConfigWriteError",
    # Validation
    "ConfigSchema",
    "SchemaField",
    "get_schema_for_top_key",
    "register_schema",
    "unregister_schema",
    "validate_config_value",
]
