"""
ConfigManager: layered balance configuration for the Nacho engine.

Purpose
-------
- Provide hierarchical, dot-notation access to tunable balance values.
- Back configuration with YAML defaults plus in-memory overrides.
- Keep every scaling constant (weights, curves, rarity tables) out of code.

Responsibilities
----------------
- Load and deep-merge balance defaults from a directory of YAML files.
- Overlay validated overrides on top of the defaults.
- Serve reads by dot-notation key with a caller-supplied default.
- Validate structures using the recursive schemas in `validator`.

Key Design Decisions
--------------------
- YAML is the single source for **defaults**; overrides live in memory on
  the instance that received them.
- ConfigManager is an ordinary object. Each service receives one in its
  constructor, so two managers with different balance never interfere and
  tests can build one per case.
- Overrides are applied to the top-level subtree and re-validated as a
  whole, so a partial override cannot leave a section structurally broken.

Dependencies
------------
- PyYAML: parsing balance files (`yaml.safe_load`)
- `nacho.core.config.validator`: schema validation
- `nacho.core.logging.logger.get_logger`: structured logging
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Union

import yaml

from nacho.core.config.config import Config
from nacho.core.config.errors import (
    ConfigInitializationError,
    ConfigValidationError,
    ConfigWriteError,
)
from nacho.core.config.validator import validate_config_value
from nacho.core.logging.logger import get_logger

logger = get_logger(__name__)

_MISSING = object()


# ============================================================================
# ConfigManager
# ============================================================================


class ConfigManager:
    """
    Balance configuration with YAML defaults and validated overrides.

    Examples
    --------
    >>> manager = ConfigManager.from_yaml()
    >>> manager.get("power.scale")
    12
    >>> manager.get("power.missing_key", 0)
    0
    >>> manager.set("power.scale", 10)
    >>> manager.get("power.scale")
    10
    """

    def __init__(self, defaults: Optional[Mapping[str, Any]] = None) -> None:
        self._defaults: Dict[str, Any] = copy.deepcopy(dict(defaults or {}))
        self._overrides: Dict[str, Any] = {}
        self._validators: Dict[str, Callable[[Any], Any]] = {}

        for top_key, value in self._defaults.items():
            validate_config_value(top_key, value)

        self._merged: Dict[str, Any] = self._merge_layers(self._overrides)

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_yaml(
        cls,
        config_dir: Optional[Union[str, Path]] = None,
    ) -> "ConfigManager":
        """
        Build a manager from every `*.yaml` / `*.yml` file in a directory.

        Parameters
        ----------
        config_dir:
            Directory to load. Defaults to `Config.BALANCE_DIR` (the packaged
            balance tables unless `NACHO_BALANCE_DIR` points elsewhere).

        Raises
        ------
        ConfigInitializationError
            If the directory is missing, a file cannot be parsed, or a
            file's root is not a mapping.
        """
        directory = Path(config_dir) if config_dir is not None else Config.BALANCE_DIR
        if not directory.is_dir():
            raise ConfigInitializationError(
                f"Balance directory does not exist: {directory}"
            )

        yaml_files = sorted(
            list(directory.rglob("*.yaml")) + list(directory.rglob("*.yml"))
        )
        if not yaml_files:
            logger.warning(
                "No YAML balance files found",
                extra={"config_dir": str(directory)},
            )

        defaults: Dict[str, Any] = {}
        for yaml_file in yaml_files:
            try:
                with yaml_file.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle)
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigInitializationError(
                    f"Failed to load balance file {yaml_file.name}: {exc}"
                ) from exc

            if data is None:
                continue
            if not isinstance(data, dict):
                raise ConfigInitializationError(
                    f"Balance file {yaml_file.name} must contain a mapping; "
                    f"got {type(data).__name__}"
                )

            cls._deep_merge_dict(defaults, data)
            logger.debug(
                "Loaded YAML config",
                extra={
                    "file": str(yaml_file.relative_to(directory)),
                    "absolute_path": str(yaml_file),
                },
            )

        try:
            manager = cls(defaults)
        except ConfigValidationError as exc:
            raise ConfigInitializationError(
                f"Invalid balance configuration in {directory}: {exc}"
            ) from exc

        logger.info(
            "ConfigManager initialized",
            extra={
                "config_dir": str(directory),
                "yaml_file_count": len(yaml_files),
                "top_level_keys": sorted(defaults.keys()),
            },
        )
        return manager

    @staticmethod
    def _deep_merge_dict(
        target: MutableMapping[str, Any],
        source: Mapping[str, Any],
    ) -> None:
        """Recursively merge `source` into `target` (in-place)."""
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                ConfigManager._deep_merge_dict(target[key], value)
            else:
                target[key] = copy.deepcopy(value)

    def _merge_layers(self, overrides: Mapping[str, Any]) -> Dict[str, Any]:
        merged = copy.deepcopy(self._defaults)
        self._deep_merge_dict(merged, overrides)
        return merged

    # =========================================================================
    # READ API
    # =========================================================================

    @staticmethod
    def _traverse(tree: Mapping[str, Any], key: str) -> Any:
        value: Any = tree
        for part in key.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return _MISSING
            value = value[part]
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a configuration value by dot-notation path.

        Overrides win over YAML defaults. Returns `default` when the key is
        absent from both layers or resolves to None.

        Examples
        --------
        >>> manager.get("dungeon.power.base")
        12000
        >>> manager.get("dungeon.power.cubic", 0)
        0
        """
        value = self._traverse(self._merged, key)
        if value is _MISSING or value is None:
            return default
        return value

    def section(self, key: str) -> Dict[str, Any]:
        """
        Return a deep copy of a mapping-valued section.

        Missing sections yield an empty dict; callers then fall back to
        their own per-field defaults.
        """
        value = self.get(key, {})
        if not isinstance(value, Mapping):
            raise ConfigValidationError(
                f"Config value at '{key}' must be a mapping; got {type(value).__name__}"
            )
        return copy.deepcopy(dict(value))

    def get_all_keys(self) -> List[str]:
        """Return all top-level configuration keys across both layers."""
        return sorted(self._merged.keys())

    # =========================================================================
    # WRITE API
    # =========================================================================

    def register_validator(self, key: str, validator: Callable[[Any], Any]) -> None:
        """
        Register a validator for an exact dot-notation key.

        Validators are invoked on `set` and must either return the value to
        store or raise to block the write.
        """
        self._validators[key] = validator
        logger.debug(
            "ConfigManager validator registered",
            extra={
                "config_key": key,
                "validator": getattr(validator, "__name__", "anonymous"),
            },
        )

    def _apply_validator(self, key: str, value: Any) -> Any:
        validator = self._validators.get(key)
        if not validator:
            return value

        try:
            return validator(value)
        except (ValueError, TypeError, ConfigValidationError) as exc:
            logger.error(
                "Config validation failed",
                extra={
                    "config_key": key,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            raise ConfigWriteError(f"Validation failed for config key '{key}'") from exc

    def set(self, key: str, value: Any) -> None:
        """
        Override a configuration value on this instance.

        The resulting top-level section (defaults merged with all overrides)
        is schema-validated before the write is committed.

        Raises
        ------
        ConfigValidationError
            If the merged section no longer matches its schema.
        ConfigWriteError
            If a registered per-key validator rejects the value.
        """
        value = self._apply_validator(key, value)

        parts = key.split(".")
        top_key = parts[0]

        candidate = copy.deepcopy(self._overrides)
        node: Dict[str, Any] = candidate
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = copy.deepcopy(value)

        merged = self._merge_layers(candidate)
        validate_config_value(top_key, merged[top_key])

        self._overrides = candidate
        self._merged = merged
        logger.info(
            "Config override applied",
            extra={"config_key": key},
        )

    def reset(self, key: Optional[str] = None) -> None:
        """Drop one top-level override section, or all overrides."""
        if key is None:
            self._overrides.clear()
        else:
            self._overrides.pop(key.split(".")[0], None)
        self._merged = self._merge_layers(self._overrides)
