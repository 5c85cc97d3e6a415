"""
Configuration validation and schema management for the Nacho engine.

Purpose
-------
Provides recursive schema-based validation for the nested balance tables.
Ensures type safety and structural integrity of configuration values before
they are merged into a ConfigManager.

Responsibilities
----------------
- Define ConfigSchema class for recursive validation
- Maintain schema registry for known top-level balance keys
- Perform type checking and structural validation
- Support type coercion for compatible types (int->float)

Non-Responsibilities
--------------------
- Configuration storage or lookup (handled by ConfigManager)
- Balance semantics such as monotonic curves (handled by each service)

Key Validation Rules
--------------------
1. All config values must be Mapping types (dict-like)
2. Known fields are validated against specified types or nested schemas
3. Type coercion: int values accepted where float expected
4. Missing fields are allowed (sparse overrides supported)
5. Unknown fields allowed by default (set allow_extra=False to forbid)
6. Nested schemas validated recursively with path tracking
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from nacho.core.config.errors import ConfigValidationError


# Type alias for schema field definitions
SchemaField = Union[type, "ConfigSchema"]


@dataclass(slots=True)
class ConfigSchema:
    """
    Recursive schema for nested configuration validation.

    Attributes
    ----------
    fields:
        Mapping of field names to expected types or nested schemas.
    allow_extra:
        Whether to allow fields not defined in the schema.

    Examples
    --------
    >>> schema = ConfigSchema(fields={"count": int, "rate": float})
    >>> schema.validate({"count": 10, "rate": 0.5})
    {'count': 10, 'rate': 0.5}

    >>> schema.validate({"count": "ten"})
    Traceback (most recent call last):
        ...
    ConfigValidationError: Config value at 'count' must be int; got str
    """

    fields: Mapping[str, SchemaField]
    allow_extra: bool = True

    def validate(self, value: Any, path: str = "") -> Any:
        """
        Validate value against this schema with detailed error reporting.

        Parameters
        ----------
        value:
            The value to validate (typically a dict/mapping).
        path:
            Dot-notation path for error messages (e.g., "power.equipment").

        Returns
        -------
        Any
            The original value if validation succeeds.

        Raises
        ------
        ConfigValidationError
            If validation fails, with the dotted path of the offending field.
        """
        if not isinstance(value, Mapping):
            raise ConfigValidationError(
                f"Config value at '{path or '<root>'}' must be a mapping; "
                f"got {type(value).__name__}"
            )

        for key, expected in self.fields.items():
            full_path = f"{path}.{key}" if path else key

            # Missing fields are allowed (sparse overrides)
            if key not in value:
                continue

            raw = value[key]

            if isinstance(expected, ConfigSchema):
                expected.validate(raw, path=full_path)
                continue

            # bool is an int subclass; never accept it as a number
            if isinstance(raw, bool) and expected is not bool:
                raise ConfigValidationError(
                    f"Config value at '{full_path}' must be {expected.__name__}; "
                    f"got bool"
                )

            if expected is float and isinstance(raw, int):
                continue

            if not isinstance(raw, expected):
                raise ConfigValidationError(
                    f"Config value at '{full_path}' must be {expected.__name__}; "
                    f"got {type(raw).__name__}"
                )

        if not self.allow_extra:
            unknown_keys = set(value.keys()) - set(self.fields.keys())
            if unknown_keys:
                unknown_list = ", ".join(sorted(str(k) for k in unknown_keys))
                raise ConfigValidationError(
                    f"Unexpected config keys at '{path or '<root>'}': {unknown_list}"
                )

        return value


# ============================================================================
# Schema Registry
# ============================================================================

# Only well-understood fields are specified; list-valued tables are checked
# for type only, and each service validates its own entries on read.

_SCHEMAS: Dict[str, ConfigSchema] = {
    "power": ConfigSchema(
        fields={
            "scale": int,
            "base_stat_weight": int,
            "level_weight": int,
            "collection_bonus": float,
            "excluded_frame_ids": list,
            "title_rarity_power": dict,
            "frame_rarity_power": dict,
            "shadow_rank_power": dict,
            "army_bonuses": list,
            "equipment": ConfigSchema(
                fields={
                    "stat_multiplier": float,
                    "default_rarity_multiplier": float,
                    "rarity_multiplier": dict,
                },
            ),
            "passive_weight": int,
            "job_class": ConfigSchema(
                fields={
                    "weight": int,
                    "order": list,
                },
            ),
        },
    ),
    "dungeon": ConfigSchema(
        fields={
            "tiers": list,
            "floors_per_tier": int,
            "boss_interval": int,
            "power": ConfigSchema(
                fields={
                    "base": int,
                    "linear": float,
                    "quadratic": float,
                },
            ),
            "xp_fraction": float,
            "time_limit": ConfigSchema(
                fields={
                    "base_seconds": int,
                    "step_floors": int,
                    "step_seconds": int,
                },
            ),
            "min_level_offset": int,
            "recommended_stats": list,
            "drop_rates": dict,
            "boss": ConfigSchema(
                fields={
                    "level_offset": int,
                    "health_multiplier": int,
                    "abilities": list,
                    "shadow_value_per_floor": float,
                    "names": list,
                    "shadows": list,
                },
            ),
            "rewards": ConfigSchema(
                fields={
                    "defeat_xp_fraction": float,
                    "victory_xp_fraction": float,
                    "victory_xp_variance": float,
                    "boss_rare_multiplier": float,
                    "boss_rare_rarities": list,
                    "bonus_roll": ConfigSchema(
                        fields={
                            "base": float,
                            "per_floor": float,
                            "max": float,
                        },
                    ),
                    "high_floor_roll": ConfigSchema(
                        fields={
                            "min_floor": int,
                            "chance": float,
                        },
                    ),
                    "fallback_rarity": str,
                },
            ),
        },
    ),
    "boss": ConfigSchema(
        fields={
            "elements": list,
            "element_keywords": list,
            "names": dict,
            "moves": dict,
            "element_move_count": int,
            "finishing_move": str,
            "power_per_difficulty": int,
            "variance": ConfigSchema(
                fields={
                    "min": float,
                    "spread": float,
                },
            ),
            "level_spread": int,
            "stat_floor": int,
            "stat_pool_divisor": int,
            "top_up_fraction": float,
            "stat_bias": dict,
            "extract_chance": float,
            "shadow_name_prefix": str,
            "shadow_rank_ladder": list,
            "default_shadow_rank": str,
            "shadow_bonus_per_difficulty": int,
            "shadow_bonus_stat": dict,
        },
    ),
    "daily_quests": ConfigSchema(
        fields={
            "batch_size": int,
            "manual_completion_xp": ConfigSchema(
                fields={
                    "base": int,
                    "level_bonus": float,
                },
            ),
            "shards": ConfigSchema(
                fields={
                    "min": int,
                    "spread": int,
                    "per_level": int,
                    "max": int,
                },
            ),
            "quest_pool": list,
        },
    ),
    "stats": ConfigSchema(
        fields={
            "passives": list,
            "buffs": dict,
            "sleep": ConfigSchema(
                fields={
                    "buff_id": str,
                    "min_hours": float,
                    "max_hours": float,
                },
            ),
            "health_score": ConfigSchema(
                fields={
                    "base": int,
                    "min": int,
                    "max": int,
                    "sleep": dict,
                    "weight": dict,
                },
            ),
        },
    ),
    "progression": ConfigSchema(
        fields={
            "xp_curve": ConfigSchema(
                fields={
                    "base": int,
                    "exponent": float,
                },
            ),
            "level_up": ConfigSchema(
                fields={
                    "stat_gain": int,
                    "passive_points": int,
                },
            ),
            "missions": ConfigSchema(
                fields={
                    "streak_bonus_per_day": float,
                    "level_bonus_per_level": float,
                    "target_stat_gain": int,
                    "schedule_lookback_days": int,
                    "shards": ConfigSchema(
                        fields={
                            "min": int,
                            "spread": int,
                            "streak_bonus": float,
                            "level_bonus": float,
                        },
                    ),
                },
            ),
            "daily_chest": ConfigSchema(
                fields={
                    "xp_per_level": int,
                },
            ),
            "daily_reset": ConfigSchema(
                fields={
                    "streak_gain": int,
                },
            ),
        },
    ),
    "cosmetics": ConfigSchema(
        fields={
            "titles": dict,
            "frames": dict,
        },
    ),
}


def get_schema_for_top_key(top_key: str) -> Optional[ConfigSchema]:
    """Return the validation schema for a top-level key, or None."""
    return _SCHEMAS.get(top_key)


def register_schema(top_key: str, schema: ConfigSchema) -> None:
    """
    Register a new schema for a top-level configuration key.

    Example
    -------
    >>> schema = ConfigSchema(fields={"enabled": bool, "rate": float})
    >>> register_schema("season", schema)
    >>> get_schema_for_top_key("season") is schema
    True
    """
    _SCHEMAS[top_key] = schema


def unregister_schema(top_key: str) -> Optional[ConfigSchema]:
    """Unregister a schema; returns the removed schema, if any."""
    return _SCHEMAS.pop(top_key, None)


def validate_config_value(top_key: str, value: Any) -> Any:
    """
    Validate a top-level configuration value against its schema.

    If no schema is registered for the key, the value passes validation
    unchanged (permissive by default).

    Raises
    ------
    ConfigValidationError:
        If validation fails.
    """
    schema = get_schema_for_top_key(top_key)
    if schema is None:
        return value
    return schema.validate(value, path=top_key)


__all__ = [
    "ConfigSchema",
    "SchemaField",
    "get_schema_for_top_key",
    "register_schema",
    "unregister_schema",
    "validate_config_value",
]
