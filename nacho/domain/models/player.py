"""
Player Domain Models for the Nacho engine.

Purpose
-------
Immutable value objects describing a player's character sheet and the
collections that feed power: active buffs, passive skills, the shadow
roster and equipment.

Responsibilities
----------------
- Enforce structural invariants (integer, non-negative attributes; level >= 1)
- Keep the unlocked title list unique, preserving unlock order
- Convert to and from plain mappings for the persistence boundary

Non-Responsibilities
--------------------
- Computing effective stats or power (handled by services)
- Deciding when state is persisted (handled by the host application)

Usage Example
-------------
>>> stats = UserStats(strength=14, level=3)
>>> stats.get(StatType.STRENGTH)
14
>>> state = PlayerState.from_dict({"stats": stats.to_dict()})
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from nacho.domain.models.base import (
    DomainValidationError,
    format_datetime,
    parse_datetime,
    validate_non_negative,
    validate_not_empty,
    validate_positive,
)


# ============================================================================
# STAT TYPE
# ============================================================================


class StatType(str, Enum):
    """The six player attributes."""

    STRENGTH = "Strength"
    VITALITY = "Vitality"
    AGILITY = "Agility"
    INTELLIGENCE = "Intelligence"
    FORTUNE = "Fortune"
    METABOLISM = "Metabolism"

    @property
    def key(self) -> str:
        """Lowercase attribute name used in mappings and config."""
        return self.value.lower()

    @classmethod
    def try_parse(cls, value: Any) -> Optional["StatType"]:
        """Case-insensitive lookup; unknown names yield None."""
        if isinstance(value, StatType):
            return value
        if not isinstance(value, str):
            return None
        return _STAT_LOOKUP.get(value.strip().lower())

    @classmethod
    def parse(cls, value: Any) -> "StatType":
        """Case-insensitive lookup; unknown names raise DomainValidationError."""
        stat = cls.try_parse(value)
        if stat is None:
            raise DomainValidationError(f"Unknown stat: {value!r}", field="stat")
        return stat


_STAT_LOOKUP: Dict[str, StatType] = {stat.key: stat for stat in StatType}


def parse_stat_mapping(raw: Optional[Mapping[Any, Any]], field_name: str) -> Dict[StatType, int]:
    """Parse `{stat name: int}` into `{StatType: int}`; unknown stats raise."""
    if not raw:
        return {}
    parsed: Dict[StatType, int] = {}
    for name, amount in raw.items():
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise DomainValidationError(
                f"{field_name}[{name}] must be an integer, got {amount!r}",
                field=field_name,
            )
        parsed[StatType.parse(name)] = amount
    return parsed


def _dedupe(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(values))


# ============================================================================
# USER STATS
# ============================================================================


@dataclass(frozen=True)
class UserStats:
    """
    Immutable character sheet.

    Attributes
    ----------
    strength, vitality, agility, intelligence, fortune, metabolism : int
        Base attribute values (non-negative)
    level : int
        Player level (>= 1)
    xp_current, xp_for_next_level : int
        Progress inside the current level
    streak : int
        Consecutive active days
    equipped_title_id : Optional[str]
        Title shown on the profile
    unlocked_title_ids : Tuple[str, ...]
        Unique, in unlock order
    selected_frame_id : str
        Avatar frame ("default" when none)
    unlocked_frame_ids : Tuple[str, ...]
        Unique, in unlock order
    job_class : str
        Name from the ordered job class progression
    passive_levels : Dict[str, int]
        Passive id -> invested level
    passive_points : int
        Unspent passive points
    """

    strength: int = 10
    vitality: int = 10
    agility: int = 10
    intelligence: int = 10
    fortune: int = 10
    metabolism: int = 10
    level: int = 1
    xp_current: int = 0
    xp_for_next_level: int = 150
    streak: int = 0
    equipped_title_id: Optional[str] = None
    unlocked_title_ids: Tuple[str, ...] = ()
    selected_frame_id: str = "default"
    unlocked_frame_ids: Tuple[str, ...] = ("default",)
    job_class: str = "None"
    passive_levels: Dict[str, int] = field(default_factory=dict)
    passive_points: int = 0

    def __post_init__(self) -> None:
        """Validate structure and normalise collections."""
        for stat in StatType:
            validate_non_negative(getattr(self, stat.key), stat.key)
        validate_positive(self.level, "level")
        validate_non_negative(self.xp_current, "xp_current")
        validate_positive(self.xp_for_next_level, "xp_for_next_level")
        validate_non_negative(self.streak, "streak")
        validate_non_negative(self.passive_points, "passive_points")

        for passive_id, passive_level in self.passive_levels.items():
            validate_non_negative(passive_level, f"passive_levels[{passive_id}]")

        object.__setattr__(self, "unlocked_title_ids", _dedupe(self.unlocked_title_ids))
        object.__setattr__(self, "unlocked_frame_ids", _dedupe(self.unlocked_frame_ids))
        object.__setattr__(self, "passive_levels", dict(self.passive_levels))

    def get(self, stat: StatType) -> int:
        return getattr(self, stat.key)

    def base_stat_total(self) -> int:
        return sum(self.get(stat) for stat in StatType)

    def as_stat_dict(self) -> Dict[StatType, int]:
        return {stat: self.get(stat) for stat in StatType}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserStats":
        """
        Build from a plain mapping.

        The six attributes and `level` are required; a missing one is a
        structural error, not something to default silently.
        """
        if not isinstance(data, Mapping):
            raise DomainValidationError("stats must be a mapping", field="stats")

        for required in [stat.key for stat in StatType] + ["level"]:
            if required not in data:
                raise DomainValidationError(
                    f"stats is missing required field '{required}'",
                    field=required,
                )

        passive_levels = data.get("passive_levels") or {}
        if not isinstance(passive_levels, Mapping):
            raise DomainValidationError(
                "passive_levels must be a mapping", field="passive_levels"
            )

        kwargs: Dict[str, Any] = {stat.key: data[stat.key] for stat in StatType}
        kwargs.update(
            level=data["level"],
            xp_current=data.get("xp_current", 0),
            xp_for_next_level=data.get("xp_for_next_level", 150),
            streak=data.get("streak", 0),
            equipped_title_id=data.get("equipped_title_id"),
            unlocked_title_ids=tuple(data.get("unlocked_title_ids") or ()),
            selected_frame_id=data.get("selected_frame_id") or "default",
            unlocked_frame_ids=tuple(data.get("unlocked_frame_ids") or ("default",)),
            job_class=data.get("job_class") or "None",
            passive_levels=dict(passive_levels),
            passive_points=data.get("passive_points", 0),
        )
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {stat.key: self.get(stat) for stat in StatType}
        data.update(
            level=self.level,
            xp_current=self.xp_current,
            xp_for_next_level=self.xp_for_next_level,
            streak=self.streak,
            equipped_title_id=self.equipped_title_id,
            unlocked_title_ids=list(self.unlocked_title_ids),
            selected_frame_id=self.selected_frame_id,
            unlocked_frame_ids=list(self.unlocked_frame_ids),
            job_class=self.job_class,
            passive_levels=dict(self.passive_levels),
            passive_points=self.passive_points,
        )
        return data


# ============================================================================
# BUFFS & PASSIVES
# ============================================================================


@dataclass(frozen=True)
class ActiveBuff:
    """
    One timed stat modifier.

    A buff definition with several modifiers is stored as several records
    sharing the same `id`. `stat` is None for XP-only buffs.
    """

    id: str
    stat: Optional[StatType]
    amount: int
    expires_at: datetime

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        if self.expires_at is None:
            raise DomainValidationError("expires_at is required", field="expires_at")
        object.__setattr__(self, "expires_at", parse_datetime(self.expires_at, "expires_at"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActiveBuff":
        stat = data.get("stat")
        return cls(
            id=data["id"],
            # Unknown stat names contribute nothing rather than failing
            stat=StatType.try_parse(stat) if stat is not None else None,
            amount=int(data.get("amount", 0)),
            expires_at=parse_datetime(data["expires_at"], "expires_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "stat": self.stat.value if self.stat else None,
            "amount": self.amount,
            "expires_at": format_datetime(self.expires_at),
        }


@dataclass(frozen=True)
class PassiveDefinition:
    """
    A passive skill bought with passive points.

    `multiplier(level)` scales the matching base stat; `stat_bonuses_per_level`
    feeds the passive component of power.
    """

    id: str
    name: str
    stat: StatType
    bonus_per_level: float
    max_level: int
    stat_bonuses_per_level: Dict[StatType, int] = field(default_factory=dict)
    cost_per_level: int = 1

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_positive(self.max_level, "max_level")
        validate_positive(self.cost_per_level, "cost_per_level")
        if self.bonus_per_level < 0:
            raise DomainValidationError(
                f"bonus_per_level must be non-negative, got {self.bonus_per_level}",
                field="bonus_per_level",
            )

    def capped_level(self, level: int) -> int:
        return max(0, min(level, self.max_level))

    def multiplier(self, level: int) -> float:
        return 1 + self.capped_level(level) * self.bonus_per_level

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PassiveDefinition":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            stat=StatType.parse(data["stat"]),
            bonus_per_level=float(data.get("bonus_per_level", 0.0)),
            max_level=int(data.get("max_level", 1)),
            stat_bonuses_per_level=parse_stat_mapping(
                data.get("stat_bonuses_per_level"), "stat_bonuses_per_level"
            ),
            cost_per_level=int(data.get("cost_per_level", 1)),
        )


# ============================================================================
# COLLECTIONS
# ============================================================================


@dataclass(frozen=True)
class Shadow:
    """An extracted shadow in the player's army."""

    id: str
    name: str
    rank: str
    bonus_stat: Optional[StatType] = None
    bonus_value: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Shadow":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            rank=str(data.get("rank", "")),
            bonus_stat=StatType.try_parse(data.get("bonus_stat")),
            bonus_value=int(data.get("bonus_value", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rank": self.rank,
            "bonus_stat": self.bonus_stat.value if self.bonus_stat else None,
            "bonus_value": self.bonus_value,
        }


@dataclass(frozen=True)
class EquipmentItem:
    """An inventory item; only equipped items add power."""

    id: str
    rarity: str
    base_stats: Dict[StatType, int] = field(default_factory=dict)
    is_equipped: bool = False

    def __post_init__(self) -> None:
        for stat, value in self.base_stats.items():
            validate_non_negative(value, f"base_stats[{stat}]")

    def stat_total(self) -> int:
        return sum(self.base_stats.values())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EquipmentItem":
        return cls(
            id=str(data["id"]),
            rarity=str(data.get("rarity") or "common"),
            base_stats=parse_stat_mapping(data.get("base_stats"), "base_stats"),
            is_equipped=bool(data.get("is_equipped", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "rarity": self.rarity,
            "base_stats": {stat.value: value for stat, value in self.base_stats.items()},
            "is_equipped": self.is_equipped,
        }


# ============================================================================
# PLAYER STATE
# ============================================================================


@dataclass(frozen=True)
class PlayerState:
    """
    Everything power aggregation reads about a player.

    `custom_titles` / `custom_frames` map player-authored cosmetic ids to
    their rarity and extend the built-in catalog.
    """

    stats: UserStats
    shadows: Tuple[Shadow, ...] = ()
    inventory: Tuple[EquipmentItem, ...] = ()
    custom_titles: Dict[str, str] = field(default_factory=dict)
    custom_frames: Dict[str, str] = field(default_factory=dict)
    active_buffs: Tuple[ActiveBuff, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.stats, UserStats):
            raise DomainValidationError("stats must be UserStats", field="stats")
        object.__setattr__(self, "shadows", tuple(self.shadows))
        object.__setattr__(self, "inventory", tuple(self.inventory))
        object.__setattr__(self, "active_buffs", tuple(self.active_buffs))

    def equipped_items(self) -> Tuple[EquipmentItem, ...]:
        return tuple(item for item in self.inventory if item.is_equipped)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlayerState":
        if not isinstance(data, Mapping):
            raise DomainValidationError("player state must be a mapping", field="state")
        if "stats" not in data:
            raise DomainValidationError("player state is missing 'stats'", field="stats")

        return cls(
            stats=UserStats.from_dict(data["stats"]),
            shadows=tuple(Shadow.from_dict(s) for s in data.get("shadows") or ()),
            inventory=tuple(EquipmentItem.from_dict(i) for i in data.get("inventory") or ()),
            custom_titles=dict(data.get("custom_titles") or {}),
            custom_frames=dict(data.get("custom_frames") or {}),
            active_buffs=tuple(
                ActiveBuff.from_dict(b) for b in data.get("active_buffs") or ()
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "shadows": [shadow.to_dict() for shadow in self.shadows],
            "inventory": [item.to_dict() for item in self.inventory],
            "custom_titles": dict(self.custom_titles),
            "custom_frames": dict(self.custom_frames),
            "active_buffs": [buff.to_dict() for buff in self.active_buffs],
        }
