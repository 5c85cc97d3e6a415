"""
Dungeon and Boss Domain Models.

Purpose
-------
Value objects produced by the procedural generators: a Demon Tower floor
(`Dungeon`), its scripted floor boss (`DungeonBoss`), and a fully
generated combatant (`Boss`) with an optional extractable shadow.

Design Notes
------------
- Generated content is never persisted as authored data; it is recomputed
  from its inputs on demand, so these objects are frozen.
- `drop_rates` keeps the configured rarity order (common first).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from nacho.domain.models.base import validate_non_negative, validate_not_empty, validate_positive
from nacho.domain.models.player import StatType, UserStats


@dataclass(frozen=True)
class ShadowBonus:
    stat: StatType
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {"stat": self.stat.value, "value": self.value}


@dataclass(frozen=True)
class ShadowData:
    """A shadow companion the player may extract after a victory."""

    name: str
    rank: str
    bonus: ShadowBonus

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "rank": self.rank, "bonus": self.bonus.to_dict()}


@dataclass(frozen=True)
class DungeonRewards:
    xp: int
    drop_rates: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_non_negative(self.xp, "xp")

    def to_dict(self) -> Dict[str, Any]:
        return {"xp": self.xp, "drop_rates": dict(self.drop_rates)}


@dataclass(frozen=True)
class DungeonBoss:
    """The fixed boss guarding every tenth floor."""

    id: str
    name: str
    level: int
    health: int
    power_level: int
    abilities: Tuple[str, ...]
    can_extract: bool
    shadow_data: Optional[ShadowData] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "health": self.health,
            "power_level": self.power_level,
            "abilities": list(self.abilities),
            "can_extract": self.can_extract,
            "shadow_data": self.shadow_data.to_dict() if self.shadow_data else None,
        }


@dataclass(frozen=True)
class Dungeon:
    """
    One floor of the Demon Tower.

    Attributes
    ----------
    floor : int
        Floor number (>= 1) the dungeon was generated from
    difficulty : str
        Tier label (E .. SSS)
    recommended_power : int
        Power requirement; non-decreasing in `floor`
    time_limit : int
        Seconds allowed for a run
    boss : Optional[DungeonBoss]
        Present exactly on boss floors
    """

    id: str
    floor: int
    name: str
    description: str
    difficulty: str
    recommended_level: int
    recommended_power: int
    time_limit: int
    min_level: int
    recommended_stats: Tuple[StatType, ...]
    rewards: DungeonRewards
    boss: Optional[DungeonBoss] = None

    def __post_init__(self) -> None:
        validate_positive(self.floor, "floor")
        validate_positive(self.min_level, "min_level")
        validate_non_negative(self.recommended_power, "recommended_power")

    @property
    def is_boss_floor(self) -> bool:
        return self.boss is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "floor": self.floor,
            "name": self.name,
            "description": self.description,
            "difficulty": self.difficulty,
            "recommended_level": self.recommended_level,
            "recommended_power": self.recommended_power,
            "time_limit": self.time_limit,
            "min_level": self.min_level,
            "recommended_stats": [stat.value for stat in self.recommended_stats],
            "rewards": self.rewards.to_dict(),
            "boss": self.boss.to_dict() if self.boss else None,
        }


@dataclass(frozen=True)
class DungeonDescriptor:
    """
    What the boss generator needs to know about a dungeon or zone.

    `difficulty` is a 1-based rank (tier index + 1). `recommended_power` of 0
    means "no budget", and the generator derives one from the rank.
    `min_level` of None means the player's own level is used.
    """

    id: str
    difficulty: int
    recommended_power: int = 0
    min_level: Optional[int] = None

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_positive(self.difficulty, "difficulty")
        validate_non_negative(self.recommended_power, "recommended_power")
        if self.min_level is not None:
            validate_positive(self.min_level, "min_level")

    @classmethod
    def from_dungeon(cls, dungeon: Dungeon, tiers: Sequence[str]) -> "DungeonDescriptor":
        """Describe a generated floor, ranking its tier by position in `tiers`."""
        rank = list(tiers).index(dungeon.difficulty) + 1 if dungeon.difficulty in tiers else 1
        return cls(
            id=dungeon.id,
            difficulty=rank,
            recommended_power=dungeon.recommended_power,
            min_level=dungeon.min_level,
        )


@dataclass(frozen=True)
class Boss:
    """A generated boss combatant."""

    id: str
    name: str
    element: str
    level: int
    stats: UserStats
    power_level: int
    special_moves: Tuple[str, ...]
    can_extract: bool
    shadow_data: Optional[ShadowData] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "element": self.element,
            "level": self.level,
            "stats": self.stats.to_dict(),
            "power_level": self.power_level,
            "special_moves": list(self.special_moves),
            "can_extract": self.can_extract,
            "shadow_data": self.shadow_data.to_dict() if self.shadow_data else None,
        }
