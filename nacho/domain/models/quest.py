"""
Daily Quest Domain Models.

Purpose
-------
Value objects for the daily objective batch: condition, reward, the quest
itself and the context snapshot used to advance it.

Design Notes
------------
- Quests are immutable. Progress tracking returns the *same* object when
  nothing changed and a new one otherwise, so callers can detect change
  with an identity check.
- `manual_verification` quests are always binary (target 1); their title
  carries the real effort (e.g. "Do 20 Push-ups").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from nacho.domain.models.base import (
    DomainValidationError,
    format_datetime,
    parse_datetime,
    validate_non_negative,
    validate_not_empty,
    validate_positive,
)
from nacho.domain.models.player import StatType, UserStats, parse_stat_mapping


class QuestType(str, Enum):
    MANUAL_VERIFICATION = "manual_verification"
    MISSION_COMPLETION = "mission_completion"
    DUNGEON_CLEAR = "dungeon_clear"
    STAT_THRESHOLD = "stat_threshold"
    HEALTH_SCORE = "health_score"
    STREAK = "streak"
    SHADOW_EXTRACTION = "shadow_extraction"

    @classmethod
    def parse(cls, value: Any) -> "QuestType":
        try:
            return cls(value)
        except ValueError as exc:
            raise DomainValidationError(
                f"Unknown quest type: {value!r}", field="type"
            ) from exc


@dataclass(frozen=True)
class QuestCondition:
    """
    What a quest measures.

    `metadata["stat_type"]` names the stat for `stat_threshold` quests.
    """

    type: QuestType
    target: int
    current: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_positive(self.target, "target")
        validate_non_negative(self.current, "current")

    @property
    def is_met(self) -> bool:
        return self.current >= self.target

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type.value,
            "target": self.target,
            "current": self.current,
        }
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuestCondition":
        return cls(
            type=QuestType.parse(data["type"]),
            target=data["target"],
            current=data.get("current", 0),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class QuestReward:
    quest_points: int
    shards: int
    stats: Dict[StatType, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_non_negative(self.quest_points, "quest_points")
        validate_non_negative(self.shards, "shards")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"quest_points": self.quest_points, "shards": self.shards}
        if self.stats:
            data["stats"] = {stat.key: value for stat, value in self.stats.items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuestReward":
        return cls(
            quest_points=data.get("quest_points", 0),
            shards=data.get("shards", 0),
            stats=parse_stat_mapping(data.get("stats"), "stats"),
        )


@dataclass(frozen=True)
class DailyQuest:
    """One objective in a player's daily batch."""

    id: str
    title: str
    description: str
    condition: QuestCondition
    reward: QuestReward
    completed: bool = False
    claimed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_not_empty(self.title, "title")
        object.__setattr__(self, "claimed_at", parse_datetime(self.claimed_at, "claimed_at"))

    @property
    def is_manual(self) -> bool:
        return self.condition.type is QuestType.MANUAL_VERIFICATION

    @property
    def is_claimed(self) -> bool:
        return self.claimed_at is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "condition": self.condition.to_dict(),
            "reward": self.reward.to_dict(),
            "completed": self.completed,
            "claimed_at": format_datetime(self.claimed_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DailyQuest":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description", ""),
            condition=QuestCondition.from_dict(data["condition"]),
            reward=QuestReward.from_dict(data.get("reward") or {}),
            completed=bool(data.get("completed", False)),
            claimed_at=data.get("claimed_at"),
        )


@dataclass(frozen=True)
class QuestCheckContext:
    """
    Snapshot of today's activity. Every field is optional; a missing field
    leaves quests of the matching type untouched.
    """

    missions_completed_today: Optional[int] = None
    dungeons_cleared_today: Optional[int] = None
    current_stats: Optional[UserStats] = None
    health_score: Optional[int] = None
    streak: Optional[int] = None
    shadows_extracted: Optional[int] = None
