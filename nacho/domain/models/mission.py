"""
Mission Domain Model.

A recurring, player-authored or built-in habit. Availability is never
stored: it is recomputed from `frequency` and `days_of_week` on every check.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from nacho.domain.models.base import (
    DomainValidationError,
    format_datetime,
    parse_datetime,
    validate_non_negative,
    validate_not_empty,
)
from nacho.domain.models.player import StatType


class MissionFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class Mission:
    """
    A recurring task.

    Attributes
    ----------
    frequency : MissionFrequency
        `daily` missions are available every day; `weekly` ones only on
        `days_of_week`
    days_of_week : FrozenSet[int]
        Weekday integers, 0 = Sunday .. 6 = Saturday
    is_daily : bool
        Daily-gated: at most one completion per calendar day
    streak : int
        Consecutive scheduled completions of this mission
    """

    id: str
    title: str
    xp_reward: int
    frequency: MissionFrequency = MissionFrequency.DAILY
    is_daily: bool = True
    days_of_week: FrozenSet[int] = frozenset()
    target_stat: Optional[StatType] = None
    last_completed_at: Optional[datetime] = None
    streak: int = 0

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_non_negative(self.xp_reward, "xp_reward")
        validate_non_negative(self.streak, "streak")

        days = frozenset(self.days_of_week)
        for day in days:
            if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
                raise DomainValidationError(
                    f"days_of_week entries must be 0..6, got {day!r}",
                    field="days_of_week",
                )
        object.__setattr__(self, "days_of_week", days)
        object.__setattr__(
            self, "last_completed_at", parse_datetime(self.last_completed_at, "last_completed_at")
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Mission":
        frequency = data.get("frequency") or MissionFrequency.DAILY.value
        try:
            parsed_frequency = MissionFrequency(frequency)
        except ValueError as exc:
            raise DomainValidationError(
                f"Unknown mission frequency: {frequency!r}", field="frequency"
            ) from exc

        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            xp_reward=data.get("xp_reward", 0),
            frequency=parsed_frequency,
            is_daily=bool(data.get("is_daily", True)),
            days_of_week=frozenset(data.get("days_of_week") or ()),
            target_stat=StatType.try_parse(data.get("target_stat")),
            last_completed_at=data.get("last_completed_at"),
            streak=data.get("streak", 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "xp_reward": self.xp_reward,
            "frequency": self.frequency.value,
            "is_daily": self.is_daily,
            "days_of_week": sorted(self.days_of_week),
            "target_stat": self.target_stat.value if self.target_stat else None,
            "last_completed_at": format_datetime(self.last_completed_at),
            "streak": self.streak,
        }
