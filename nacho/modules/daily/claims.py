"""
Quest Claim Service
===================

Purpose
-------
The player-driven side of daily quests: marking a manual quest as done and
redeeming a completed quest's reward exactly once.

Domain
------
- Only manual verification quests can be marked done by hand; doing so sets
  `current = target` and `completed = True` and pays a small XP bonus
  (`floor(base * (1 + level * level_bonus))`)
- A reward is paid once: claiming stamps `claimed_at`; a second claim is
  rejected
- Stat rewards are added to the player's base attributes

Dependencies
------------
- ConfigManager: `daily_quests.manual_completion_xp`
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from nacho.core.config.manager import ConfigManager
from nacho.core.logging.logger import get_logger
from nacho.domain.models.base import ensure_utc, utc_now
from nacho.domain.models.player import UserStats
from nacho.domain.models.quest import DailyQuest
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.exceptions import (
    InvalidOperationError,
    QuestAlreadyClaimedError,
    QuestNotCompletedError,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ManualCompletion:
    quest: DailyQuest
    xp_reward: int


@dataclass(frozen=True)
class QuestClaim:
    """A redeemed quest and what it paid."""

    quest: DailyQuest
    stats: UserStats
    quest_points: int
    shards: int


class QuestClaimService(BaseService):
    """
    Manual completion and reward claiming.

    Public Methods
    --------------
    - mark_manual_done(quest, level) -> ManualCompletion
    - claim_reward(quest, stats, now) -> QuestClaim
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        super().__init__(config_manager, logger)
        self.manual_xp_base = self.get_config("daily_quests.manual_completion_xp.base", 50)
        self.manual_xp_level_bonus = float(
            self.get_config("daily_quests.manual_completion_xp.level_bonus", 0.1)
        )

    def manual_completion_xp(self, level: int) -> int:
        return math.floor(self.manual_xp_base * (1 + level * self.manual_xp_level_bonus))

    def mark_manual_done(self, quest: DailyQuest, level: int = 1) -> ManualCompletion:
        """
        Mark a manual verification quest as done.

        Raises:
            InvalidOperationError: If the quest is not a manual quest, or is
                already completed
        """
        if not quest.is_manual:
            raise InvalidOperationError(
                "mark_manual_done",
                f"Quest {quest.id} is tracked automatically ({quest.condition.type.value})",
            )
        if quest.completed:
            raise InvalidOperationError("mark_manual_done", f"Quest {quest.id} is already completed")

        updated = replace(
            quest,
            condition=replace(quest.condition, current=quest.condition.target),
            completed=True,
        )
        xp = self.manual_completion_xp(level)
        self.log_operation("mark_manual_done", quest_id=quest.id, xp_reward=xp)
        return ManualCompletion(quest=updated, xp_reward=xp)

    def claim_reward(
        self, quest: DailyQuest, stats: UserStats, now: Optional[datetime] = None
    ) -> QuestClaim:
        """
        Redeem a completed quest.

        Raises:
            QuestNotCompletedError: If the quest is not completed
            QuestAlreadyClaimedError: If `claimed_at` is already set
        """
        if quest.is_claimed:
            raise QuestAlreadyClaimedError(quest.id, quest.claimed_at)
        if not quest.completed:
            raise QuestNotCompletedError(quest.id)

        now = ensure_utc(now or utc_now())
        claimed = replace(quest, claimed_at=now)

        stat_changes = {
            stat.key: stats.get(stat) + amount for stat, amount in quest.reward.stats.items()
        }
        new_stats = replace(stats, **stat_changes) if stat_changes else stats

        self.log.info(
            "Quest reward claimed",
            extra={
                "quest_id": quest.id,
                "quest_points": quest.reward.quest_points,
                "shards": quest.reward.shards,
                "stat_rewards": {stat.key: v for stat, v in quest.reward.stats.items()},
            },
        )
        return QuestClaim(
            quest=claimed,
            stats=new_stats,
            quest_points=quest.reward.quest_points,
            shards=quest.reward.shards,
        )
