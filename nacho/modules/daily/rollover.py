"""
Daily Rollover
==============

Purpose
-------
Apply the day boundary to the quest batch: replace yesterday's quests with
a fresh batch and roll the player streak.

Domain
------
- Already refreshed today: nothing changes
- Last refresh was yesterday and every quest of that batch was completed:
  streak grows by `daily_reset.streak_gain`
- Anything else (a missed day, incomplete batch, first refresh): streak
  resets to 0

Design Decisions
----------------
- This core does not detect the day change on its own; the host calls
  `rollover` whenever it loads state, and the call is idempotent per day
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import List, Optional, Sequence

from nacho.core.config.manager import ConfigManager
from nacho.core.logging.logger import get_logger
from nacho.domain.models.base import ensure_utc, utc_now
from nacho.domain.models.player import UserStats
from nacho.domain.models.quest import DailyQuest
from nacho.modules.daily.quest_generator import DailyQuestGenerator
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.time_window import DateLike, is_new_day, is_yesterday, to_date

logger = get_logger(__name__)


@dataclass(frozen=True)
class DailyRollover:
    stats: UserStats
    quests: List[DailyQuest]
    refreshed_on: date
    refreshed: bool


class DailyRolloverService(BaseService):
    """
    Day-boundary handling for the daily quest batch.

    Public Methods
    --------------
    - rollover(stats, quests, last_refresh, now) -> DailyRollover
    """

    def __init__(self, config_manager: ConfigManager, generator: DailyQuestGenerator) -> None:
        super().__init__(config_manager, logger)
        self._generator = generator
        self.streak_gain: int = self.get_config("progression.daily_reset.streak_gain", 1)

    def rollover(
        self,
        stats: UserStats,
        quests: Sequence[DailyQuest],
        last_refresh: Optional[DateLike],
        now: Optional[datetime] = None,
    ) -> DailyRollover:
        now = ensure_utc(now or utc_now())
        today = to_date(now)

        if not is_new_day(last_refresh, now):
            return DailyRollover(
                stats=stats, quests=list(quests), refreshed_on=to_date(last_refresh), refreshed=False
            )

        if is_yesterday(last_refresh, now) and all(quest.completed for quest in quests):
            streak = stats.streak + self.streak_gain
        else:
            streak = 0

        new_quests = self._generator.generate(stats.level)

        self.log.info(
            "Daily quests refreshed",
            extra={
                "previous_refresh": str(last_refresh) if last_refresh else None,
                "streak_before": stats.streak,
                "streak_after": streak,
                "quests": len(new_quests),
            },
        )
        return DailyRollover(
            stats=replace(stats, streak=streak),
            quests=new_quests,
            refreshed_on=today,
            refreshed=True,
        )
