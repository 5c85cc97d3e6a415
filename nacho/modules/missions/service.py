"""
Mission Service
===============

Purpose
-------
Complete a recurring mission: gate it by the time window policy, pay XP and
shards, train its target stat and roll both the player and mission streaks.

Domain
------
- A mission can be completed iff it is available today and, when daily
  gated, not already completed today
- Player streak grows by one per completion
- XP: `floor(xp_reward * (1 + streak * streak_bonus) * buff_multiplier
  * (1 + level * level_bonus))` using the new streak and the level before
  the grant
- Shards: `floor((min + floor(r * spread)) * (1 + streak * streak_bonus)
  * (1 + level * level_bonus))`
- Mission streak grows by one, and restarts at 1 when the previous
  completion is older than the last scheduled day before today
- Level-ups are resolved by ProgressionService

Dependencies
------------
- ConfigManager: `progression.missions.*`
- BuffService: XP multiplier from live buffs
- ProgressionService: level-up loop
"""

from __future__ import annotations

import math
import random
import secrets
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional

from nacho.core.config.manager import ConfigManager
from nacho.core.logging.logger import get_logger
from nacho.domain.models.base import ensure_utc, utc_now
from nacho.domain.models.mission import Mission
from nacho.domain.models.player import ActiveBuff, UserStats
from nacho.modules.progression.service import ProgressionService
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.exceptions import MissionUnavailableError
from nacho.modules.shared.time_window import (
    can_complete,
    is_available_today,
    previous_scheduled_date,
    to_date,
)
from nacho.modules.stats.buffs import BuffService

logger = get_logger(__name__)


@dataclass(frozen=True)
class MissionCompletion:
    mission: Mission
    stats: UserStats
    xp_earned: int
    shards_earned: int
    levels_gained: int


class MissionService(BaseService):
    """
    Mission completion and rewards.

    Public Methods
    --------------
    - can_complete(mission, now) -> bool
    - complete(mission, stats, buffs, now) -> MissionCompletion
    - mission_streak_after(mission, now) -> int
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        buff_service: Optional[BuffService] = None,
        progression_service: Optional[ProgressionService] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(config_manager, logger)
        self._buffs = buff_service or BuffService(config_manager)
        self._progression = progression_service or ProgressionService(config_manager)
        self._rng = rng or secrets.SystemRandom()

        cfg = self.get_section("progression.missions")
        self.streak_bonus = float(cfg.get("streak_bonus_per_day", 0.05))
        self.level_bonus = float(cfg.get("level_bonus_per_level", 0.02))
        self.target_stat_gain = int(cfg.get("target_stat_gain", 1))
        self.lookback_days = int(cfg.get("schedule_lookback_days", 7))

        shards_cfg = cfg.get("shards", {})
        self.shards_min = shards_cfg.get("min", 15)
        self.shards_spread = shards_cfg.get("spread", 25)
        self.shards_streak_bonus = float(shards_cfg.get("streak_bonus", 0.1))
        self.shards_level_bonus = float(shards_cfg.get("level_bonus", 0.05))

    def can_complete(self, mission: Mission, now: Optional[datetime] = None) -> bool:
        return can_complete(mission, now)

    def mission_streak_after(self, mission: Mission, now: Optional[datetime] = None) -> int:
        """Mission streak once completed at `now`."""
        now = ensure_utc(now or utc_now())
        if mission.last_completed_at is None:
            return mission.streak + 1

        expected = previous_scheduled_date(mission, now, self.lookback_days)
        if to_date(mission.last_completed_at) < expected:
            return 1
        return mission.streak + 1

    def complete(
        self,
        mission: Mission,
        stats: UserStats,
        buffs: Iterable[ActiveBuff] = (),
        now: Optional[datetime] = None,
    ) -> MissionCompletion:
        """
        Complete `mission` at `now`.

        Raises:
            MissionUnavailableError: If the mission is not scheduled today or
                was already completed today
        """
        now = ensure_utc(now or utc_now())

        if not can_complete(mission, now):
            reason = (
                "Mission is not scheduled today"
                if not is_available_today(mission, now)
                else "Mission was already completed today"
            )
            raise MissionUnavailableError(mission.id, reason)

        streak = stats.streak + 1
        buff_multiplier = self._buffs.xp_multiplier(buffs, now)
        xp = math.floor(
            mission.xp_reward
            * (1 + streak * self.streak_bonus)
            * buff_multiplier
            * (1 + stats.level * self.level_bonus)
        )
        shards = math.floor(
            (self.shards_min + math.floor(self._rng.random() * self.shards_spread))
            * (1 + streak * self.shards_streak_bonus)
            * (1 + stats.level * self.shards_level_bonus)
        )

        changes = {"streak": streak}
        if mission.target_stat is not None:
            changes[mission.target_stat.key] = stats.get(mission.target_stat) + self.target_stat_gain
        trained = replace(stats, **changes)

        leveled = self._progression.apply_xp(trained, xp)
        updated_mission = replace(
            mission,
            last_completed_at=now,
            streak=self.mission_streak_after(mission, now),
        )

        self.log.info(
            "Mission completed",
            extra={
                "mission_id": mission.id,
                "xp_earned": xp,
                "shards_earned": shards,
                "streak": streak,
                "mission_streak": updated_mission.streak,
                "buff_multiplier": buff_multiplier,
                "levels_gained": leveled.levels_gained,
            },
        )
        return MissionCompletion(
            mission=updated_mission,
            stats=leveled.stats,
            xp_earned=xp,
            shards_earned=shards,
            levels_gained=leveled.levels_gained,
        )
