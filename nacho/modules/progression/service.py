"""
Progression Service
===================

Purpose
-------
Experience, levels and passive skill investment.

Domain
------
- XP to next level: `floor(base * level ** exponent)` (150, 2.5)
- Level-up loop: XP carries over; one grant may gain several levels
- Each level gained adds `stat_gain` to every attribute and
  `passive_points` passive points
- Daily chest: once per calendar day, `level * xp_per_level` XP
- Passive upgrade: costs `cost_per_level` points, capped at `max_level`

Dependencies
------------
- ConfigManager: `progression.*`, `stats.passives`
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Optional

from nacho.core.config.manager import ConfigManager
from nacho.core.logging.logger import get_logger
from nacho.domain.models.player import PassiveDefinition, StatType, UserStats
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.exceptions import InvalidOperationError, NotFoundError
from nacho.modules.shared.formulas import calculate_xp_for_next_level
from nacho.modules.shared.time_window import DateLike, is_new_day
from nacho.modules.stats.resolver import load_passive_definitions

logger = get_logger(__name__)


@dataclass(frozen=True)
class LevelUpResult:
    stats: UserStats
    levels_gained: int

    @property
    def leveled_up(self) -> bool:
        return self.levels_gained > 0


class ProgressionService(BaseService):
    """
    XP curve, level-ups, daily chest and passive upgrades.

    Public Methods
    --------------
    - xp_for_next_level(level) -> int
    - apply_xp(stats, xp) -> LevelUpResult
    - can_open_daily_chest(last_opened_at, now) -> bool
    - daily_chest_xp(level) -> int
    - upgrade_passive(stats, passive_id) -> UserStats
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        super().__init__(config_manager, logger)

        self.xp_base = self.get_config("progression.xp_curve.base", 150)
        self.xp_exponent = float(self.get_config("progression.xp_curve.exponent", 2.5))
        self.stat_gain: int = self.get_config("progression.level_up.stat_gain", 1)
        self.passive_points_per_level: int = self.get_config("progression.level_up.passive_points", 1)
        self.chest_xp_per_level: int = self.get_config("progression.daily_chest.xp_per_level", 50)

        self._passives: Dict[str, PassiveDefinition] = {
            passive.id: passive for passive in load_passive_definitions(config_manager)
        }

    def xp_for_next_level(self, level: int) -> int:
        return calculate_xp_for_next_level(level, self.xp_base, self.xp_exponent)

    def apply_xp(self, stats: UserStats, xp: int) -> LevelUpResult:
        """
        Grant XP and resolve every level-up it pays for.

        Raises:
            ValidationError: If `xp` is negative or not an integer
        """
        self.validate_non_negative_int(xp, "xp")

        level = stats.level
        current = stats.xp_current + xp
        while current >= self.xp_for_next_level(level):
            current -= self.xp_for_next_level(level)
            level += 1

        levels_gained = level - stats.level
        changes: Dict[str, int] = {
            "level": level,
            "xp_current": current,
            "xp_for_next_level": self.xp_for_next_level(level),
        }
        if levels_gained:
            gain = levels_gained * self.stat_gain
            changes.update({stat.key: stats.get(stat) + gain for stat in StatType})
            changes["passive_points"] = (
                stats.passive_points + levels_gained * self.passive_points_per_level
            )
            self.log.info(
                "Level up",
                extra={"from_level": stats.level, "to_level": level, "xp_granted": xp},
            )

        return LevelUpResult(stats=replace(stats, **changes), levels_gained=levels_gained)

    # ========================================================================
    # DAILY CHEST
    # ========================================================================

    def can_open_daily_chest(
        self, last_opened_at: Optional[DateLike], now: Optional[datetime] = None
    ) -> bool:
        return is_new_day(last_opened_at, now)

    def daily_chest_xp(self, level: int) -> int:
        self.validate_positive_int(level, "level")
        return level * self.chest_xp_per_level

    # ========================================================================
    # PASSIVES
    # ========================================================================

    def upgrade_passive(self, stats: UserStats, passive_id: str) -> UserStats:
        """
        Spend passive points on one level of a passive skill.

        Raises:
            NotFoundError: If the passive id is unknown
            InvalidOperationError: If the passive is maxed or points are short
        """
        passive = self._passives.get(passive_id)
        if passive is None:
            raise NotFoundError("Passive", passive_id)

        current_level = stats.passive_levels.get(passive_id, 0)
        if current_level >= passive.max_level:
            raise InvalidOperationError(
                "upgrade_passive",
                f"Passive {passive_id} is already at max level {passive.max_level}",
            )
        if stats.passive_points < passive.cost_per_level:
            raise InvalidOperationError(
                "upgrade_passive",
                f"Need {passive.cost_per_level} passive points, have {stats.passive_points}",
            )

        passive_levels = dict(stats.passive_levels)
        passive_levels[passive_id] = current_level + 1

        self.log_operation(
            "upgrade_passive", passive_id=passive_id, new_level=current_level + 1
        )
        return replace(
            stats,
            passive_levels=passive_levels,
            passive_points=stats.passive_points - passive.cost_per_level,
        )
