"""
Stat Resolver
=============

Purpose
-------
Compute the *effective* value of each of the six attributes: the stored
base value scaled by the matching passive skill, plus every live timed buff
on that stat.

Domain
------
- Passive multiplier: `1 + min(level, max_level) * bonus_per_level`
- Floor after the multiplier, before buffs are added
- Buffs stack additively and count only while `expires_at > now`

Design Decisions
----------------
- Unknown passive ids and buffs on unknown stats contribute nothing
- The wall clock is an explicit `now` argument (defaults to UTC now)
- Passive definitions come from `stats.passives` in the balance config

Dependencies
------------
- ConfigManager: passive definitions
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union

from nacho.core.config.manager import ConfigManager
from nacho.core.exceptions import ConfigurationError
from nacho.core.logging.logger import get_logger
from nacho.domain.models.base import DomainValidationError, ensure_utc, utc_now
from nacho.domain.models.player import ActiveBuff, PassiveDefinition, StatType, UserStats
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.exceptions import ValidationError
from nacho.modules.shared.time_window import is_buff_active

logger = get_logger(__name__)


def load_passive_definitions(config_manager: ConfigManager) -> List[PassiveDefinition]:
    """Parse `stats.passives`; a malformed entry is a configuration error."""
    raw_passives = config_manager.get("stats.passives", default=[]) or []
    passives: List[PassiveDefinition] = []
    for raw in raw_passives:
        try:
            passives.append(PassiveDefinition.from_dict(raw))
        except (DomainValidationError, KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError("stats.passives", f"Invalid passive {raw!r}: {exc}") from exc
    return passives


class StatResolver(BaseService):
    """
    Resolves effective stats from base values, passives and buffs.

    Public Methods
    --------------
    - effective_stat(stats, stat, buffs, now) -> One effective attribute
    - effective_stats(stats, buffs, now) -> All six attributes
    - passive_for(stat) -> Passive definition scaling a stat, if any
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        super().__init__(config_manager, logger)

        self._passives = load_passive_definitions(config_manager)

        # First definition per stat wins
        self._passive_by_stat: Dict[StatType, PassiveDefinition] = {}
        for passive in self._passives:
            self._passive_by_stat.setdefault(passive.stat, passive)

        self.log.debug(
            "StatResolver initialized",
            extra={"passives": [p.id for p in self._passives]},
        )

    @property
    def passives(self) -> List[PassiveDefinition]:
        return list(self._passives)

    def passive_for(self, stat: StatType) -> Optional[PassiveDefinition]:
        return self._passive_by_stat.get(stat)

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def effective_stat(
        self,
        stats: UserStats,
        stat: Union[StatType, str],
        buffs: Iterable[ActiveBuff] = (),
        now: Optional[datetime] = None,
    ) -> int:
        """
        Effective value of one attribute.

        Args:
            stats: Player character sheet
            stat: Attribute (StatType or case-insensitive name)
            buffs: Active buff records (expired ones are ignored)
            now: Reference time for buff expiry

        Returns:
            `floor(base * passive_multiplier) + live buff amounts`

        Raises:
            ValidationError: If `stat` does not name one of the six attributes
        """
        stat_type = self._parse_stat(stat)
        now = ensure_utc(now or utc_now())

        base = stats.get(stat_type)
        multiplier = 1.0
        passive = self.passive_for(stat_type)
        if passive is not None:
            multiplier = passive.multiplier(stats.passive_levels.get(passive.id, 0))

        buff_total = sum(
            buff.amount
            for buff in buffs
            if buff.stat is stat_type and is_buff_active(buff, now)
        )

        return math.floor(base * multiplier) + buff_total

    def effective_stats(
        self,
        stats: UserStats,
        buffs: Iterable[ActiveBuff] = (),
        now: Optional[datetime] = None,
    ) -> Dict[StatType, int]:
        buff_list = list(buffs)
        now = ensure_utc(now or utc_now())
        return {
            stat: self.effective_stat(stats, stat, buff_list, now) for stat in StatType
        }

    @staticmethod
    def _parse_stat(stat: Union[StatType, str]) -> StatType:
        try:
            return StatType.parse(stat)
        except DomainValidationError as exc:
            raise ValidationError("stat", str(exc)) from exc
