"""
Buff Service
============

Purpose
-------
Own the timed buff lifecycle and the body-record health score:
activation (including the sleep reward), pruning of expired records, the XP
multiplier granted by live buffs, and the 0-100 health score.

Domain
------
- A buff definition may modify several stats; it is stored as one
  ActiveBuff record per modified stat, all sharing the definition id
- XP-only buffs are stored as a single record with no stat
- Re-activating a buff replaces its previous records (timer refresh,
  never a double stack of the same buff)
- Expired buffs are filtered out, never mutated in place

Dependencies
------------
- ConfigManager: `stats.buffs`, `stats.sleep`, `stats.health_score`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

from nacho.core.config.manager import ConfigManager
from nacho.core.exceptions import ConfigurationError
from nacho.core.logging.logger import get_logger
from nacho.domain.models.base import DomainValidationError, ensure_utc, utc_now
from nacho.domain.models.player import ActiveBuff, StatType, parse_stat_mapping
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.exceptions import NotFoundError
from nacho.modules.shared.formulas import clamp
from nacho.modules.shared.time_window import is_buff_active

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuffDefinition:
    id: str
    name: str
    duration: timedelta
    modifiers: Dict[StatType, int] = field(default_factory=dict)
    xp_multiplier: float = 1.0

    @classmethod
    def from_config(cls, buff_id: str, data: Mapping[str, Any]) -> "BuffDefinition":
        return cls(
            id=buff_id,
            name=data.get("name", buff_id),
            duration=timedelta(minutes=float(data["duration_minutes"])),
            modifiers=parse_stat_mapping(data.get("modifiers"), "modifiers"),
            xp_multiplier=float(data.get("xp_multiplier", 1.0)),
        )


class BuffService(BaseService):
    """
    Timed buff activation, expiry and the health score.

    Public Methods
    --------------
    - get_definition(buff_id) -> BuffDefinition
    - activate(buff_id, now, active_buffs) -> Updated buff list
    - grant_sleep_buff(hours, now, active_buffs) -> Updated buff list
    - prune_expired(buffs, now) -> Live buffs only
    - xp_multiplier(buffs, now) -> Product of live buff XP multipliers
    - health_score(sleep_hours, weight_kg, previous_weight_kg) -> 0..100
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        super().__init__(config_manager, logger)

        self._definitions: Dict[str, BuffDefinition] = {}
        for buff_id, raw in self.get_section("stats.buffs").items():
            try:
                self._definitions[buff_id] = BuffDefinition.from_config(buff_id, raw)
            except (DomainValidationError, KeyError, TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"stats.buffs.{buff_id}", f"Invalid buff definition: {exc}"
                ) from exc

        sleep_cfg = self.get_section("stats.sleep")
        self._sleep_buff_id: str = sleep_cfg.get("buff_id", "well_rested")
        self._sleep_min_hours = float(sleep_cfg.get("min_hours", 7))
        self._sleep_max_hours = float(sleep_cfg.get("max_hours", 9))

        self._health_cfg = self.get_section("stats.health_score")

    @property
    def definitions(self) -> Dict[str, BuffDefinition]:
        return dict(self._definitions)

    def get_definition(self, buff_id: str) -> BuffDefinition:
        definition = self._definitions.get(buff_id)
        if definition is None:
            raise NotFoundError("Buff", buff_id)
        return definition

    # ========================================================================
    # ACTIVATION & EXPIRY
    # ========================================================================

    def activate(
        self,
        buff_id: str,
        now: Optional[datetime] = None,
        active_buffs: Iterable[ActiveBuff] = (),
    ) -> List[ActiveBuff]:
        """
        Activate a buff and return the player's updated buff list.

        Records of the same buff id are replaced; other buffs are kept as
        they are.

        Raises:
            NotFoundError: If `buff_id` is not a known buff
        """
        definition = self.get_definition(buff_id)
        now = ensure_utc(now or utc_now())
        expires_at = now + definition.duration

        if definition.modifiers:
            new_records = [
                ActiveBuff(id=definition.id, stat=stat, amount=amount, expires_at=expires_at)
                for stat, amount in definition.modifiers.items()
            ]
        else:
            new_records = [ActiveBuff(id=definition.id, stat=None, amount=0, expires_at=expires_at)]

        kept = [buff for buff in active_buffs if buff.id != buff_id]

        self.log_operation(
            "activate_buff",
            buff_id=buff_id,
            expires_at=expires_at.isoformat(),
            records=len(new_records),
        )
        return kept + new_records

    def grant_sleep_buff(
        self,
        hours: float,
        now: Optional[datetime] = None,
        active_buffs: Iterable[ActiveBuff] = (),
    ) -> List[ActiveBuff]:
        """
        Reward a logged night of sleep inside the healthy band.

        Outside the band the buff list is returned unchanged.

        Raises:
            ValidationError: If `hours` is outside 0..24
        """
        self.validate_range(hours, "hours", 0, 24)

        buffs = list(active_buffs)
        if not self._sleep_min_hours <= hours <= self._sleep_max_hours:
            return buffs
        return self.activate(self._sleep_buff_id, now, buffs)

    def prune_expired(
        self, buffs: Iterable[ActiveBuff], now: Optional[datetime] = None
    ) -> List[ActiveBuff]:
        now = ensure_utc(now or utc_now())
        return [buff for buff in buffs if is_buff_active(buff, now)]

    def xp_multiplier(
        self, buffs: Iterable[ActiveBuff], now: Optional[datetime] = None
    ) -> float:
        """
        Product of `xp_multiplier` over distinct live buff definitions.

        A multi-stat buff counts once; unknown ids count as 1.
        """
        now = ensure_utc(now or utc_now())
        live_ids = {buff.id for buff in buffs if is_buff_active(buff, now)}

        multiplier = 1.0
        for buff_id in sorted(live_ids):
            definition = self._definitions.get(buff_id)
            if definition is not None:
                multiplier *= definition.xp_multiplier
        return multiplier

    # ========================================================================
    # HEALTH SCORE
    # ========================================================================

    def health_score(
        self,
        sleep_hours: Optional[float] = None,
        weight_kg: Optional[float] = None,
        previous_weight_kg: Optional[float] = None,
    ) -> int:
        """
        Score a body record from 0 to 100.

        Starts from the configured base; sleep and weight stability adjust
        it. A missing measurement leaves its part of the score untouched.
        A weight with no previous record counts as stable.
        """
        cfg = self._health_cfg
        score = float(cfg.get("base", 60))

        if sleep_hours is not None:
            score += self._sleep_delta(sleep_hours, cfg.get("sleep", {}))
        if weight_kg is not None:
            score += self._weight_delta(weight_kg, previous_weight_kg, cfg.get("weight", {}))

        return int(clamp(score, cfg.get("min", 0), cfg.get("max", 100)))

    def _sleep_delta(self, hours: float, cfg: Mapping[str, Any]) -> float:
        if self._sleep_min_hours <= hours <= self._sleep_max_hours:
            return cfg.get("healthy_delta", 20)
        if cfg.get("short_min_hours", 6) <= hours < self._sleep_min_hours:
            return cfg.get("short_delta", 10)
        if hours < cfg.get("deprived_below_hours", 5):
            return cfg.get("deprived_delta", -15)
        if hours > cfg.get("oversleep_above_hours", 10):
            return cfg.get("oversleep_delta", -10)
        return 0

    @staticmethod
    def _weight_delta(
        weight_kg: float, previous_kg: Optional[float], cfg: Mapping[str, Any]
    ) -> float:
        if previous_kg is None:
            return cfg.get("first_record_delta", 20)

        diff = abs(weight_kg - previous_kg)
        if diff < cfg.get("stable_within_kg", 0.5):
            return cfg.get("stable_delta", 20)
        if diff < cfg.get("close_within_kg", 1.0):
            return cfg.get("close_delta", 10)
        return cfg.get("swing_delta", -10)
