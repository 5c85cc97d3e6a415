"""
Power Aggregation Service
=========================

Purpose
-------
Single source of truth for "how strong is the player". Combines eight
independently weighted sources into one total power rating with a full,
attributable breakdown.

Domain
------
- Base stats: sum of the six raw attributes x weight x scale
- Level: level x weight x scale
- Titles: equipped title at full rarity value, every other unlocked title
  at the collection bonus (10%)
- Frames: same pattern as titles; the "default" frame never counts
- Shadows: rank value per shadow plus cumulative army-size bonuses
- Equipment: `floor(sum(base_stats) x rarity_mult x stat_mult) x scale`
  per equipped item
- Passives: `floor(sum(stat_bonuses_per_level) x level x weight) x scale`
- Job class: triangular `n(n+1)/2 x weight x scale` over the ordered list

Design Decisions
----------------
- Every component is floored at its own boundary and clamped at 0, so
  `total == sum(components)` holds exactly
- Unknown title/frame/passive ids and unknown rarities contribute 0;
  unknown equipment rarity uses the default multiplier (1)
- Rarity tables are matched case-insensitively
- Structurally malformed player state raises MalformedStateError

Dependencies
------------
- ConfigManager: `power.*` weights, `cosmetics.*` catalog, `stats.passives`
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from nacho.core.config.manager import ConfigManager
from nacho.core.logging.logger import get_logger
from nacho.domain.models.base import DomainValidationError
from nacho.domain.models.player import PassiveDefinition, PlayerState, UserStats
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.exceptions import MalformedStateError
from nacho.modules.shared.formulas import calculate_triangular
from nacho.modules.stats.resolver import load_passive_definitions

logger = get_logger(__name__)


# ============================================================================
# Data Models
# ============================================================================


@dataclass(frozen=True)
class PowerBreakdown:
    """
    Power split by source. Never persisted; recomputed on every display.
    """

    base_stats: int
    level: int
    titles: int
    frames: int
    shadows: int
    equipment: int
    passives: int
    job_class: int
    total: int

    def components(self) -> Dict[str, int]:
        """The eight named components, without `total`."""
        data = asdict(self)
        data.pop("total")
        return data

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


# ============================================================================
# PowerService
# ============================================================================


class PowerService(BaseService):
    """
    Aggregates player power from eight sources.

    Public Methods
    --------------
    - calculate_breakdown(state) -> PowerBreakdown
    - calculate_total_power(state) -> int
    - job_class_index(job_class) -> Position in the ordered progression

    Configuration Keys
    ------------------
    - power.scale, power.base_stat_weight, power.level_weight
    - power.title_rarity_power, power.frame_rarity_power, power.collection_bonus
    - power.shadow_rank_power, power.army_bonuses
    - power.equipment.*, power.passive_weight, power.job_class.*
    - cosmetics.titles, cosmetics.frames
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        super().__init__(config_manager, logger)

        self.scale: int = self.get_config("power.scale", 12)
        self.base_stat_weight: int = self.get_config("power.base_stat_weight", 40)
        self.level_weight: int = self.get_config("power.level_weight", 400)
        self.collection_bonus: float = float(self.get_config("power.collection_bonus", 0.1))
        self.excluded_frame_ids = frozenset(
            self.get_config("power.excluded_frame_ids", ["default"])
        )

        self._title_power = self._lowercase_table(self.get_section("power.title_rarity_power"))
        self._frame_power = self._lowercase_table(self.get_section("power.frame_rarity_power"))
        self._shadow_power = self._lowercase_table(self.get_section("power.shadow_rank_power"))

        # Ascending thresholds; every threshold reached adds its bonus
        self._army_bonuses: List[Tuple[int, int]] = sorted(
            (int(entry["min_shadows"]), int(entry["bonus"]))
            for entry in self.get_config("power.army_bonuses", [])
        )

        equipment_cfg = self.get_section("power.equipment")
        self._equipment_stat_mult = float(equipment_cfg.get("stat_multiplier", 3))
        self._equipment_default_mult = float(equipment_cfg.get("default_rarity_multiplier", 1))
        self._equipment_mult = self._lowercase_table(equipment_cfg.get("rarity_multiplier", {}))

        self.passive_weight: int = self.get_config("power.passive_weight", 400)
        self._passives: Dict[str, PassiveDefinition] = {
            passive.id: passive for passive in load_passive_definitions(config_manager)
        }

        job_cfg = self.get_section("power.job_class")
        self.job_class_weight: int = job_cfg.get("weight", 2500)
        self._job_class_order: List[str] = [str(name) for name in job_cfg.get("order", [])]

        self._title_catalog: Dict[str, str] = dict(self.get_section("cosmetics.titles"))
        self._frame_catalog: Dict[str, str] = dict(self.get_section("cosmetics.frames"))

        self.log.debug(
            "PowerService initialized",
            extra={
                "scale": self.scale,
                "job_classes": len(self._job_class_order),
                "passives": len(self._passives),
            },
        )

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def calculate_breakdown(self, state: Union[PlayerState, Mapping[str, Any]]) -> PowerBreakdown:
        """
        Compute the full power breakdown.

        Args:
            state: PlayerState, or its plain-mapping form

        Returns:
            PowerBreakdown whose `total` is exactly the sum of its components

        Raises:
            MalformedStateError: If the state is structurally broken
        """
        try:
            player = self._coerce_state(state)
        except MalformedStateError as exc:
            self.log_error("calculate_power", exc, field=exc.field)
            raise
        stats = player.stats

        components = {
            "base_stats": self._base_stats_power(stats),
            "level": stats.level * self.level_weight * self.scale,
            "titles": self._titles_power(stats, player.custom_titles),
            "frames": self._frames_power(stats, player.custom_frames),
            "shadows": self._shadows_power(player),
            "equipment": self._equipment_power(player),
            "passives": self._passives_power(stats),
            "job_class": self._job_class_power(stats.job_class),
        }
        components = {name: max(0, int(value)) for name, value in components.items()}
        total = math.floor(sum(components.values()))

        self.log_operation("calculate_power", total=total, **components)
        return PowerBreakdown(total=total, **components)

    def calculate_total_power(self, state: Union[PlayerState, Mapping[str, Any]]) -> int:
        return self.calculate_breakdown(state).total

    def job_class_index(self, job_class: Optional[str]) -> int:
        """Index in the ordered progression; unknown classes count as 0."""
        if job_class is None:
            return 0
        try:
            return self._job_class_order.index(str(job_class))
        except ValueError:
            return 0

    # ========================================================================
    # COMPONENTS
    # ========================================================================

    def _base_stats_power(self, stats: UserStats) -> int:
        return stats.base_stat_total() * self.base_stat_weight * self.scale

    def _titles_power(self, stats: UserStats, custom_titles: Mapping[str, str]) -> int:
        power = 0
        equipped = stats.equipped_title_id
        if equipped:
            power += self._rarity_value(self._title_power, self._title_rarity(equipped, custom_titles)) * self.scale

        for title_id in stats.unlocked_title_ids:
            if title_id == equipped:
                continue
            value = self._rarity_value(self._title_power, self._title_rarity(title_id, custom_titles))
            power += math.floor(value * self.scale * self.collection_bonus)
        return power

    def _frames_power(self, stats: UserStats, custom_frames: Mapping[str, str]) -> int:
        power = 0
        selected = stats.selected_frame_id
        if selected and selected not in self.excluded_frame_ids:
            power += self._rarity_value(self._frame_power, self._frame_rarity(selected, custom_frames)) * self.scale

        for frame_id in stats.unlocked_frame_ids:
            if frame_id == selected or frame_id in self.excluded_frame_ids:
                continue
            value = self._rarity_value(self._frame_power, self._frame_rarity(frame_id, custom_frames))
            power += math.floor(value * self.scale * self.collection_bonus)
        return power

    def _shadows_power(self, player: PlayerState) -> int:
        power = sum(
            self._rarity_value(self._shadow_power, shadow.rank) * self.scale
            for shadow in player.shadows
        )
        roster_size = len(player.shadows)
        for min_shadows, bonus in self._army_bonuses:
            if roster_size >= min_shadows:
                power += bonus * self.scale
        return power

    def _equipment_power(self, player: PlayerState) -> int:
        power = 0
        for item in player.equipped_items():
            rarity = (item.rarity or "common").lower()
            multiplier = self._equipment_mult.get(rarity)
            if multiplier is None:
                self.log.warning(
                    "Unknown equipment rarity; using default multiplier",
                    extra={"item_id": item.id, "rarity": item.rarity},
                )
                multiplier = self._equipment_default_mult
            power += math.floor(item.stat_total() * multiplier * self._equipment_stat_mult) * self.scale
        return power

    def _passives_power(self, stats: UserStats) -> int:
        power = 0
        for passive_id, level in stats.passive_levels.items():
            passive = self._passives.get(passive_id)
            if passive is None or level <= 0:
                continue
            bonus_total = sum(passive.stat_bonuses_per_level.values())
            power += math.floor(bonus_total * level * self.passive_weight) * self.scale
        return power

    def _job_class_power(self, job_class: Optional[str]) -> int:
        index = self.job_class_index(job_class)
        return calculate_triangular(index) * self.job_class_weight * self.scale

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _title_rarity(self, title_id: str, custom_titles: Mapping[str, str]) -> Optional[str]:
        return self._title_catalog.get(title_id) or custom_titles.get(title_id)

    def _frame_rarity(self, frame_id: str, custom_frames: Mapping[str, str]) -> Optional[str]:
        return self._frame_catalog.get(frame_id) or custom_frames.get(frame_id)

    @staticmethod
    def _rarity_value(table: Mapping[str, float], rarity: Optional[str]) -> float:
        if not rarity:
            return 0
        return table.get(str(rarity).lower(), 0)

    @staticmethod
    def _lowercase_table(table: Mapping[str, Any]) -> Dict[str, float]:
        return {str(key).lower(): value for key, value in table.items()}

    @staticmethod
    def _coerce_state(state: Union[PlayerState, Mapping[str, Any]]) -> PlayerState:
        if isinstance(state, PlayerState):
            return state
        try:
            return PlayerState.from_dict(state)
        except DomainValidationError as exc:
            raise MalformedStateError(exc.field or "state", str(exc)) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedStateError("state", f"Malformed player state: {exc!r}") from exc
