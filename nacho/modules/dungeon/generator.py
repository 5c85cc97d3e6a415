"""
Dungeon Floor Generator
=======================

Purpose
-------
Map an integer floor of the Demon Tower to a fully specified dungeon: tier,
power requirement, reward curve, drop-rate table and, every tenth floor, a
boss. Pure and deterministic; any floor >= 1 works and nothing is stored.

Domain
------
- Tier: `tiers[min((floor - 1) // floors_per_tier, len(tiers) - 1)]`; floors
  past the last tier stay in the last tier
- Power: `base + (f-1) * linear + (f-1)^2 * quadratic`
- XP: `floor(power * xp_fraction)`
- Boss floors: `floor % boss_interval == 0`; boss index
  `floor // boss_interval - 1`, names cycled by modulo
- Drop rates: one independent chance per rarity, each clamped on its own.
  They do not sum to 1 and are never normalised
- Shadow data only while the boss index has an authored shadow; later bosses
  are still extractable but carry none

Design Decisions
----------------
- Negative growth coefficients would break monotonicity; they are rejected
  at construction as a configuration error
- Floors that are not positive integers raise ValidationError
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

from nacho.core.config.manager import ConfigManager
from nacho.core.exceptions import ConfigurationError
from nacho.core.logging.logger import get_logger
from nacho.domain.models.dungeon import (
    Dungeon,
    DungeonBoss,
    DungeonDescriptor,
    DungeonRewards,
    ShadowBonus,
    ShadowData,
)
from nacho.domain.models.player import StatType
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.formulas import calculate_polynomial_growth, clamp

logger = get_logger(__name__)


class DungeonFloorGenerator(BaseService):
    """
    Generates Demon Tower floors.

    Public Methods
    --------------
    - generate(floor) -> Dungeon
    - tier_for(floor) -> Tier label
    - recommended_power(floor) -> Power requirement
    - drop_rates(floor) -> Ordered rarity -> chance table
    - is_boss_floor(floor) -> bool
    - describe(dungeon) -> DungeonDescriptor for the boss generator

    Configuration Keys
    ------------------
    - dungeon.tiers, dungeon.floors_per_tier, dungeon.boss_interval
    - dungeon.power.{base,linear,quadratic}, dungeon.xp_fraction
    - dungeon.time_limit.*, dungeon.min_level_offset
    - dungeon.recommended_stats, dungeon.drop_rates
    - dungeon.boss.*
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        super().__init__(config_manager, logger)

        self.tiers: List[str] = [str(t) for t in self.get_config("dungeon.tiers", required=True)]
        if not self.tiers:
            raise ConfigurationError("dungeon.tiers", "At least one tier is required")

        self.floors_per_tier: int = self.get_config("dungeon.floors_per_tier", 20)
        self.boss_interval: int = self.get_config("dungeon.boss_interval", 10)
        for key, value in (
            ("dungeon.floors_per_tier", self.floors_per_tier),
            ("dungeon.boss_interval", self.boss_interval),
        ):
            if value <= 0:
                raise ConfigurationError(key, f"Must be positive, got {value}")

        power_cfg = self.get_section("dungeon.power")
        self.power_base = power_cfg.get("base", 12000)
        self.power_linear = power_cfg.get("linear", 4500)
        self.power_quadratic = power_cfg.get("quadratic", 35)
        self.xp_fraction = float(self.get_config("dungeon.xp_fraction", 0.05))
        for key, value in (
            ("dungeon.power.base", self.power_base),
            ("dungeon.power.linear", self.power_linear),
            ("dungeon.power.quadratic", self.power_quadratic),
            ("dungeon.xp_fraction", self.xp_fraction),
        ):
            if value < 0:
                raise ConfigurationError(
                    key, f"Must be non-negative to keep floor scaling monotonic, got {value}"
                )

        time_cfg = self.get_section("dungeon.time_limit")
        self.time_base = time_cfg.get("base_seconds", 300)
        self.time_step_floors = time_cfg.get("step_floors", 50)
        self.time_step_seconds = time_cfg.get("step_seconds", 60)
        self.min_level_offset = self.get_config("dungeon.min_level_offset", 5)

        self._stat_rotation: List[Tuple[StatType, ...]] = [
            tuple(StatType.parse(name) for name in pair)
            for pair in self.get_config("dungeon.recommended_stats", [])
        ]

        self._drop_rates_cfg: Dict[str, Dict[str, Any]] = self.get_section("dungeon.drop_rates")

        boss_cfg = self.get_section("dungeon.boss")
        self._boss_names: List[str] = list(boss_cfg.get("names", []))
        if not self._boss_names:
            raise ConfigurationError("dungeon.boss.names", "At least one boss name is required")
        self._boss_level_offset = boss_cfg.get("level_offset", 5)
        self._boss_health_mult = boss_cfg.get("health_multiplier", 15)
        self._boss_abilities: Tuple[str, ...] = tuple(boss_cfg.get("abilities", []))
        self._shadow_value_per_floor = float(boss_cfg.get("shadow_value_per_floor", 2.5))
        self._shadows: List[Mapping[str, Any]] = list(boss_cfg.get("shadows", []))

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def generate(self, floor: int) -> Dungeon:
        """
        Build the dungeon for a floor.

        Raises:
            ValidationError: If `floor` is not a positive integer
        """
        self.validate_positive_int(floor, "floor")

        tier = self.tier_for(floor)
        power = self.recommended_power(floor)
        xp = math.floor(power * self.xp_fraction)
        boss = self._build_boss(floor, tier, power) if self.is_boss_floor(floor) else None

        if boss is not None:
            name = f"Boss: {boss.name} (Floor {floor})"
        else:
            name = f"Demon Tower Rank {tier} [Floor {floor}]"

        dungeon = Dungeon(
            id=f"dungeon_{floor}",
            floor=floor,
            name=name,
            description=f"Floor {floor} of the Demon Tower. Recommended Power: {power:,}",
            difficulty=tier,
            recommended_level=floor,
            recommended_power=power,
            time_limit=self.time_base + (floor // self.time_step_floors) * self.time_step_seconds,
            min_level=max(1, floor - self.min_level_offset),
            recommended_stats=self._recommended_stats(floor),
            rewards=DungeonRewards(xp=xp, drop_rates=self.drop_rates(floor)),
            boss=boss,
        )

        self.log_operation(
            "generate_floor",
            floor=floor,
            tier=tier,
            recommended_power=power,
            boss=boss.id if boss else None,
        )
        return dungeon

    def tier_for(self, floor: int) -> str:
        index = (floor - 1) // self.floors_per_tier
        return self.tiers[min(index, len(self.tiers) - 1)]

    def tier_rank(self, tier: str) -> int:
        """1-based position of a tier label; unknown labels rank 1."""
        return self.tiers.index(tier) + 1 if tier in self.tiers else 1

    def recommended_power(self, floor: int) -> int:
        return calculate_polynomial_growth(
            floor - 1, self.power_base, self.power_linear, self.power_quadratic
        )

    def is_boss_floor(self, floor: int) -> bool:
        return floor % self.boss_interval == 0

    def boss_index(self, floor: int) -> Optional[int]:
        if not self.is_boss_floor(floor):
            return None
        return floor // self.boss_interval - 1

    def drop_rates(self, floor: int) -> Dict[str, float]:
        """
        Independent per-rarity drop chances for a floor.

        `rate = clamp(base + (floor - start_floor) * growth, min, max)`,
        and exactly 0 while `floor < start_floor`. A rarity already drops on
        its start floor.
        """
        rates: Dict[str, float] = {}
        for rarity, curve in self._drop_rates_cfg.items():
            start_floor = curve.get("start_floor", 0)
            if floor < start_floor:
                rates[rarity] = 0.0
                continue
            raw = curve.get("base", 0.0) + (floor - start_floor) * curve.get("growth", 0.0)
            rate = clamp(raw, curve.get("min", 0.0), curve.get("max", 1.0))
            rates[rarity] = float(clamp(rate, 0.0, 1.0))
        return rates

    def describe(self, dungeon: Dungeon) -> DungeonDescriptor:
        return DungeonDescriptor.from_dungeon(dungeon, self.tiers)

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _recommended_stats(self, floor: int) -> Tuple[StatType, ...]:
        if not self._stat_rotation:
            return ()
        return self._stat_rotation[floor % len(self._stat_rotation)]

    def _build_boss(self, floor: int, tier: str, power: int) -> DungeonBoss:
        index = floor // self.boss_interval - 1
        name = self._boss_names[index % len(self._boss_names)]

        shadow_data = None
        if index < len(self._shadows):
            shadow_cfg = self._shadows[index]
            shadow_data = ShadowData(
                name=shadow_cfg["name"],
                rank=tier,
                bonus=ShadowBonus(
                    stat=StatType.parse(shadow_cfg.get("stat", "strength")),
                    value=math.floor(floor * self._shadow_value_per_floor),
                ),
            )

        return DungeonBoss(
            id=f"boss_{floor}",
            name=name,
            level=floor + self._boss_level_offset,
            health=power * self._boss_health_mult,
            power_level=power,
            abilities=self._boss_abilities,
            can_extract=True,
            shadow_data=shadow_data,
        )
