"""
Boss Generator
==============

Purpose
-------
Procedurally build a boss combatant for a dungeon or zone: element,
power level, element-biased stat spread, move set and an optional
extractable shadow.

Domain
------
- Power: `floor(base * (variance_min + r * variance_spread))` where `base`
  is the dungeon's recommended power (or `difficulty * power_per_difficulty`
  when it has none). Boss power never scales with the player
- Level: dungeon min level (player level when absent) + `randint(0, 4)`
- Stats: each starts at `stat_floor`; element bias adds fractions of
  `pool = power // stat_pool_divisor`; every stat gets a random top-up of
  up to `top_up_fraction` of the pool
- Moves: element moves drawn without repetition, then the universal
  finishing move, de-duplicated in order
- Extraction: `can_extract` with `extract_chance`; the shadow's rank comes
  from a difficulty ladder and its bonus stat from the element

Design Decisions
----------------
- The random source is injected (`random.Random`); the default is
  `secrets.SystemRandom()`
- Player stats only provide a fallback level; nothing else reads them

Dependencies
------------
- ConfigManager: `boss.*`
- ElementResolver: element selection and per-element tables
"""

from __future__ import annotations

import math
import random
import secrets
from typing import Dict, List, Optional, Tuple

from nacho.core.config.manager import ConfigManager
from nacho.core.logging.logger import get_logger
from nacho.domain.models.dungeon import Boss, DungeonDescriptor, ShadowBonus, ShadowData
from nacho.domain.models.player import StatType, UserStats
from nacho.modules.combat.elements import ElementResolver
from nacho.modules.shared.base_service import BaseService

logger = get_logger(__name__)


class BossGenerator(BaseService):
    """
    Builds bosses from a dungeon descriptor.

    Public Methods
    --------------
    - generate(dungeon, player_stats) -> Boss
    - shadow_rank(difficulty) -> Rank label from the difficulty ladder
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        rng: Optional[random.Random] = None,
        element_resolver: Optional[ElementResolver] = None,
    ) -> None:
        super().__init__(config_manager, logger)
        self._rng = rng or secrets.SystemRandom()
        self.elements = element_resolver or ElementResolver(config_manager)

        self.power_per_difficulty = self.get_config("boss.power_per_difficulty", 100)
        self.variance_min = float(self.get_config("boss.variance.min", 0.9))
        self.variance_spread = float(self.get_config("boss.variance.spread", 0.2))
        self.level_spread = int(self.get_config("boss.level_spread", 4))

        self.stat_floor = int(self.get_config("boss.stat_floor", 10))
        self.stat_pool_divisor = int(self.get_config("boss.stat_pool_divisor", 2))
        self.top_up_fraction = float(self.get_config("boss.top_up_fraction", 0.1))

        self.element_move_count = int(self.get_config("boss.element_move_count", 2))
        self.finishing_move: str = self.get_config("boss.finishing_move", "Cataclysm Strike")

        self.extract_chance = float(self.get_config("boss.extract_chance", 0.7))
        self.shadow_name_prefix: str = self.get_config("boss.shadow_name_prefix", "Shadow")
        # Highest threshold first
        self._rank_ladder: List[Tuple[int, str]] = sorted(
            (
                (int(step["min_difficulty"]), str(step["rank"]))
                for step in self.get_config("boss.shadow_rank_ladder", [])
            ),
            reverse=True,
        )
        self.default_shadow_rank: str = self.get_config("boss.default_shadow_rank", "C")
        self.shadow_bonus_per_difficulty = int(self.get_config("boss.shadow_bonus_per_difficulty", 2))

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def generate(self, dungeon: DungeonDescriptor, player_stats: UserStats) -> Boss:
        """
        Generate a boss for `dungeon`.

        Args:
            dungeon: Zone/dungeon descriptor (id, difficulty rank, power)
            player_stats: Current player sheet; only its level is used, and
                only when the dungeon has no minimum level

        Returns:
            A new Boss. Identical RNG state yields an identical boss.
        """
        rng = self._rng
        element = self.elements.resolve(dungeon.id, rng)

        base_power = dungeon.recommended_power or dungeon.difficulty * self.power_per_difficulty
        variance = self.variance_min + rng.random() * self.variance_spread
        power_level = math.floor(base_power * variance)

        base_level = dungeon.min_level if dungeon.min_level is not None else player_stats.level
        level = base_level + rng.randint(0, self.level_spread)

        stats = self._distribute_stats(element, power_level, level)

        name_base = rng.choice(self.elements.names_for(element))
        special_moves = self._pick_moves(element)

        can_extract = rng.random() < self.extract_chance
        shadow_data = None
        if can_extract:
            shadow_data = ShadowData(
                name=f"{self.shadow_name_prefix} {name_base}",
                rank=self.shadow_rank(dungeon.difficulty),
                bonus=ShadowBonus(
                    stat=self.elements.shadow_bonus_stat(element),
                    value=dungeon.difficulty * self.shadow_bonus_per_difficulty,
                ),
            )

        boss = Boss(
            id=f"boss_{dungeon.id}_{rng.getrandbits(32):08x}",
            name=f"{name_base} Lvl. {level}",
            element=element,
            level=level,
            stats=stats,
            power_level=power_level,
            special_moves=special_moves,
            can_extract=can_extract,
            shadow_data=shadow_data,
        )

        self.log_operation(
            "generate_boss",
            dungeon_id=dungeon.id,
            element=element,
            power_level=power_level,
            level=level,
            can_extract=can_extract,
        )
        return boss

    def shadow_rank(self, difficulty: int) -> str:
        for min_difficulty, rank in self._rank_ladder:
            if difficulty >= min_difficulty:
                return rank
        return self.default_shadow_rank

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _distribute_stats(self, element: str, power_level: int, level: int) -> UserStats:
        pool = power_level // self.stat_pool_divisor
        values: Dict[StatType, int] = {stat: self.stat_floor for stat in StatType}

        for stat, fraction in self.elements.stat_bias(element).items():
            values[stat] += math.floor(pool * fraction)

        top_up_cap = pool * self.top_up_fraction
        for stat in StatType:
            values[stat] += math.floor(self._rng.random() * top_up_cap)

        return UserStats(
            level=level,
            **{stat.key: value for stat, value in values.items()},
        )

    def _pick_moves(self, element: str) -> Tuple[str, ...]:
        pool = self.elements.moves_for(element)
        picked = self._rng.sample(pool, k=min(self.element_move_count, len(pool)))
        return tuple(dict.fromkeys(picked + [self.finishing_move]))
