"""
Dungeon Reward Service
======================

Purpose
-------
Turn a finished dungeon run into XP and loot rarities.

Domain
------
- Defeat: `floor(xp * defeat_fraction)`, no loot
- Victory: `floor(xp * victory_fraction * (1 + r * variance))`
- Loot roll: every rarity in the floor's table is an independent trial;
  the rarest hit is kept, and a roll with no hit yields the fallback
  rarity (common). A victory always drops at least one item
- Boss floors roll once more with the top rarities boosted (capped at 1)
- One bonus roll with chance `min(max, base + floor * per_floor)`, and one
  more on high floors

Design Decisions
----------------
- Randomness comes from an injected `random.Random`; the default is
  `secrets.SystemRandom()`, tests pass a seeded generator
"""

from __future__ import annotations

import math
import random
import secrets
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from nacho.core.config.manager import ConfigManager
from nacho.core.logging.logger import get_logger
from nacho.domain.models.dungeon import Dungeon
from nacho.modules.shared.base_service import BaseService

logger = get_logger(__name__)


@dataclass(frozen=True)
class DungeonLoot:
    """Outcome of a run: XP earned and one rarity per dropped item."""

    xp: int
    rarities: Tuple[str, ...] = ()
    victory: bool = True


class DungeonRewardService(BaseService):
    """
    Computes run rewards from a generated dungeon.

    Public Methods
    --------------
    - calculate_rewards(dungeon, victory) -> DungeonLoot
    - roll_rarity(drop_rates) -> Rarity of one dropped item
    """

    def __init__(self, config_manager: ConfigManager, rng: Optional[random.Random] = None) -> None:
        super().__init__(config_manager, logger)
        self._rng = rng or secrets.SystemRandom()

        cfg = self.get_section("dungeon.rewards")
        self.defeat_fraction = float(cfg.get("defeat_xp_fraction", 0.1))
        self.victory_fraction = float(cfg.get("victory_xp_fraction", 0.15))
        self.victory_variance = float(cfg.get("victory_xp_variance", 0.2))
        self.boss_multiplier = float(cfg.get("boss_rare_multiplier", 3))
        self.boss_rarities = tuple(
            cfg.get("boss_rare_rarities", ["mythic", "godlike", "celestial", "transcendent"])
        )
        self.fallback_rarity: str = cfg.get("fallback_rarity", "common")

        bonus_cfg = cfg.get("bonus_roll", {})
        self.bonus_base = float(bonus_cfg.get("base", 0.2))
        self.bonus_per_floor = float(bonus_cfg.get("per_floor", 0.002))
        self.bonus_max = float(bonus_cfg.get("max", 0.5))

        high_cfg = cfg.get("high_floor_roll", {})
        self.high_floor_min = int(high_cfg.get("min_floor", 100))
        self.high_floor_chance = float(high_cfg.get("chance", 0.3))

    def calculate_rewards(self, dungeon: Dungeon, victory: bool) -> DungeonLoot:
        """
        Rewards for one run of `dungeon`.

        Returns:
            DungeonLoot; on defeat `rarities` is empty, on victory it has at
            least one entry
        """
        base_xp = dungeon.rewards.xp

        if not victory:
            loot = DungeonLoot(xp=math.floor(base_xp * self.defeat_fraction), victory=False)
            self.log_operation("dungeon_defeat", floor=dungeon.floor, xp=loot.xp)
            return loot

        xp = math.floor(
            base_xp * self.victory_fraction * (1 + self._rng.random() * self.victory_variance)
        )
        rates = dungeon.rewards.drop_rates

        rarities: List[str] = [self.roll_rarity(rates)]
        if dungeon.is_boss_floor:
            rarities.append(self.roll_rarity(self._boosted_rates(rates)))
        if self._rng.random() < self.bonus_roll_chance(dungeon.floor):
            rarities.append(self.roll_rarity(rates))
        if dungeon.floor >= self.high_floor_min and self._rng.random() < self.high_floor_chance:
            rarities.append(self.roll_rarity(rates))

        self.log_operation(
            "dungeon_victory",
            floor=dungeon.floor,
            xp=xp,
            drops=len(rarities),
        )
        return DungeonLoot(xp=xp, rarities=tuple(rarities), victory=True)

    def bonus_roll_chance(self, floor: int) -> float:
        return min(self.bonus_max, self.bonus_base + floor * self.bonus_per_floor)

    def roll_rarity(self, drop_rates: Mapping[str, float]) -> str:
        """
        One item's rarity: independent trial per rarity, rarest hit wins.

        `drop_rates` is ordered common first; a rarity with rate 0 never hits.
        """
        hit: Optional[str] = None
        for rarity, rate in drop_rates.items():
            if rate > 0 and self._rng.random() < rate:
                hit = rarity
        return hit or self.fallback_rarity

    def _boosted_rates(self, drop_rates: Mapping[str, float]) -> Dict[str, float]:
        boosted = dict(drop_rates)
        for rarity in self.boss_rarities:
            if rarity in boosted:
                boosted[rarity] = min(1.0, boosted[rarity] * self.boss_multiplier)
        return boosted
