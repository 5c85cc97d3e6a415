"""
Dungeon Module
==============

Domain: the Demon Tower.

Services:
- DungeonFloorGenerator: floor number -> dungeon definition
- DungeonRewardService: run XP and loot rarity rolls
"""

from .generator import DungeonFloorGenerator
from .rewards import DungeonLoot, DungeonRewardService

__all__ = [
    "DungeonFloorGenerator",
    "DungeonRewardService",
    "DungeonLoot",
]
