"""
Domain models for the Nacho engine.

All models are frozen dataclasses that validate on construction and
convert to and from plain mappings (`to_dict` / `from_dict`).
"""

from nacho.domain.models.base import DomainValidationError
from nacho.domain.models.dungeon import (
    Boss,
    Dungeon,
    DungeonBoss,
    DungeonDescriptor,
    DungeonRewards,
    ShadowBonus,
    ShadowData,
)
from nacho.domain.models.mission import Mission, MissionFrequency
from nacho.domain.models.player import (
    ActiveBuff,
    EquipmentItem,
    PassiveDefinition,
    PlayerState,
    Shadow,
    StatType,
    UserStats,
)
from nacho.domain.models.quest import (
    DailyQuest,
    QuestCheckContext,
    QuestCondition,
    QuestReward,
    QuestType,
)

__all__ = [
    "DomainValidationError",
    # Player
    "StatType",
    "UserStats",
    "ActiveBuff",
    "PassiveDefinition",
    "Shadow",
    "EquipmentItem",
    "PlayerState",
    # Dungeon
    "Dungeon",
    "DungeonBoss",
    "DungeonDescriptor",
    "DungeonRewards",
    "Boss",
    "ShadowData",
    "ShadowBonus",
    # Quests
    "QuestType",
    "QuestCondition",
    "QuestReward",
    "DailyQuest",
    "QuestCheckContext",
    # Missions
    "Mission",
    "MissionFrequency",
]
