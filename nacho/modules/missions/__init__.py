"""
Missions Module
===============

Recurring mission completion: availability gating, XP and shard rewards,
stat training and streaks.
"""

from .service import MissionCompletion, MissionService

__all__ = ["MissionService", "MissionCompletion"]
