"""
Progression Module
==================

XP curve, level-ups, the daily chest and passive skill upgrades.
"""

from .service import LevelUpResult, ProgressionService

__all__ = ["ProgressionService", "LevelUpResult"]
