"""
Daily Module
============

Domain: daily quest batches, progress, claims and the day boundary.

Services:
- DailyQuestGenerator: level-scaled batch from the template pool
- check_quest / check_all: progress tracking from a context snapshot
- QuestClaimService: manual completion and one-time reward claims
- DailyRolloverService: new batch and streak roll at the day boundary
"""

from .claims import ManualCompletion, QuestClaim, QuestClaimService
from .quest_generator import DailyQuestGenerator, QuestTemplate
from .quest_tracker import check_all, check_quest, observed_progress
from .rollover import DailyRollover, DailyRolloverService

__all__ = [
    "DailyQuestGenerator",
    "QuestTemplate",
    "check_quest",
    "check_all",
    "observed_progress",
    "QuestClaimService",
    "QuestClaim",
    "ManualCompletion",
    "DailyRolloverService",
    "DailyRollover",
]
