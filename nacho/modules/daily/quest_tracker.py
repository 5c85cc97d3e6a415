"""
Quest Progress Tracker
======================

Purpose
-------
Advance daily quests from a snapshot of the player's day.

Domain
------
- Each condition type reads one context field:
  mission_completion <- missions_completed_today,
  dungeon_clear <- dungeons_cleared_today,
  stat_threshold <- the stat named in `metadata["stat_type"]`,
  health_score <- health_score, streak <- streak,
  shadow_extraction <- shadows_extracted
- A missing context field leaves the quest untouched
- `current` only moves forward; `completed` flips once `current >= target`
- Completed quests are returned as-is and never re-evaluated
- Manual verification quests are never advanced here; see
  `nacho.modules.daily.claims.QuestClaimService.mark_manual_done`

Design Decisions
----------------
- Returns the *same* object when nothing changed so callers can detect
  change with `is`
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional

from nacho.core.logging.logger import get_logger
from nacho.domain.models.player import StatType
from nacho.domain.models.quest import DailyQuest, QuestCheckContext, QuestType

logger = get_logger(__name__)


def _stat_threshold(quest: DailyQuest, context: QuestCheckContext) -> Optional[int]:
    if context.current_stats is None:
        return None
    stat = StatType.try_parse(quest.condition.metadata.get("stat_type"))
    if stat is None:
        return None
    return context.current_stats.get(stat)


_OBSERVERS: Dict[QuestType, Callable[[DailyQuest, QuestCheckContext], Optional[int]]] = {
    QuestType.MISSION_COMPLETION: lambda quest, ctx: ctx.missions_completed_today,
    QuestType.DUNGEON_CLEAR: lambda quest, ctx: ctx.dungeons_cleared_today,
    QuestType.STAT_THRESHOLD: _stat_threshold,
    QuestType.HEALTH_SCORE: lambda quest, ctx: ctx.health_score,
    QuestType.STREAK: lambda quest, ctx: ctx.streak,
    QuestType.SHADOW_EXTRACTION: lambda quest, ctx: ctx.shadows_extracted,
}


def observed_progress(quest: DailyQuest, context: QuestCheckContext) -> Optional[int]:
    """The context value this quest tracks, or None when absent/not tracked."""
    observer = _OBSERVERS.get(quest.condition.type)
    if observer is None:
        return None
    return observer(quest, context)


def check_quest(quest: DailyQuest, context: QuestCheckContext) -> DailyQuest:
    """
    Advance one quest from a context snapshot.

    Returns:
        `quest` itself when nothing changed, otherwise an updated copy
    """
    if quest.completed:
        return quest

    current = quest.condition.current
    observed = observed_progress(quest, context)
    if observed is not None:
        current = max(current, int(observed))

    completed = current >= quest.condition.target
    if current == quest.condition.current and completed == quest.completed:
        return quest

    logger.debug(
        "Quest progress updated",
        extra={
            "quest_id": quest.id,
            "quest_type": quest.condition.type.value,
            "current": current,
            "target": quest.condition.target,
            "completed": completed,
        },
    )
    return replace(
        quest,
        condition=replace(quest.condition, current=current),
        completed=completed,
    )


def check_all(quests: Iterable[DailyQuest], context: QuestCheckContext) -> List[DailyQuest]:
    """Map `check_quest` over a batch, preserving order and identity of unchanged quests."""
    return [check_quest(quest, context) for quest in quests]
