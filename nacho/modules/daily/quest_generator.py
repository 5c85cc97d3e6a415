"""
Daily Quest Generator
=====================

Purpose
-------
Produce the fixed-size batch of daily objectives for a player level from
the configured template pool.

Domain
------
- Target: `clamp(floor(base_target + level * target_scale), target_min, target_max)`
  (`target_min` defaults to 1)
- Quest points: `clamp(floor(base_reward + level * reward_scale), reward_min, reward_max)`
- Shards: `min(floor(min + r * spread) + level * per_level, max)`
- Selection: shuffle a copy of the pool, skip any template whose rendered
  title is already in the batch, stop at `batch_size`
- Manual verification quests are binary (target 1); their title keeps the
  scaled effort

Design Decisions
----------------
- The configured pool is read-only; each batch works on its own copy
- Quest ids are UUIDs drawn from the injected random source, so a seeded
  generator reproduces a batch exactly
- A pool too small to fill the batch yields a shorter batch (logged)

Dependencies
------------
- ConfigManager: `daily_quests.*`
"""

from __future__ import annotations

import math
import random
import secrets
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from nacho.core.config.manager import ConfigManager
from nacho.core.exceptions import ConfigurationError
from nacho.core.logging.logger import get_logger
from nacho.domain.models.base import DomainValidationError
from nacho.domain.models.player import StatType, parse_stat_mapping
from nacho.domain.models.quest import DailyQuest, QuestCondition, QuestReward, QuestType
from nacho.modules.shared.base_service import BaseService
from nacho.modules.shared.formulas import calculate_level_scaled

logger = get_logger(__name__)


@dataclass(frozen=True)
class QuestTemplate:
    """One entry of the quest pool, parsed from config."""

    type: QuestType
    title: str
    description: str
    base_target: float
    target_scale: float
    base_reward: float
    reward_scale: float
    target_min: Optional[float] = 1
    target_max: Optional[float] = None
    reward_min: Optional[float] = 0
    reward_max: Optional[float] = None
    stat_reward: Dict[StatType, int] = field(default_factory=dict)
    stat_choices: Tuple[StatType, ...] = ()

    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> "QuestTemplate":
        return cls(
            type=QuestType.parse(data["type"]),
            title=data["title"],
            description=data.get("description", ""),
            base_target=data.get("base_target", 1),
            target_scale=data.get("target_scale", 0),
            base_reward=data.get("base_reward", 0),
            reward_scale=data.get("reward_scale", 0),
            target_min=data.get("target_min", 1),
            target_max=data.get("target_max"),
            reward_min=data.get("reward_min", 0),
            reward_max=data.get("reward_max"),
            stat_reward=parse_stat_mapping(data.get("stat_reward"), "stat_reward"),
            stat_choices=tuple(StatType.parse(s) for s in data.get("stat_choices") or ()),
        )

    def target_for(self, level: int) -> int:
        return calculate_level_scaled(
            self.base_target, level, self.target_scale, self.target_min, self.target_max
        )

    def quest_points_for(self, level: int) -> int:
        return calculate_level_scaled(
            self.base_reward, level, self.reward_scale, self.reward_min, self.reward_max
        )


class DailyQuestGenerator(BaseService):
    """
    Generates daily quest batches.

    Public Methods
    --------------
    - generate(level) -> List[DailyQuest]
    - templates -> Parsed template pool (copy)
    """

    def __init__(self, config_manager: ConfigManager, rng: Optional[random.Random] = None) -> None:
        super().__init__(config_manager, logger)
        self._rng = rng or secrets.SystemRandom()

        self.batch_size: int = self.get_config("daily_quests.batch_size", 3)
        if self.batch_size <= 0:
            raise ConfigurationError("daily_quests.batch_size", "Must be positive")

        shards_cfg = self.get_section("daily_quests.shards")
        self.shards_min = shards_cfg.get("min", 10)
        self.shards_spread = shards_cfg.get("spread", 15)
        self.shards_per_level = shards_cfg.get("per_level", 1)
        self.shards_max = shards_cfg.get("max")

        self._templates: Tuple[QuestTemplate, ...] = self._load_templates()

    @property
    def templates(self) -> List[QuestTemplate]:
        return list(self._templates)

    def generate(self, level: int) -> List[DailyQuest]:
        """
        Build today's batch for a player of `level`.

        Raises:
            ValidationError: If `level` is not a positive integer
        """
        self.validate_positive_int(level, "level")

        pool = list(self._templates)
        self._rng.shuffle(pool)

        quests: List[DailyQuest] = []
        used_titles = set()
        for template in pool:
            if len(quests) >= self.batch_size:
                break

            quest = self._build_quest(template, level)
            if quest.title in used_titles:
                continue

            quests.append(quest)
            used_titles.add(quest.title)

        if len(quests) < self.batch_size:
            self.log.warning(
                "Quest pool too small to fill the daily batch",
                extra={"requested": self.batch_size, "generated": len(quests)},
            )

        self.log_operation(
            "generate_daily_quests",
            level=level,
            quests=[q.title for q in quests],
        )
        return quests

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _build_quest(self, template: QuestTemplate, level: int) -> DailyQuest:
        target = template.target_for(level)

        metadata: Dict[str, Any] = {}
        stat_name = ""
        if template.stat_choices:
            stat = self._rng.choice(template.stat_choices)
            stat_name = stat.value
            metadata["stat_type"] = stat.value

        fields = {
            "target": target,
            "half_target": target // 2,
            "half_target_up": math.ceil(target / 2),
            "stat": stat_name,
        }

        condition_target = 1 if template.type is QuestType.MANUAL_VERIFICATION else target
        shards = math.floor(self.shards_min + self._rng.random() * self.shards_spread)
        shards += level * self.shards_per_level
        if self.shards_max is not None:
            shards = min(shards, self.shards_max)

        return DailyQuest(
            id=str(uuid.UUID(int=self._rng.getrandbits(128), version=4)),
            title=template.title.format(**fields),
            description=template.description.format(**fields),
            condition=QuestCondition(
                type=template.type,
                target=condition_target,
                current=0,
                metadata=metadata,
            ),
            reward=QuestReward(
                quest_points=template.quest_points_for(level),
                shards=shards,
                stats=dict(template.stat_reward),
            ),
            completed=False,
        )

    def _load_templates(self) -> Tuple[QuestTemplate, ...]:
        raw_pool = self.get_config("daily_quests.quest_pool", [])
        templates: List[QuestTemplate] = []
        for index, raw in enumerate(raw_pool):
            try:
                templates.append(QuestTemplate.from_config(raw))
            except (DomainValidationError, KeyError, TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"daily_quests.quest_pool[{index}]", f"Invalid quest template: {exc}"
                ) from exc
        if not templates:
            raise ConfigurationError("daily_quests.quest_pool", "Quest pool is empty")
        return tuple(templates)
