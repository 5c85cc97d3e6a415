"""
Pytest Configuration and Fixtures for the Nacho Engine Tests
============================================================

Purpose
-------
Centralized fixtures for the unit suite: balance configuration, a fixed
clock, seeded randomness and domain model factories.

Responsibilities
----------------
- Load the packaged balance tables into a fresh ConfigManager per test
- Provide a fixed "now" so day-boundary rules are reproducible
- Provide factories for UserStats, missions and daily quests

Non-Responsibilities
--------------------
- Test implementation (delegated to test files)
- Business logic (delegated to services)

Architecture Notes
------------------
- ConfigManager is function-scoped: tests that apply overrides never leak
  them into other tests
- `now` is Wednesday 2024-01-10 12:00 UTC (weekday index 3)
"""

from __future__ import annotations

import os
import random
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import pytest

from nacho.core.config.config import Config
from nacho.core.config.manager import ConfigManager
from nacho.domain.models.mission import Mission
from nacho.domain.models.player import UserStats
from nacho.domain.models.quest import DailyQuest, QuestCondition, QuestReward, QuestType

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ["NACHO_ENV"] = "testing"
    os.environ["NACHO_LOG_LEVEL"] = "DEBUG"
    Config.load()


# ============================================================================
# INFRASTRUCTURE FIXTURES
# ============================================================================


@pytest.fixture
def config_manager() -> ConfigManager:
    """
    Balance configuration loaded from the packaged YAML tables.

    Scope: function (overrides never leak between tests)
    """
    return ConfigManager.from_yaml()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible generation."""
    return random.Random(1234)


@pytest.fixture
def now() -> datetime:
    """Fixed clock: Wednesday 2024-01-10 12:00 UTC."""
    return datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# DOMAIN MODEL FACTORIES
# ============================================================================


@pytest.fixture
def make_stats() -> Callable[..., UserStats]:
    """
    Factory for UserStats with default attributes of 10.

    Usage:
        stats = make_stats(strength=15, level=3)
    """

    def _make(**overrides: Any) -> UserStats:
        return UserStats(**overrides)

    return _make


@pytest.fixture
def make_mission() -> Callable[..., Mission]:
    """Factory for a daily mission worth 100 XP."""

    def _make(**overrides: Any) -> Mission:
        fields = {"id": "m-1", "title": "Morning Run", "xp_reward": 100}
        fields.update(overrides)
        return Mission(**fields)

    return _make


@pytest.fixture
def make_quest() -> Callable[..., DailyQuest]:
    """
    Factory for a daily quest.

    Usage:
        quest = make_quest(QuestType.MISSION_COMPLETION, target=3)
    """

    def _make(
        quest_type: QuestType = QuestType.MISSION_COMPLETION,
        target: int = 3,
        current: int = 0,
        completed: bool = False,
        metadata: Optional[dict] = None,
        reward: Optional[QuestReward] = None,
        quest_id: str = "q-1",
        claimed_at: Optional[datetime] = None,
    ) -> DailyQuest:
        return DailyQuest(
            id=quest_id,
            title=f"Quest {quest_id}",
            description="",
            condition=QuestCondition(
                type=quest_type,
                target=target,
                current=current,
                metadata=metadata or {},
            ),
            reward=reward or QuestReward(quest_points=40, shards=20),
            completed=completed,
            claimed_at=claimed_at,
        )

    return _make
