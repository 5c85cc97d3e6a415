"""
Unit Tests for DailyQuestGenerator
==================================

Test Coverage
-------------
- Batch size, uniqueness and reproducibility
- Level scaling of targets, quest points and shards
- Manual quests are binary
- Small and empty template pools
"""

import logging
import random

import pytest

from nacho.core.exceptions import ConfigurationError
from nacho.domain.models import QuestType, StatType
from nacho.modules.daily import DailyQuestGenerator
from nacho.modules.shared.exceptions import ValidationError

TIDY = {
    "type": "manual_verification",
    "title": "Tidy Your Room",
    "description": "Spend 10 minutes tidying your personal space.",
    "base_target": 1,
    "target_scale": 0,
    "base_reward": 35,
    "reward_scale": 0.5,
    "stat_reward": {"fortune": 1},
}

STAT_RAISE = {
    "type": "stat_threshold",
    "title": "Raise {stat} to {target}",
    "description": "Reach {target} base {stat}.",
    "base_target": 12,
    "target_scale": 1,
    "base_reward": 35,
    "reward_scale": 0.5,
    "stat_choices": ["strength", "agility"],
}


def _templates_by_title(generator):
    return {template.title: template for template in generator.templates}


@pytest.mark.unit
class TestBatch:
    """Test batch composition."""

    def test_batch_of_three_unique_quests(self, config_manager, rng):
        """A batch should hold three fresh quests with unique titles."""
        quests = DailyQuestGenerator(config_manager, rng).generate(1)

        assert len(quests) == 3
        assert len({q.title for q in quests}) == 3
        assert len({q.id for q in quests}) == 3
        assert all(not q.completed and q.condition.current == 0 for q in quests)

    def test_same_seed_same_batch(self, config_manager):
        """The same seed should produce the same batch."""
        first = DailyQuestGenerator(config_manager, random.Random(7)).generate(12)
        second = DailyQuestGenerator(config_manager, random.Random(7)).generate(12)

        assert [q.to_dict() for q in first] == [q.to_dict() for q in second]

    def test_no_duplicate_titles_across_seeds_and_levels(self, config_manager):
        """No batch should repeat a title for any seed or level."""
        for seed in range(300):
            generator = DailyQuestGenerator(config_manager, random.Random(seed))
            for level in (1, 10, 50, 150, 999):
                titles = [q.title for q in generator.generate(level)]

                assert len(titles) == 3
                assert len(set(titles)) == len(titles), (seed, level, titles)

    def test_manual_quests_are_binary(self, config_manager):
        """Manual verification quests should always target 1."""
        generator = DailyQuestGenerator(config_manager, random.Random(11))

        for level in range(1, 30):
            for quest in generator.generate(level):
                if quest.is_manual:
                    assert quest.condition.target == 1

    def test_pool_is_not_mutated(self, config_manager, rng):
        """Generating should not reorder the configured pool."""
        generator = DailyQuestGenerator(config_manager, rng)
        before = generator.templates

        generator.generate(5)

        assert generator.templates == before

    def test_level_must_be_positive(self, config_manager, rng):
        """Level zero should be rejected."""
        with pytest.raises(ValidationError):
            DailyQuestGenerator(config_manager, rng).generate(0)


@pytest.mark.unit
class TestScaling:
    """Test template scaling with level."""

    def test_push_up_target(self, config_manager, rng):
        """Push-up targets should scale with level and cap."""
        pushups = _templates_by_title(DailyQuestGenerator(config_manager, rng))["Do {target} Push-ups"]

        assert pushups.target_for(1) == 10
        assert pushups.target_for(20) == 20
        assert pushups.target_for(1000) == 100
        assert pushups.quest_points_for(1) == 41

    def test_dungeon_clear_caps(self, config_manager, rng):
        """Tower clear targets and points should cap."""
        clears = _templates_by_title(DailyQuestGenerator(config_manager, rng))["Clear {target} Tower Floors"]

        assert clears.target_for(1) == 1
        assert clears.target_for(300) == 5
        assert clears.quest_points_for(300) == 250

    def test_shards_scale_with_level_and_cap(self, config_manager, rng):
        """Shard rewards should scale with level up to the cap."""
        generator = DailyQuestGenerator(config_manager, rng)

        for quest in generator.generate(20):
            assert 30 <= quest.reward.shards <= 44
        for quest in generator.generate(1000):
            assert quest.reward.shards == 500


@pytest.mark.unit
class TestSmallPools:
    """Test pool overrides."""

    def test_stat_threshold_quest_names_its_stat(self, config_manager, rng):
        """Stat quests should name their chosen stat in the title."""
        config_manager.set("daily_quests.quest_pool", [STAT_RAISE])
        config_manager.set("daily_quests.batch_size", 1)

        (quest,) = DailyQuestGenerator(config_manager, rng).generate(3)

        stat = StatType.parse(quest.condition.metadata["stat_type"])
        assert stat in (StatType.STRENGTH, StatType.AGILITY)
        assert quest.title == f"Raise {stat.value} to 15"
        assert quest.condition.type is QuestType.STAT_THRESHOLD
        assert quest.condition.target == 15

    def test_duplicate_titles_are_skipped(self, config_manager, rng, caplog):
        """Duplicate titles should be skipped with a warning."""
        config_manager.set("daily_quests.quest_pool", [TIDY, TIDY])

        with caplog.at_level(logging.WARNING):
            quests = DailyQuestGenerator(config_manager, rng).generate(1)

        assert [q.title for q in quests] == ["Tidy Your Room"]
        assert quests[0].reward.stats == {StatType.FORTUNE: 1}
        assert "Quest pool too small" in caplog.text

    def test_empty_pool_is_a_configuration_error(self, config_manager):
        """An empty pool should be a configuration error."""
        config_manager.set("daily_quests.quest_pool", [])

        with pytest.raises(ConfigurationError):
            DailyQuestGenerator(config_manager)

    def test_unknown_quest_type_is_a_configuration_error(self, config_manager):
        """Unknown quest types should be a configuration error."""
        config_manager.set("daily_quests.quest_pool", [dict(TIDY, type="juggling")])

        with pytest.raises(ConfigurationError):
            DailyQuestGenerator(config_manager)
