"""
Unit Tests for DailyRolloverService
===================================

Test Coverage
-------------
- Idempotence within a day
- Streak growth and reset rules
- Fresh batch generation at the player's level
"""

from datetime import date

import pytest

from nacho.modules.daily import DailyQuestGenerator, DailyRolloverService


@pytest.fixture
def generator(mocker, make_quest):
    generator = mocker.Mock(spec=DailyQuestGenerator)
    generator.generate.return_value = [make_quest(quest_id="fresh")]
    return generator


@pytest.fixture
def service(config_manager, generator):
    return DailyRolloverService(config_manager, generator)


@pytest.mark.unit
class TestRollover:
    """Test day-boundary handling."""

    def test_same_day_is_a_no_op(self, service, generator, make_stats, make_quest, now):
        """A second refresh on the same day should change nothing."""
        stats = make_stats(streak=4)
        quests = [make_quest()]

        result = service.rollover(stats, quests, date(2024, 1, 10), now)

        assert not result.refreshed
        assert result.stats is stats
        assert result.quests == quests
        assert result.refreshed_on == date(2024, 1, 10)
        generator.generate.assert_not_called()

    def test_all_completed_yesterday_grows_streak(
        self, service, generator, make_stats, make_quest, now
    ):
        """Finishing yesterday's batch should grow the streak."""
        quests = [
            make_quest(target=1, current=1, completed=True, quest_id="a"),
            make_quest(target=1, current=1, completed=True, quest_id="b"),
        ]

        result = service.rollover(make_stats(streak=4, level=6), quests, date(2024, 1, 9), now)

        assert result.refreshed
        assert result.stats.streak == 5
        assert result.refreshed_on == date(2024, 1, 10)
        assert [q.id for q in result.quests] == ["fresh"]
        generator.generate.assert_called_once_with(6)

    def test_incomplete_quest_resets_streak(self, service, make_stats, make_quest, now):
        """An unfinished quest yesterday should reset the streak."""
        quests = [
            make_quest(target=1, current=1, completed=True, quest_id="a"),
            make_quest(target=3, current=2, quest_id="b"),
        ]

        result = service.rollover(make_stats(streak=4), quests, date(2024, 1, 9), now)

        assert result.stats.streak == 0

    def test_missed_day_resets_streak(self, service, make_stats, make_quest, now):
        """Skipping a day should reset the streak."""
        quests = [make_quest(target=1, current=1, completed=True)]

        result = service.rollover(make_stats(streak=4), quests, date(2024, 1, 8), now)

        assert result.refreshed
        assert result.stats.streak == 0

    def test_first_refresh(self, service, generator, make_stats, now):
        """The first refresh should issue a batch without a streak."""
        result = service.rollover(make_stats(streak=2), [], None, now)

        assert result.refreshed
        assert result.stats.streak == 0
        generator.generate.assert_called_once_with(1)

    def test_empty_batch_yesterday_counts_as_completed(self, service, make_stats, now):
        """An empty batch yesterday should count as completed."""
        result = service.rollover(make_stats(streak=1), [], date(2024, 1, 9), now)

        assert result.stats.streak == 2
