"""
Unit Tests for QuestClaimService
================================

Test Coverage
-------------
- Manual completion and its XP bonus
- Single redemption of quest rewards
- Stat rewards applied to base attributes
"""

import pytest

from nacho.domain.models import QuestReward, QuestType, StatType
from nacho.modules.daily import QuestClaimService
from nacho.modules.shared.exceptions import (
    InvalidOperationError,
    QuestAlreadyClaimedError,
    QuestNotCompletedError,
)


@pytest.fixture
def service(config_manager):
    return QuestClaimService(config_manager)


@pytest.mark.unit
class TestManualCompletion:
    """Test mark_manual_done."""

    def test_marks_done_and_pays_xp(self, service, make_quest):
        """Manual completion should complete the quest and pay XP."""
        quest = make_quest(QuestType.MANUAL_VERIFICATION, target=1)

        result = service.mark_manual_done(quest, level=1)

        assert result.quest.completed
        assert result.quest.condition.current == 1
        assert result.xp_reward == 55
        assert not quest.completed

    def test_xp_scales_with_level(self, service):
        """Manual quest XP should scale with level."""
        assert service.manual_completion_xp(10) == 100

    def test_automatic_quest_is_rejected(self, service, make_quest):
        """Automatic quests should not be completable by hand."""
        with pytest.raises(InvalidOperationError):
            service.mark_manual_done(make_quest(QuestType.MISSION_COMPLETION))

    def test_completed_quest_is_rejected(self, service, make_quest):
        """Completing a finished quest again should be refused."""
        quest = make_quest(QuestType.MANUAL_VERIFICATION, target=1, current=1, completed=True)

        with pytest.raises(InvalidOperationError):
            service.mark_manual_done(quest)


@pytest.mark.unit
class TestClaimReward:
    """Test claim_reward."""

    def test_claim_pays_and_stamps(self, service, make_quest, make_stats, now):
        """Claiming should pay the reward and stamp the claim time."""
        quest = make_quest(
            QuestType.MANUAL_VERIFICATION,
            target=1,
            current=1,
            completed=True,
            reward=QuestReward(quest_points=41, shards=12, stats={StatType.STRENGTH: 1}),
        )

        claim = service.claim_reward(quest, make_stats(), now)

        assert claim.quest.claimed_at == now
        assert claim.quest.is_claimed
        assert claim.quest_points == 41
        assert claim.shards == 12
        assert claim.stats.strength == 11
        assert claim.stats.vitality == 10

    def test_claim_without_stat_reward_keeps_stats(self, service, make_quest, make_stats, now):
        """Claims without stat rewards should leave stats alone."""
        stats = make_stats()
        quest = make_quest(target=1, current=1, completed=True)

        assert service.claim_reward(quest, stats, now).stats is stats

    def test_incomplete_quest_cannot_be_claimed(self, service, make_quest, make_stats, now):
        """Incomplete quests should not be claimable."""
        with pytest.raises(QuestNotCompletedError):
            service.claim_reward(make_quest(), make_stats(), now)

    def test_second_claim_is_rejected(self, service, make_quest, make_stats, now):
        """A quest should only be claimed once."""
        quest = make_quest(target=1, current=1, completed=True, claimed_at=now)

        with pytest.raises(QuestAlreadyClaimedError):
            service.claim_reward(quest, make_stats(), now)
