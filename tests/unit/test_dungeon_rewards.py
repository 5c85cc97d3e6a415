"""
Unit Tests for DungeonRewardService
===================================

Test Coverage
-------------
- Defeat and victory XP
- Rarest-hit loot rolls and the common fallback
- Boss, bonus and high-floor extra rolls

The random source is a mock with a scripted `random()` sequence so each
roll can be followed by hand.
"""

import random

import pytest

from nacho.modules.dungeon import DungeonFloorGenerator, DungeonRewardService

MISS = 0.99


@pytest.fixture
def floors(config_manager):
    return DungeonFloorGenerator(config_manager)


@pytest.fixture
def scripted_rng(mocker):
    return mocker.Mock(spec=random.Random)


@pytest.mark.unit
class TestRollRarity:
    """Test a single loot roll."""

    def test_rarest_hit_wins(self, config_manager, scripted_rng):
        """The rarest rarity that hits should win."""
        scripted_rng.random.side_effect = [0.1, 0.1]
        rewards = DungeonRewardService(config_manager, scripted_rng)

        assert rewards.roll_rarity({"common": 0.5, "rare": 0.2, "epic": 0.0}) == "rare"

    def test_zero_rates_are_never_rolled(self, config_manager, scripted_rng):
        """Zero-rate rarities should not consume a roll."""
        scripted_rng.random.side_effect = [MISS, 0.1]
        rewards = DungeonRewardService(config_manager, scripted_rng)

        assert rewards.roll_rarity({"common": 0.5, "mythic": 0.0, "rare": 0.2}) == "rare"
        assert scripted_rng.random.call_count == 2

    def test_no_hit_falls_back_to_common(self, config_manager, scripted_rng):
        """A roll with no hit should fall back to common."""
        scripted_rng.random.side_effect = [MISS, MISS]
        rewards = DungeonRewardService(config_manager, scripted_rng)

        assert rewards.roll_rarity({"common": 0.5, "rare": 0.2}) == "common"

    def test_bonus_roll_chance_is_capped(self, config_manager):
        """Bonus roll chance should grow with floor up to 50%."""
        rewards = DungeonRewardService(config_manager, random.Random(1))

        assert rewards.bonus_roll_chance(1) == pytest.approx(0.202)
        assert rewards.bonus_roll_chance(150) == pytest.approx(0.5)
        assert rewards.bonus_roll_chance(1000) == 0.5


@pytest.mark.unit
class TestCalculateRewards:
    """Test whole-run rewards."""

    def test_defeat_pays_a_tenth_and_no_loot(self, config_manager, floors, scripted_rng):
        """Defeat should pay a tenth of base XP and drop nothing."""
        rewards = DungeonRewardService(config_manager, scripted_rng)

        loot = rewards.calculate_rewards(floors.generate(10), victory=False)

        # floor(floor(55335 * 0.05) * 0.1)
        assert loot.xp == 276
        assert loot.rarities == ()
        assert loot.victory is False
        scripted_rng.random.assert_not_called()

    def test_victory_single_drop(self, config_manager, floors, scripted_rng):
        """A plain victory should drop one item."""
        # variance, five rolled rarities on floor 1, bonus roll miss
        scripted_rng.random.side_effect = [0.0, 0.1, MISS, MISS, MISS, MISS, MISS]
        rewards = DungeonRewardService(config_manager, scripted_rng)

        loot = rewards.calculate_rewards(floors.generate(1), victory=True)

        # floor(600 * 0.15)
        assert loot.xp == 90
        assert loot.rarities == ("common",)

    def test_bonus_roll_adds_a_drop(self, config_manager, floors, scripted_rng):
        """A hit on the bonus chance should add a second drop."""
        scripted_rng.random.side_effect = [0.0] + [MISS] * 5 + [0.1] + [0.0] * 5
        rewards = DungeonRewardService(config_manager, scripted_rng)

        loot = rewards.calculate_rewards(floors.generate(1), victory=True)

        assert loot.rarities == ("common", "legendary")

    def test_boss_floor_rolls_twice(self, config_manager, floors, scripted_rng):
        """Boss floors should add a boosted roll."""
        scripted_rng.random.side_effect = (
            [0.0] + [MISS] * 5 + [MISS, MISS, MISS, 0.0, MISS] + [MISS]
        )
        rewards = DungeonRewardService(config_manager, scripted_rng)

        loot = rewards.calculate_rewards(floors.generate(10), victory=True)

        # floor(2766 * 0.15)
        assert loot.xp == 414
        assert loot.rarities == ("common", "epic")

    def test_high_floor_roll(self, config_manager, floors, scripted_rng):
        """Floors from 100 up should get the extra high-floor roll."""
        dungeon = floors.generate(100)
        rolled = sum(1 for rate in dungeon.rewards.drop_rates.values() if rate > 0)
        # main roll, boss roll, bonus miss, high-floor hit, high-floor roll
        scripted_rng.random.side_effect = (
            [0.0] + [MISS] * rolled + [MISS] * rolled + [MISS] + [0.1] + [MISS] * rolled
        )
        rewards = DungeonRewardService(config_manager, scripted_rng)

        loot = rewards.calculate_rewards(dungeon, victory=True)

        assert loot.rarities == ("common", "common", "common")

    def test_victory_always_drops_known_rarities(self, config_manager, floors):
        """Victories should only drop rarities from the floor table."""
        rewards = DungeonRewardService(config_manager, random.Random(99))

        for floor in (1, 10, 55, 100, 150):
            dungeon = floors.generate(floor)
            loot = rewards.calculate_rewards(dungeon, victory=True)

            assert len(loot.rarities) >= (2 if dungeon.is_boss_floor else 1)
            assert set(loot.rarities) <= set(dungeon.rewards.drop_rates)
