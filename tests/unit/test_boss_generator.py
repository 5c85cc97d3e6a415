"""
Unit Tests for BossGenerator and ElementResolver
================================================

Test Coverage
-------------
- Keyword-driven element selection with random fallback
- Power, level, stat spread and moves from a scripted random source
- Shadow extraction and rank ladder
- Reproducibility with a seeded generator
"""

import random

import pytest

from nacho.domain.models import DungeonDescriptor, StatType
from nacho.modules.combat import BossGenerator, ElementResolver


@pytest.fixture
def elements(config_manager):
    return ElementResolver(config_manager)


@pytest.fixture
def scripted_rng(mocker):
    """
    Random source that picks the first option everywhere.

    `random()` must be scripted per test: variance, six stat top-ups,
    then the extraction roll.
    """
    rng = mocker.Mock(spec=random.Random)
    rng.randint.return_value = 2
    rng.choice.side_effect = lambda options: options[0]
    rng.sample.side_effect = lambda population, k: list(population)[:k]
    rng.getrandbits.return_value = 0xABCDEF
    return rng


@pytest.mark.unit
class TestElementResolver:
    """Test element selection."""

    @pytest.mark.parametrize(
        "dungeon_id,element",
        [
            ("red_gate_orc", "fire"),
            ("Goblin_Cave", "dark"),
            ("insect_hive", "metabolism"),
            # The first matching rule wins
            ("double_dungeon_void", "arcane"),
        ],
    )
    def test_keyword_match(self, elements, dungeon_id, element):
        """Dungeon ids should map to elements by their first matching keyword."""
        assert elements.match_keyword(dungeon_id) == element

    def test_no_keyword_falls_back_to_random(self, elements):
        """Ids without a keyword should get a random known element."""
        assert elements.match_keyword("dungeon_1") is None
        assert elements.resolve("dungeon_1", random.Random(3)) in elements.elements

    def test_element_tables(self, elements):
        """Element tables should expose bias, shadow stat and moves."""
        assert elements.stat_bias("arcane") == {StatType.INTELLIGENCE: 0.6}
        assert elements.shadow_bonus_stat("dark") is StatType.VITALITY
        assert elements.shadow_bonus_stat("plasma") is StatType.STRENGTH
        assert len(elements.moves_for("fire")) == 3


@pytest.mark.unit
class TestBossGeneration:
    """Test a fully scripted boss."""

    def test_scripted_boss(self, config_manager, scripted_rng, make_stats):
        """A scripted roll sequence should produce a fully known boss."""
        # Arrange
        scripted_rng.random.side_effect = [0.5] + [0.0] * 6 + [0.1]
        generator = BossGenerator(config_manager, scripted_rng)
        dungeon = DungeonDescriptor(id="void_gate", difficulty=2, recommended_power=1000, min_level=5)

        # Act
        boss = generator.generate(dungeon, make_stats(level=40))

        # Assert
        assert boss.element == "dark"
        assert boss.power_level == 1000
        assert boss.level == 7
        assert boss.name == "Shadow Beast Lvl. 7"
        assert boss.id == "boss_void_gate_00abcdef"
        assert boss.special_moves == ("Void Howl", "Shadow Step", "Cataclysm Strike")

    def test_element_bias_spreads_half_the_power(self, config_manager, scripted_rng, make_stats):
        """Half the power should go to stats, weighted by element bias."""
        scripted_rng.random.side_effect = [0.5] + [0.0] * 6 + [0.1]
        generator = BossGenerator(config_manager, scripted_rng)
        dungeon = DungeonDescriptor(id="void_gate", difficulty=2, recommended_power=1000, min_level=5)

        stats = generator.generate(dungeon, make_stats()).stats

        # pool = 500; dark adds 20% to strength, agility and intelligence
        assert stats.strength == 110
        assert stats.agility == 110
        assert stats.intelligence == 110
        assert stats.vitality == 10
        assert stats.fortune == 10
        assert stats.metabolism == 10

    def test_extractable_shadow(self, config_manager, scripted_rng, make_stats):
        """A successful extraction roll should attach shadow data."""
        scripted_rng.random.side_effect = [0.5] + [0.0] * 6 + [0.1]
        generator = BossGenerator(config_manager, scripted_rng)
        dungeon = DungeonDescriptor(id="void_gate", difficulty=2, recommended_power=1000, min_level=5)

        boss = generator.generate(dungeon, make_stats())

        assert boss.can_extract is True
        assert boss.shadow_data.name == "Shadow Shadow Beast"
        assert boss.shadow_data.rank == "C"
        assert boss.shadow_data.bonus.stat is StatType.VITALITY
        assert boss.shadow_data.bonus.value == 4

    def test_failed_extraction_has_no_shadow(self, config_manager, scripted_rng, make_stats):
        """A failed extraction roll should leave no shadow data."""
        scripted_rng.random.side_effect = [0.5] + [0.0] * 6 + [0.9]
        generator = BossGenerator(config_manager, scripted_rng)
        dungeon = DungeonDescriptor(id="void_gate", difficulty=2, recommended_power=1000, min_level=5)

        boss = generator.generate(dungeon, make_stats())

        assert boss.can_extract is False
        assert boss.shadow_data is None

    def test_power_budget_from_difficulty(self, config_manager, scripted_rng, make_stats):
        """Without recommended power the budget should follow difficulty."""
        scripted_rng.random.side_effect = [0.5] + [0.0] * 6 + [0.9]
        generator = BossGenerator(config_manager, scripted_rng)

        boss = generator.generate(DungeonDescriptor(id="red_gate", difficulty=3), make_stats())

        assert boss.power_level == 300

    def test_player_level_used_without_min_level(self, config_manager, scripted_rng, make_stats):
        """Player level should be used when min_level is missing."""
        scripted_rng.random.side_effect = [0.5] + [0.0] * 6 + [0.9]
        scripted_rng.randint.return_value = 0
        generator = BossGenerator(config_manager, scripted_rng)

        boss = generator.generate(DungeonDescriptor(id="red_gate", difficulty=3), make_stats(level=12))

        assert boss.level == 12

    @pytest.mark.parametrize("difficulty,rank", [(1, "C"), (3, "B"), (4, "A"), (5, "S"), (8, "S")])
    def test_shadow_rank_ladder(self, config_manager, difficulty, rank):
        """Difficulty should map onto the shadow rank ladder."""
        assert BossGenerator(config_manager, random.Random(0)).shadow_rank(difficulty) == rank


@pytest.mark.unit
class TestSeededGeneration:
    """Test reproducibility and structural guarantees with a real generator."""

    def test_same_seed_same_boss(self, config_manager, make_stats):
        """The same seed should produce the same boss."""
        dungeon = DungeonDescriptor(id="dungeon_42", difficulty=3, recommended_power=50000, min_level=37)

        first = BossGenerator(config_manager, random.Random(42)).generate(dungeon, make_stats())
        second = BossGenerator(config_manager, random.Random(42)).generate(dungeon, make_stats())

        assert first == second

    def test_power_ignores_player_strength(self, config_manager, make_stats):
        """Boss power should not depend on the player."""
        dungeon = DungeonDescriptor(id="dungeon_42", difficulty=3, recommended_power=50000, min_level=37)

        weak = BossGenerator(config_manager, random.Random(5)).generate(dungeon, make_stats())
        strong = BossGenerator(config_manager, random.Random(5)).generate(
            dungeon, make_stats(strength=900, level=80)
        )

        assert weak.power_level == strong.power_level

    def test_structural_guarantees(self, config_manager, make_stats):
        """Seeded bosses should stay within the power variance band."""
        generator = BossGenerator(config_manager, random.Random(2024))
        dungeon = DungeonDescriptor(id="dungeon_7", difficulty=1, recommended_power=12000, min_level=2)

        for _ in range(50):
            boss = generator.generate(dungeon, make_stats())

            assert 10800 <= boss.power_level <= 13200
            assert 2 <= boss.level <= 6
            assert boss.special_moves[-1] == "Cataclysm Strike"
            assert len(boss.special_moves) == len(set(boss.special_moves)) == 3
            assert all(boss.stats.get(stat) >= 10 for stat in StatType)
            assert boss.can_extract == (boss.shadow_data is not None)
