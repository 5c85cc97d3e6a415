"""
Unit Tests for StatResolver
===========================

Test Coverage
-------------
- Passive multipliers (floored, capped at max level)
- Live buff stacking and expiry
- Stat name parsing
"""

from datetime import timedelta

import pytest

from nacho.domain.models import ActiveBuff, StatType
from nacho.modules.shared.exceptions import ValidationError
from nacho.modules.stats import StatResolver


@pytest.fixture
def resolver(config_manager):
    return StatResolver(config_manager)


@pytest.mark.unit
class TestEffectiveStat:
    """Test effective attribute resolution."""

    def test_base_value_without_modifiers(self, resolver, make_stats, now):
        """Without modifiers the effective stat should equal the base."""
        stats = make_stats(strength=15)

        assert resolver.effective_stat(stats, StatType.STRENGTH, now=now) == 15

    def test_passive_multiplier_is_floored(self, resolver, make_stats, now):
        """Passive multipliers should be applied then floored."""
        # 15 * 1.15 = 17.25
        stats = make_stats(strength=15, passive_levels={"iron_muscle": 3})

        assert resolver.effective_stat(stats, StatType.STRENGTH, now=now) == 17

    def test_passive_level_is_capped(self, resolver, make_stats, now):
        """Passive levels above the max should be capped."""
        # 15 * (1 + 10 * 0.05) = 22.5
        stats = make_stats(strength=15, passive_levels={"iron_muscle": 12})

        assert resolver.effective_stat(stats, StatType.STRENGTH, now=now) == 22

    def test_live_buffs_are_added_after_floor(self, resolver, make_stats, now):
        """Live buffs should be added after flooring."""
        stats = make_stats(strength=15, passive_levels={"iron_muscle": 3})
        buffs = [
            ActiveBuff(id="gym_boost", stat=StatType.STRENGTH, amount=5, expires_at=now + timedelta(minutes=30)),
            ActiveBuff(id="old", stat=StatType.STRENGTH, amount=50, expires_at=now - timedelta(minutes=1)),
            ActiveBuff(id="gym_boost", stat=StatType.VITALITY, amount=3, expires_at=now + timedelta(minutes=30)),
        ]

        assert resolver.effective_stat(stats, StatType.STRENGTH, buffs, now) == 22

    def test_passive_on_other_stat_ignored(self, resolver, make_stats, now):
        """Passives for other stats should not apply."""
        stats = make_stats(agility=12, passive_levels={"iron_muscle": 5, "unknown_passive": 3})

        assert resolver.effective_stat(stats, StatType.AGILITY, now=now) == 12

    def test_stat_name_is_case_insensitive(self, resolver, make_stats, now):
        """Stat names should be matched case-insensitively."""
        stats = make_stats(metabolism=9)

        assert resolver.effective_stat(stats, "metabolism", now=now) == 9

    def test_unknown_stat_name_rejected(self, resolver, make_stats, now):
        """Unknown stat names should be rejected."""
        with pytest.raises(ValidationError) as exc_info:
            resolver.effective_stat(make_stats(), "Sense", now=now)

        assert exc_info.value.field == "stat"

    def test_effective_stats_covers_all_six(self, resolver, make_stats, now):
        """effective_stats should return all six stats."""
        buffs = [ActiveBuff(id="coffee_focus", stat=StatType.INTELLIGENCE, amount=5, expires_at=now + timedelta(hours=1))]

        effective = resolver.effective_stats(make_stats(), buffs, now)

        assert set(effective) == set(StatType)
        assert effective[StatType.INTELLIGENCE] == 15
        assert effective[StatType.FORTUNE] == 10

    def test_passive_lookup(self, resolver):
        """Each stat should have exactly one passive."""
        assert resolver.passive_for(StatType.VITALITY).id == "phoenix_body"
        assert len(resolver.passives) == 6
