"""
Unit Tests for PowerService
===========================

Purpose
-------
Pin every power component to hand-computed values from the packaged
balance tables (scale 12).

Test Coverage
-------------
- Each of the eight components
- total == sum(components)
- Collection bonus and excluded frames
- Cumulative army bonuses
- Malformed state handling
"""

import logging

import pytest

from nacho.domain.models import EquipmentItem, PlayerState, Shadow, StatType
from nacho.modules.power import PowerService
from nacho.modules.shared.exceptions import MalformedStateError


@pytest.fixture
def power(config_manager):
    return PowerService(config_manager)


@pytest.fixture
def rich_state(make_stats):
    stats = make_stats(
        strength=20,
        level=5,
        equipped_title_id="overlord",
        unlocked_title_ids=("overlord", "disciplined", "homemade_title"),
        selected_frame_id="shadow",
        unlocked_frame_ids=("default", "shadow", "lightning"),
        job_class="Guardian",
        passive_levels={"iron_muscle": 2},
    )
    return PlayerState(
        stats=stats,
        shadows=tuple(Shadow(id=f"s{i}", name="Soldier", rank="C") for i in range(5)),
        inventory=(
            EquipmentItem(
                id="blade",
                rarity="Rare",
                base_stats={StatType.STRENGTH: 5, StatType.AGILITY: 3},
                is_equipped=True,
            ),
            EquipmentItem(
                id="odd_ring",
                rarity="weird",
                base_stats={StatType.VITALITY: 2},
                is_equipped=True,
            ),
            EquipmentItem(
                id="spare",
                rarity="legendary",
                base_stats={StatType.STRENGTH: 50},
                is_equipped=False,
            ),
        ),
        custom_titles={"homemade_title": "epic"},
    )


@pytest.mark.unit
class TestBaselinePower:
    """Test a fresh level 1 player."""

    def test_fresh_player(self, power, make_stats):
        """A fresh level 1 player should land on the baseline total."""
        breakdown = power.calculate_breakdown(PlayerState(stats=make_stats()))

        assert breakdown.base_stats == 60 * 40 * 12
        assert breakdown.level == 400 * 12
        assert breakdown.titles == 0
        # The default frame never counts
        assert breakdown.frames == 0
        assert breakdown.job_class == 0
        assert breakdown.total == 33600

    def test_one_stat_point_is_worth_480(self, power, make_stats):
        """One extra stat point should add 480 power."""
        before = power.calculate_total_power(PlayerState(stats=make_stats()))
        after = power.calculate_total_power(PlayerState(stats=make_stats(fortune=11)))

        assert after - before == 480


@pytest.mark.unit
class TestComponents:
    """Test each component against the rich fixture."""

    def test_base_stats(self, power, rich_state):
        """Base stats should contribute effective stat total times 480."""
        assert power.calculate_breakdown(rich_state).base_stats == 33600

    def test_level(self, power, rich_state):
        """Level should contribute a flat amount per level."""
        assert power.calculate_breakdown(rich_state).level == 24000

    def test_titles_equipped_plus_collection(self, power, rich_state):
        """Titles should count the equipped title plus every unlocked one."""
        # overlord 2000*12 + disciplined floor(100*12*0.1) + custom epic floor(1000*12*0.1)
        assert power.calculate_breakdown(rich_state).titles == 24000 + 120 + 1200

    def test_frames_skip_default(self, power, rich_state):
        """The default frame should contribute nothing."""
        # shadow (S) 4000*12 + lightning (B) floor(1000*12*0.1)
        assert power.calculate_breakdown(rich_state).frames == 48000 + 1200

    def test_shadows_with_army_bonus(self, power, rich_state):
        """Shadows should add rank power plus army bonuses."""
        # 5 x C (800) + the 5-shadow army bonus of 2000
        assert power.calculate_breakdown(rich_state).shadows == 5 * 800 * 12 + 2000 * 12

    def test_equipment_only_equipped_items(self, power, rich_state):
        """Only equipped items should contribute."""
        # floor(8 * 2 * 3) * 12 + unknown rarity floor(2 * 1 * 3) * 12
        assert power.calculate_breakdown(rich_state).equipment == 576 + 72

    def test_passives(self, power, rich_state):
        """Passive levels should contribute per level."""
        # iron_muscle: floor(2 * 2 * 400) * 12
        assert power.calculate_breakdown(rich_state).passives == 19200

    def test_job_class_is_triangular(self, power, rich_state):
        """Job class power should follow the triangular index."""
        # Guardian is index 3 -> 6 * 2500 * 12
        assert power.calculate_breakdown(rich_state).job_class == 180000

    def test_total_is_sum_of_components(self, power, rich_state):
        """The total should equal the sum of the eight components."""
        breakdown = power.calculate_breakdown(rich_state)

        assert breakdown.total == sum(breakdown.components().values())
        assert breakdown.total == 403968

    def test_mapping_input_matches_model_input(self, power, rich_state):
        """Plain mappings should give the same total as models."""
        assert power.calculate_total_power(rich_state.to_dict()) == power.calculate_total_power(rich_state)


@pytest.mark.unit
class TestEdgeCases:
    """Test lookups with odd or missing data."""

    def test_army_bonuses_are_cumulative(self, power, make_stats):
        """Ten shadows should earn both army bonuses."""
        shadows = tuple(Shadow(id=f"s{i}", name="Soldier", rank="E") for i in range(10))

        breakdown = power.calculate_breakdown(PlayerState(stats=make_stats(), shadows=shadows))

        assert breakdown.shadows == 10 * 200 * 12 + (2000 + 5000) * 12

    def test_unknown_title_contributes_nothing(self, power, make_stats):
        """Unknown title ids should contribute zero."""
        stats = make_stats(equipped_title_id="made_up", unlocked_title_ids=("made_up",))

        assert power.calculate_breakdown(PlayerState(stats=stats)).titles == 0

    def test_rarity_lookup_is_case_insensitive(self, power, make_stats):
        """Shadow ranks should match regardless of case."""
        state = PlayerState(
            stats=make_stats(),
            shadows=(Shadow(id="igris", name="Igris", rank="ss"),),
        )

        assert power.calculate_breakdown(state).shadows == 8000 * 12

    def test_job_class_index(self, power):
        """Unknown or missing job classes should map to index 0."""
        assert power.job_class_index("Shadow Monarch") == 9
        assert power.job_class_index("Astronaut") == 0
        assert power.job_class_index(None) == 0


@pytest.mark.unit
class TestMalformedState:
    """Structurally broken state raises instead of producing a number."""

    def test_missing_attribute(self, power):
        """A stats mapping missing an attribute should be rejected."""
        with pytest.raises(MalformedStateError):
            power.calculate_total_power({"stats": {"strength": 10, "level": 1}})

    def test_missing_stats(self, power):
        """State without stats should be rejected."""
        with pytest.raises(MalformedStateError):
            power.calculate_total_power({"shadows": []})

    def test_non_integer_stat(self, power, make_stats):
        """Non-integer stats should be rejected with the field name."""
        data = {"stats": make_stats().to_dict()}
        data["stats"]["strength"] = "ten"

        with pytest.raises(MalformedStateError) as exc_info:
            power.calculate_total_power(data)

        assert exc_info.value.field == "strength"

    def test_level_zero(self, power, make_stats):
        """Level zero should be rejected."""
        data = {"stats": make_stats().to_dict()}
        data["stats"]["level"] = 0

        with pytest.raises(MalformedStateError):
            power.calculate_total_power(data)

    def test_malformed_state_is_logged_as_error(self, power, caplog):
        """Malformed state should be logged at ERROR before propagating."""
        with caplog.at_level(logging.WARNING, logger="nacho.modules.power.service"):
            with pytest.raises(MalformedStateError):
                power.calculate_total_power({"shadows": []})

        (record,) = [r for r in caplog.records if r.name == "nacho.modules.power.service"]
        assert record.levelno == logging.ERROR
        assert "calculate_power" in record.getMessage()
        assert record.severity == "error"
        assert record.retryable is False
        assert record.field == "stats"
