"""
Tests for the sport skill-tier catalog.
"""
import pytest
from backend.utils.skill_levels import (
    SKILL_LEVELS,
    format_skill_level_range,
    get_skill_level_order,
    get_skill_levels_for_sport,
    is_known_sport,
    is_skill_level_in_range,
)


class TestCatalog:
    """Every sport lists its tiers in strictly increasing order."""

    @pytest.mark.parametrize("sport", sorted(SKILL_LEVELS))
    def test_orders_are_consecutive(self, sport):
        orders = [level["order"] for level in get_skill_levels_for_sport(sport)]
        assert orders == list(range(1, len(orders) + 1))

    def test_badminton_tiers(self):
        names = [level["name"] for level in get_skill_levels_for_sport("Badminton")]
        assert names[0] == "Low Beginner"
        assert names[-1] == "Expert"
        assert len(names) == 6

    def test_unknown_sport(self):
        assert is_known_sport("Quidditch") is False
        assert get_skill_levels_for_sport("Quidditch") == []
        assert get_skill_level_order("Beginner", "Quidditch") is None


class TestRanges:
    """Range membership is inclusive on both ends."""

    def test_in_range(self):
        assert is_skill_level_in_range("Mid Beginner", "Low Beginner", "High Beginner", "Badminton")
        assert is_skill_level_in_range("Low Beginner", "Low Beginner", "High Beginner", "Badminton")
        assert is_skill_level_in_range("High Beginner", "Low Beginner", "High Beginner", "Badminton")

    def test_out_of_range(self):
        assert not is_skill_level_in_range("Expert", "Low Beginner", "High Beginner", "Badminton")

    def test_unknown_tier_is_out_of_range(self):
        assert not is_skill_level_in_range("Wizard", "Low Beginner", "Expert", "Badminton")

    def test_format_range(self):
        assert format_skill_level_range("Beginner", "Advanced") == "Beginner - Advanced"
        assert format_skill_level_range("Advanced", "Advanced") == "Advanced"
