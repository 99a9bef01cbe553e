"""Tests for runladder.core.levels – requirement rules and level descriptors."""

from __future__ import annotations

import pytest

from runladder.core.levels import (
    REQUIREMENT_RULES,
    LevelDescriptor,
    LevelState,
    all_levels,
    constant_requirement,
    requirement_equals_level,
)


# ---------------------------------------------------------------------------
# Requirement rules
# ---------------------------------------------------------------------------

class TestRequirementRules:
    def test_default_rule_is_identity(self):
        assert requirement_equals_level(2) == 2
        assert requirement_equals_level(21) == 21

    def test_constant_rule(self):
        rule = constant_requirement(3)
        assert rule(1) == 3
        assert rule(50) == 3

    def test_registry_names(self):
        assert set(REQUIREMENT_RULES) == {"level", "constant"}

    def test_registry_builds_rules(self):
        assert REQUIREMENT_RULES["level"]()(9) == 9
        assert REQUIREMENT_RULES["constant"](units=4)(9) == 4


# ---------------------------------------------------------------------------
# LevelDescriptor dataclass
# ---------------------------------------------------------------------------

class TestLevelDescriptor:
    def test_cumulative_units_is_product(self):
        d = LevelDescriptor(level=7, requirement=3)
        assert d.cumulative_units == 21

    def test_frozen(self):
        d = LevelDescriptor(level=7, requirement=7)
        with pytest.raises(AttributeError):
            d.level = 8  # type: ignore[misc]

    def test_equality(self):
        assert LevelDescriptor(level=2, requirement=2) == LevelDescriptor(level=2, requirement=2)


# ---------------------------------------------------------------------------
# all_levels
# ---------------------------------------------------------------------------

class TestAllLevels:
    def test_length_covers_bounds_inclusive(self):
        levels = all_levels(2, 21, requirement_equals_level)
        assert len(levels) == 20
        assert levels[0].level == 2
        assert levels[-1].level == 21

    def test_default_rule_squares(self):
        for d in all_levels(2, 21, requirement_equals_level):
            assert d.requirement == d.level
            assert d.cumulative_units == d.level * d.level

    def test_constant_rule(self):
        levels = all_levels(1, 3, constant_requirement(5))
        assert [d.requirement for d in levels] == [5, 5, 5]
        assert [d.cumulative_units for d in levels] == [5, 10, 15]

    def test_single_level_ladder(self):
        assert all_levels(4, 4, requirement_equals_level) == [LevelDescriptor(level=4, requirement=4)]

    def test_returns_fresh_list(self):
        a = all_levels(2, 5, requirement_equals_level)
        b = all_levels(2, 5, requirement_equals_level)
        assert a == b
        assert a is not b


# ---------------------------------------------------------------------------
# LevelState dataclass
# ---------------------------------------------------------------------------

class TestLevelState:
    def test_defaults(self):
        ls = LevelState(level=LevelDescriptor(level=3, requirement=3), completed=False)
        assert ls.is_current is False
        assert ls.fill_percent == 0.0

    def test_level_reference(self):
        d = LevelDescriptor(level=3, requirement=3)
        ls = LevelState(level=d, completed=True, fill_percent=100.0)
        assert ls.level is d
        assert ls.level.cumulative_units == 9
