from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

RequirementRule = Callable[[int], int]


def requirement_equals_level(level: int) -> int:
    """Default rule: clearing level N takes N units (N runs of N km)."""
    return level


def constant_requirement(units: int) -> RequirementRule:
    """Rule where every level takes the same number of units."""

    def _rule(level: int) -> int:
        return units

    _rule.__name__ = f"constant_requirement_{units}"
    return _rule


def _level_rule() -> RequirementRule:
    return requirement_equals_level


# Rule factories addressable by name from the YAML config.
REQUIREMENT_RULES: Dict[str, Callable[..., RequirementRule]] = {
    "level": _level_rule,
    "constant": constant_requirement,
}


@dataclass(frozen=True)
class LevelDescriptor:
    level: int
    requirement: int

    @property
    def cumulative_units(self) -> int:
        """Units of distance covered by clearing the whole level."""
        return self.level * self.requirement


@dataclass(frozen=True)
class LevelState:
    """A level as seen from a given position: done, current, or still ahead."""

    level: LevelDescriptor
    completed: bool
    is_current: bool = False
    fill_percent: float = 0.0


def all_levels(
    start_level: int,
    end_level: int,
    requirement_of: RequirementRule,
) -> List[LevelDescriptor]:
    return [
        LevelDescriptor(level=level, requirement=requirement_of(level))
        for level in range(start_level, end_level + 1)
    ]
