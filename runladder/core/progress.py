"""Date-driven progression: where a given day falls on the ladder.

Nothing here is stored. A ``Position`` is recomputed from the configured
reference point every time a date is queried, so two callers asking about
the same day always see the same figures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from runladder.core.config import LadderConfig
from runladder.core.levels import LevelDescriptor, LevelState, all_levels
from runladder.core.phases import Phase, PhaseStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Position:
    """Level reached and units completed within it.

    ``count == requirement`` means the level is finished but not yet rolled
    over. Ordering is lexicographic (level, then count).
    """

    level: int
    count: int


@dataclass(frozen=True)
class ProgressSnapshot:
    """Everything a display needs for one query date."""

    query_date: date
    position: Position
    requirement: int
    units_left_at_level: int
    level_progress_percent: float
    levels_in_progress: int
    cumulative_units_completed: int
    units_completed: int
    total_units_goal: int
    total_units_required: int
    units_remaining: int
    cumulative_units_remaining: int
    overall_progress_percent: str
    projected_completion_date: date
    phases: List[PhaseStats] = field(default_factory=list)
    levels: List[LevelState] = field(default_factory=list)


def _as_day(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


class ProgressionEngine:
    """Pure queries over an immutable LadderConfig."""

    def __init__(self, config: LadderConfig) -> None:
        self._config = config

    @property
    def config(self) -> LadderConfig:
        return self._config

    def requirement_of(self, level: int) -> int:
        return self._config.requirement_of(level)

    # ------------------------------------------------------------------
    # Forward mapping
    # ------------------------------------------------------------------

    def position_for_date(self, day: date) -> Position:
        cfg = self._config
        days_diff = (_as_day(day) - cfg.reference_date).days
        additional_units = days_diff // cfg.cadence_days

        level = cfg.reference_level
        remaining = cfg.reference_count + additional_units

        while remaining > self.requirement_of(level):
            remaining -= self.requirement_of(level)
            level += 1
            if level > cfg.end_level:
                logger.debug("Saturated at end of ladder for %s", day)
                level = cfg.end_level
                remaining = self.requirement_of(level)
                break

        while remaining < 0:
            level -= 1
            if level < cfg.start_level:
                logger.debug("Saturated at start of ladder for %s", day)
                level = cfg.start_level
                remaining = 0
                break
            remaining += self.requirement_of(level)

        return Position(level=level, count=remaining)

    def next_unit_date(self, day: date) -> date:
        """Date one completed unit after ``day`` (the "complete a run" step)."""
        return _as_day(day) + timedelta(days=self._config.cadence_days)

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def all_levels(self) -> List[LevelDescriptor]:
        cfg = self._config
        return all_levels(cfg.start_level, cfg.end_level, cfg.requirement_of)

    def total_units_goal(self) -> int:
        return sum(d.cumulative_units for d in self.all_levels())

    def total_units_required(self) -> int:
        return sum(d.requirement for d in self.all_levels())

    def cumulative_units_completed(self, position: Position) -> int:
        """Distance covered: every finished level in full plus the current one so far."""
        below = sum(d.cumulative_units for d in self.all_levels() if d.level < position.level)
        return below + position.level * position.count

    def units_completed_count(self, position: Position) -> int:
        below = sum(d.requirement for d in self.all_levels() if d.level < position.level)
        return below + position.count

    def units_remaining(self, position: Position) -> int:
        return self.total_units_required() - self.units_completed_count(position)

    def cumulative_units_remaining(self, position: Position) -> int:
        return self.total_units_goal() - self.cumulative_units_completed(position)

    def units_left_at_level(self, position: Position) -> int:
        return self.requirement_of(position.level) - position.count

    def level_progress_percent(self, position: Position) -> float:
        return position.count / self.requirement_of(position.level) * 100.0

    def levels_in_progress(self, position: Position) -> int:
        """Levels finished, plus the current one once it has been started."""
        started = 1 if position.count > 0 else 0
        return position.level - self._config.start_level + started

    def overall_progress(self, position: Position) -> float:
        goal = self.total_units_goal()
        if goal == 0:
            return 0.0
        percent = self.cumulative_units_completed(position) / goal * 100.0
        return max(0.0, min(100.0, percent))

    def overall_progress_percent(self, position: Position) -> str:
        return f"{self.overall_progress(position):.1f}"

    def phase_stats(
        self,
        position: Position,
        *,
        phases: Optional[Iterable[Phase]] = None,
    ) -> List[PhaseStats]:
        """Per-phase unit progress; ``phases`` defaults to the configured ones."""
        if phases is None:
            phases = self._config.phases

        stats: List[PhaseStats] = []
        for phase in phases:
            completed = 0
            total = 0
            for level in range(phase.low, phase.high + 1):
                requirement = self.requirement_of(level)
                total += requirement
                if level < position.level:
                    completed += requirement
                elif level == position.level:
                    completed += position.count
            stats.append(
                PhaseStats(
                    name=phase.name,
                    completed=completed,
                    total=total,
                    completed_percent=completed / total * 100.0 if total else 0.0,
                    is_current=phase.contains(position.level),
                    is_completed=position.level > phase.high,
                )
            )
        return stats

    def level_states(self, position: Position) -> List[LevelState]:
        states: List[LevelState] = []
        for descriptor in self.all_levels():
            if descriptor.level < position.level:
                states.append(LevelState(level=descriptor, completed=True, fill_percent=100.0))
            elif descriptor.level == position.level:
                states.append(
                    LevelState(
                        level=descriptor,
                        completed=False,
                        is_current=True,
                        fill_percent=self.level_progress_percent(position),
                    )
                )
            else:
                states.append(LevelState(level=descriptor, completed=False))
        return states

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def remaining_units(self, position: Position) -> int:
        """Units still to run from ``position`` to the end of the ladder."""
        cfg = self._config
        remaining = max(0, self.requirement_of(position.level) - position.count)
        for level in range(position.level + 1, cfg.end_level + 1):
            remaining += self.requirement_of(level)
        return remaining

    def projected_completion_date(self, position: Position, from_date: date) -> date:
        days = self.remaining_units(position) * self._config.cadence_days
        start = _as_day(from_date)
        if days > (date.max - start).days:
            logger.debug("Projection from %s runs past the calendar, clamped", start)
            return date.max
        return start + timedelta(days=days)

    # ------------------------------------------------------------------
    # Bundle
    # ------------------------------------------------------------------

    def snapshot(self, day: date) -> ProgressSnapshot:
        day = _as_day(day)
        position = self.position_for_date(day)
        return ProgressSnapshot(
            query_date=day,
            position=position,
            requirement=self.requirement_of(position.level),
            units_left_at_level=self.units_left_at_level(position),
            level_progress_percent=self.level_progress_percent(position),
            levels_in_progress=self.levels_in_progress(position),
            cumulative_units_completed=self.cumulative_units_completed(position),
            units_completed=self.units_completed_count(position),
            total_units_goal=self.total_units_goal(),
            total_units_required=self.total_units_required(),
            units_remaining=self.units_remaining(position),
            cumulative_units_remaining=self.cumulative_units_remaining(position),
            overall_progress_percent=self.overall_progress_percent(position),
            projected_completion_date=self.projected_completion_date(position, day),
            phases=self.phase_stats(position),
            levels=self.level_states(position),
        )
