"""Named sub-ranges of the ladder ("journey phases") and their progress."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Phase:
    name: str
    low: int
    high: int
    icon: str = ""

    def contains(self, level: int) -> bool:
        return self.low <= level <= self.high


@dataclass(frozen=True)
class PhaseStats:
    """Progress through one phase, in units (runs) rather than distance."""

    name: str
    completed: int
    total: int
    completed_percent: float
    is_current: bool = False
    is_completed: bool = False


DEFAULT_PHASES: Tuple[Phase, ...] = (
    Phase(name="Starting Out", low=2, high=5, icon="🎯"),
    Phase(name="Building Base", low=6, high=10, icon="💪"),
    Phase(name="Mid Journey", low=11, high=15, icon="🔥"),
    Phase(name="Advanced", low=16, high=19, icon="⚡"),
    Phase(name="Final Push", low=20, high=21, icon="🏆"),
)
