from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from runladder.core.levels import REQUIREMENT_RULES, RequirementRule, requirement_equals_level
from runladder.core.phases import DEFAULT_PHASES, Phase

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / "ladder.yaml"


class ConfigurationError(ValueError):
    """The ladder configuration breaks one of its invariants.

    Raised once while the configuration is built or loaded; the engine's
    query methods never raise it.
    """


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class LadderConfig:
    """Reference point, cadence and ladder bounds. Immutable once built."""

    reference_date: date
    reference_level: int
    reference_count: int
    cadence_days: int
    start_level: int
    end_level: int
    requirement_of: RequirementRule = requirement_equals_level
    phases: Tuple[Phase, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.reference_date, datetime):
            object.__setattr__(self, "reference_date", self.reference_date.date())
        elif not isinstance(self.reference_date, date):
            raise ConfigurationError(
                f"reference_date must be a date, got {self.reference_date!r}"
            )
        object.__setattr__(self, "phases", tuple(self.phases))

        for name in ("reference_level", "reference_count", "cadence_days", "start_level", "end_level"):
            if not _is_int(getattr(self, name)):
                raise ConfigurationError(f"{name} must be an integer, got {getattr(self, name)!r}")

        if self.cadence_days <= 0:
            raise ConfigurationError(f"cadence_days must be positive, got {self.cadence_days}")
        if self.start_level > self.end_level:
            raise ConfigurationError(
                f"start_level {self.start_level} is above end_level {self.end_level}"
            )

        for level in range(self.start_level, self.end_level + 1):
            requirement = self.requirement_of(level)
            if not _is_int(requirement) or requirement <= 0:
                raise ConfigurationError(
                    f"requirement for level {level} must be a positive integer, got {requirement!r}"
                )

        if not self.start_level <= self.reference_level <= self.end_level:
            raise ConfigurationError(
                f"reference_level {self.reference_level} outside ladder "
                f"[{self.start_level}, {self.end_level}]"
            )
        reference_requirement = self.requirement_of(self.reference_level)
        if not 0 <= self.reference_count <= reference_requirement:
            raise ConfigurationError(
                f"reference_count {self.reference_count} outside "
                f"[0, {reference_requirement}] for level {self.reference_level}"
            )

        for phase in self.phases:
            if phase.low > phase.high:
                raise ConfigurationError(f"phase {phase.name!r}: low {phase.low} is above high {phase.high}")
            if phase.low < self.start_level or phase.high > self.end_level:
                raise ConfigurationError(
                    f"phase {phase.name!r}: range [{phase.low}, {phase.high}] outside ladder "
                    f"[{self.start_level}, {self.end_level}]"
                )


def load_config(path: Optional[Path] = None) -> LadderConfig:
    """Build a LadderConfig from a YAML file (the bundled ladder.yaml by default)."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Ladder config not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{config_path.name}: invalid YAML: {e}") from e
    if not raw or not isinstance(raw, dict):
        raise ConfigurationError(
            f"{config_path.name}: expected YAML with 'reference', 'cadence_days' and 'ladder'"
        )

    reference = raw.get("reference")
    if not isinstance(reference, dict):
        raise ConfigurationError(f"{config_path.name}: missing or invalid 'reference'")
    ladder = raw.get("ladder")
    if not isinstance(ladder, dict):
        raise ConfigurationError(f"{config_path.name}: missing or invalid 'ladder'")
    for section, keys in ((reference, ("date", "level", "count")), (ladder, ("start", "end"))):
        for key in keys:
            if key not in section:
                raise ConfigurationError(f"{config_path.name}: missing '{key}'")
    if "cadence_days" not in raw:
        raise ConfigurationError(f"{config_path.name}: missing 'cadence_days'")

    reference_date = reference["date"]
    if isinstance(reference_date, str):
        try:
            reference_date = date.fromisoformat(reference_date.strip())
        except ValueError as e:
            raise ConfigurationError(f"{config_path.name}: invalid reference date {reference_date!r}") from e

    try:
        config = LadderConfig(
            reference_date=reference_date,
            reference_level=reference["level"],
            reference_count=reference["count"],
            cadence_days=raw["cadence_days"],
            start_level=ladder["start"],
            end_level=ladder["end"],
            requirement_of=_parse_requirement(ladder.get("requirement"), config_path),
            phases=_parse_phases(raw.get("phases"), config_path),
        )
    except ConfigurationError as e:
        raise ConfigurationError(f"{config_path.name}: {e}") from e

    logger.info(
        "Loaded ladder %s-%s from %s (reference %s: level %s, count %s)",
        config.start_level,
        config.end_level,
        config_path,
        config.reference_date.isoformat(),
        config.reference_level,
        config.reference_count,
    )
    return config


def _parse_requirement(raw: Any, config_path: Path) -> RequirementRule:
    if raw is None:
        return requirement_equals_level
    if isinstance(raw, str):
        raw = {"rule": raw}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{config_path.name}: invalid 'requirement'")

    params: Dict[str, Any] = dict(raw)
    name = params.pop("rule", None)
    factory = REQUIREMENT_RULES.get(name) if isinstance(name, str) else None
    if factory is None:
        raise ConfigurationError(
            f"{config_path.name}: unknown requirement rule {name!r} "
            f"(expected one of {', '.join(sorted(REQUIREMENT_RULES))})"
        )
    try:
        return factory(**params)
    except TypeError as e:
        raise ConfigurationError(f"{config_path.name}: bad parameters for rule {name!r}: {e}") from e


def _parse_phases(raw: Any, config_path: Path) -> Tuple[Phase, ...]:
    if raw is None:
        return DEFAULT_PHASES
    if not isinstance(raw, list):
        raise ConfigurationError(f"{config_path.name}: 'phases' must be a list")

    phases = []
    for item in raw:
        if not isinstance(item, dict):
            raise ConfigurationError(f"{config_path.name}: each phase must be a mapping")
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"{config_path.name}: phase missing or invalid 'name'")
        bounds = item.get("range")
        if not isinstance(bounds, list) or len(bounds) != 2 or not all(_is_int(b) for b in bounds):
            raise ConfigurationError(f"{config_path.name}: phase {name!r} needs 'range: [low, high]'")
        phases.append(Phase(name=name.strip(), low=bounds[0], high=bounds[1], icon=str(item.get("icon", ""))))
    return tuple(phases)
