"""Command-line entry point for the runladder progress tracker."""

import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from runladder.core.config import ConfigurationError, load_config
from runladder.core.progress import ProgressionEngine, ProgressSnapshot

CONFIG_ENV_VAR = "RUNLADDER_CONFIG"


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def format_date(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def progress_message(snapshot: ProgressSnapshot) -> str:
    runs_left = snapshot.units_left_at_level
    level = snapshot.position.level
    if runs_left > 0:
        plural = "" if runs_left == 1 else "s"
        return f"{runs_left} more run{plural} of {level}km to level up!"
    return "Level complete! The next run moves you to the next level."


def format_snapshot(snapshot: ProgressSnapshot) -> List[str]:
    """Render a snapshot as plain text lines."""
    position = snapshot.position
    lines = [
        f"Progress on {format_date(snapshot.query_date)}",
        f"  Current distance:   {position.level} km",
        f"  Runs completed:     {position.count} / {snapshot.requirement}",
        f"  {progress_message(snapshot)}",
        f"  Total distance run: {snapshot.cumulative_units_completed} km",
        f"  Overall progress:   {snapshot.overall_progress_percent}%",
        f"  Projected finish:   {format_date(snapshot.projected_completion_date)}",
        f"  Runs:               {snapshot.units_completed} of {snapshot.total_units_required}"
        f" ({snapshot.units_remaining} remaining)",
        f"  Distance:           {snapshot.cumulative_units_completed} of {snapshot.total_units_goal} km"
        f" ({snapshot.cumulative_units_remaining} km remaining)",
    ]
    if snapshot.phases:
        lines.append("Journey")
        for phase in snapshot.phases:
            marker = "*" if phase.is_current else ("+" if phase.is_completed else " ")
            lines.append(f"  {marker} {phase.name:<14} {round(phase.completed_percent):>3d}%")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    """Print the progress snapshot for the date in ``argv`` (today by default)."""
    args = sys.argv[1:] if argv is None else argv

    try:
        query_date = date.fromisoformat(args[0]) if args else date.today()
    except ValueError:
        logging.error(f"Invalid date {args[0]!r}, expected YYYY-MM-DD")
        return 2

    config_path = os.environ.get(CONFIG_ENV_VAR)
    try:
        config = load_config(Path(config_path) if config_path else None)
    except (ConfigurationError, FileNotFoundError) as e:
        logging.error(f"Cannot start: {e}")
        return 1

    engine = ProgressionEngine(config)
    for line in format_snapshot(engine.snapshot(query_date)):
        print(line)
    return 0


def run() -> None:
    """Initialize logging and print today's (or the given day's) progress."""
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
