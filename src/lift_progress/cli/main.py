"""
CLI entry point using Typer.

Provides commands for the workout log and progression engine:
- init: Create profile, daily goals and log files
- log-workout / show-history / delete-record: Manage the workout log
- suggest / plateau / progress: Per-exercise analysis
- streak: Workout streaks and the current 7-day cycle
- log-water / log-meal / goals / set-goals / achievements: Nutrition tracking
- log-weight / weight-history: Body-weight log and trend
"""

from typing import Annotated

import typer

from ..logging_config import configure_logging
from .app import app
from .commands import analysis, bodyweight, nutrition, workouts  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug log events on stderr"),
    ] = False,
) -> None:
    """
    Workout log with progressive-overload suggestions.
    """
    configure_logging("DEBUG" if verbose else None)


if __name__ == "__main__":
    app()
