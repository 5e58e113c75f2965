"""Shared Typer app object, shared option types, and store/engine helpers."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.engine.config_loader import load_progression_rules
from ..core.engine.service import ProgressionEngine
from ..io.history_store import WorkoutStore, get_default_history_path

# Shared --history-path option type used across all commands
HistoryOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to workouts JSONL file"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="lift-progress",
    help="Workout log with progressive-overload suggestions, plateau checks, streaks and nutrition goals.",
    no_args_is_help=True,
)


def get_store(history_path: Path | None) -> WorkoutStore:
    """Get the store from path or default location, honouring name matching config."""
    if history_path is None:
        history_path = get_default_history_path()
    return WorkoutStore(history_path, name_matching=load_progression_rules().name_matching)


def get_engine(store: WorkoutStore) -> ProgressionEngine:
    return ProgressionEngine(store, rules=load_progression_rules())
