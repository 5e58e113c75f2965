"""Body-weight commands: log-weight, weight-history."""

import json
from dataclasses import asdict
from typing import Annotated, Optional

import typer

from ...core.bodyweight import weight_trend
from ...core.parsing import format_kg
from ...core.streaks import effective_date
from ...io.serializers import ValidationError, body_weight_to_dict, validate_log_date
from .. import views
from ..app import HistoryOption, JsonOption, app, get_store


@app.command("log-weight")
def log_weight(
    weight_kg: Annotated[float, typer.Argument(help="Body weight in kg")],
    history_path: HistoryOption = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Date YYYY-MM-DD (default: today)"),
    ] = None,
) -> None:
    """
    Record today's body weight (or a past day's).

    A second reading on the same day replaces the first. The profile
    weight follows the most recent reading.
    """
    store = get_store(history_path)

    try:
        day = validate_log_date(date, effective_date())
        store.log_body_weight(day, weight_kg)
        trend = weight_trend(store.load_body_weights())
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Logged {format_kg(weight_kg)} on {day.isoformat()}")
    if trend is not None:
        views.print_info(f"Change since previous reading: {trend.diff:+.1f} kg ({trend.direction})")


@app.command("weight-history")
def weight_history(
    history_path: HistoryOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List body-weight readings and the latest trend.
    """
    store = get_store(history_path)

    try:
        entries = store.load_body_weights()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    trend = weight_trend(entries)

    if json_out:
        print(json.dumps({
            "entries": [body_weight_to_dict(e) for e in entries],
            "trend": asdict(trend) if trend else None,
        }, indent=2))
        return

    if not entries:
        views.print_info("No body-weight readings yet. Use 'log-weight' to add one.")
        return

    views.print_body_weights(entries, trend)
