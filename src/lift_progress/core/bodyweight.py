"""
Body-weight log helpers.

Readings are kept one per day. The trend compares the two most recent
readings; a change under 0.5 kg is reported as stable.
"""

from typing import Iterable

from .config import WEIGHT_STABLE_THRESHOLD_KG
from .models import BodyWeightEntry, WeightTrend


def upsert_entry(entries: Iterable[BodyWeightEntry], entry: BodyWeightEntry) -> list[BodyWeightEntry]:
    """Replace any reading on the same day, returning the log oldest first."""
    kept = [e for e in entries if e.log_date != entry.log_date]
    kept.append(entry)
    return sorted(kept, key=lambda e: e.log_date)


def weight_trend(
    entries: Iterable[BodyWeightEntry],
    stable_threshold: float = WEIGHT_STABLE_THRESHOLD_KG,
) -> WeightTrend | None:
    """
    Compare the latest reading with the one before it.

    Args:
        entries: Body-weight readings in any order
        stable_threshold: Absolute change (kg) below which the trend is stable

    Returns:
        WeightTrend, or None with fewer than two readings
    """
    ordered = sorted(entries, key=lambda e: e.log_date)
    if len(ordered) < 2:
        return None

    latest = ordered[-1].weight_kg
    previous = ordered[-2].weight_kg
    diff = round(latest - previous, 2)
    if abs(diff) < stable_threshold:
        direction = "stable"
    elif diff > 0:
        direction = "up"
    else:
        direction = "down"
    return WeightTrend(latest=latest, previous=previous, diff=diff, direction=direction)
