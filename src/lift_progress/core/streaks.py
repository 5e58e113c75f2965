"""
Workout streaks, rolling 7-day cycles, and the app's day boundary.

The app day rolls over at 04:00 America/Sao_Paulo rather than at
midnight, so a session finished at 01:30 still belongs to "yesterday"
when deciding what today is.

Cycles are anchored at the user's first completed workout, not at
calendar weeks: cycle n covers days [first + 7n, first + 7n + 6].
"""

from datetime import date, datetime, timedelta
from typing import Iterable
from zoneinfo import ZoneInfo

from .config import APP_TIMEZONE, CYCLE_LENGTH_DAYS, DAY_ROLLOVER_HOUR
from .models import StreakSummary, WorkoutCycle

_ONE_DAY = timedelta(days=1)


def effective_date(
    now: datetime | None = None,
    timezone: str = APP_TIMEZONE,
    rollover_hour: int = DAY_ROLLOVER_HOUR,
) -> date:
    """
    Return the current app day.

    Args:
        now: Current time; naive values are taken as local app time.
             Defaults to the wall clock.
        timezone: IANA zone the app day is defined in
        rollover_hour: Local hour at which the day changes

    Returns:
        Today's date, or yesterday's if local time is before the rollover
    """
    tz = ZoneInfo(timezone)
    if now is None:
        local = datetime.now(tz)
    elif now.tzinfo is None:
        local = now.replace(tzinfo=tz)
    else:
        local = now.astimezone(tz)

    if local.hour < rollover_hour:
        return (local - _ONE_DAY).date()
    return local.date()


def to_day(value: date | datetime, timezone: str = APP_TIMEZONE) -> date:
    """Reduce a timestamp to its app day; plain dates pass through."""
    if isinstance(value, datetime):
        return effective_date(value, timezone)
    return value


def unique_days(values: Iterable[date | datetime]) -> list[date]:
    """Deduplicated days, most recent first."""
    return sorted({to_day(v) for v in values}, reverse=True)


def compute_streak(
    completed_workout_dates: Iterable[date | datetime],
    today: date | None = None,
) -> StreakSummary:
    """
    Compute current and longest runs of consecutive workout days.

    The current streak is alive only if the latest workout day is today or
    yesterday; it then walks back while each day is exactly one day before
    the previous one. The max streak is the longest such run anywhere in the
    history.

    Args:
        completed_workout_dates: Completion timestamps or dates (any order)
        today: App day to measure from (default: effective_date())

    Returns:
        StreakSummary
    """
    days = unique_days(completed_workout_dates)
    if not days:
        return StreakSummary(current_streak=0, max_streak=0)

    if today is None:
        today = effective_date()

    current = 0
    if days[0] in (today, today - _ONE_DAY):
        current = 1
        for prev, day in zip(days, days[1:]):
            if prev - day != _ONE_DAY:
                break
            current += 1

    longest = 1
    run = 1
    for prev, day in zip(days, days[1:]):
        if prev - day == _ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    return StreakSummary(current_streak=current, max_streak=max(longest, current))


def cycle_index(first_day: date, day: date) -> int:
    """
    Index of the rolling 7-day cycle that contains ``day``.

    Raises:
        ValueError: If day precedes the anchor
    """
    offset = (day - first_day).days
    if offset < 0:
        raise ValueError(f"{day.isoformat()} is before the first workout {first_day.isoformat()}")
    return offset // CYCLE_LENGTH_DAYS


def _cycle_bounds(first_day: date, index: int) -> tuple[date, date]:
    start = first_day + timedelta(days=index * CYCLE_LENGTH_DAYS)
    return start, start + timedelta(days=CYCLE_LENGTH_DAYS - 1)


def group_into_cycles(completed_workout_dates: Iterable[date | datetime]) -> list[WorkoutCycle]:
    """
    Group workout days into cycles anchored at the first workout.

    Only cycles that contain at least one workout are returned, oldest first.
    """
    days = sorted(set(unique_days(completed_workout_dates)))
    if not days:
        return []

    first = days[0]
    grouped: dict[int, list[date]] = {}
    for day in days:
        grouped.setdefault(cycle_index(first, day), []).append(day)

    cycles = []
    for index in sorted(grouped):
        start, end = _cycle_bounds(first, index)
        cycles.append(WorkoutCycle(index=index, start=start, end=end, workout_days=tuple(grouped[index])))
    return cycles


def current_cycle(
    completed_workout_dates: Iterable[date | datetime],
    today: date | None = None,
) -> WorkoutCycle | None:
    """
    The cycle containing today, with the workouts done in it so far.

    Returns:
        WorkoutCycle, or None when there is no completed workout yet
    """
    days = sorted(set(unique_days(completed_workout_dates)))
    if not days:
        return None
    if today is None:
        today = effective_date()

    first = days[0]
    index = cycle_index(first, max(today, first))
    start, end = _cycle_bounds(first, index)
    in_cycle = tuple(d for d in days if start <= d <= end)
    return WorkoutCycle(index=index, start=start, end=end, workout_days=in_cycle)
