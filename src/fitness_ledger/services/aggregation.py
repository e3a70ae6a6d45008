"""
Aggregation functions over fitness document snapshots.

Everything here is pure: functions read a document (or a series derived
from one) and return new values without touching storage.
"""

import math
from collections.abc import Sequence
from datetime import date, timedelta
from typing import TypeVar

from fitness_ledger.domain.analytics import ContributionDay, EtaProjection, WeightPoint
from fitness_ledger.domain.document import FitnessDocument
from fitness_ledger.utils.dates import days_between, range_days, to_iso

T = TypeVar("T")


def contribution_series(
    n: int,
    document: FitnessDocument,
    today: date | str | None = None,
    timezone_str: str = "UTC",
) -> list[ContributionDay]:
    """
    Build the per-day completion series for the consistency grid.

    Args:
        n: Number of days, ending today.
        document: Document snapshot.
        today: Last day of the window. Defaults to today in `timezone_str`.
        timezone_str: Timezone used to resolve today.

    Returns:
        `n` days, oldest first.
    """
    end = date.fromisoformat(to_iso(today)) if today is not None else None
    series: list[ContributionDay] = []

    for day in range_days(n, end=end, timezone_str=timezone_str):
        workout = document.workouts.get(day)
        meal = document.meals.get(day)
        series.append(
            ContributionDay(
                date=day,
                workout_done=bool(workout and workout.completed),
                meal_done=bool(meal and meal.completed),
            )
        )

    return series


def group_weeks(series: Sequence[T], size: int = 7) -> list[list[T]]:
    """Chunk a flat series into consecutive columns of `size` (last may be short)."""
    if size <= 0:
        raise ValueError("size must be positive")
    return [list(series[i : i + size]) for i in range(0, len(series), size)]


def weight_trend_series(document: FitnessDocument) -> list[WeightPoint]:
    """
    Extract all weight readings sorted by date.

    ISO date strings sort lexicographically in calendar order.
    """
    return [
        WeightPoint(date=day, kg=kg) for day, kg in sorted(document.weights.items())
    ]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def eta_projection(trend: Sequence[WeightPoint], goal_weight: float) -> EtaProjection | None:
    """
    Project when the goal weight is reached by linear extrapolation.

    Uses only the earliest and latest readings. Only a net loss between
    them is extrapolated.

    Args:
        trend: Weight readings sorted ascending by date.
        goal_weight: Target weight in kilograms.

    Returns:
        Projection, or None when fewer than two readings exist or the
        weight has not gone down. An ETA past the end of the calendar is
        pinned to `9999-12-31`.
    """
    if len(trend) < 2:
        return None

    first = trend[0]
    last = trend[-1]

    days_diff = max(1, days_between(first.date, last.date))
    rate = (first.kg - last.kg) / days_diff

    if rate <= 0:
        return None

    remaining = last.kg - goal_weight
    days_left = remaining / rate
    # timedelta keeps whole days when added to a date, flooring fractional days
    try:
        eta_date = date.fromisoformat(last.date) + timedelta(days=days_left)
    except OverflowError:
        # beyond the representable calendar; pinned to its edge
        eta_date = date.max if days_left > 0 else date.min

    return EtaProjection(
        rate=rate,
        eta_date=eta_date.isoformat(),
        days_left=_round_half_up(days_left),
    )


def hydration_progress(document: FitnessDocument, day: date | str) -> float:
    """
    Percentage of the daily water target logged on a day.

    Args:
        document: Document snapshot.
        day: Date to inspect.

    Returns:
        Percentage clamped to [0, 100]; 0 when the target is not positive.
    """
    target = document.targets.water_target_l
    if target <= 0:
        return 0.0

    logged = document.hydration.get(to_iso(day), 0.0)
    return min(100.0, max(0.0, logged / target * 100))
